"""
Change records emitted by board operations.

Every mutating call returns the cells it touched, in the order they
changed, so a view can redraw only what moved.
"""
from dataclasses import dataclass

from .cell import CellView


@dataclass(frozen=True)
class CellChange:
    """New state of one cell after a move."""

    row: int
    col: int
    state: CellView
