"""
Exceptions raised by the Minesweeper engine.

Game flow (hitting a mine, winning, an invalid move) is reported
through board status and never raises.
"""


class SweeperError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(SweeperError, ValueError):
    """Board dimensions, mine count or mine layout are invalid."""


class DeserializationError(SweeperError, ValueError):
    """A persisted game could not be parsed or is inconsistent."""


class CellIndexError(SweeperError, IndexError):
    """Direct cell access outside the grid."""

    def __init__(self, row: int, col: int, rows: int, columns: int) -> None:
        super().__init__(
            f"Cell ({row}, {col}) is outside a {rows}x{columns} board"
        )
        self.row = row
        self.col = col
