"""
Game controller for Minesweeper.

Owns the authoritative board for a UI or script and serializes every
move through it. Views read snapshots and change records; they never
hold the board itself.
"""
import logging
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

import numpy as np

from .board import Board, Difficulty, GameStatus, WinRule, new_game
from .cell import CellView
from .errors import DeserializationError
from .events import CellChange
from .persistence import load_game, save_game

logger = logging.getLogger(__name__)


# ============================================================================
# Commands
# ============================================================================

class Command(Enum):
    """Moves a player can make."""

    NEW_GAME = auto()
    REVEAL = auto()
    FLAG = auto()
    CHORD = auto()


@dataclass(frozen=True)
class Move:
    """A command and its target cell."""

    command: Command
    row: int = 0
    col: int = 0


# ============================================================================
# Controller
# ============================================================================

class GameController:
    """
    Single owner of a Minesweeper board.

    Tracks elapsed game time on behalf of the board, reveals every mine
    when a game is lost, and handles saving and loading.
    """

    def __init__(
        self,
        difficulty: Union[str, Difficulty] = Difficulty.EASY,
        win_rule: WinRule = WinRule.ALL_MINES_FLAGGED,
        seed: Optional[int] = None,
        log: Any = None,
    ) -> None:
        """
        Initialize the controller with a fresh game.

        Args:
            difficulty: Preset for the first game.
            win_rule: Win rule for every game started here.
            seed: Seed for mine placement.
            log: Diagnostics sink passed to boards.
        """
        self.win_rule = win_rule
        self.seed = seed
        self.log = log or logger
        self.game_time = 0
        self._board = new_game(
            difficulty, win_rule=win_rule, seed=seed, logger=self.log
        )

    # ========================================================================
    # Game Lifecycle
    # ========================================================================

    def new_game(
        self,
        difficulty: Optional[Union[str, Difficulty]] = None,
        rows: Optional[int] = None,
        columns: Optional[int] = None,
        mines: Optional[int] = None,
    ) -> Board:
        """
        Replace the current board with a fresh one.

        With no arguments the current dimensions are reused.
        """
        if difficulty is None and rows is None and columns is None and mines is None:
            rows = self._board.rows
            columns = self._board.columns
            mines = self._board.mine_count

        self._board = new_game(
            difficulty, rows, columns, mines,
            win_rule=self.win_rule, seed=self.seed, logger=self.log,
        )
        self.game_time = 0
        return self._board

    def dispatch(self, move: Move) -> List[CellChange]:
        """
        Apply a move to the current board.

        Returns:
            Cells that changed.
        """
        if move.command == Command.NEW_GAME:
            self.new_game()
            return []
        if move.command == Command.REVEAL:
            return self.reveal(move.row, move.col)
        if move.command == Command.FLAG:
            return self.flag(move.row, move.col)
        if move.command == Command.CHORD:
            return self.chord(move.row, move.col)
        raise ValueError(f"Unknown command: {move.command}")

    def reveal(self, row: int, col: int) -> List[CellChange]:
        """Reveal a cell, exposing all mines if it ends the game."""
        return self._after_move(self._board.reveal(row, col))

    def flag(self, row: int, col: int) -> List[CellChange]:
        """Toggle a flag."""
        return self._after_move(self._board.flag(row, col))

    def chord(self, row: int, col: int) -> List[CellChange]:
        """Reveal around a satisfied number."""
        return self._after_move(self._board.chord(row, col))

    def _after_move(self, changes: List[CellChange]) -> List[CellChange]:
        """Apply end-of-game effects to a move's changes."""
        if changes and self._board.is_lost:
            changes = changes + self._board.reveal_all_mines()
        return changes

    def tick(self, seconds: int = 1) -> int:
        """
        Advance the game clock.

        Time only counts while the game is in progress.

        Returns:
            Elapsed game time.
        """
        if self._board.status == GameStatus.IN_PROGRESS:
            self.game_time += seconds
        return self.game_time

    # ========================================================================
    # Persistence
    # ========================================================================

    def save(self, path: Union[str, Path]) -> Path:
        """Save the current game."""
        return save_game(path, self._board, self.game_time)

    def load(self, path: Union[str, Path]) -> Board:
        """
        Replace the current game with a saved one.

        Raises:
            DeserializationError: If the file is unreadable or invalid.
                The current game is kept in that case.
        """
        saved = load_game(path, self.win_rule, log=self.log)
        self._board = saved.board
        self.game_time = saved.game_time
        return self._board

    def load_or_default(self, path: Union[str, Path]) -> bool:
        """
        Load a saved game, starting an Easy game if it cannot be loaded.

        Returns:
            True if the saved game was loaded.
        """
        try:
            self.load(path)
        except DeserializationError as exc:
            self.log.error(f"Could not load {path}: {exc}")
            self.new_game(Difficulty.EASY)
            return False
        return True

    # ========================================================================
    # Read-only Accessors
    # ========================================================================

    @property
    def status(self) -> GameStatus:
        return self._board.status

    @property
    def rows(self) -> int:
        return self._board.rows

    @property
    def columns(self) -> int:
        return self._board.columns

    @property
    def mine_count(self) -> int:
        return self._board.mine_count

    @property
    def remaining_mines(self) -> int:
        return self._board.remaining_mines

    def cell(self, row: int, col: int) -> CellView:
        """Read one cell. Raises CellIndexError off the board."""
        return self._board[row, col]

    def snapshot(self) -> Tuple[CellView, ...]:
        """Read-only copy of every cell, row-major."""
        return self._board.snapshot()

    def get_observation(self) -> np.ndarray:
        """Numeric copy of the board, see Board.get_observation."""
        return self._board.get_observation()
