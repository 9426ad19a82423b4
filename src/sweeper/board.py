"""
Board module for Minesweeper game.

Implements the game board with deferred mine placement, cell revealing,
flagging, and game status management.
"""
import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .cell import Cell, CellView
from .errors import CellIndexError, ConfigurationError
from .events import CellChange

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class GameStatus(Enum):
    """Possible states of the game. Values are the persisted names."""

    NOT_STARTED = "NotStarted"
    IN_PROGRESS = "InProgress"
    WON = "Won"
    LOST = "Lost"

    @property
    def is_terminal(self) -> bool:
        """Won and Lost boards accept no further moves."""
        return self in (GameStatus.WON, GameStatus.LOST)


class WinRule(Enum):
    """How the board decides that the player has won."""

    ALL_MINES_FLAGGED = auto()
    ALL_SAFE_CELLS_REVEALED = auto()


class Difficulty(Enum):
    """Named board presets."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def from_name(cls, name: Union[str, "Difficulty"]) -> "Difficulty":
        """Look up a difficulty by name, case-insensitively."""
        if isinstance(name, cls):
            return name
        for difficulty in cls:
            if difficulty.value.lower() == str(name).lower():
                return difficulty
        raise ConfigurationError(f"Unknown difficulty: {name!r}")


# (rows, columns, mines) for each preset
PRESET_DIMENSIONS = {
    Difficulty.EASY: (10, 10, 10),
    Difficulty.MEDIUM: (15, 15, 40),
    Difficulty.HARD: (20, 20, 80),
}


@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        rows: Number of rows.
        columns: Number of columns.
        num_mines: Total mines to place.
        win_rule: Condition that ends the game as won.
        seed: Seed for mine placement, None for a fresh random layout.
    """

    rows: int = 10
    columns: int = 10
    num_mines: int = 10
    win_rule: WinRule = WinRule.ALL_MINES_FLAGGED
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.rows < 1 or self.columns < 1:
            raise ConfigurationError("Board dimensions must be positive")
        if self.num_mines < 0:
            raise ConfigurationError("Number of mines cannot be negative")
        # One safe cell is enough: the first click is never a mine
        max_mines = self.rows * self.columns - 1
        if self.num_mines > max_mines:
            raise ConfigurationError(
                f"Too many mines (max {max_mines}, one cell must stay safe "
                f"for the first click)"
            )

    @property
    def total_cells(self) -> int:
        """Number of cells on the board."""
        return self.rows * self.columns

    @classmethod
    def from_difficulty(
        cls,
        difficulty: Union[str, Difficulty],
        win_rule: WinRule = WinRule.ALL_MINES_FLAGGED,
        seed: Optional[int] = None,
    ) -> "BoardConfig":
        """Build the configuration for a named preset."""
        rows, columns, mines = PRESET_DIMENSIONS[Difficulty.from_name(difficulty)]
        return cls(rows, columns, mines, win_rule, seed)


# Preset difficulty levels
EASY = BoardConfig(*PRESET_DIMENSIONS[Difficulty.EASY])
MEDIUM = BoardConfig(*PRESET_DIMENSIONS[Difficulty.MEDIUM])
HARD = BoardConfig(*PRESET_DIMENSIONS[Difficulty.HARD])

PRESETS = {
    Difficulty.EASY: EASY,
    Difficulty.MEDIUM: MEDIUM,
    Difficulty.HARD: HARD,
}


# ============================================================================
# Board Class
# ============================================================================

@dataclass(eq=False)
class Board:
    """
    Minesweeper game board.

    Manages the grid of cells, mine placement, revealing logic,
    and win/lose conditions. Cells are stored row-major in a flat list
    and addressed by ``row * columns + col``.

    A board has a single owner: moves are applied synchronously and the
    board must not be mutated from two threads at once. Readers get
    ``CellView`` snapshots, never the mutable cells.

    Attributes:
        config: Dimensions, mine count and win rule.
        logger: Diagnostics sink with ``info``, ``warning`` and ``error``
            methods. Defaults to this module's logger.
    """

    config: BoardConfig = field(default_factory=BoardConfig)
    logger: Any = field(default=None, repr=False)
    _cells: List[Cell] = field(default_factory=list, init=False, repr=False)
    _status: GameStatus = field(default=GameStatus.NOT_STARTED, init=False)
    _flagged_count: int = field(default=0, init=False)
    _rng: random.Random = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialize the grid after dataclass creation."""
        if self.logger is None:
            self.logger = logger
        self._rng = random.Random(self.config.seed)
        self._init_grid()
        self.logger.info(
            f"Created {self.rows}x{self.columns} board "
            f"with {self.mine_count} mines"
        )

    @classmethod
    def restore(
        cls,
        config: BoardConfig,
        cells: Sequence[Cell],
        status: GameStatus,
        logger: Any = None,
    ) -> "Board":
        """
        Rebuild a board from previously saved cells.

        Args:
            config: Configuration the cells were created with.
            cells: Row-major cells, one per position.
            status: Status the board was saved in.
            logger: Optional diagnostics sink.

        Returns:
            Board holding the given cells.
        """
        if len(cells) != config.total_cells:
            raise ConfigurationError(
                f"Expected {config.total_cells} cells, got {len(cells)}"
            )
        board = cls(config, logger)
        board._cells = list(cells)
        board._status = status
        board._flagged_count = board._count_flagged()
        return board

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create empty grid of cells."""
        self._cells = [Cell() for _ in range(self.config.total_cells)]
        self._status = GameStatus.NOT_STARTED
        self._flagged_count = 0

    def _handle_first_click(self, row: int, col: int) -> None:
        """Handle first click: place mines away from it and start the game."""
        self._place_random_mines(self.index_of(row, col))
        self._set_status(GameStatus.IN_PROGRESS)

    def _place_random_mines(self, exclude: int) -> None:
        """
        Place mines uniformly at random, keeping one cell mine-free.

        Args:
            exclude: Flat index of the cell to keep mine-free.
        """
        positions = [
            index for index in range(self.config.total_cells)
            if index != exclude
        ]
        mine_indices = self._rng.sample(positions, self.config.num_mines)
        self._lay_mines(mine_indices)
        row, col = self.position_of(exclude)
        self.logger.info(
            f"Placed {len(mine_indices)} mines avoiding ({row}, {col})"
        )

    def place_mines(self, positions: Iterable[Tuple[int, int]]) -> None:
        """
        Place mines at explicit positions instead of at random.

        Only allowed before the first move. Starts the game.

        Args:
            positions: (row, col) of every mine on the board.

        Raises:
            ConfigurationError: If the game has started, a position is
                off the board, or the number of distinct positions does
                not match the configured mine count.
        """
        if self._status != GameStatus.NOT_STARTED:
            raise ConfigurationError("Mines can only be placed before the first move")

        mine_indices = set()
        for row, col in positions:
            if not self.in_bounds(row, col):
                raise ConfigurationError(f"Mine position ({row}, {col}) is off the board")
            mine_indices.add(self.index_of(row, col))

        if len(mine_indices) != self.config.num_mines:
            raise ConfigurationError(
                f"Expected {self.config.num_mines} mine positions, "
                f"got {len(mine_indices)}"
            )

        self._lay_mines(sorted(mine_indices))
        self.logger.info(f"Placed {len(mine_indices)} mines at fixed positions")
        self._set_status(GameStatus.IN_PROGRESS)

    def _lay_mines(self, mine_indices: Iterable[int]) -> None:
        """Mark mines and compute adjacency counts."""
        for index in mine_indices:
            self._cells[index].is_mine = True
        self._calculate_adjacent_mines()

    def _calculate_adjacent_mines(self) -> None:
        """Calculate adjacent mine counts for all non-mine cells."""
        for index, cell in enumerate(self._cells):
            if not cell.is_mine:
                cell.adjacent_mines = sum(
                    1 for neighbor in self._neighbor_indices(index)
                    if self._cells[neighbor].is_mine
                )

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def index_of(self, row: int, col: int) -> int:
        """Convert (row, col) to a flat cell index."""
        return row * self.config.columns + col

    def position_of(self, index: int) -> Tuple[int, int]:
        """Convert a flat cell index to (row, col)."""
        return divmod(index, self.config.columns)

    def in_bounds(self, row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.config.rows and 0 <= col < self.config.columns

    def neighbors(self, row: int, col: int) -> List[Tuple[int, int]]:
        """
        Get valid neighboring cell positions.

        Args:
            row: Row index of center cell.
            col: Column index of center cell.

        Returns:
            List of (row, col) tuples for the up to eight neighbors
            inside the board. Edges are not wrapped.
        """
        neighbors = []
        for delta_row in (-1, 0, 1):
            for delta_col in (-1, 0, 1):
                if delta_row == 0 and delta_col == 0:
                    continue
                new_row = row + delta_row
                new_col = col + delta_col
                if self.in_bounds(new_row, new_col):
                    neighbors.append((new_row, new_col))
        return neighbors

    def _neighbor_indices(self, index: int) -> List[int]:
        """Flat indices of the neighbors of a flat index."""
        row, col = self.position_of(index)
        return [self.index_of(r, c) for r, c in self.neighbors(row, col)]

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def reveal(self, row: int, col: int) -> List[CellChange]:
        """
        Reveal a cell at the given position.

        On first click, places mines avoiding this cell.
        If cell is empty (0 adjacent mines), reveals the connected empty
        region and its numbered border. If cell is a mine, game is lost.

        Args:
            row: Row index to reveal.
            col: Column index to reveal.

        Returns:
            Cells that changed, empty if the move was ignored.
        """
        if not self._can_reveal(row, col):
            return []

        if self._status == GameStatus.NOT_STARTED:
            self._handle_first_click(row, col)

        changes = self._flood_reveal(self.index_of(row, col))
        self.evaluate_win()
        return changes

    def _can_reveal(self, row: int, col: int) -> bool:
        """Check if a cell can be revealed."""
        if self._status.is_terminal:
            return False
        if not self.in_bounds(row, col):
            self.logger.warning(f"Reveal at ({row}, {col}) is out of bounds")
            return False
        cell = self._cells[self.index_of(row, col)]
        if cell.is_flagged:
            self.logger.info(f"Cell ({row}, {col}) is flagged, not revealing")
            return False
        return cell.is_hidden

    def _flood_reveal(self, start: int) -> List[CellChange]:
        """
        Reveal a cell and cascade through empty neighbors.

        Uses an explicit stack so large empty regions do not hit the
        recursion limit. Each cell is revealed at most once.
        """
        changes = []
        stack = [start]
        while stack:
            index = stack.pop()
            cell = self._cells[index]
            if not cell.reveal():
                continue
            changes.append(self._change(index))

            if cell.is_mine:
                row, col = self.position_of(index)
                self.logger.info(f"Mine hit at ({row}, {col})")
                self._set_status(GameStatus.LOST)
                break

            if cell.adjacent_mines == 0:
                stack.extend(
                    neighbor for neighbor in self._neighbor_indices(index)
                    if self._cells[neighbor].is_hidden
                )
        return changes

    def flag(self, row: int, col: int) -> List[CellChange]:
        """
        Toggle flag on a cell.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            The toggled cell, or an empty list if the move was ignored.
        """
        if self._status == GameStatus.NOT_STARTED:
            self.logger.info("Cannot flag before the first reveal")
            return []
        if self._status.is_terminal:
            return []
        if not self.in_bounds(row, col):
            self.logger.warning(f"Flag at ({row}, {col}) is out of bounds")
            return []

        index = self.index_of(row, col)
        if not self._cells[index].toggle_flag():
            return []

        self._flagged_count = self._count_flagged()
        self.evaluate_win()
        return [self._change(index)]

    def _count_flagged(self) -> int:
        """Count flagged cells on the whole board."""
        return sum(1 for cell in self._cells if cell.is_flagged)

    def chord(self, row: int, col: int) -> List[CellChange]:
        """
        Chord action: reveal all unflagged neighbors if flag count matches.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            Cells that changed, empty if the chord was not allowed.
        """
        if not self._can_chord(row, col):
            return []

        changes = []
        for neighbor in self._neighbor_indices(self.index_of(row, col)):
            if self._status != GameStatus.IN_PROGRESS:
                break
            if self._cells[neighbor].is_hidden:
                changes.extend(self._flood_reveal(neighbor))

        self.evaluate_win()
        return changes

    def _can_chord(self, row: int, col: int) -> bool:
        """Check if chord action is valid."""
        if self._status != GameStatus.IN_PROGRESS:
            return False
        if not self.in_bounds(row, col):
            return False
        cell = self._cells[self.index_of(row, col)]
        if not cell.is_revealed or cell.adjacent_mines == 0:
            return False
        flag_count = sum(
            1 for row_, col_ in self.neighbors(row, col)
            if self._cells[self.index_of(row_, col_)].is_flagged
        )
        return flag_count == cell.adjacent_mines

    def reveal_all_mines(self) -> List[CellChange]:
        """
        Show every mine, removing flags from them.

        Called after a loss. Status and safe cells are left alone.

        Returns:
            Mine cells that changed.
        """
        self.logger.info("Revealing all mines")
        changes = [
            self._change(index)
            for index, cell in enumerate(self._cells)
            if cell.expose_mine()
        ]
        self._flagged_count = self._count_flagged()
        return changes

    # ========================================================================
    # Win Evaluation
    # ========================================================================

    def evaluate_win(self) -> GameStatus:
        """
        Update status to WON if the configured win condition holds.

        Returns:
            Current game status.
        """
        if self._status != GameStatus.IN_PROGRESS:
            return self._status

        if self.win_condition_met():
            self._set_status(GameStatus.WON)
        return self._status

    def win_condition_met(self) -> bool:
        """Check the configured win rule against the cells."""
        if self.config.win_rule == WinRule.ALL_SAFE_CELLS_REVEALED:
            return all(
                cell.is_revealed for cell in self._cells if not cell.is_mine
            )

        mines = [cell for cell in self._cells if cell.is_mine]
        # No decision until mines exist on the board
        if not mines:
            return False
        return all(cell.is_flagged for cell in mines)

    def _set_status(self, status: GameStatus) -> None:
        """Move to a new status, logging the transition."""
        if status != self._status:
            self.logger.info(
                f"Game status changed from {self._status.value} to {status.value}"
            )
            self._status = status

    def _change(self, index: int) -> CellChange:
        """Build the change record for a cell."""
        row, col = self.position_of(index)
        return CellChange(row, col, self._cells[index].view())

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def rows(self) -> int:
        """Number of rows."""
        return self.config.rows

    @property
    def columns(self) -> int:
        """Number of columns."""
        return self.config.columns

    @property
    def mine_count(self) -> int:
        """Configured number of mines."""
        return self.config.num_mines

    @property
    def status(self) -> GameStatus:
        """Get current game status."""
        return self._status

    @property
    def flagged_count(self) -> int:
        """Number of flagged cells."""
        return self._flagged_count

    @property
    def remaining_mines(self) -> int:
        """Mines minus flags. Negative when the player over-flags."""
        return self.config.num_mines - self._flagged_count

    @property
    def cells_revealed(self) -> int:
        """Number of revealed cells."""
        return sum(1 for cell in self._cells if cell.is_revealed)

    @property
    def is_playing(self) -> bool:
        """Check if moves are still accepted."""
        return not self._status.is_terminal

    @property
    def is_won(self) -> bool:
        """Check if game was won."""
        return self._status == GameStatus.WON

    @property
    def is_lost(self) -> bool:
        """Check if game was lost."""
        return self._status == GameStatus.LOST

    @property
    def is_finished(self) -> bool:
        """Check if the game reached a terminal status."""
        return self._status.is_terminal

    def __len__(self) -> int:
        return len(self._cells)

    def __getitem__(self, position: Tuple[int, int]) -> CellView:
        """
        Read a cell by (row, col).

        Raises:
            CellIndexError: If the position is off the board.
        """
        row, col = position
        if not self.in_bounds(row, col):
            raise CellIndexError(row, col, self.rows, self.columns)
        return self._cells[self.index_of(row, col)].view()

    def is_mine(self, row: int, col: int) -> bool:
        return self[row, col].is_mine

    def is_revealed(self, row: int, col: int) -> bool:
        return self[row, col].is_revealed

    def is_flagged(self, row: int, col: int) -> bool:
        return self[row, col].is_flagged

    def adjacent_mine_count(self, row: int, col: int) -> int:
        return self[row, col].adjacent_mines

    def snapshot(self) -> Tuple[CellView, ...]:
        """Row-major read-only copy of every cell."""
        return tuple(cell.view() for cell in self._cells)

    def get_observation(self) -> np.ndarray:
        """
        Get board state as a numpy array.

        Returns:
            2D numpy array where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with adjacent count
                9 = revealed mine
        """
        values = [cell.to_observation() for cell in self._cells]
        return np.array(values, dtype=np.int8).reshape(self.rows, self.columns)

    def get_valid_actions(self) -> List[Tuple[int, int]]:
        """
        Get list of cells that can still be revealed.

        Returns:
            List of (row, col) positions of hidden cells.
        """
        return [
            self.position_of(index)
            for index, cell in enumerate(self._cells)
            if cell.is_hidden
        ]


# ============================================================================
# Game Construction
# ============================================================================

def new_game(
    difficulty: Optional[Union[str, Difficulty]] = None,
    rows: Optional[int] = None,
    columns: Optional[int] = None,
    mines: Optional[int] = None,
    win_rule: WinRule = WinRule.ALL_MINES_FLAGGED,
    seed: Optional[int] = None,
    logger: Any = None,
) -> Board:
    """
    Create a fresh board from a difficulty or explicit dimensions.

    Args:
        difficulty: Preset name or Difficulty.
        rows: Number of rows (explicit boards only).
        columns: Number of columns (explicit boards only).
        mines: Number of mines (explicit boards only).
        win_rule: Condition that ends the game as won.
        seed: Seed for mine placement.
        logger: Optional diagnostics sink.

    Returns:
        A board with no mines placed yet.

    Raises:
        ConfigurationError: If both or neither forms are given, or the
            dimensions are invalid.
    """
    explicit = (rows, columns, mines)
    if difficulty is not None:
        if any(value is not None for value in explicit):
            raise ConfigurationError(
                "Pass either a difficulty or rows/columns/mines, not both"
            )
        config = BoardConfig.from_difficulty(difficulty, win_rule, seed)
    else:
        if any(value is None for value in explicit):
            raise ConfigurationError("rows, columns and mines are all required")
        config = BoardConfig(rows, columns, mines, win_rule, seed)
    return Board(config, logger)
