"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sweeper import Board, BoardConfig, Cell, Difficulty, WinRule, new_game


# ============================================================================
# Diagnostics Sink
# ============================================================================

class RecordingLog:
    """Collects messages sent to a board's logger."""

    def __init__(self) -> None:
        self.infos = []
        self.warnings = []
        self.errors = []

    def info(self, message: str) -> None:
        self.infos.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture
def recording_log() -> RecordingLog:
    """Logger stand-in that records messages."""
    return RecordingLog()


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def default_board() -> Board:
    """Create a default 10x10 board with 10 mines."""
    return Board()


@pytest.fixture
def easy_board() -> Board:
    """Create an Easy difficulty board."""
    return new_game(Difficulty.EASY)


@pytest.fixture
def small_board() -> Board:
    """Create a small 3x3 board with 1 mine at the top-left corner."""
    board = Board(BoardConfig(3, 3, 1))
    board.place_mines([(0, 0)])
    return board


@pytest.fixture
def safe_rule_board() -> Board:
    """3x3 board with a corner mine, won by revealing every safe cell."""
    board = Board(BoardConfig(3, 3, 1, WinRule.ALL_SAFE_CELLS_REVEALED))
    board.place_mines([(0, 0)])
    return board


@pytest.fixture
def empty_board() -> Board:
    """Create a board with no mines for cascade testing."""
    return Board(BoardConfig(5, 5, 0))


@pytest.fixture
def diagonal_board() -> Board:
    """5x5 board with mines on the diagonal corners and center."""
    board = Board(BoardConfig(5, 5, 3))
    board.place_mines([(0, 0), (2, 2), (4, 4)])
    return board


@pytest.fixture
def wall_board() -> Board:
    """5x5 board with a full column of mines down the middle."""
    board = Board(BoardConfig(5, 5, 5, WinRule.ALL_SAFE_CELLS_REVEALED))
    board.place_mines([(row, 2) for row in range(5)])
    return board


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(is_mine=True)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> BoardConfig:
    """Create a valid board configuration."""
    return BoardConfig(10, 10, 10)
