"""
Minesweeper board engine.

Provides the board model, deferred mine placement, reveal and flag
rules, win evaluation, persistence and a single-owner controller.
"""
from .cell import Cell, CellState, CellView
from .board import (
    Board,
    BoardConfig,
    Difficulty,
    GameStatus,
    WinRule,
    PRESETS,
    EASY,
    MEDIUM,
    HARD,
    new_game,
)
from .controller import Command, GameController, Move
from .errors import (
    CellIndexError,
    ConfigurationError,
    DeserializationError,
    SweeperError,
)
from .events import CellChange
from .persistence import SavedGame, dumps, loads, load_game, save_game
from .environment import MinesweeperEnv

__all__ = [
    "Cell",
    "CellState",
    "CellView",
    "Board",
    "BoardConfig",
    "Difficulty",
    "GameStatus",
    "WinRule",
    "PRESETS",
    "EASY",
    "MEDIUM",
    "HARD",
    "new_game",
    "Command",
    "GameController",
    "Move",
    "CellIndexError",
    "ConfigurationError",
    "DeserializationError",
    "SweeperError",
    "CellChange",
    "SavedGame",
    "dumps",
    "loads",
    "load_game",
    "save_game",
    "MinesweeperEnv",
]
