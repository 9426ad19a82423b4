"""
Save and load games as JSON.

The document layout is fixed for compatibility with existing save files:

    {
        "Rows": 10, "Columns": 10, "Mines": 10,
        "FlaggedItems": 0, "RemainingMines": 10, "GameTime": 0,
        "GameStatus": "NotStarted",
        "Items": [
            {"IsRevealed": false, "IsMine": false, "IsFlagged": false,
             "MineCount": 0, "Point": {"X": 0.0, "Y": 0.0}},
            ...
        ]
    }

Items are row-major and Point holds (row, column) as floats.
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Union

from .board import Board, BoardConfig, GameStatus, WinRule
from .cell import Cell, CellState
from .errors import ConfigurationError, DeserializationError

logger = logging.getLogger(__name__)


# ============================================================================
# Saved Game
# ============================================================================

@dataclass
class SavedGame:
    """A restored board together with the elapsed game time."""

    board: Board
    game_time: int = 0


# ============================================================================
# Serialization
# ============================================================================

def board_to_dict(board: Board, game_time: int = 0) -> Dict[str, Any]:
    """
    Convert a board to the persisted document layout.

    Args:
        board: Board to save.
        game_time: Elapsed seconds tracked by the caller.

    Returns:
        JSON-ready dictionary.
    """
    items = []
    for index, cell in enumerate(board.snapshot()):
        row, col = board.position_of(index)
        items.append({
            "IsRevealed": cell.is_revealed,
            "IsMine": cell.is_mine,
            "IsFlagged": cell.is_flagged,
            "MineCount": cell.adjacent_mines,
            "Point": {"X": float(row), "Y": float(col)},
        })

    return {
        "Rows": board.rows,
        "Columns": board.columns,
        "Mines": board.mine_count,
        "FlaggedItems": board.flagged_count,
        "RemainingMines": board.remaining_mines,
        "GameTime": game_time,
        "GameStatus": board.status.value,
        "Items": items,
    }


def dumps(board: Board, game_time: int = 0) -> str:
    """Serialize a board to JSON text."""
    return json.dumps(board_to_dict(board, game_time), indent=2)


def save_game(path: Union[str, Path], board: Board, game_time: int = 0) -> Path:
    """
    Write a board to a JSON file.

    Returns:
        Path that was written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps(board, game_time), encoding="utf-8")
    logger.info(f"Saved game to {path}")
    return path


# ============================================================================
# Deserialization
# ============================================================================

def _require(data: Dict[str, Any], key: str, kind: type) -> Any:
    """Fetch a field and check its JSON type."""
    if key not in data:
        raise DeserializationError(f"Missing field {key!r}")
    value = data[key]
    # bool is a subclass of int, JSON true must not pass as a number
    if kind is int and isinstance(value, bool):
        raise DeserializationError(f"Field {key!r} must be an integer")
    if kind is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DeserializationError(f"Field {key!r} must be a number")
        return value
    if not isinstance(value, kind):
        raise DeserializationError(f"Field {key!r} must be {kind.__name__}")
    return value


def _parse_status(value: str) -> GameStatus:
    try:
        return GameStatus(value)
    except ValueError:
        raise DeserializationError(f"Unknown game status {value!r}") from None


def _parse_cell(item: Any, row: int, col: int) -> Cell:
    """Build one cell from its saved form."""
    if not isinstance(item, dict):
        raise DeserializationError(f"Item ({row}, {col}) must be an object")

    is_revealed = _require(item, "IsRevealed", bool)
    is_flagged = _require(item, "IsFlagged", bool)
    is_mine = _require(item, "IsMine", bool)
    mine_count = _require(item, "MineCount", int)
    point = _require(item, "Point", dict)

    if (_require(point, "X", float), _require(point, "Y", float)) != (row, col):
        raise DeserializationError(
            f"Item at ({row}, {col}) has Point ({point['X']}, {point['Y']})"
        )
    if is_revealed and is_flagged:
        raise DeserializationError(
            f"Item ({row}, {col}) cannot be both revealed and flagged"
        )
    if not 0 <= mine_count <= 8:
        raise DeserializationError(
            f"Item ({row}, {col}) has invalid MineCount {mine_count}"
        )

    if is_revealed:
        state = CellState.REVEALED
    elif is_flagged:
        state = CellState.FLAGGED
    else:
        state = CellState.HIDDEN
    return Cell(is_mine=is_mine, adjacent_mines=mine_count, state=state)


def board_from_dict(
    data: Any,
    win_rule: WinRule = WinRule.ALL_MINES_FLAGGED,
    log: Any = None,
) -> SavedGame:
    """
    Rebuild a board from the persisted document layout.

    Args:
        data: Parsed JSON document.
        win_rule: Win rule for the restored board.
        log: Diagnostics sink for the restored board and load warnings.

    Returns:
        The restored game.

    Raises:
        DeserializationError: If any field is missing, mistyped or
            inconsistent with the rest of the document.
    """
    if not isinstance(data, dict):
        raise DeserializationError("Saved game must be a JSON object")

    rows = _require(data, "Rows", int)
    columns = _require(data, "Columns", int)
    mines = _require(data, "Mines", int)
    game_time = _require(data, "GameTime", int)
    status = _parse_status(_require(data, "GameStatus", str))
    items = _require(data, "Items", list)

    try:
        config = BoardConfig(rows, columns, mines, win_rule)
    except ConfigurationError as exc:
        raise DeserializationError(f"Invalid board dimensions: {exc}") from exc
    if game_time < 0:
        raise DeserializationError("GameTime cannot be negative")
    if len(items) != config.total_cells:
        raise DeserializationError(
            f"Expected {config.total_cells} items, got {len(items)}"
        )

    cells: List[Cell] = [
        _parse_cell(item, *divmod(index, columns))
        for index, item in enumerate(items)
    ]

    placed = sum(1 for cell in cells if cell.is_mine)
    if status == GameStatus.NOT_STARTED:
        if placed or any(not cell.is_hidden for cell in cells):
            raise DeserializationError("A game that has not started cannot have moves")
    elif placed != mines:
        raise DeserializationError(f"Expected {mines} mines, found {placed}")

    board = Board.restore(config, cells, status, log)
    _check_mine_counts(board)
    _check_status(board)
    _check_counters(data, board, log or logger)
    return SavedGame(board=board, game_time=game_time)


def _check_mine_counts(board: Board) -> None:
    """Reject numbers that disagree with the saved mines."""
    for index, cell in enumerate(board.snapshot()):
        if cell.is_mine:
            continue
        row, col = board.position_of(index)
        expected = sum(1 for r, c in board.neighbors(row, col) if board.is_mine(r, c))
        if cell.adjacent_mines != expected:
            raise DeserializationError(
                f"Item ({row}, {col}) has MineCount {cell.adjacent_mines}, "
                f"but borders {expected} mines"
            )


def _check_status(board: Board) -> None:
    """Reject a status the cells cannot have reached."""
    exploded = any(cell.is_mine and cell.is_revealed for cell in board.snapshot())
    if board.status == GameStatus.LOST and not exploded:
        raise DeserializationError("A lost game must have a revealed mine")
    if board.status in (GameStatus.IN_PROGRESS, GameStatus.WON) and exploded:
        raise DeserializationError(
            f"A game marked {board.status.value} cannot have a revealed mine"
        )
    if board.status == GameStatus.WON and not board.win_condition_met():
        raise DeserializationError(
            f"A game marked Won does not meet the {board.config.win_rule.name} rule"
        )


def _check_counters(data: Dict[str, Any], board: Board, log: Any) -> None:
    """Warn when stored counters disagree with the cells."""
    flagged = data.get("FlaggedItems")
    remaining = data.get("RemainingMines")
    if flagged != board.flagged_count or remaining != board.remaining_mines:
        log.warning(
            f"Saved counters FlaggedItems={flagged} RemainingMines={remaining} "
            f"do not match the cells; using {board.flagged_count} "
            f"and {board.remaining_mines}"
        )


def loads(
    text: str,
    win_rule: WinRule = WinRule.ALL_MINES_FLAGGED,
    log: Any = None,
) -> SavedGame:
    """Parse JSON text into a saved game."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise DeserializationError(f"Saved game is not valid JSON: {exc}") from exc
    return board_from_dict(data, win_rule, log)


def load_game(
    path: Union[str, Path],
    win_rule: WinRule = WinRule.ALL_MINES_FLAGGED,
    log: Any = None,
) -> SavedGame:
    """
    Read a saved game from a JSON file.

    Raises:
        DeserializationError: If the file cannot be read or parsed.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DeserializationError(f"Cannot read {path}: {exc}") from exc
    saved = loads(text, win_rule, log)
    (log or logger).info(f"Loaded game from {path}")
    return saved
