"""Serialization of GameState for the key-value store."""
import json
from typing import Any, Dict, List, Optional

from minesweeper.types import GameConfig, GameState


class GameStateDecodeError(ValueError):
    """Raised when a stored record is not a valid game state."""


def encode(state: GameState) -> bytes:
    """Convert game state to compact JSON bytes."""
    record: Dict[str, Any] = {
        'board': state.board,
        'mask': state.mask,
        'flags': state.flags,
        'gameOver': state.game_over,
        'won': state.won,
        'startTime': state.start_time,
        'moves': state.moves,
    }
    # Absent while the game is running
    if state.end_time is not None:
        record['endTime'] = state.end_time
    return json.dumps(record, separators=(',', ':')).encode('utf-8')


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _grid(record: Dict[str, Any], key: str, is_cell) -> List[List[Any]]:
    grid = record.get(key)
    if not isinstance(grid, list) or not grid:
        raise GameStateDecodeError(f"'{key}' must be a non-empty list of rows")

    width = None
    for row in grid:
        if not isinstance(row, list) or not row:
            raise GameStateDecodeError(f"'{key}' rows must be non-empty lists")
        if width is None:
            width = len(row)
        elif len(row) != width:
            raise GameStateDecodeError(f"'{key}' is not rectangular")
        if not all(is_cell(cell) for cell in row):
            raise GameStateDecodeError(f"'{key}' holds an invalid cell value")
    return grid


def _field(record: Dict[str, Any], key: str, check, description: str) -> Any:
    if key not in record:
        raise GameStateDecodeError(f"Missing field '{key}'")
    value = record[key]
    if not check(value):
        raise GameStateDecodeError(f"'{key}' must be {description}")
    return value


def decode(data: bytes, config: Optional[GameConfig] = None) -> GameState:
    """
    Rebuild a game state from bytes produced by encode().

    When a config is given the grids must match its dimensions and the board
    must hold exactly config.mines mines.

    Raises:
        GameStateDecodeError: If the record is malformed in any way.
    """
    try:
        record = json.loads(data.decode('utf-8') if isinstance(data, bytes) else data)
    except (UnicodeDecodeError, ValueError) as error:
        raise GameStateDecodeError(f"Stored game is not valid JSON: {error}") from error

    if not isinstance(record, dict):
        raise GameStateDecodeError("Stored game must be a JSON object")

    board = _grid(record, 'board', lambda v: _is_int(v) and -1 <= v <= 8)
    mask = _grid(record, 'mask', lambda v: isinstance(v, bool))
    flags = _grid(record, 'flags', lambda v: isinstance(v, bool))

    shape = (len(board), len(board[0]))
    for key, grid in (('mask', mask), ('flags', flags)):
        if (len(grid), len(grid[0])) != shape:
            raise GameStateDecodeError(f"'{key}' does not match the board shape")

    if config is not None:
        if shape != (config.rows, config.cols):
            raise GameStateDecodeError(
                f"Board is {shape[0]}x{shape[1]}, expected {config.rows}x{config.cols}")
        mines = sum(1 for row in board for value in row if value == -1)
        if mines != config.mines:
            raise GameStateDecodeError(f"Board holds {mines} mines, expected {config.mines}")

    end_time = record.get('endTime')
    if end_time is not None and not _is_int(end_time):
        raise GameStateDecodeError("'endTime' must be an integer when present")

    return GameState(
        board=board,
        mask=mask,
        flags=flags,
        game_over=_field(record, 'gameOver', lambda v: isinstance(v, bool), "a boolean"),
        won=_field(record, 'won', lambda v: isinstance(v, bool), "a boolean"),
        start_time=_field(record, 'startTime', _is_int, "an integer"),
        end_time=end_time,
        moves=_field(record, 'moves', lambda v: _is_int(v) and v >= 0, "a non-negative integer"),
    )
