"""Rendering payload returned to the transport."""
from typing import Any, Dict, Optional

from minesweeper.engine import MINE, now_ms
from minesweeper.types import GameConfig, GameState

HIDDEN = '#'
FLAG = 'F'
MINE_GLYPH = '*'


def format_time(ms: int) -> str:
    """Format milliseconds as m:ss."""
    seconds = max(ms, 0) // 1000
    return f"{seconds // 60}:{seconds % 60:02d}"


def cell_glyph(game_state: GameState, row: int, col: int) -> str:
    if game_state.flags[row][col]:
        return FLAG
    if not game_state.mask[row][col]:
        return HIDDEN
    if game_state.board[row][col] == MINE:
        return MINE_GLYPH
    return str(game_state.board[row][col])


def game_status(game_state: GameState) -> str:
    if not game_state.game_over:
        return 'IN_PROGRESS'
    return 'WON' if game_state.won else 'LOST'


def status_text(game_state: GameState, config: GameConfig, now: Optional[int] = None) -> str:
    elapsed = game_state.elapsed_ms(now_ms() if now is None else now)
    text = (f"Time {format_time(elapsed)} | Moves: {game_state.moves}\n"
            f"Mines left: {game_state.mines_remaining(config)}")
    if game_state.game_over:
        text += "\nYou won!" if game_state.won else "\nGame over!"
    return text


def serialize_game_state(game_state: GameState, config: GameConfig, now: Optional[int] = None) -> Dict[str, Any]:
    """Convert game state to a JSON-serializable view for the player."""
    now = now_ms() if now is None else now
    return {
        'cells': [
            [cell_glyph(game_state, row, col) for col in range(len(game_state.board[row]))]
            for row in range(len(game_state.board))
        ],
        'status': game_status(game_state),
        'moves': game_state.moves,
        'minesRemaining': game_state.mines_remaining(config),
        'elapsed': format_time(game_state.elapsed_ms(now)),
        'text': status_text(game_state, config, now),
    }
