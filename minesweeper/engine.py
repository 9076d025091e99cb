"""Game logic: board generation, reveal cascades, chords and win checks."""
import logging
import random
import time
from enum import Enum
from typing import List, Optional, Tuple

from minesweeper.types import GameConfig, GameState

logger = logging.getLogger(__name__)

MINE = -1

# NW, N, NE, W, E, SW, S, SE
DIRECTIONS = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)


class ChordResult(str, Enum):
    """Outcome of a click on a revealed numbered cell."""
    REVEALED = 'REVEALED'
    MINE_HIT = 'MINE_HIT'
    AUTO_FLAGGED = 'AUTO_FLAGGED'
    NOTHING = 'NOTHING'


class ClickKind(str, Enum):
    """Every branch a cell click can take, inferred from the cell's state."""
    GAME_OVER = 'GAME_OVER'
    OUT_OF_BOUNDS = 'OUT_OF_BOUNDS'
    FLAGGED = 'FLAGGED'
    CHORD_ON_NUMBER = 'CHORD_ON_NUMBER'
    REVEALED_BLANK = 'REVEALED_BLANK'
    REVEAL_HIDDEN = 'REVEAL_HIDDEN'


def now_ms() -> int:
    return int(time.time() * 1000)


def is_valid_position(config: GameConfig, row: int, col: int) -> bool:
    """Check if position is within board bounds."""
    return 0 <= row < config.rows and 0 <= col < config.cols


def neighbors(config: GameConfig, row: int, col: int) -> List[Tuple[int, int]]:
    """In-bounds neighbor positions, in DIRECTIONS order."""
    positions = []
    for dr, dc in DIRECTIONS:
        new_row, new_col = row + dr, col + dc
        if is_valid_position(config, new_row, new_col):
            positions.append((new_row, new_col))
    return positions


def count_neighbor_mines(board: List[List[int]], config: GameConfig, row: int, col: int) -> int:
    """Count the number of mines in neighboring cells."""
    return sum(1 for r, c in neighbors(config, row, col) if board[r][c] == MINE)


def generate_board(config: GameConfig, rng: Optional[random.Random] = None) -> List[List[int]]:
    """
    Create a board with randomly placed mines and neighbor counts.

    Mines are placed by sampling random cells and skipping duplicates until
    config.mines distinct cells hold one. The first click is not guaranteed
    to be safe.
    """
    rng = rng or random
    board = [[0] * config.cols for _ in range(config.rows)]

    placed = 0
    while placed < config.mines:
        row = rng.randrange(config.rows)
        col = rng.randrange(config.cols)
        if board[row][col] != MINE:
            board[row][col] = MINE
            placed += 1

    for row in range(config.rows):
        for col in range(config.cols):
            if board[row][col] != MINE:
                board[row][col] = count_neighbor_mines(board, config, row, col)

    return board


def new_game(config: GameConfig, rng: Optional[random.Random] = None, now: Optional[int] = None) -> GameState:
    """Create a fresh game with nothing revealed or flagged."""
    return GameState(
        board=generate_board(config, rng),
        mask=[[False] * config.cols for _ in range(config.rows)],
        flags=[[False] * config.cols for _ in range(config.rows)],
        start_time=now_ms() if now is None else now,
    )


def reveal(state: GameState, config: GameConfig, row: int, col: int, budget: Optional[int] = None) -> int:
    """
    Reveal a cell and cascade through zero-valued neighbors.

    At most `budget` cells (default config.max_reveals) are revealed; once it
    runs out the cascade stops and the rest stays hidden for a later click.
    Out-of-bounds, revealed and flagged cells are skipped. The work-list
    visits cells in the same order as a depth-first recursion over
    DIRECTIONS would.

    Returns:
        The budget left after this call.
    """
    if budget is None:
        budget = config.max_reveals

    stack = [(row, col)]
    while stack and budget > 0:
        r, c = stack.pop()
        if not is_valid_position(config, r, c) or state.mask[r][c] or state.flags[r][c]:
            continue

        state.mask[r][c] = True
        budget -= 1

        if state.board[r][c] == 0:
            for dr, dc in reversed(DIRECTIONS):
                stack.append((r + dr, c + dc))

    return budget


def trigger_mine_hit(state: GameState, now: Optional[int] = None) -> None:
    """End the game as a loss and show every mine, flagged or not."""
    state.game_over = True
    state.end_time = now_ms() if now is None else now
    for r, board_row in enumerate(state.board):
        for c, value in enumerate(board_row):
            if value == MINE:
                state.mask[r][c] = True
    logger.info(f"Mine hit after {state.moves} moves")


def _scan_neighbors(state: GameState, config: GameConfig, row: int, col: int) -> Tuple[int, List[Tuple[int, int]]]:
    """Count flagged neighbors and collect hidden, unflagged ones."""
    flag_count = 0
    hidden = []
    for r, c in neighbors(config, row, col):
        if state.flags[r][c]:
            flag_count += 1
        elif not state.mask[r][c]:
            hidden.append((r, c))
    return flag_count, hidden


def auto_flag(state: GameState, config: GameConfig, row: int, col: int) -> bool:
    """
    Flag every hidden neighbor when they must all be mines.

    This looks at a single number only: if the hidden, unflagged neighbors
    exactly match the mines not yet flagged around it, they are all flagged.
    Wrong player flags can make it flag a safe cell.

    Returns:
        True if any flag was placed.
    """
    if not state.mask[row][col] or state.board[row][col] <= 0:
        return False

    flag_count, hidden = _scan_neighbors(state, config, row, col)
    if hidden and len(hidden) == state.board[row][col] - flag_count:
        for r, c in hidden:
            state.flags[r][c] = True
        return True

    return False


def chord(state: GameState, config: GameConfig, row: int, col: int, now: Optional[int] = None) -> ChordResult:
    """
    Resolve a click on a revealed numbered cell.

    When the flags around the cell match its number, the other hidden
    neighbors are opened, each with its own reveal budget; any of them being
    a mine ends the game. Otherwise the auto-flag heuristic is tried.
    """
    value = state.board[row][col]
    flag_count, hidden = _scan_neighbors(state, config, row, col)

    if flag_count == value:
        if any(state.board[r][c] == MINE for r, c in hidden):
            trigger_mine_hit(state, now)
            return ChordResult.MINE_HIT

        for r, c in hidden:
            reveal(state, config, r, c)
        return ChordResult.REVEALED if hidden else ChordResult.NOTHING

    if auto_flag(state, config, row, col):
        return ChordResult.AUTO_FLAGGED

    return ChordResult.NOTHING


def check_win(state: GameState, config: GameConfig, now: Optional[int] = None) -> bool:
    """
    Win when every mine is flagged and no flag sits on a safe cell.

    Hidden safe cells do not matter.
    """
    total_flags = 0
    correct_flags = 0
    for board_row, flag_row in zip(state.board, state.flags):
        for value, flagged in zip(board_row, flag_row):
            if flagged:
                total_flags += 1
                if value == MINE:
                    correct_flags += 1

    if correct_flags == config.mines and total_flags == config.mines:
        state.game_over = True
        state.won = True
        state.end_time = now_ms() if now is None else now
        logger.info(f"Game won after {state.moves} moves")
        return True

    return False


def classify_click(state: GameState, config: GameConfig, row: int, col: int) -> ClickKind:
    """
    Decide what a click on (row, col) means.

    GAME_OVER, OUT_OF_BOUNDS and FLAGGED are no-ops. CHORD_ON_NUMBER goes
    to chord(); REVEAL_HIDDEN opens the cell. REVEALED_BLANK opens nothing
    but still counts as a move.
    """
    if state.game_over:
        return ClickKind.GAME_OVER
    if not is_valid_position(config, row, col):
        return ClickKind.OUT_OF_BOUNDS
    if state.mask[row][col]:
        if state.board[row][col] > 0:
            return ClickKind.CHORD_ON_NUMBER
        return ClickKind.REVEALED_BLANK
    if state.flags[row][col]:
        return ClickKind.FLAGGED
    return ClickKind.REVEAL_HIDDEN


def apply_click(state: GameState, config: GameConfig, row: int, col: int, now: Optional[int] = None) -> ClickKind:
    """Apply one player click in place and check for a win afterwards."""
    kind = classify_click(state, config, row, col)

    if kind == ClickKind.REVEAL_HIDDEN:
        state.moves += 1
        if state.board[row][col] == MINE:
            trigger_mine_hit(state, now)
        else:
            reveal(state, config, row, col)
    elif kind == ClickKind.CHORD_ON_NUMBER:
        result = chord(state, config, row, col, now)
        if result in (ChordResult.REVEALED, ChordResult.AUTO_FLAGGED):
            state.moves += 1
    elif kind == ClickKind.REVEALED_BLANK:
        state.moves += 1
    else:
        logger.debug(f"Ignoring click at ({row}, {col}): {kind.value}")
        return kind

    if not state.game_over:
        check_win(state, config, now)

    return kind


def toggle_flag(state: GameState, config: GameConfig, row: int, col: int, now: Optional[int] = None) -> bool:
    """Toggle flag on a hidden cell of a running game."""
    if state.game_over or not is_valid_position(config, row, col) or state.mask[row][col]:
        return False

    state.flags[row][col] = not state.flags[row][col]
    state.moves += 1
    check_win(state, config, now)
    return True
