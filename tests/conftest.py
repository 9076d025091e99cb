"""
Pytest configuration and shared fixtures.
"""
import random
from typing import Iterable, List, Tuple

import pytest

from minesweeper import engine
from minesweeper.types import GameConfig, GameState


def board_from_mines(config: GameConfig, mines: Iterable[Tuple[int, int]]) -> List[List[int]]:
    """Build a board with mines at fixed positions."""
    board = [[0] * config.cols for _ in range(config.rows)]
    for row, col in mines:
        board[row][col] = engine.MINE
    for row in range(config.rows):
        for col in range(config.cols):
            if board[row][col] != engine.MINE:
                board[row][col] = engine.count_neighbor_mines(board, config, row, col)
    return board


def state_from_board(board: List[List[int]]) -> GameState:
    """Wrap a board in a fresh, untouched game state."""
    rows, cols = len(board), len(board[0])
    return GameState(
        board=board,
        mask=[[False] * cols for _ in range(rows)],
        flags=[[False] * cols for _ in range(rows)],
        start_time=1_000,
    )


# Mines down the right edge and along the bottom right corner
SCENARIO_MINES = [(row, 7) for row in range(8)] + [(7, 6), (7, 5)]

# 3x3 board:  [[-1, -1, 1],
#              [ 2,  2, 1],
#              [ 0,  0, 0]]
SMALL_MINES = [(0, 0), (0, 1)]


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def config() -> GameConfig:
    """The default 8x8 deployment with 10 mines."""
    return GameConfig(8, 8, 10, 50)


@pytest.fixture
def wide_budget_config() -> GameConfig:
    """8x8 with 10 mines and a budget large enough for the whole board."""
    return GameConfig(8, 8, 10, 64)


@pytest.fixture
def small_config() -> GameConfig:
    """3x3 board with 2 mines."""
    return GameConfig(3, 3, 2, 50)


# ============================================================================
# State Fixtures
# ============================================================================

@pytest.fixture
def scenario_state(config: GameConfig) -> GameState:
    """8x8 game with a known layout, nothing revealed."""
    return state_from_board(board_from_mines(config, SCENARIO_MINES))


@pytest.fixture
def small_state(small_config: GameConfig) -> GameState:
    """3x3 game with the bottom two rows already revealed."""
    game_state = state_from_board(board_from_mines(small_config, SMALL_MINES))
    for row in (1, 2):
        for col in range(3):
            game_state.mask[row][col] = True
    return game_state


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)

