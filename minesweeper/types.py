"""Type definitions for the persisted Minesweeper engine."""
import os
from dataclasses import dataclass
from typing import Any, List, Optional


@dataclass(frozen=True)
class GameConfig:
    """
    Deployment-wide settings threaded into every engine operation.

    Attributes:
        rows: Number of grid rows.
        cols: Number of grid columns.
        mines: Mines placed on every new board.
        max_reveals: Ceiling on cells revealed by one cascading reveal.
    """
    rows: int = 8
    cols: int = 8
    mines: int = 10
    max_reveals: int = 50

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError("Board dimensions must be positive")
        if self.mines < 0:
            raise ValueError("Number of mines cannot be negative")
        if self.mines >= self.cell_count:
            raise ValueError(f"Too many mines (max {self.cell_count - 1})")
        if self.max_reveals < 0:
            raise ValueError("Reveal budget cannot be negative")

    @classmethod
    def from_env(cls) -> "GameConfig":
        """Build the configuration from MINESWEEPER_* environment variables."""
        return cls(
            rows=int(os.getenv("MINESWEEPER_ROWS", 8)),
            cols=int(os.getenv("MINESWEEPER_COLS", 8)),
            mines=int(os.getenv("MINESWEEPER_MINES", 10)),
            max_reveals=int(os.getenv("MINESWEEPER_MAX_REVEALS", 50)),
        )

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols


@dataclass
class GameState:
    """Current state of one game, rebuilt from storage for every move."""
    board: List[List[int]]
    mask: List[List[bool]]
    flags: List[List[bool]]
    game_over: bool = False
    won: bool = False
    start_time: int = 0
    end_time: Optional[int] = None
    moves: int = 0

    def flag_count(self) -> int:
        return sum(flag for row in self.flags for flag in row)

    def mines_remaining(self, config: GameConfig) -> int:
        """Mines not yet accounted for by a flag (can go negative)."""
        return config.mines - self.flag_count()

    def elapsed_ms(self, now: int) -> int:
        if self.game_over and self.end_time is not None:
            return self.end_time - self.start_time
        return now - self.start_time


NEW_GAME = 'new-game'
CLICK = 'click'
FLAG = 'flag'
MOVE_KINDS = (NEW_GAME, CLICK, FLAG)


class InvalidMoveError(ValueError):
    """Raised when an inbound move payload is structurally invalid."""


@dataclass
class MoveRequest:
    """Request to make a move."""
    kind: str  # 'new-game', 'click', 'flag'
    row: Optional[int] = None
    col: Optional[int] = None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_move(payload: Any) -> MoveRequest:
    """
    Convert an untyped transport payload into a MoveRequest.

    Coordinates only have to be integers here; out-of-range cells are
    accepted and treated as no-ops by the engine.

    Raises:
        InvalidMoveError: If the payload is not a well-formed move.
    """
    if not isinstance(payload, dict):
        raise InvalidMoveError("Move must be a JSON object")

    kind = payload.get('kind')
    if kind not in MOVE_KINDS:
        raise InvalidMoveError(f"Unknown move kind: {kind!r}")

    if kind == NEW_GAME:
        return MoveRequest(kind=kind)

    row, col = payload.get('row'), payload.get('col')
    if not _is_int(row) or not _is_int(col):
        raise InvalidMoveError("Cell moves need integer 'row' and 'col'")

    return MoveRequest(kind=kind, row=row, col=col)
