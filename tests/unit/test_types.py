"""
Unit tests for configuration and move parsing.
"""
import pytest

from minesweeper.types import (
    CLICK, FLAG, NEW_GAME, GameConfig, GameState, InvalidMoveError, MoveRequest, parse_move,
)


# ============================================================================
# Game Configuration Tests
# ============================================================================

class TestGameConfig:
    """Test configuration validation."""

    def test_defaults(self) -> None:
        """Defaults match the classic 8x8 deployment."""
        config = GameConfig()
        assert (config.rows, config.cols, config.mines, config.max_reveals) == (8, 8, 10, 50)
        assert config.cell_count == 64

    def test_zero_dimension_raises_error(self) -> None:
        with pytest.raises(ValueError, match="dimensions must be positive"):
            GameConfig(0, 8, 1)

    def test_negative_mines_raises_error(self) -> None:
        with pytest.raises(ValueError, match="cannot be negative"):
            GameConfig(8, 8, -1)

    def test_mines_fill_board_raises_error(self) -> None:
        """A board with no safe cell is a configuration fault."""
        with pytest.raises(ValueError, match="Too many mines"):
            GameConfig(3, 3, 9)

    def test_mine_limit_follows_cell_count(self) -> None:
        """The largest mine count leaves exactly one safe cell."""
        config = GameConfig(4, 5, 19)
        assert config.cell_count == 20
        with pytest.raises(ValueError, match=r"max 19"):
            GameConfig(4, 5, 20)

    def test_negative_budget_raises_error(self) -> None:
        with pytest.raises(ValueError, match="budget"):
            GameConfig(8, 8, 10, -5)

    def test_from_env(self, monkeypatch) -> None:
        """Settings are read from MINESWEEPER_* variables."""
        monkeypatch.setenv("MINESWEEPER_ROWS", "16")
        monkeypatch.setenv("MINESWEEPER_COLS", "30")
        monkeypatch.setenv("MINESWEEPER_MINES", "99")
        monkeypatch.setenv("MINESWEEPER_MAX_REVEALS", "200")

        assert GameConfig.from_env() == GameConfig(16, 30, 99, 200)

    def test_from_env_defaults(self, monkeypatch) -> None:
        for name in ("MINESWEEPER_ROWS", "MINESWEEPER_COLS", "MINESWEEPER_MINES", "MINESWEEPER_MAX_REVEALS"):
            monkeypatch.delenv(name, raising=False)
        assert GameConfig.from_env() == GameConfig()


class TestGameState:
    """Test derived values on the state."""

    def test_mines_remaining(self, config: GameConfig, scenario_state: GameState) -> None:
        scenario_state.flags[0][0] = True
        scenario_state.flags[1][1] = True
        assert scenario_state.flag_count() == 2
        assert scenario_state.mines_remaining(config) == 8

    def test_elapsed_while_running(self, scenario_state: GameState) -> None:
        assert scenario_state.elapsed_ms(scenario_state.start_time + 1_500) == 1_500

    def test_elapsed_after_end(self, scenario_state: GameState) -> None:
        scenario_state.game_over = True
        scenario_state.end_time = scenario_state.start_time + 4_000
        assert scenario_state.elapsed_ms(scenario_state.start_time + 60_000) == 4_000


# ============================================================================
# Move Parsing Tests
# ============================================================================

class TestParseMove:
    """Test conversion of inbound payloads."""

    def test_new_game(self) -> None:
        assert parse_move({"kind": "new-game"}) == MoveRequest(NEW_GAME)

    def test_new_game_ignores_coordinates(self) -> None:
        assert parse_move({"kind": "new-game", "row": 1, "col": 1}) == MoveRequest(NEW_GAME)

    @pytest.mark.parametrize("kind", [CLICK, FLAG])
    def test_cell_moves(self, kind: str) -> None:
        assert parse_move({"kind": kind, "row": 2, "col": 5}) == MoveRequest(kind, 2, 5)

    def test_out_of_range_coordinates_accepted(self) -> None:
        """Range is the engine's concern; parsing only checks types."""
        assert parse_move({"kind": CLICK, "row": -4, "col": 99}) == MoveRequest(CLICK, -4, 99)

    @pytest.mark.parametrize("payload", [
        None,
        "c_1_2",
        [CLICK, 1, 2],
        {},
        {"kind": "reveal", "row": 1, "col": 1},
        {"kind": CLICK},
        {"kind": CLICK, "row": 1},
        {"kind": CLICK, "row": 1.0, "col": 2},
        {"kind": CLICK, "row": False, "col": 2},
        {"kind": FLAG, "row": "1", "col": "2"},
    ])
    def test_invalid_payloads(self, payload) -> None:
        with pytest.raises(InvalidMoveError):
            parse_move(payload)
