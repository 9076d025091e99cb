"""Per-move control flow: load, apply, store."""
import logging
import random
from typing import Optional

from minesweeper import codec, engine
from minesweeper.store import GameStore
from minesweeper.types import CLICK, FLAG, NEW_GAME, GameConfig, GameState, MoveRequest

logger = logging.getLogger(__name__)


def game_key(session_id: str) -> str:
    return f"game:{session_id}"


class GameService:
    """
    Runs player moves against games kept in a GameStore.

    Nothing is cached between calls: each move decodes the stored record,
    mutates it and writes it back (or deletes it once the game is over).
    Concurrent moves for one session are not serialized; the last write wins.
    """

    def __init__(self, store: GameStore, config: GameConfig, rng: Optional[random.Random] = None):
        self.store = store
        self.config = config
        self.rng = rng

    async def start_new_game(self, session_id: str) -> GameState:
        """Create a game for the session, replacing any existing one."""
        game_state = engine.new_game(self.config, self.rng)
        await self.store.put(game_key(session_id), codec.encode(game_state))
        logger.info(f"New game for session {session_id}")
        return game_state

    async def get_game(self, session_id: str) -> Optional[GameState]:
        data = await self.store.get(game_key(session_id))
        if data is None:
            return None
        return codec.decode(data, self.config)

    async def apply_move(self, session_id: str, move: MoveRequest) -> Optional[GameState]:
        """
        Apply one move and persist the result.

        Returns:
            The updated state, or None when a cell move arrives without an
            active game.

        Raises:
            GameStateDecodeError: If the stored record is corrupt.
        """
        if move.kind == NEW_GAME:
            return await self.start_new_game(session_id)

        key = game_key(session_id)
        data = await self.store.get(key)
        if data is None:
            logger.info(f"No active game for session {session_id}, ignoring {move.kind}")
            return None

        game_state = codec.decode(data, self.config)

        if move.kind == CLICK:
            engine.apply_click(game_state, self.config, move.row, move.col)
        elif move.kind == FLAG:
            engine.toggle_flag(game_state, self.config, move.row, move.col)

        if game_state.game_over:
            await self.store.delete(key)
            logger.info(f"Game for session {session_id} finished, won={game_state.won}")
        else:
            await self.store.put(key, codec.encode(game_state))

        return game_state

    async def discard(self, session_id: str) -> None:
        """Drop the stored game, e.g. after it failed to decode."""
        await self.store.delete(game_key(session_id))
