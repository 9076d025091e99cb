"""Flask server delivering moves to the Minesweeper engine."""
import asyncio
import os
import logging
from datetime import datetime, timedelta
from flask import Flask, request, jsonify
from flask_cors import CORS

from minesweeper.codec import GameStateDecodeError
from minesweeper.render import serialize_game_state
from minesweeper.service import GameService
from minesweeper.store import DEFAULT_TASK_QUEUE, InMemoryGameStore, TemporalGameStore, connect_temporal
from minesweeper.types import GameConfig, InvalidMoveError, parse_move

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)

# Global service reference, set up by main()
game_service: GameService | None = None

NO_GAME_MESSAGE = "No active game. Send a 'new-game' move to start one."


@app.route('/api/sessions/<session_id>/moves', methods=['POST'])
def make_move(session_id):
    """Apply a move for the session."""
    try:
        move = parse_move(request.get_json(silent=True))
    except InvalidMoveError as error:
        return jsonify({'error': str(error)}), 400

    try:
        game_state = asyncio.run(game_service.apply_move(session_id, move))
    except GameStateDecodeError as error:
        logger.warning(f"Discarding corrupt game for session {session_id}: {error}")
        asyncio.run(game_service.discard(session_id))
        return jsonify({'error': 'Stored game was unreadable and has been discarded; start a new game'}), 409
    except Exception as error:
        logger.error(f"Error making move: {error}")
        return jsonify({'error': 'Failed to make move'}), 500

    if game_state is None:
        return jsonify({'gameState': None, 'message': NO_GAME_MESSAGE})
    return jsonify({'gameState': serialize_game_state(game_state, game_service.config)})


@app.route('/api/sessions/<session_id>', methods=['GET'])
def get_game_state(session_id):
    """Get the session's current game."""
    try:
        game_state = asyncio.run(game_service.get_game(session_id))
    except GameStateDecodeError as error:
        logger.warning(f"Stored game for session {session_id} is unreadable: {error}")
        return jsonify({'error': 'Stored game is unreadable'}), 409
    except Exception as error:
        logger.error(f"Error getting game state: {error}")
        return jsonify({'error': 'Failed to load game'}), 500

    if game_state is None:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify({'gameState': serialize_game_state(game_state, game_service.config)})


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'OK',
        'timestamp': datetime.now().isoformat()
    })


def build_service() -> GameService:
    """Create the game service from environment settings."""
    config = GameConfig.from_env()
    backend = os.getenv("MINESWEEPER_STORE", "temporal")

    if backend == "memory":
        logger.info("Using in-memory game store")
        return GameService(InMemoryGameStore(), config)

    client = asyncio.run(connect_temporal())
    logger.info("Connected to Temporal server")
    store = TemporalGameStore(
        client,
        task_queue=os.getenv("MINESWEEPER_TASK_QUEUE", DEFAULT_TASK_QUEUE),
        idle_timeout=timedelta(hours=float(os.getenv("MINESWEEPER_IDLE_TIMEOUT_HOURS", 24))),
    )
    return GameService(store, config)


def main():
    """Start the Flask server."""
    global game_service
    logging.basicConfig(level=logging.INFO)

    try:
        game_service = build_service()

        port = int(os.getenv("PORT", 3000))
        logger.info(f"Minesweeper server running on http://localhost:{port}")
        logger.info("With the Temporal store, start the worker in another terminal: python -m minesweeper.worker")

        app.run(host='0.0.0.0', port=port, debug=False)

    except Exception as error:
        logger.error(f"Failed to start server: {error}")
        exit(1)


if __name__ == "__main__":
    main()
