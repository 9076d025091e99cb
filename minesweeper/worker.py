"""Temporal worker hosting the game store workflows."""
import asyncio
import logging
import os
from temporalio.worker import Worker
from minesweeper.store import DEFAULT_TASK_QUEUE, connect_temporal
from minesweeper.workflows import GameStoreWorkflow

logger = logging.getLogger(__name__)


async def main():
    """Start the Temporal worker."""
    logging.basicConfig(level=logging.INFO)
    client = await connect_temporal()
    task_queue = os.getenv("MINESWEEPER_TASK_QUEUE", DEFAULT_TASK_QUEUE)

    worker = Worker(
        client,
        task_queue=task_queue,
        workflows=[GameStoreWorkflow],
    )

    logger.info("Worker started, connected to Temporal")
    logger.info(f"Listening on task queue: {task_queue}")

    await worker.run()


if __name__ == "__main__":
    asyncio.run(main())
