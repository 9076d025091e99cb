"""Key-value stores holding encoded games between moves."""
import logging
import os
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Dict, Optional

from temporalio.client import Client
from temporalio.common import WorkflowIDConflictPolicy
from temporalio.envconfig import ClientConfig
from temporalio.service import RPCError, RPCStatusCode

from minesweeper.workflows import GameStoreWorkflow

logger = logging.getLogger(__name__)

DEFAULT_TASK_QUEUE = "minesweeper-store-task-queue"


class GameStore(ABC):
    """Async key-value interface used by the game service."""

    @abstractmethod
    async def get(self, key: str) -> Optional[bytes]:
        """Return the stored bytes, or None when the key is absent."""

    @abstractmethod
    async def put(self, key: str, data: bytes) -> None:
        """Store bytes under key, replacing any previous value."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key; deleting an absent key is not an error."""


class InMemoryGameStore(GameStore):
    """Process-local store for development and tests."""

    def __init__(self) -> None:
        self.records: Dict[str, bytes] = {}

    async def get(self, key: str) -> Optional[bytes]:
        return self.records.get(key)

    async def put(self, key: str, data: bytes) -> None:
        self.records[key] = data

    async def delete(self, key: str) -> None:
        self.records.pop(key, None)


class TemporalGameStore(GameStore):
    """
    Store backed by one GameStoreWorkflow per key.

    The workflow id is the key itself. A record left without writes for
    idle_timeout is evicted by its workflow.
    """

    def __init__(self, client: Client, task_queue: str = DEFAULT_TASK_QUEUE,
                 idle_timeout: timedelta = timedelta(hours=24)) -> None:
        self.client = client
        self.task_queue = task_queue
        self.idle_timeout = idle_timeout

    async def get(self, key: str) -> Optional[bytes]:
        handle = self.client.get_workflow_handle(key)
        try:
            return await handle.query(GameStoreWorkflow.get_payload)
        except RPCError as error:
            if error.status == RPCStatusCode.NOT_FOUND:
                return None
            raise

    async def put(self, key: str, data: bytes) -> None:
        handle = await self.client.start_workflow(
            GameStoreWorkflow.run,
            self.idle_timeout.total_seconds(),
            id=key,
            task_queue=self.task_queue,
            id_conflict_policy=WorkflowIDConflictPolicy.USE_EXISTING,
        )
        await handle.execute_update(GameStoreWorkflow.put_payload, data)

    async def delete(self, key: str) -> None:
        handle = self.client.get_workflow_handle(key)
        try:
            await handle.signal(GameStoreWorkflow.delete_payload)
        except RPCError as error:
            # Already completed or never started
            if error.status != RPCStatusCode.NOT_FOUND:
                raise
            logger.debug(f"No running record for {key}")


async def connect_temporal() -> Client:
    """
    Connect to Temporal.

    Uses the envconfig profile named by TEMPORAL_PROFILE when set, otherwise
    TEMPORAL_ADDRESS and TEMPORAL_NAMESPACE.
    """
    profile_name = os.getenv("TEMPORAL_PROFILE")
    if profile_name:
        connect_config = ClientConfig.load_client_connect_config(profile=profile_name)
        return await Client.connect(**connect_config)
    return await Client.connect(
        os.getenv("TEMPORAL_ADDRESS", "localhost:7233"),
        namespace=os.getenv("TEMPORAL_NAMESPACE", "default"),
    )
