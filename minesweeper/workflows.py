"""Temporal workflow that holds one stored game record."""
import asyncio
from typing import Optional

from temporalio import workflow


@workflow.defn
class GameStoreWorkflow:
    """Workflow acting as a single key-value entry, keyed by workflow id."""

    def __init__(self):
        self.payload: Optional[bytes] = None
        self.last_activity_time: float = 0
        self.should_close: bool = False

    @workflow.run
    async def run(self, idle_timeout_seconds: float) -> None:
        """Keep the record until it is deleted or left idle too long."""
        self.last_activity_time = workflow.time()

        while not self.should_close:
            remaining = idle_timeout_seconds - (workflow.time() - self.last_activity_time)
            if remaining <= 0:
                workflow.logger.info(f"Evicting idle record {workflow.info().workflow_id}")
                break
            try:
                await workflow.wait_condition(lambda: self.should_close, timeout=remaining)
            except asyncio.TimeoutError:
                # Writes may have pushed the deadline back; re-check it
                continue

        self.payload = None

    @workflow.update
    def put_payload(self, data: bytes) -> None:
        """Replace the stored record, reviving it if a delete is still pending."""
        self.payload = data
        self.should_close = False
        self.last_activity_time = workflow.time()

    @workflow.signal
    def delete_payload(self) -> None:
        """Drop the record and let the workflow complete."""
        self.payload = None
        self.should_close = True

    @workflow.query
    def get_payload(self) -> Optional[bytes]:
        return self.payload
