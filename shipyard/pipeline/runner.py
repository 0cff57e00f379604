"""Detached execution of pipeline runs."""

import asyncio

from shipyard.logging_config import get_logger

from .coordinator import PipelineCoordinator

logger = get_logger(__name__)


class PipelineRunner:
    """Submits pipeline runs as background tasks with their own error boundary.

    The runner holds strong references to in-flight tasks so they are not
    garbage-collected mid-run; ``drain`` waits for them on shutdown. Runs are
    never cancelled by the runner.
    """

    def __init__(self, coordinator: PipelineCoordinator):
        self.coordinator = coordinator
        self._tasks: set[asyncio.Task] = set()

    @property
    def active(self) -> int:
        return len(self._tasks)

    def submit(self, project_id: str) -> asyncio.Task:
        task = asyncio.create_task(self._run(project_id), name=f"pipeline-{project_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info("pipeline_enqueued", project_id=project_id, active=self.active)
        return task

    async def _run(self, project_id: str) -> None:
        try:
            await self.coordinator.run(project_id)
        except Exception as e:
            logger.exception("pipeline_unhandled_error", project_id=project_id)
            try:
                await self.coordinator.fail(project_id, e)
            except Exception:
                logger.exception("pipeline_error_not_persisted", project_id=project_id)

    async def drain(self) -> None:
        """Wait for every submitted run to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
