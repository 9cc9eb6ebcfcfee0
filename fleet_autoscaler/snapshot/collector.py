"""
Snapshot Collector — gathers a consistent, point-in-time WorldView.

The five reads are independent and run concurrently; the collector waits
for all of them. If any read fails the whole snapshot fails, and reads
still in flight are cancelled before the error is raised.
"""

import asyncio
import logging

from pydantic import ValidationError

from fleet_autoscaler.errors import ConfigurationError, SnapshotError
from fleet_autoscaler.models.world import WorldView
from fleet_autoscaler.sources.base import NodeManagerSource, WorkQueueSource

logger = logging.getLogger(__name__)


class SnapshotCollector:
    """Builds a fresh WorldView (with no pending entries) from the two sources."""

    def __init__(self, work_queue: WorkQueueSource, node_manager: NodeManagerSource):
        self.work_queue = work_queue
        self.node_manager = node_manager

    async def _read_all(self) -> list:
        tasks = [
            asyncio.ensure_future(self.work_queue.get_backlog()),
            asyncio.ensure_future(self.work_queue.get_agent_count()),
            asyncio.ensure_future(self.node_manager.get_managed_nodes()),
            asyncio.ensure_future(self.node_manager.get_alive_nodes()),
            asyncio.ensure_future(self.node_manager.get_time()),
        ]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                if not task.done():
                    task.cancel()
            # Collect the cancelled and failed siblings so nothing outlives the tick
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def snapshot(self) -> WorldView:
        try:
            backlog, agent_count, managed, alive, now = await self._read_all()
        except Exception as e:
            raise SnapshotError(f"Snapshot read failed: {e}") from e

        managed = list(managed)
        if not managed:
            raise ConfigurationError("Node manager reports no managed nodes")
        duplicates = sorted({n for n in managed if managed.count(n) > 1})
        if duplicates:
            raise ConfigurationError(f"Node manager reports duplicate managed nodes: {duplicates}")

        managed_set = set(managed)
        unmanaged = sorted(set(alive) - managed_set)
        if unmanaged:
            logger.warning("Ignoring alive nodes outside the managed set: %s", unmanaged)
            alive = {n: t for n, t in alive.items() if n in managed_set}

        try:
            view = WorldView(
                backlog=backlog,
                agent_count=agent_count,
                managed_nodes=managed,
                alive=alive,
                pending={},
                time=now,
            )
        except ValidationError as e:
            raise SnapshotError(f"Snapshot rejected invalid source data: {e}") from e
        logger.debug("Snapshot: %s", view.summary())
        return view
