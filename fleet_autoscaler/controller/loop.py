"""
Autoscaler Loop — the reference tick driver.

Holds the last good WorldView between ticks (in memory only; a restart
loses pending bookkeeping, which self-heals within the expiry window).

States:
  STOPPED → RUNNING → (tick ok | tick failed → keep previous view) → RUNNING
  RUNNING → STOPPED on stop event or ConfigurationError
"""

import asyncio
import logging
from collections import deque
from datetime import datetime, timezone
from typing import Deque, List, Optional

from fleet_autoscaler.controller.cycle import AutoscalerCycle
from fleet_autoscaler.errors import AutoscalerError, ConfigurationError
from fleet_autoscaler.models.action import action_node_ids
from fleet_autoscaler.models.autoscaler import AutoscalerConfig, TickRecord
from fleet_autoscaler.models.world import WorldView
from fleet_autoscaler.sources.base import NodeManagerSource, WorkQueueSource

logger = logging.getLogger(__name__)


class AutoscalerLoop:
    """Drives AutoscalerCycle on a fixed interval and records tick outcomes."""

    def __init__(
        self,
        work_queue: WorkQueueSource,
        node_manager: NodeManagerSource,
        config: Optional[AutoscalerConfig] = None,
    ):
        self.cycle = AutoscalerCycle(work_queue, node_manager, config)
        self.world: Optional[WorldView] = None
        self._history: Deque[TickRecord] = deque(maxlen=self.config.history_size)
        self._running = False

    @property
    def config(self) -> AutoscalerConfig:
        return self.cycle.config

    @config.setter
    def config(self, config: AutoscalerConfig) -> None:
        self.cycle.config = config
        self._history = deque(self._history, maxlen=config.history_size)

    @property
    def status(self) -> str:
        """Current loop status."""
        return "running" if self._running else "stopped"

    @property
    def history(self) -> List[TickRecord]:
        """Tick records, oldest first."""
        return list(self._history)

    async def run_once(self) -> TickRecord:
        """
        Run a single tick.

        On success the new view replaces the stored one. On a transient
        failure the stored view is kept and the failure is recorded.
        ConfigurationError is recorded and re-raised.
        """
        started_at = datetime.now(timezone.utc)
        try:
            result = await self.cycle.run(self.world)
        except AutoscalerError as e:
            logger.warning("Tick failed: %s", e)
            record = TickRecord(
                started_at=started_at,
                world_time=self.world.time if self.world else None,
                success=False,
                error=str(e),
                pending_count=len(self.world.pending) if self.world else 0,
            )
            self._history.append(record)
            raise

        self.world = result.world
        record = TickRecord(
            started_at=started_at,
            world_time=result.world.time,
            action=result.action.kind.value,
            node_ids=list(action_node_ids(result.action)),
            success=True,
            pending_count=len(result.world.pending),
        )
        self._history.append(record)
        return record

    async def run_async(self, stop_event: Optional[asyncio.Event] = None) -> None:
        """Tick every ``tick_interval_seconds`` until ``stop_event`` is set."""
        self._running = True
        if stop_event is None:
            stop_event = asyncio.Event()

        try:
            while not stop_event.is_set():
                try:
                    await self.run_once()
                except ConfigurationError:
                    logger.error("Autoscaler misconfigured, stopping loop")
                    raise
                except AutoscalerError:
                    pass  # Recorded by run_once; retried next tick
                try:
                    await asyncio.wait_for(
                        stop_event.wait(),
                        timeout=self.config.tick_interval_seconds,
                    )
                except asyncio.TimeoutError:
                    continue
        finally:
            self._running = False
