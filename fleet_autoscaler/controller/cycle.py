"""
Autoscaler Cycle — one Snapshot → Reconcile → Decide → Act pass.

The cycle never loops on its own: a host (see ``controller.loop``) decides
when to tick, how to back off and when to stop. A failed tick raises and
leaves the caller's previous WorldView as it was.
"""

import logging
from typing import NamedTuple, Optional

from fleet_autoscaler.decision.engine import decide
from fleet_autoscaler.execution.executor import ActionExecutor
from fleet_autoscaler.models.action import Action
from fleet_autoscaler.models.autoscaler import AutoscalerConfig
from fleet_autoscaler.models.world import WorldView
from fleet_autoscaler.reconciler.pending import reconcile
from fleet_autoscaler.snapshot.collector import SnapshotCollector
from fleet_autoscaler.sources.base import NodeManagerSource, WorkQueueSource

logger = logging.getLogger(__name__)


class CycleResult(NamedTuple):
    world: WorldView
    action: Action


class AutoscalerCycle:
    """Runs reconciliation cycles against the injected capability interfaces."""

    def __init__(
        self,
        work_queue: WorkQueueSource,
        node_manager: NodeManagerSource,
        config: Optional[AutoscalerConfig] = None,
    ):
        self.work_queue = work_queue
        self.node_manager = node_manager
        self.config = config or AutoscalerConfig()
        self.collector = SnapshotCollector(work_queue, node_manager)

    async def run(self, previous: Optional[WorldView] = None) -> CycleResult:
        """Run one cycle and return the new view together with the action taken."""
        fresh = await self.collector.snapshot()
        if previous is None:
            world = fresh
        else:
            world = reconcile(previous, fresh, self.config.pending_expiry_minutes)

        action = decide(world, self.config)
        logger.debug("Decided %s for %s", action.kind.value, world.summary())

        executor = ActionExecutor(self.node_manager, self.config.stop_strategy)
        world = await executor.act(world, action)
        return CycleResult(world=world, action=action)

    async def tick(self, previous: Optional[WorldView] = None) -> WorldView:
        """Run one cycle; ``previous=None`` bootstraps with no pending requests."""
        result = await self.run(previous)
        return result.world
