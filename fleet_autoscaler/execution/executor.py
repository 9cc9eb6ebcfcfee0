"""
Action Executor — issues start/stop requests and records them as pending.

Behavioral Contract:
- NoOp returns the input view unchanged and issues no calls
- Does not wait for nodes to become alive or stopped
- Every acknowledged request is recorded as pending at the view's time
- The only side effects are the start/stop calls themselves
"""

import asyncio
import logging
from typing import Dict

from fleet_autoscaler.errors import ActionError
from fleet_autoscaler.models.action import Action, NoOp, StartNode, StopNodes
from fleet_autoscaler.models.autoscaler import StopStrategy
from fleet_autoscaler.models.world import WorldView
from fleet_autoscaler.sources.base import NodeManagerSource

logger = logging.getLogger(__name__)


class ActionExecutor:
    """Applies an Action through the node manager."""

    def __init__(
        self,
        node_manager: NodeManagerSource,
        stop_strategy: StopStrategy = StopStrategy.SEQUENTIAL,
    ):
        self.node_manager = node_manager
        self.stop_strategy = stop_strategy

    async def act(self, world: WorldView, action: Action) -> WorldView:
        if isinstance(action, NoOp):
            return world
        if isinstance(action, StartNode):
            return await self._start(world, action)
        if isinstance(action, StopNodes):
            if self.stop_strategy == StopStrategy.PARALLEL:
                return await self._stop_parallel(world, action)
            return await self._stop_sequential(world, action)
        raise TypeError(f"Unknown action: {action!r}")

    async def _start(self, world: WorldView, action: StartNode) -> WorldView:
        logger.info("Starting node %s: %s", action.node_id, action.reason)
        try:
            await self.node_manager.start_node(action.node_id)
        except Exception as e:
            raise ActionError(
                f"Start of {action.node_id} failed: {e}",
                world=world,
                failed_nodes=[action.node_id],
            ) from e
        return world.with_pending({**world.pending, action.node_id: world.time})

    async def _stop_sequential(self, world: WorldView, action: StopNodes) -> WorldView:
        """Stop one node at a time; a failure keeps the entries already recorded."""
        pending: Dict = dict(world.pending)
        for node_id in action.node_ids:
            logger.info("Stopping node %s", node_id)
            try:
                await self.node_manager.stop_node(node_id)
            except Exception as e:
                raise ActionError(
                    f"Stop of {node_id} failed: {e}",
                    world=world.with_pending(pending),
                    failed_nodes=[node_id],
                ) from e
            pending[node_id] = world.time
        return world.with_pending(pending)

    async def _stop_parallel(self, world: WorldView, action: StopNodes) -> WorldView:
        """Stop all nodes concurrently; any failure records nothing."""
        logger.info("Stopping nodes %s", list(action.node_ids))
        results = await asyncio.gather(
            *(self.node_manager.stop_node(n) for n in action.node_ids),
            return_exceptions=True,
        )
        failed = [
            (node_id, result)
            for node_id, result in zip(action.node_ids, results)
            if isinstance(result, BaseException)
        ]
        if failed:
            node_id, first_error = failed[0]
            raise ActionError(
                f"Stop failed for {[n for n, _ in failed]}: {first_error}",
                world=world,
                failed_nodes=[n for n, _ in failed],
            ) from first_error

        pending = dict(world.pending)
        for node_id in action.node_ids:
            pending[node_id] = world.time
        return world.with_pending(pending)

