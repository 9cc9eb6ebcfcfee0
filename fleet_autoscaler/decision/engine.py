"""
Decision Engine — classifies a WorldView into exactly one Action.

Rules, first match wins:
  1. Scale-up:   no agents, work queued, nothing alive, nothing pending
                 → start the first managed node. One node at a time.
  2. Scale-down: among alive nodes with no request in flight, stop those
                 that are idle and about to enter another billed hour, or
                 that have reached the hard age cap (even when busy).
  3. Otherwise NoOp.

All ages are whole minutes, floored, measured against the view's time.
"""

from typing import List, Optional

from fleet_autoscaler.models.action import Action, NoOp, StartNode, StopNodes
from fleet_autoscaler.models.autoscaler import AutoscalerConfig
from fleet_autoscaler.models.world import WorldView


def needs_scale_up(world: WorldView) -> bool:
    return (
        world.agent_count == 0
        and world.backlog > 0
        and not world.alive
        and not world.pending
    )


def should_stop(world: WorldView, node_id: str, config: AutoscalerConfig) -> Optional[str]:
    """Return the reason an alive node should be stopped, or None to keep it."""
    age = world.age_minutes(world.alive[node_id])
    if age >= config.max_node_age_minutes:
        return f"{node_id} reached max age ({age}m)"
    if world.backlog == 0 and age % config.billing_period_minutes >= config.stop_threshold_minutes:
        return f"{node_id} idle near billing boundary ({age}m)"
    return None


def stop_candidates(world: WorldView) -> List[str]:
    """Alive nodes without an in-flight request, in managed-node order."""
    return [
        n for n in world.managed_nodes
        if n in world.alive and n not in world.pending
    ]


def decide(world: WorldView, config: Optional[AutoscalerConfig] = None) -> Action:
    """Pure and total: never raises on a well-formed WorldView."""
    config = config or AutoscalerConfig()

    if needs_scale_up(world):
        return StartNode(
            node_id=world.managed_nodes[0],
            reason=f"backlog {world.backlog} with no agents",
        )

    if world.alive:
        selected = []
        reasons = []
        for node_id in stop_candidates(world):
            reason = should_stop(world, node_id, config)
            if reason:
                selected.append(node_id)
                reasons.append(reason)
        if selected:
            return StopNodes(node_ids=tuple(selected), reason="; ".join(reasons))

    return NoOp()
