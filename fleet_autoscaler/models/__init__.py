"""Fleet Autoscaler data models."""

from fleet_autoscaler.models.action import (
    Action,
    ActionKind,
    NoOp,
    StartNode,
    StopNodes,
    action_node_ids,
)
from fleet_autoscaler.models.autoscaler import AutoscalerConfig, StopStrategy, TickRecord
from fleet_autoscaler.models.world import WorldView

__all__ = [
    "Action",
    "ActionKind",
    "AutoscalerConfig",
    "NoOp",
    "StartNode",
    "StopNodes",
    "StopStrategy",
    "TickRecord",
    "WorldView",
    "action_node_ids",
]
