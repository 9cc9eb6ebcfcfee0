"""Actions — the single outcome the Decision Engine selects per cycle."""

from enum import Enum
from typing import Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ActionKind(str, Enum):
    NOOP = "noop"
    START_NODE = "start_node"
    STOP_NODES = "stop_nodes"


class NoOp(BaseModel):
    """Do nothing this cycle."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[ActionKind.NOOP] = ActionKind.NOOP


class StartNode(BaseModel):
    """Request one managed node to start."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[ActionKind.START_NODE] = ActionKind.START_NODE
    node_id: str
    reason: str = ""


class StopNodes(BaseModel):
    """Request a non-empty set of alive nodes to stop."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[ActionKind.STOP_NODES] = ActionKind.STOP_NODES
    node_ids: Tuple[str, ...] = Field(min_length=1)   # In managed-node order
    reason: str = ""

    @field_validator("node_ids")
    @classmethod
    def _unique(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if len(set(value)) != len(value):
            raise ValueError("node_ids must be unique")
        return value


Action = Union[NoOp, StartNode, StopNodes]


def action_node_ids(action: Action) -> Tuple[str, ...]:
    """Node ids an action touches (empty for NoOp)."""
    if isinstance(action, StartNode):
        return (action.node_id,)
    if isinstance(action, StopNodes):
        return action.node_ids
    return ()
