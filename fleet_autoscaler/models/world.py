"""World View — one immutable, point-in-time picture of the fleet."""

from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.tzinfo.utcoffset(value) is not None


class WorldView(BaseModel):
    """
    Backlog, agents and node state for one reconciliation cycle.

    A new view is built every cycle; nothing is ever mutated in place.
    ``time`` is the instant the view was assembled and is the only clock
    any age comparison may use.
    """

    model_config = ConfigDict(frozen=True)

    backlog: int = Field(ge=0)                  # Queued jobs
    agent_count: int = Field(ge=0)              # Registered workers, may exceed managed nodes
    managed_nodes: List[str] = Field(min_length=1)
    alive: Dict[str, datetime] = {}             # node id → start time
    pending: Dict[str, datetime] = {}           # node id → request time
    time: datetime

    @model_validator(mode="after")
    def _check_invariants(self) -> "WorldView":
        if len(set(self.managed_nodes)) != len(self.managed_nodes):
            raise ValueError("managed_nodes contains duplicate ids")
        managed = set(self.managed_nodes)
        unknown_alive = set(self.alive) - managed
        if unknown_alive:
            raise ValueError(f"alive nodes not managed: {sorted(unknown_alive)}")
        unknown_pending = set(self.pending) - managed
        if unknown_pending:
            raise ValueError(f"pending nodes not managed: {sorted(unknown_pending)}")
        aware = _is_aware(self.time)
        for field_name, stamps in (("alive", self.alive), ("pending", self.pending)):
            mixed = sorted(n for n, t in stamps.items() if _is_aware(t) != aware)
            if mixed:
                raise ValueError(
                    f"{field_name} timestamps for {mixed} must be "
                    f"{'timezone-aware' if aware else 'naive'} like time"
                )
        return self

    def age_minutes(self, since: datetime) -> int:
        """Whole minutes elapsed from ``since`` to this view's time (floored, never negative)."""
        seconds = (self.time - since).total_seconds()
        return max(0, int(seconds // 60))

    def with_pending(self, pending: Dict[str, datetime]) -> "WorldView":
        """
        Return a validated copy of this view with ``pending`` replaced.

        The copy shares no containers with this view.
        """
        data = self.model_dump()
        data["pending"] = dict(pending)
        return WorldView.model_validate(data)

    def summary(self) -> dict:
        """Compact, serializable description for logs and the operator API."""
        return {
            "backlog": self.backlog,
            "agent_count": self.agent_count,
            "managed": len(self.managed_nodes),
            "alive": sorted(self.alive),
            "pending": sorted(self.pending),
            "time": self.time.isoformat(),
        }
