"""Capability interfaces consumed by the autoscaler, plus in-memory implementations."""

from fleet_autoscaler.sources.base import NodeManagerSource, WorkQueueSource
from fleet_autoscaler.sources.memory import InMemoryNodeManager, InMemoryWorkQueue

__all__ = [
    "InMemoryNodeManager",
    "InMemoryWorkQueue",
    "NodeManagerSource",
    "WorkQueueSource",
]
