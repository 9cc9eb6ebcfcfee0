"""
In-memory capability implementations.

Used by the test-suite and for local runs of the operator API. In
production these are replaced by clients for the real job queue and
cloud node manager.
"""

from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Set

from fleet_autoscaler.errors import SourceError


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryWorkQueue:
    """A job queue whose backlog and agent count are set directly."""

    def __init__(self, backlog: int = 0, agent_count: int = 0):
        self.backlog = backlog
        self.agent_count = agent_count
        self.failing: Set[str] = set()

    def fail(self, *operations: str) -> None:
        """Make the named operations (e.g. ``"get_backlog"``) raise SourceError."""
        self.failing.update(operations)

    def recover(self) -> None:
        self.failing.clear()

    def _check(self, operation: str) -> None:
        if operation in self.failing:
            raise SourceError(f"{operation} unavailable")

    async def get_backlog(self) -> int:
        self._check("get_backlog")
        return self.backlog

    async def get_agent_count(self) -> int:
        self._check("get_agent_count")
        return self.agent_count


class InMemoryNodeManager:
    """
    A node manager backed by a dict of alive nodes.

    By default start/stop only record the request; with ``apply_requests``
    the node appears alive (or disappears) immediately, which is enough to
    walk the full Idle → Pending → Alive → Pending → Idle cycle in tests.
    """

    def __init__(
        self,
        managed_nodes: Iterable[str],
        alive: Optional[Dict[str, datetime]] = None,
        clock: Optional[Callable[[], datetime]] = None,
        apply_requests: bool = False,
    ):
        self.managed_nodes: List[str] = list(managed_nodes)
        self.alive: Dict[str, datetime] = dict(alive or {})
        self.clock = clock or _utc_now
        self.apply_requests = apply_requests
        self.started: List[str] = []
        self.stopped: List[str] = []
        self.failing: Set[str] = set()
        self.failing_nodes: Set[str] = set()

    def fail(self, *operations: str) -> None:
        """Make the named operations (e.g. ``"stop_node"``) raise SourceError."""
        self.failing.update(operations)

    def fail_node(self, *node_ids: str) -> None:
        """Make start/stop requests for the given nodes raise SourceError."""
        self.failing_nodes.update(node_ids)

    def recover(self) -> None:
        self.failing.clear()
        self.failing_nodes.clear()

    def _check(self, operation: str, node_id: Optional[str] = None) -> None:
        if operation in self.failing:
            raise SourceError(f"{operation} unavailable")
        if node_id is not None and node_id in self.failing_nodes:
            raise SourceError(f"{operation} rejected for {node_id}")

    async def get_time(self) -> datetime:
        self._check("get_time")
        return self.clock()

    async def get_managed_nodes(self) -> List[str]:
        self._check("get_managed_nodes")
        return list(self.managed_nodes)

    async def get_alive_nodes(self) -> Dict[str, datetime]:
        self._check("get_alive_nodes")
        return dict(self.alive)

    async def start_node(self, node_id: str) -> None:
        self._check("start_node", node_id)
        self.started.append(node_id)
        if self.apply_requests:
            self.alive[node_id] = self.clock()

    async def stop_node(self, node_id: str) -> None:
        self._check("stop_node", node_id)
        self.stopped.append(node_id)
        if self.apply_requests:
            self.alive.pop(node_id, None)
