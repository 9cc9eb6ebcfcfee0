"""
Capability interfaces — what the autoscaler needs from the outside world.

Transport, credentials and the choice of cloud API belong to the
implementations. Any method may raise ``SourceError`` on a transient
failure; the autoscaler treats authentication failures the same way.
"""

from datetime import datetime
from typing import Dict, List, Protocol


class WorkQueueSource(Protocol):
    """Protocol for the CI job queue."""

    async def get_backlog(self) -> int: ...

    async def get_agent_count(self) -> int: ...


class NodeManagerSource(Protocol):
    """
    Protocol for the cloud node manager.

    ``start_node``/``stop_node`` return once the request is accepted, not
    once the node is actually alive or gone.
    """

    async def get_time(self) -> datetime: ...

    async def get_managed_nodes(self) -> List[str]: ...

    async def get_alive_nodes(self) -> Dict[str, datetime]: ...

    async def start_node(self, node_id: str) -> None: ...

    async def stop_node(self, node_id: str) -> None: ...
