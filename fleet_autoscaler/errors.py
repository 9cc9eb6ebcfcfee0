"""Autoscaler error taxonomy.

Every failure originates in I/O and fails the whole tick. The decision
logic itself never raises.
"""

from typing import List, Optional


class AutoscalerError(Exception):
    """Base class for all autoscaler failures."""
    pass


class SourceError(AutoscalerError):
    """Transient I/O failure from a capability interface (network, auth)."""
    pass


class SnapshotError(AutoscalerError):
    """One of the snapshot reads failed; no partial WorldView is produced."""
    pass


class ConfigurationError(AutoscalerError):
    """Fatal precondition failure, e.g. an empty managed node set. Not retried."""
    pass


class ActionError(AutoscalerError):
    """
    A start or stop request was not acknowledged.

    ``world`` holds the view as it stood when the action aborted: with the
    pending entries recorded before the failure (sequential stops), or the
    unchanged input view (start, parallel stops).
    """

    def __init__(self, message: str, world=None, failed_nodes: Optional[List[str]] = None):
        super().__init__(message)
        self.world = world
        self.failed_nodes = failed_nodes or []
