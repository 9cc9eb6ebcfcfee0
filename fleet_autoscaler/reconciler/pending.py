"""
Pending reconciliation — carries in-flight requests from one cycle to the next.

A pending entry is dropped when:
  - its node changed alive/not-alive membership between the two views
    (the request observably resolved, for better or worse), or
  - it is at least the expiry window old by the fresh view's time
    (the request is presumed lost; the next decision may retry it), or
  - its node is no longer managed.
"""

import logging
from typing import Dict

from fleet_autoscaler.models.world import WorldView

logger = logging.getLogger(__name__)

DEFAULT_PENDING_EXPIRY_MINUTES = 10


def reconcile(
    previous: WorldView,
    fresh: WorldView,
    expiry_minutes: int = DEFAULT_PENDING_EXPIRY_MINUTES,
) -> WorldView:
    """Return ``fresh`` with ``pending`` set to what survives from ``previous``."""
    changed = set(previous.alive) ^ set(fresh.alive)
    managed = set(fresh.managed_nodes)

    carried: Dict = {}
    for node_id, requested_at in previous.pending.items():
        if node_id in changed:
            logger.debug("Pending %s resolved (alive membership changed)", node_id)
            continue
        age = fresh.age_minutes(requested_at)
        if age >= expiry_minutes:
            logger.info("Pending %s expired after %d minutes", node_id, age)
            continue
        if node_id not in managed:
            logger.debug("Pending %s dropped (no longer managed)", node_id)
            continue
        carried[node_id] = requested_at

    return fresh.with_pending(carried)
