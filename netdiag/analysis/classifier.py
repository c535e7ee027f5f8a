"""Partition node ids into healthy and stale sets."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from netdiag.models import Identity, LivenessStatus, NodeFilter, NodeSets

logger = logging.getLogger(__name__)


def classify_nodes(
    node_ids: Iterable[int],
    liveness: Mapping[int, LivenessStatus],
    identities: Mapping[int, Identity],
    node_filter: NodeFilter | None = None,
) -> NodeSets:
    """Split ``node_ids`` into healthy and stale sets under ``node_filter``.

    Parameters
    ----------
    node_ids:
        Every node id known to the snapshot, in snapshot order.
    liveness:
        Liveness per node id.  Only HEALTHY and SUSPECT nodes are kept;
        every other state is excluded from both sets.
    identities:
        Resolved identities, used for locality matching.  A node without
        an identity is matched against an empty locality.
    node_filter:
        A non-empty ``node_ids`` restricts both sets to those ids.  A
        ``locality_pattern`` hides every node whose locality matches.

    Returns
    -------
    NodeSets with ``healthy`` in snapshot order and ``stale`` as a set.
    """
    node_filter = node_filter or NodeFilter()

    healthy: list[int] = []
    stale: list[int] = []
    for node_id in dict.fromkeys(node_ids):
        status = liveness.get(node_id)
        if status == LivenessStatus.HEALTHY:
            healthy.append(node_id)
        elif status == LivenessStatus.SUSPECT:
            stale.append(node_id)

    if node_filter.node_ids:
        healthy = [n for n in healthy if n in node_filter.node_ids]
        stale = [n for n in stale if n in node_filter.node_ids]

    pattern = node_filter.locality_pattern
    if pattern is not None:
        def hidden(node_id: int) -> bool:
            identity = identities.get(node_id)
            return pattern.search(identity.locality if identity else "") is not None

        healthy = [n for n in healthy if not hidden(n)]
        stale = [n for n in stale if not hidden(n)]

    logger.debug("classify: %d healthy, %d stale", len(healthy), len(stale))
    return NodeSets(healthy=tuple(healthy), stale=frozenset(stale))
