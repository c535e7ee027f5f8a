"""Missing connection detection.

A healthy node that reports a latency toward a node outside the healthy
set (stale, filtered out, dead or unknown) shows a one-directional gap.
Each such report produces exactly one entry; nothing is inferred about
the reverse direction.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from netdiag.identity import lookup_identity
from netdiag.models import Identity, NoConnection, RawNodeStatus

logger = logging.getLogger(__name__)


def detect_no_connections(
    healthy: Sequence[int],
    status_by_id: Mapping[int, RawNodeStatus],
    identities: dict[int, Identity],
) -> list[NoConnection]:
    """Find latency reports from healthy nodes toward non-healthy peers.

    Parameters
    ----------
    healthy:
        Healthy node ids after filtering.
    status_by_id:
        Raw status per node id, holding each node's latency map.
    identities:
        Resolved identities.  Peers without one get a placeholder.

    Returns
    -------
    Unordered list of NoConnection entries.
    """
    healthy_set = set(healthy)
    no_connections: list[NoConnection] = []

    for source in healthy:
        status = status_by_id.get(source)
        if status is None:
            continue
        for peer in status.latencies:
            if peer in healthy_set:
                continue
            no_connections.append(
                NoConnection(
                    source=lookup_identity(identities, source),
                    target=lookup_identity(identities, peer),
                )
            )

    logger.debug("connections: %d missing connections", len(no_connections))
    return no_connections
