"""Node identity resolution.

Turns raw per-node status records into the ``Identity`` records every
table is keyed on.  Locality is rendered as ``key=value`` pairs joined
with commas, in the order the node reports its tiers:

    region=us-east,zone=us-east-1a

Resolution never fails.  Missing fields become empty strings.
"""

from __future__ import annotations

import logging
from typing import Iterable

from netdiag.models import Identity, LocalityTier, RawNodeStatus

logger = logging.getLogger(__name__)


def locality_to_string(tiers: Iterable[LocalityTier] | None) -> str:
    """Serialize locality tiers as ``k1=v1,k2=v2`` without reordering them."""
    if not tiers:
        return ""
    parts = []
    for tier in tiers:
        key = tier.key if tier.key is not None else ""
        value = tier.value if tier.value is not None else ""
        parts.append(f"{key}={value}")
    return ",".join(parts)


def identity_from_status(status: RawNodeStatus) -> Identity:
    return Identity(
        node_id=status.node_id,
        address=status.address or "",
        locality=locality_to_string(status.locality_tiers),
        last_updated=status.updated_at,
    )


def placeholder_identity(node_id: int) -> Identity:
    """Identity for a node id that appears without a status record."""
    return Identity(node_id=node_id)


def resolve_identities(statuses: Iterable[RawNodeStatus]) -> dict[int, Identity]:
    """Build the node id -> Identity mapping for a snapshot.

    When a node id is reported more than once the last record wins.
    """
    identities: dict[int, Identity] = {}
    for status in statuses:
        if status.node_id in identities:
            logger.debug("identity: duplicate status for n%d, keeping latest", status.node_id)
        identities[status.node_id] = identity_from_status(status)
    return identities


def lookup_identity(identities: dict[int, Identity], node_id: int) -> Identity:
    identity = identities.get(node_id)
    if identity is None:
        logger.debug("identity: no status for n%d, using placeholder", node_id)
        return placeholder_identity(node_id)
    return identity
