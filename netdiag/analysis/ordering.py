"""Deterministic ordering of identities and missing connections.

Each ordering is a chain of stable sorts, so the last pass is the
primary key and earlier passes break ties.
"""

from __future__ import annotations

from typing import Iterable

from netdiag.models import Identity, NoConnection


def sort_identities(identities: Iterable[Identity]) -> list[Identity]:
    """Group by locality, then node id within each locality."""
    ordered = sorted(identities, key=lambda identity: identity.node_id)
    ordered = sorted(ordered, key=lambda identity: identity.locality)
    return ordered


def sort_no_connections(no_connections: Iterable[NoConnection]) -> list[NoConnection]:
    """Order by source locality, source id, target locality, target id."""
    ordered = sorted(no_connections, key=lambda nc: nc.target.node_id)
    ordered = sorted(ordered, key=lambda nc: nc.target.locality)
    ordered = sorted(ordered, key=lambda nc: nc.source.node_id)
    ordered = sorted(ordered, key=lambda nc: nc.source.locality)
    return ordered
