import json
from datetime import datetime, timezone

import pytest

from netdiag.models import LivenessStatus, LocalityTier, RawNodeStatus, Snapshot

MS = 1_000_000  # nanoseconds per millisecond

UPDATED_AT = datetime(2017, 7, 14, 2, 40, tzinfo=timezone.utc)


def make_status(node_id, locality="", latencies_ms=None, address=None):
    """Build a RawNodeStatus from a ``k=v,k=v`` locality and ms latencies."""
    tiers = tuple(
        LocalityTier(*tier.split("=", 1)) for tier in locality.split(",") if tier
    )
    return RawNodeStatus(
        node_id=node_id,
        address=address if address is not None else f"10.0.0.{node_id}:26257",
        locality_tiers=tiers,
        updated_at=UPDATED_AT,
        latencies={peer: int(ms * MS) for peer, ms in (latencies_ms or {}).items()},
    )


@pytest.fixture
def three_node_snapshot():
    """Two nodes in dc=east 5ms apart, one in dc=west ~50ms away."""
    return Snapshot(
        statuses=(
            make_status(1, "dc=east", {2: 5, 3: 50}),
            make_status(2, "dc=east", {1: 5, 3: 6}),
            make_status(3, "dc=west", {1: 50, 2: 6}),
        ),
        liveness={
            1: LivenessStatus.HEALTHY,
            2: LivenessStatus.HEALTHY,
            3: LivenessStatus.HEALTHY,
        },
    )


@pytest.fixture
def mixed_snapshot():
    """Six nodes across two regions with every interesting liveness state.

    n1, n2, n4 healthy; n3 suspect; n5 dead; n6 decommissioned.
    n1 still reports latencies toward n3 (stale) and n5 (dead).
    """
    return Snapshot(
        statuses=(
            make_status(4, "region=us-west,zone=b", {1: 40, 2: 42}),
            make_status(1, "region=us-east,zone=a", {2: 2, 3: 3, 4: 40, 5: 7}),
            make_status(2, "region=us-east,zone=b", {1: 2, 4: 41}),
            make_status(3, "region=us-east,zone=a", {1: 3, 2: 4}),
            make_status(5, "region=us-west,zone=a", {1: 7}),
            make_status(6, "region=us-west,zone=a", {}),
        ),
        liveness={
            1: LivenessStatus.HEALTHY,
            2: LivenessStatus.HEALTHY,
            3: LivenessStatus.SUSPECT,
            4: LivenessStatus.HEALTHY,
            5: LivenessStatus.DEAD,
            6: LivenessStatus.DECOMMISSIONED,
        },
    )


@pytest.fixture
def snapshot_document():
    """A JSON snapshot document as produced by the status subsystem."""
    return {
        "nodes": [
            {
                "node_id": 1,
                "address": "10.0.0.1:26257",
                "locality": [{"key": "dc", "value": "east"}],
                "updated_at": 1500000000000000000,
                "latencies": {"2": 5 * MS, "3": 50 * MS},
            },
            {
                "node_id": 2,
                "address": "10.0.0.2:26257",
                "locality": [{"key": "dc", "value": "east"}],
                "updated_at": "2017-07-14T02:40:00Z",
                "latencies": {"1": 5 * MS, "3": 6 * MS},
            },
            {
                "node_id": 3,
                "address": "10.0.0.3:26257",
                "locality": [["dc", "west"]],
                "latencies": {"1": 50 * MS, "2": 6 * MS},
            },
        ],
        "liveness": {"1": "HEALTHY", "2": "healthy", "3": 3},
    }


@pytest.fixture
def snapshot_file(tmp_path, snapshot_document):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot_document), encoding="utf-8")
    return path
