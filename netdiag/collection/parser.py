"""Snapshot document parser.

Reads the JSON snapshot handed over by the node status / liveness
subsystem and builds the immutable ``Snapshot`` the engine works on.

Document layout::

    {
      "nodes": [
        {"node_id": 1, "address": "10.0.0.1:26257",
         "locality": [{"key": "region", "value": "us-east"}],
         "updated_at": 1500000000000000000,
         "latencies": {"2": 5000000}}
      ],
      "liveness": {"1": "HEALTHY", "2": 2}
    }

Latencies are nanoseconds and are kept unrounded.  Malformed fields
inside a node record are dropped with a warning; only a document with no
usable structure raises.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from netdiag.config import LIVENESS_ALIASES, LIVENESS_CODES, NANOS_PER_MILLI
from netdiag.errors import SnapshotError
from netdiag.models import LivenessStatus, LocalityTier, RawNodeStatus, Snapshot

logger = logging.getLogger(__name__)

NANOS_PER_SECOND = NANOS_PER_MILLI * 1000


# ---------------------------------------------------------------------------
# Field parsers
# ---------------------------------------------------------------------------

def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError:
            return None
    return None


def parse_timestamp(value: Any) -> datetime | None:
    """Nanoseconds since the epoch or an ISO-8601 string -> aware UTC datetime."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / NANOS_PER_SECOND, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    return None


def parse_locality(value: Any) -> tuple[LocalityTier, ...]:
    """Accept a list of ``{"key", "value"}`` dicts or ``[key, value]`` pairs.

    A ``{"tiers": [...]}`` wrapper is unwrapped.  Tier order is preserved.
    """
    if isinstance(value, dict):
        value = value.get("tiers")
    if not isinstance(value, list):
        return ()
    tiers = []
    for tier in value:
        if isinstance(tier, dict):
            key, val = tier.get("key"), tier.get("value")
        elif isinstance(tier, (list, tuple)) and len(tier) == 2:
            key, val = tier
        else:
            logger.warning("Skipping malformed locality tier %r", tier)
            continue
        tiers.append(LocalityTier(
            key="" if key is None else str(key),
            value="" if val is None else str(val),
        ))
    return tuple(tiers)


def parse_latencies(node_id: int, value: Any) -> dict[int, float]:
    """Peer id -> nanoseconds.

    Values are kept as given, fractional nanoseconds included.  Self
    entries, unparsable entries and non-finite values (NaN, Infinity,
    overflowing literals such as 1e400) are dropped.
    """
    if not isinstance(value, dict):
        return {}
    latencies: dict[int, float] = {}
    for peer_key, nanos in value.items():
        peer = _as_int(peer_key)
        if peer is None or isinstance(nanos, bool) or not isinstance(nanos, (int, float)):
            logger.warning("n%d: skipping malformed latency entry %r -> %r", node_id, peer_key, nanos)
            continue
        if not math.isfinite(nanos):
            logger.warning("n%d: skipping non-finite latency toward n%d: %r", node_id, peer, nanos)
            continue
        if peer == node_id:
            logger.warning("n%d: dropping latency entry toward itself", node_id)
            continue
        latencies[peer] = nanos
    return latencies


def parse_liveness_status(value: Any) -> LivenessStatus:
    if isinstance(value, bool):
        return LivenessStatus.UNKNOWN
    if isinstance(value, int):
        name = LIVENESS_CODES.get(value, LivenessStatus.UNKNOWN.value)
    elif isinstance(value, str):
        name = value.strip().upper()
        name = LIVENESS_ALIASES.get(name, name)
    else:
        return LivenessStatus.UNKNOWN
    try:
        return LivenessStatus(name)
    except ValueError:
        logger.warning("Unknown liveness status %r, treating as UNKNOWN", value)
        return LivenessStatus.UNKNOWN


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

def parse_node_status(record: dict[str, Any]) -> RawNodeStatus:
    """Build a RawNodeStatus from one node record.

    Raises SnapshotError when the record has no integer ``node_id``.
    """
    if not isinstance(record, dict):
        raise SnapshotError(f"node record is not an object: {record!r}")
    node_id = _as_int(record.get("node_id"))
    if node_id is None:
        raise SnapshotError(f"node record without an integer node_id: {record!r}")

    address = record.get("address")
    if not isinstance(address, str):
        if address is not None:
            logger.warning("n%d: non-string address %r", node_id, address)
        address = ""

    return RawNodeStatus(
        node_id=node_id,
        address=address,
        locality_tiers=parse_locality(record.get("locality")),
        updated_at=parse_timestamp(record.get("updated_at")),
        latencies=parse_latencies(node_id, record.get("latencies")),
    )


def parse_snapshot(document: dict[str, Any]) -> Snapshot:
    """Build a Snapshot from a decoded snapshot document."""
    if not isinstance(document, dict):
        raise SnapshotError("snapshot document must be a JSON object")
    nodes = document.get("nodes")
    if not isinstance(nodes, list):
        raise SnapshotError("snapshot document has no 'nodes' list")

    statuses = tuple(parse_node_status(record) for record in nodes)

    liveness: dict[int, LivenessStatus] = {}
    raw_liveness = document.get("liveness") or {}
    if not isinstance(raw_liveness, dict):
        logger.warning("Ignoring non-object liveness section")
        raw_liveness = {}
    for key, value in raw_liveness.items():
        node_id = _as_int(key)
        if node_id is None:
            logger.warning("Skipping liveness entry with non-integer node id %r", key)
            continue
        liveness[node_id] = parse_liveness_status(value)

    logger.info("Parsed snapshot: %d node statuses, %d liveness entries",
                len(statuses), len(liveness))
    return Snapshot(statuses=statuses, liveness=liveness)


def load_snapshot(filepath: str | Path) -> Snapshot:
    """Read and parse a snapshot JSON file."""
    filepath = Path(filepath)
    try:
        with open(filepath, "r", encoding="utf-8") as fh:
            document = json.load(fh)
    except OSError as exc:
        raise SnapshotError(f"cannot read {filepath}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"malformed JSON in {filepath.name}: {exc}") from exc
    return parse_snapshot(document)
