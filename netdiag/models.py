"""Shared data models for netdiag."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Mapping


class LivenessStatus(str, Enum):
    UNKNOWN = "UNKNOWN"
    HEALTHY = "HEALTHY"
    SUSPECT = "SUSPECT"
    DEAD = "DEAD"
    DECOMMISSIONING = "DECOMMISSIONING"
    DECOMMISSIONED = "DECOMMISSIONED"


class Band(str, Enum):
    """Heat map classification of a single (source, target) cell."""
    SELF = "self"
    NO_CONNECTION = "no-connection"
    PLUS_2 = "plus-2"
    PLUS_1 = "plus-1"
    EVEN = "even"
    MINUS_1 = "minus-1"
    MINUS_2 = "minus-2"
    # Latency exists but there are no statistics to compare it against.
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class LocalityTier:
    key: str
    value: str


@dataclass(frozen=True)
class Identity:
    """How a node is shown in every table: id, address and locality."""
    node_id: int
    address: str = ""
    locality: str = ""
    last_updated: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "node_id": self.node_id,
            "address": self.address,
            "locality": self.locality,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
        }


@dataclass(frozen=True)
class RawNodeStatus:
    """A single node's status record as reported at snapshot time.

    ``latencies`` maps peer node id -> round-trip latency in nanoseconds.
    """
    node_id: int
    address: str = ""
    locality_tiers: tuple[LocalityTier, ...] = ()
    updated_at: datetime | None = None
    latencies: Mapping[int, float] = field(default_factory=dict)


@dataclass(frozen=True)
class Snapshot:
    """Immutable bundle of node statuses and liveness for one computation."""
    statuses: tuple[RawNodeStatus, ...] = ()
    liveness: Mapping[int, LivenessStatus] = field(default_factory=dict)
    node_ids: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if not self.node_ids:
            seen: dict[int, None] = {}
            for status in self.statuses:
                seen.setdefault(status.node_id, None)
            for node_id in self.liveness:
                seen.setdefault(node_id, None)
            object.__setattr__(self, "node_ids", tuple(seen))

    @property
    def is_loaded(self) -> bool:
        return bool(self.statuses) and bool(self.liveness)

    def status_by_id(self) -> dict[int, RawNodeStatus]:
        return {status.node_id: status for status in self.statuses}


@dataclass(frozen=True)
class NodeFilter:
    """Restrictions applied to the nodes shown.

    An empty ``node_ids`` set means no restriction.  ``locality_pattern``
    hides every node whose locality matches it.
    """
    node_ids: frozenset[int] = frozenset()
    locality_pattern: re.Pattern | None = None

    @property
    def is_empty(self) -> bool:
        return not self.node_ids and self.locality_pattern is None

    def to_dict(self) -> dict:
        return {
            "node_ids": sorted(self.node_ids),
            "locality": self.locality_pattern.pattern if self.locality_pattern else None,
        }


@dataclass(frozen=True)
class NodeSets:
    """Output of node classification: healthy ids in snapshot order, stale ids."""
    healthy: tuple[int, ...] = ()
    stale: frozenset[int] = frozenset()


@dataclass(frozen=True)
class NoConnection:
    """A healthy node reporting a latency toward a node outside the healthy set."""
    source: Identity
    target: Identity

    def to_dict(self) -> dict:
        return {"from": self.source.to_dict(), "to": self.target.to_dict()}


@dataclass(frozen=True)
class Thresholds:
    plus1: float
    plus2: float
    minus1: float
    minus2: float


@dataclass(frozen=True)
class LatencyStats:
    """Mean and sample standard deviation of healthy pairwise latencies (ms)."""
    mean: float
    stddev: float
    sample_count: int
    thresholds: Thresholds

    def to_dict(self) -> dict:
        return {
            "mean": self.mean,
            "stddev": self.stddev,
            "sample_count": self.sample_count,
            "thresholds": {
                "plus1": self.thresholds.plus1,
                "plus2": self.thresholds.plus2,
                "minus1": self.thresholds.minus1,
                "minus2": self.thresholds.minus2,
            },
        }


@dataclass(frozen=True)
class PairClassification:
    source: int
    target: int
    band: Band
    latency_ms: float | None = None

    def to_dict(self) -> dict:
        return {
            "from": self.source,
            "to": self.target,
            "band": self.band.value,
            "latency_ms": self.latency_ms,
        }


@dataclass(frozen=True)
class LegendEntry:
    label: str
    band: Band
    value_ms: float
