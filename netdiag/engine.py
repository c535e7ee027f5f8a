"""Network diagnostics engine.

``compute_diagnostics`` is a pure function over an immutable snapshot and
a filter.  Every call resolves identities, classifies nodes, computes
latency statistics, detects missing connections and orders the output
from scratch; nothing is cached between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from netdiag.analysis.classifier import classify_nodes
from netdiag.analysis.connections import detect_no_connections
from netdiag.analysis.latency_stats import collect_latency_samples, compute_latency_stats
from netdiag.analysis.ordering import sort_identities, sort_no_connections
from netdiag.analysis.pairwise import classify_pair
from netdiag.config import LEGEND_LABELS
from netdiag.filters import parse_filter
from netdiag.identity import lookup_identity, resolve_identities
from netdiag.models import (
    Band,
    Identity,
    LatencyStats,
    LegendEntry,
    NodeFilter,
    NoConnection,
    PairClassification,
    RawNodeStatus,
    Snapshot,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagnosticsResult:
    """Everything the network report displays for one snapshot and filter."""
    display_identities: tuple[Identity, ...] = ()
    stale_identities: tuple[Identity, ...] = ()
    no_connections: tuple[NoConnection, ...] = ()
    stats: LatencyStats | None = None
    node_filter: NodeFilter = field(default_factory=NodeFilter)
    loaded: bool = True
    stale_ids: frozenset[int] = frozenset()
    status_by_id: Mapping[int, RawNodeStatus] = field(default_factory=dict, repr=False)

    @property
    def is_empty(self) -> bool:
        return not self.display_identities

    def classify(self, source: int, target: int) -> PairClassification:
        return classify_pair(source, target, self.stale_ids, self.status_by_id, self.stats)

    def latency_matrix(self) -> list[list[PairClassification]]:
        """Heat map cells, one row per displayed node, in display order."""
        ids = [identity.node_id for identity in self.display_identities]
        return [[self.classify(a, b) for b in ids] for a in ids]

    def legend(self) -> list[LegendEntry]:
        if self.stats is None:
            return []
        t = self.stats.thresholds
        values = (
            (Band.MINUS_2, t.minus2),
            (Band.MINUS_1, t.minus1),
            (Band.EVEN, self.stats.mean),
            (Band.PLUS_1, t.plus1),
            (Band.PLUS_2, t.plus2),
        )
        return [
            LegendEntry(label=label, band=band, value_ms=value)
            for label, (band, value) in zip(LEGEND_LABELS, values)
        ]

    def to_dict(self) -> dict:
        return {
            "loaded": self.loaded,
            "filter": self.node_filter.to_dict(),
            "display_identities": [i.to_dict() for i in self.display_identities],
            "stale_identities": [i.to_dict() for i in self.stale_identities],
            "no_connections": [nc.to_dict() for nc in self.no_connections],
            "stats": self.stats.to_dict() if self.stats else None,
            "legend": [
                {"label": e.label, "band": e.band.value, "value_ms": e.value_ms}
                for e in self.legend()
            ],
            "latencies": [
                [cell.to_dict() for cell in row] for row in self.latency_matrix()
            ],
        }


def compute_diagnostics(
    snapshot: Snapshot,
    node_filter: NodeFilter | None = None,
) -> DiagnosticsResult:
    """Compute the network diagnostics view of ``snapshot`` under ``node_filter``.

    A snapshot without statuses or liveness yields an empty result with
    ``loaded`` set to False.
    """
    node_filter = node_filter or NodeFilter()
    if not snapshot.is_loaded:
        logger.info("diagnostics: snapshot not loaded (%d statuses, %d liveness entries)",
                    len(snapshot.statuses), len(snapshot.liveness))
        return DiagnosticsResult(node_filter=node_filter, loaded=False)

    identities = resolve_identities(snapshot.statuses)
    status_by_id = snapshot.status_by_id()

    node_sets = classify_nodes(snapshot.node_ids, snapshot.liveness, identities, node_filter)
    healthy = node_sets.healthy
    stale = node_sets.stale

    ordered_stale = [n for n in dict.fromkeys(snapshot.node_ids) if n in stale]
    display_ids = list(healthy) + ordered_stale
    display_identities = sort_identities(lookup_identity(identities, n) for n in display_ids)
    stale_identities = sort_identities(lookup_identity(identities, n) for n in ordered_stale)

    stats = compute_latency_stats(collect_latency_samples(healthy, status_by_id))
    no_connections = sort_no_connections(
        detect_no_connections(healthy, status_by_id, identities)
    )

    logger.debug(
        "diagnostics: %d displayed, %d stale, %d missing connections, stats=%s",
        len(display_identities), len(stale_identities), len(no_connections),
        "defined" if stats else "undefined",
    )
    return DiagnosticsResult(
        display_identities=tuple(display_identities),
        stale_identities=tuple(stale_identities),
        no_connections=tuple(no_connections),
        stats=stats,
        node_filter=node_filter,
        stale_ids=stale,
        status_by_id=status_by_id,
    )


def compute_diagnostics_from_text(
    snapshot: Snapshot,
    node_ids_text: str | None = None,
    locality_text: str | None = None,
) -> DiagnosticsResult:
    """Parse free-text filters, then compute diagnostics."""
    return compute_diagnostics(snapshot, parse_filter(node_ids_text, locality_text))
