"""Per-pair heat map classification."""

from __future__ import annotations

from typing import AbstractSet, Mapping

from netdiag.analysis.latency_stats import latency_millis
from netdiag.models import Band, LatencyStats, PairClassification, RawNodeStatus


def band_for_latency(latency_ms: float, stats: LatencyStats | None) -> Band:
    """Place a latency in its deviation band.

    Wider bands are checked before narrower ones on each side.  Without
    statistics nothing is compared and the latency stays UNCLASSIFIED.
    """
    if stats is None:
        return Band.UNCLASSIFIED
    t = stats.thresholds
    if latency_ms > t.plus2:
        return Band.PLUS_2
    if latency_ms > t.plus1:
        return Band.PLUS_1
    if latency_ms < t.minus2:
        return Band.MINUS_2
    if latency_ms < t.minus1:
        return Band.MINUS_1
    return Band.EVEN


def classify_pair(
    source: int,
    target: int,
    stale: AbstractSet[int],
    status_by_id: Mapping[int, RawNodeStatus],
    stats: LatencyStats | None,
) -> PairClassification:
    """Classify the latency ``source`` reports toward ``target``.

    First match wins: same node, either node stale, no reported latency,
    then the deviation band of the reported value.
    """
    if source == target:
        return PairClassification(source, target, Band.SELF)
    if source in stale or target in stale:
        return PairClassification(source, target, Band.NO_CONNECTION)

    latency_ms = latency_millis(status_by_id, source, target)
    if latency_ms is None:
        return PairClassification(source, target, Band.NO_CONNECTION)
    return PairClassification(source, target, band_for_latency(latency_ms, stats), latency_ms)
