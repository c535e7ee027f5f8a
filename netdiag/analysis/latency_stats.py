"""Latency statistics over the healthy subset of the cluster.

Every ordered pair of distinct healthy nodes contributes one sample when
the first node reports a latency toward the second.  (a, b) and (b, a)
are independent samples.  The spread is the sample standard deviation
(n - 1 denominator), and the heat map thresholds sit one and two
deviations either side of the mean.
"""

from __future__ import annotations

import logging
import math
from typing import Mapping, Sequence

import numpy as np

from netdiag.config import NANOS_PER_MILLI
from netdiag.models import LatencyStats, RawNodeStatus, Thresholds

logger = logging.getLogger(__name__)


def nanos_to_millis(nanos: float) -> float:
    return nanos / NANOS_PER_MILLI


def latency_millis(
    status_by_id: Mapping[int, RawNodeStatus],
    source: int,
    target: int,
) -> float | None:
    """Latency reported by ``source`` toward ``target`` in ms, if any."""
    status = status_by_id.get(source)
    if status is None:
        return None
    nanos = status.latencies.get(target)
    if nanos is None:
        return None
    return nanos_to_millis(nanos)


def collect_latency_samples(
    healthy: Sequence[int],
    status_by_id: Mapping[int, RawNodeStatus],
) -> list[float]:
    """Collect finite, strictly positive latencies between healthy nodes."""
    samples: list[float] = []
    for source in healthy:
        for target in healthy:
            if source == target:
                continue
            ms = latency_millis(status_by_id, source, target)
            if ms is None:
                continue
            if math.isfinite(ms) and ms > 0:
                samples.append(ms)
    return samples


def compute_thresholds(mean: float, stddev: float) -> Thresholds:
    plus1 = mean + stddev
    minus1 = mean - stddev
    return Thresholds(
        plus1=plus1,
        plus2=plus1 + stddev,
        minus1=minus1,
        minus2=minus1 - stddev,
    )


def compute_latency_stats(samples: Sequence[float]) -> LatencyStats | None:
    """Mean, sample standard deviation and thresholds, or None.

    The sample standard deviation needs at least two samples; with fewer
    the statistics are undefined and None is returned.
    """
    if len(samples) < 2:
        logger.debug("stats: %d samples, statistics undefined", len(samples))
        return None

    arr = np.asarray(samples, dtype=float)
    mean_val = float(np.mean(arr))
    std_val = float(np.std(arr, ddof=1))
    logger.debug("stats: n=%d mean=%.3fms stddev=%.3fms", len(arr), mean_val, std_val)
    return LatencyStats(
        mean=mean_val,
        stddev=std_val,
        sample_count=len(arr),
        thresholds=compute_thresholds(mean_val, std_val),
    )
