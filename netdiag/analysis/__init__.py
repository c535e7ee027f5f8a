"""Computational core of the network diagnostics report.

Node classification, latency statistics, per-pair heat map bands,
missing connection detection and deterministic ordering.
"""
from netdiag.analysis.classifier import classify_nodes
from netdiag.analysis.connections import detect_no_connections
from netdiag.analysis.latency_stats import (
    collect_latency_samples,
    compute_latency_stats,
    nanos_to_millis,
)
from netdiag.analysis.ordering import sort_identities, sort_no_connections
from netdiag.analysis.pairwise import band_for_latency, classify_pair
