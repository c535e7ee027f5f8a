"""Network latency and liveness diagnostics for node clusters."""

__version__ = "0.1.0"

from netdiag.engine import (  # noqa: E402
    DiagnosticsResult,
    compute_diagnostics,
    compute_diagnostics_from_text,
)
from netdiag.filters import parse_filter  # noqa: E402
from netdiag.models import Band, LivenessStatus, NodeFilter, Snapshot  # noqa: E402
