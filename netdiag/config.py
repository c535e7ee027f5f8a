"""Global configuration constants for netdiag."""

import logging
import os


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


def _env_log_level(name: str, default: str) -> str:
    level = os.environ.get(name, default).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        return default
    return level


# Unit conversion
NANOS_PER_MILLI = 1_000_000

# Logging
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVEL = _env_log_level("NETDIAG_LOG_LEVEL", "WARNING")

# Report output
MAX_TABLE_ROWS = _env_int("NETDIAG_MAX_TABLE_ROWS", 50)
LATENCY_DECIMALS = 2

# Liveness codes as reported by the node liveness subsystem.
# UNAVAILABLE nodes are shown as stale (suspect) rather than dropped.
LIVENESS_CODES = {
    0: "UNKNOWN",
    1: "DEAD",
    2: "SUSPECT",
    3: "HEALTHY",
    4: "DECOMMISSIONING",
    5: "DECOMMISSIONED",
}

LIVENESS_ALIASES = {
    "LIVE": "HEALTHY",
    "UNAVAILABLE": "SUSPECT",
}

# Heat map styles, keyed by band value
BAND_STYLES = {
    "self": "dim",
    "no-connection": "bold white on red",
    "plus-2": "black on red3",
    "plus-1": "black on dark_orange",
    "even": "black on green3",
    "minus-1": "black on sky_blue1",
    "minus-2": "black on deep_sky_blue3",
    "unclassified": "italic",
}

# Legend labels, lowest band first
LEGEND_LABELS = (
    "< -2 stddev",
    "< -1 stddev",
    "mean",
    "> +1 stddev",
    "> +2 stddev",
)
