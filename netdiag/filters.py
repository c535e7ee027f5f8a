"""Free-text filter parsing.

Both inputs usually come straight from a query string, so nothing here
raises: unusable node id tokens are dropped and an invalid locality
pattern simply means no locality filter.
"""

from __future__ import annotations

import logging
import re

from netdiag.models import NodeFilter

logger = logging.getLogger(__name__)

# Leading integer of a token, the way browsers' parseInt reads it.
_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


def _parse_int_prefix(token: str) -> int | None:
    match = _LEADING_INT.match(token)
    if match is None:
        return None
    return int(match.group(1))


def parse_node_ids(text: str | None) -> frozenset[int]:
    """Parse a comma-separated node id list.

    Tokens that do not start with an integer are dropped, and so are
    tokens that parse to 0: node id 0 cannot be selected here.
    """
    ids: set[int] = set()
    if not text:
        return frozenset()
    for token in text.split(","):
        node_id = _parse_int_prefix(token)
        if not node_id:
            logger.debug("filter: dropping node id token %r", token)
            continue
        ids.add(node_id)
    return frozenset(ids)


def parse_locality_pattern(text: str | None) -> re.Pattern | None:
    """Compile a locality pattern, or return None when absent or invalid."""
    if not text:
        return None
    try:
        return re.compile(text)
    except re.error as exc:
        logger.debug("filter: ignoring invalid locality pattern %r: %s", text, exc)
        return None


def parse_filter(node_ids_text: str | None = None, locality_text: str | None = None) -> NodeFilter:
    return NodeFilter(
        node_ids=parse_node_ids(node_ids_text),
        locality_pattern=parse_locality_pattern(locality_text),
    )


def describe_filter(node_filter: NodeFilter) -> list[str]:
    """Human-readable lines listing the active filters."""
    lines = []
    if node_filter.node_ids:
        lines.append("Node IDs: " + ", ".join(str(n) for n in sorted(node_filter.node_ids)))
    if node_filter.locality_pattern is not None:
        lines.append(f"Locality regex: {node_filter.locality_pattern.pattern}")
    return lines
