"""Canonical citation string codec.

Wire format: ``<document_id>.<page>.<start_offset>-<end_offset>``, for
example ``abc123.1.450-520``. Parsing anchors on the trailing
``.<page>.<start>-<end>`` group, so document ids may themselves contain
dots and hyphens.
"""

import re
from typing import Any, Optional

from forensic_evidence.schemas.citation import StructuredCitation
from forensic_evidence.utils.logging import get_logger

LOGGER = get_logger(__name__)

CITATION_PATTERN = re.compile(r"(\S+)\.([0-9]+)\.([0-9]+)-([0-9]+)")


def format_citation(citation: StructuredCitation) -> str:
    """Render a structured citation in canonical string form."""
    return f"{citation.document_id}.{citation.page}.{citation.start_offset}-{citation.end_offset}"


def parse_citation(value: Any) -> Optional[StructuredCitation]:
    """Parse a canonical citation string.

    Args:
        value: Candidate citation string

    Returns:
        StructuredCitation with an empty excerpt, or None if value is not a
        well-formed citation
    """
    if not isinstance(value, str):
        return None

    match = CITATION_PATTERN.fullmatch(value)
    if not match:
        return None

    try:
        return StructuredCitation(
            document_id=match.group(1),
            page=int(match.group(2)),
            start_offset=int(match.group(3)),
            end_offset=int(match.group(4)),
        )
    except ValueError:
        # ValidationError, or an integer too long to convert
        LOGGER.debug(f"Citation string has an invalid range: {value[:80]}")
        return None


def is_canonical_citation(value: Any) -> bool:
    return parse_citation(value) is not None
