"""Redaction marker detection and placeholder ids.

Redacted spans in OCR output show up as bracketed tags, block characters or
runs of filler characters. Detected spans are sorted by position with
overlaps removed, the earliest span winning.
"""

import re
import secrets
from dataclasses import dataclass
from typing import List, Tuple

from forensic_evidence.utils.logging import get_logger

LOGGER = get_logger(__name__)

REDACTION_MARKER_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"\[REDACTED\]", re.IGNORECASE),
    re.compile(r"\[REDACTED_\w+\]", re.IGNORECASE),
    re.compile(r"\[█+\]"),
    re.compile(r"█+"),
    re.compile(r"\*{3,}"),
    re.compile(r"X{3,}"),
    re.compile(r"_{5,}"),
    re.compile(r"\[CLASSIFIED\]", re.IGNORECASE),
    re.compile(r"\[WITHHELD\]", re.IGNORECASE),
)

# Names that stand in for a redacted entity rather than identify one
PLACEHOLDER_NAME_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"^REDACTED_0x[A-F0-9]+$", re.IGNORECASE),
    re.compile(r"^\[REDACTED(_\w+)?\]$", re.IGNORECASE),
    re.compile(r"^UNKNOWN$", re.IGNORECASE),
)

PERSONAL_NAME_PATTERN = re.compile(r"^[A-Z][a-z]+(?:\s+[A-Z]\.?)?(?:\s+[A-Z][a-z]*(?:['\-][A-Z]?[a-z]+)*)+$")


@dataclass(frozen=True)
class RedactionSpan:
    """A redaction marker found in text.

    Attributes:
        start: Start offset (inclusive)
        end: End offset (exclusive)
        marker: Matched marker text
    """

    start: int
    end: int
    marker: str


def detect_redactions(text: str) -> List[RedactionSpan]:
    """Find redaction markers in text.

    Args:
        text: OCR text

    Returns:
        Non-overlapping spans sorted by start offset
    """
    found: List[RedactionSpan] = []
    for pattern in REDACTION_MARKER_PATTERNS:
        for match in pattern.finditer(text or ""):
            found.append(RedactionSpan(start=match.start(), end=match.end(), marker=match.group(0)))

    # Longest span first among equal starts, so "[███]" beats its inner "███"
    found.sort(key=lambda r: (r.start, -(r.end - r.start)))

    deduped: List[RedactionSpan] = []
    for span in found:
        if not deduped or span.start >= deduped[-1].end:
            deduped.append(span)

    if deduped:
        LOGGER.debug(f"Detected {len(deduped)} redaction markers")
    return deduped


def generate_redaction_id() -> str:
    """Generate a placeholder id for a redacted entity, e.g. ``REDACTED_0x1A2B3C4D``."""
    return f"REDACTED_0x{secrets.token_hex(4).upper()}"


def is_redaction_placeholder(name: str) -> bool:
    """Whether a name is a redaction placeholder rather than an identity."""
    candidate = (name or "").strip()
    return any(p.match(candidate) for p in PLACEHOLDER_NAME_PATTERNS)


def looks_like_personal_name(name: str) -> bool:
    """Whether a name reads like a real person's name, e.g. ``Jane Doe``."""
    return bool(PERSONAL_NAME_PATTERN.match((name or "").strip()))
