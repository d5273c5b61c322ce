"""Redaction marker detection and placeholder handling."""

from forensic_evidence.services.redaction.redaction_detector import (
    RedactionSpan,
    detect_redactions,
    generate_redaction_id,
    is_redaction_placeholder,
    looks_like_personal_name,
)

__all__ = [
    "RedactionSpan",
    "detect_redactions",
    "generate_redaction_id",
    "is_redaction_placeholder",
    "looks_like_personal_name",
]
