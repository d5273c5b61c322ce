"""Append-only audit records of validation decisions."""

from datetime import datetime, timezone
from typing import Optional, Union

from forensic_evidence.config.settings import settings
from forensic_evidence.schemas.validation import LogEntityType, ValidationLogEntry, ValidationResult
from forensic_evidence.utils.logging import get_logger

LOGGER = get_logger(__name__)


def bound_excerpt(text: Optional[str], max_chars: Optional[int] = None) -> Optional[str]:
    """Trim text to the log excerpt limit, marking truncation with ``...``."""
    if text is None:
        return None
    max_chars = max_chars or settings.log_excerpt_max_chars
    if len(text) <= max_chars:
        return text
    return text[: max(0, max_chars - 3)] + "..."


def create_validation_log_entry(
    entity_type: Union[LogEntityType, str],
    entity_id: str,
    result: ValidationResult,
    subject_text: Optional[str] = None,
    timestamp: Optional[datetime] = None,
) -> ValidationLogEntry:
    """Build the audit record for one validation decision.

    The entry snapshots the verdict together with the rule version and a
    bounded excerpt of the evaluated text, so a reviewer can reconstruct the
    decision without re-running validation.

    Args:
        entity_type: Kind of validated item
        entity_id: Id of the validated item
        result: Verdict to record
        subject_text: Evaluated text (claim, relationship label, ...)
        timestamp: Decision time (default: now, UTC)

    Returns:
        ValidationLogEntry: Frozen audit record
    """
    entry = ValidationLogEntry(
        entity_type=LogEntityType(entity_type),
        entity_id=entity_id,
        rule_version=result.rule_version,
        status=result.status,
        violations=result.violations,
        warnings=result.warnings,
        subject_excerpt=bound_excerpt(subject_text),
        timestamp=timestamp or datetime.now(timezone.utc),
    )
    LOGGER.debug(
        f"Validation log entry: {entry.entity_type.value} {entity_id} -> {entry.status.value} "
        f"(rules v{entry.rule_version}, {len(entry.violations)} violations)"
    )
    return entry
