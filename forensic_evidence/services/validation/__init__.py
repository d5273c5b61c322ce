"""Validation service package.

This package provides the redaction rule gate, its versioned rule table,
the validation status state machine, audit log entries and batch
revalidation sweeps.
"""

from forensic_evidence.services.validation.phrase_scanner import (
    INFERENCE_REPLACEMENT,
    PhraseMatch,
    SanitizedText,
    extract_context,
    find_phrases,
    sanitize_text,
)
from forensic_evidence.services.validation.redaction_validator import (
    CitationResolution,
    RedactionValidator,
    get_validator,
    validate_connection,
    validate_entity,
    validate_evidence_packet,
)
from forensic_evidence.services.validation.revalidation_sweep import (
    RevalidationOutcome,
    RevalidationSweep,
    SweepReport,
)
from forensic_evidence.services.validation.rule_table import (
    DEFAULT_RULE_TABLE_PATH,
    PhraseScope,
    Rule,
    RuleId,
    RuleTable,
    get_rule_table,
    load_rule_table,
    parse_rule_table,
)
from forensic_evidence.services.validation.status_transitions import (
    apply_validation_result,
    can_transition,
    transition_status,
)
from forensic_evidence.services.validation.validation_log import (
    bound_excerpt,
    create_validation_log_entry,
)

__all__ = [
    "CitationResolution",
    "DEFAULT_RULE_TABLE_PATH",
    "INFERENCE_REPLACEMENT",
    "PhraseMatch",
    "PhraseScope",
    "RedactionValidator",
    "RevalidationOutcome",
    "RevalidationSweep",
    "Rule",
    "RuleId",
    "RuleTable",
    "SanitizedText",
    "SweepReport",
    "apply_validation_result",
    "bound_excerpt",
    "can_transition",
    "create_validation_log_entry",
    "extract_context",
    "find_phrases",
    "get_rule_table",
    "get_validator",
    "load_rule_table",
    "parse_rule_table",
    "sanitize_text",
    "transition_status",
    "validate_connection",
    "validate_entity",
    "validate_evidence_packet",
]
