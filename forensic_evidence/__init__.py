"""Forensic evidence core.

Chunk-addressed citations over OCR'd documents and a versioned redaction
rule gate for claims and relationships.
"""

from forensic_evidence.schemas import (
    AuditableEvidencePacket,
    ClaimType,
    Connection,
    Document,
    EntityReference,
    EntityType,
    EvidencePacket,
    LogEntityType,
    StructuredCitation,
    ValidationLogEntry,
    ValidationResult,
    ValidationStatus,
    ValidationViolation,
    ViolationSeverity,
)
from forensic_evidence.services.chunking import (
    Chunk,
    ChunkExtractionResult,
    ChunkingConfig,
    build_document,
    compute_content_hash,
    extract_chunks,
    verify_content_hash,
)
from forensic_evidence.services.citation import (
    create_citation_from_excerpt,
    find_chunks_containing,
    format_citation,
    parse_citation,
)
from forensic_evidence.services.evidence import EvidenceGate, GateDecision
from forensic_evidence.services.export import build_evidence_export, export_evidence_csv
from forensic_evidence.services.redaction import detect_redactions, generate_redaction_id
from forensic_evidence.services.validation import (
    RevalidationSweep,
    RuleId,
    create_validation_log_entry,
    get_rule_table,
    sanitize_text,
    validate_connection,
    validate_entity,
    validate_evidence_packet,
)

__version__ = "0.1.0"

__all__ = [
    "AuditableEvidencePacket",
    "Chunk",
    "ChunkExtractionResult",
    "ChunkingConfig",
    "ClaimType",
    "Connection",
    "Document",
    "EntityReference",
    "EntityType",
    "EvidenceGate",
    "EvidencePacket",
    "GateDecision",
    "LogEntityType",
    "RevalidationSweep",
    "RuleId",
    "StructuredCitation",
    "ValidationLogEntry",
    "ValidationResult",
    "ValidationStatus",
    "ValidationViolation",
    "ViolationSeverity",
    "build_document",
    "build_evidence_export",
    "compute_content_hash",
    "create_citation_from_excerpt",
    "create_validation_log_entry",
    "detect_redactions",
    "export_evidence_csv",
    "extract_chunks",
    "find_chunks_containing",
    "format_citation",
    "generate_redaction_id",
    "get_rule_table",
    "parse_citation",
    "sanitize_text",
    "validate_connection",
    "validate_entity",
    "validate_evidence_packet",
    "verify_content_hash",
]
