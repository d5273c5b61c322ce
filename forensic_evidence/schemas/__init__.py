"""Pydantic schemas shared across the forensic evidence core."""

from forensic_evidence.schemas.citation import CitationExcerpt, StructuredCitation
from forensic_evidence.schemas.document import Document
from forensic_evidence.schemas.evidence import (
    AuditableEvidencePacket,
    ClaimType,
    EvidencePacket,
)
from forensic_evidence.schemas.graph import Connection, EntityReference, EntityType
from forensic_evidence.schemas.validation import (
    LogEntityType,
    ValidationLogEntry,
    ValidationResult,
    ValidationStatus,
    ValidationViolation,
    ViolationSeverity,
)

__all__ = [
    "AuditableEvidencePacket",
    "CitationExcerpt",
    "ClaimType",
    "Connection",
    "Document",
    "EntityReference",
    "EntityType",
    "EvidencePacket",
    "LogEntityType",
    "StructuredCitation",
    "ValidationLogEntry",
    "ValidationResult",
    "ValidationStatus",
    "ValidationViolation",
    "ViolationSeverity",
]
