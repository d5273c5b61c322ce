"""Evidence packet schemas.

An evidence packet is a claim plus its citations, confidence, uncertainty
notes and validation outcome. Claim text and citations are fixed at
creation; only the validation fields change on revalidation.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from forensic_evidence.schemas.citation import CitationExcerpt, StructuredCitation
from forensic_evidence.schemas.validation import ValidationStatus


class ClaimType(str, Enum):
    """How a claim relates to the source material."""

    OBSERVED = "Observed"
    CORROBORATED = "Corroborated"
    UNKNOWN = "Unknown"

    @property
    def requires_citation(self) -> bool:
        return self in (ClaimType.OBSERVED, ClaimType.CORROBORATED)


class EvidencePacket(BaseModel):
    """A validated (or pending) claim with its supporting citations."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Packet id")
    claim: str = Field(..., min_length=1, description="Claim text")
    claim_type: ClaimType = Field(..., description="Observed, Corroborated or Unknown")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Author confidence (0.0-1.0)")
    citations: Tuple[StructuredCitation, ...] = Field(default=())
    uncertainty_notes: Tuple[str, ...] = Field(default=())
    validation_status: ValidationStatus = Field(default=ValidationStatus.PENDING)
    validation_notes: Tuple[str, ...] = Field(default=(), description="Warnings and violation summaries from the last validation")
    rule_version: Optional[str] = Field(None, description="Rule version of the last validation")
    raw_output: Optional[str] = Field(None, description="Raw agent output the claim was taken from")
    agent_id: Optional[str] = Field(None, description="Authoring agent or user")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AuditableEvidencePacket(BaseModel):
    """Auditor-facing rendering of a packet with canonical citation strings."""

    model_config = ConfigDict(frozen=True)

    packet_id: str
    claim_type: ClaimType
    statement: str
    citations: List[str] = Field(default_factory=list)
    citation_excerpts: List[CitationExcerpt] = Field(default_factory=list)
    uncertainty_notes: List[str] = Field(default_factory=list)
    validation_status: ValidationStatus
    created_at: datetime
    created_by: str = "unknown"
