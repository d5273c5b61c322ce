"""Evidence ingestion gate.

Validation runs before a packet is stored: the gate validates the request,
builds the packet with its resulting status and the matching audit entry,
and reports whether the packet may be persisted as accepted evidence.
"""

import uuid
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from forensic_evidence.schemas.evidence import EvidencePacket
from forensic_evidence.schemas.validation import (
    LogEntityType,
    ValidationLogEntry,
    ValidationResult,
    ValidationStatus,
    ValidationViolation,
)
from forensic_evidence.services.validation.redaction_validator import (
    RedactionValidator,
    coerce_claim_type,
    get_validator,
)
from forensic_evidence.services.validation.rule_table import RuleId
from forensic_evidence.services.validation.status_transitions import apply_validation_result
from forensic_evidence.services.validation.validation_log import create_validation_log_entry
from forensic_evidence.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class GateDecision:
    """Outcome of admitting a claim.

    Attributes:
        accepted: Whether the packet may be stored as evidence
        result: Validation verdict
        packet: Built packet, or None when the input was too malformed to build one
        log_entry: Audit record of the decision
    """

    accepted: bool
    result: ValidationResult
    packet: Optional[EvidencePacket]
    log_entry: ValidationLogEntry


class EvidenceGate:
    """Validates claims and turns accepted ones into evidence packets."""

    def __init__(self, validator: Optional[RedactionValidator] = None):
        self.validator = validator or get_validator()

    def admit(
        self,
        claim: Any,
        claim_type: Any,
        confidence: Any,
        citations: Optional[Sequence[Any]] = None,
        uncertainty_notes: Optional[Sequence[str]] = None,
        raw_output: Optional[str] = None,
        agent_id: Optional[str] = None,
        packet_id: Optional[str] = None,
    ) -> GateDecision:
        """Validate a claim and build its evidence packet.

        Args:
            claim: Claim text
            claim_type: ClaimType or its name
            confidence: Confidence in [0, 1]
            citations: StructuredCitation objects, mappings or canonical strings
            uncertainty_notes: Statements of what is unknown
            raw_output: Raw agent output the claim was taken from
            agent_id: Authoring agent or user
            packet_id: Packet id (default: new UUID)

        Returns:
            GateDecision: accepted is False for rejected claims
        """
        problems = _metadata_problems(packet_id, agent_id)
        if not isinstance(packet_id, str) or not packet_id:
            packet_id = str(uuid.uuid4())

        result = self.validator.validate_evidence_packet(
            claim, claim_type, confidence, citations, uncertainty_notes, raw_output
        )
        if problems:
            result = _with_malformed(result, problems)
        log_entry = create_validation_log_entry(
            LogEntityType.EVIDENCE_PACKET,
            packet_id,
            result,
            subject_text=claim if isinstance(claim, str) else None,
        )

        packet = None
        if not result.has_violation("MALFORMED_INPUT"):
            resolution = self.validator.resolve_citations(list(citations or []))
            pending = EvidencePacket(
                id=packet_id,
                claim=claim,
                claim_type=coerce_claim_type(claim_type),
                confidence=confidence,
                citations=resolution.resolved,
                uncertainty_notes=tuple(n for n in (uncertainty_notes or []) if n.strip()),
                raw_output=raw_output,
                agent_id=agent_id,
            )
            packet = apply_validation_result(pending, result)

        accepted = packet is not None and result.status != ValidationStatus.REJECTED
        if accepted:
            LOGGER.info(f"Evidence packet {packet_id} accepted ({result.status.value})")
        else:
            LOGGER.warning(
                f"Evidence packet {packet_id} not accepted: "
                f"{'; '.join(v.summary() for v in result.violations)}"
            )

        return GateDecision(accepted=accepted, result=result, packet=packet, log_entry=log_entry)

    def revalidate(self, packet: EvidencePacket) -> GateDecision:
        """Explicitly revalidate a stored packet under the current rule table.

        Returns:
            GateDecision: Decision carrying the packet with its new status
        """
        result = self.validator.validate_packet(packet)
        updated = apply_validation_result(packet, result, revalidation=True)
        log_entry = create_validation_log_entry(
            LogEntityType.EVIDENCE_PACKET,
            packet.id,
            result,
            subject_text=packet.claim,
        )
        if updated.validation_status != packet.validation_status:
            LOGGER.info(
                f"Evidence packet {packet.id} revalidated: "
                f"{packet.validation_status.value} -> {updated.validation_status.value}"
            )
        return GateDecision(
            accepted=result.status != ValidationStatus.REJECTED,
            result=result,
            packet=updated,
            log_entry=log_entry,
        )


def _metadata_problems(packet_id: Any, agent_id: Any) -> List[str]:
    problems = []
    if packet_id is not None and not isinstance(packet_id, str):
        problems.append(f"packet_id must be a string, got {type(packet_id).__name__}")
    if agent_id is not None and not isinstance(agent_id, str):
        problems.append(f"agent_id must be a string, got {type(agent_id).__name__}")
    return problems


def _with_malformed(result: ValidationResult, problems: List[str]) -> ValidationResult:
    """Fold gate-level shape problems into the validator's verdict."""
    violations = result.violations + tuple(
        ValidationViolation(rule_id=RuleId.MALFORMED_INPUT.value, message=p) for p in problems
    )
    return ValidationResult(
        valid=False,
        status=ValidationStatus.REJECTED,
        violations=violations,
        warnings=result.warnings,
        rule_version=result.rule_version,
    )
