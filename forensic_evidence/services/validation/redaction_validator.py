"""Redaction rule gate for evidence packets, connections and entities.

Every claim or relationship passes through this gate before it may be
treated as accepted evidence. All rules are evaluated independently so a
single call reports every violation at once. The gate never raises for bad
input: wrong shapes are reported as ``MALFORMED_INPUT`` violations and the
verdict fails closed.
"""

import math
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from forensic_evidence.schemas.citation import StructuredCitation
from forensic_evidence.schemas.evidence import ClaimType, EvidencePacket
from forensic_evidence.schemas.graph import Connection, EntityReference
from forensic_evidence.schemas.validation import (
    ValidationResult,
    ValidationStatus,
    ValidationViolation,
    ViolationSeverity,
)
from forensic_evidence.services.citation.citation_codec import parse_citation
from forensic_evidence.services.redaction.redaction_detector import (
    is_redaction_placeholder,
    looks_like_personal_name,
)
from forensic_evidence.services.validation.phrase_scanner import extract_context, find_phrases
from forensic_evidence.services.validation.rule_table import (
    PhraseScope,
    RuleId,
    RuleTable,
    get_rule_table,
)
from forensic_evidence.utils.exceptions import RuleTableError
from forensic_evidence.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class CitationResolution:
    """Citations sorted by whether they point at a document.

    Attributes:
        resolved: Citations with a usable document address
        unresolvable: Descriptions of well-formed citations without one
        malformed: Descriptions of citations of the wrong shape
    """

    resolved: Tuple[StructuredCitation, ...] = ()
    unresolvable: Tuple[str, ...] = ()
    malformed: Tuple[str, ...] = ()


@dataclass
class _Findings:
    violations: List[ValidationViolation] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add(
        self,
        rule_id: RuleId,
        message: str,
        severity: ViolationSeverity = ViolationSeverity.HARD,
        evidence: Optional[str] = None,
    ) -> None:
        self.violations.append(
            ValidationViolation(rule_id=rule_id.value, message=message, severity=severity, evidence=evidence)
        )

    def malformed(self, message: str) -> None:
        self.add(RuleId.MALFORMED_INPUT, message)


class RedactionValidator:
    """Evaluates claims and relationships against the redaction rule table.

    The validator holds no mutable state; one instance may be shared by any
    number of threads.

    Example usage:
        validator = RedactionValidator()
        result = validator.validate_evidence_packet(
            claim="This is likely John Smith",
            claim_type="Observed",
            confidence=0.9,
            citations=["doc-1.1.0-120"],
            uncertainty_notes=[],
        )
        result.status  # ValidationStatus.REJECTED
    """

    def __init__(self, rule_table: Optional[RuleTable] = None):
        self.rule_table = rule_table or get_rule_table()

    @property
    def rule_version(self) -> str:
        return self.rule_table.version

    def validate_evidence_packet(
        self,
        claim: Any,
        claim_type: Any,
        confidence: Any,
        citations: Any,
        uncertainty_notes: Any,
        raw_output: Any = None,
    ) -> ValidationResult:
        """Validate a claim before it becomes an evidence packet.

        Args:
            claim: Claim text
            claim_type: ClaimType or its name ("Observed", "Corroborated", "Unknown")
            confidence: Number in [0, 1]
            citations: StructuredCitation objects, mappings or canonical strings
            uncertainty_notes: Statements of what is unknown
            raw_output: Raw agent output the claim was taken from

        Returns:
            ValidationResult: Verdict with every violation found
        """
        findings = _Findings()
        try:
            self._evaluate_packet(findings, claim, claim_type, confidence, citations, uncertainty_notes, raw_output)
        except RuleTableError:
            raise
        except Exception as e:
            LOGGER.error(f"Unexpected error while validating evidence packet: {e}", exc_info=True)
            findings.malformed(f"Evidence packet could not be evaluated: {type(e).__name__}")

        result = self._build_result(findings)
        if not result.valid:
            LOGGER.warning(f"Evidence packet rejected: {', '.join(result.rule_ids)}")
        return result

    def validate_packet(self, packet: EvidencePacket) -> ValidationResult:
        """Validate an existing evidence packet, e.g. during revalidation."""
        return self.validate_evidence_packet(
            claim=packet.claim,
            claim_type=packet.claim_type,
            confidence=packet.confidence,
            citations=list(packet.citations),
            uncertainty_notes=list(packet.uncertainty_notes),
            raw_output=packet.raw_output,
        )

    def validate_connection(self, relationship: Any, source_entity: Any, target_entity: Any) -> ValidationResult:
        """Validate a relationship between two entities.

        Args:
            relationship: Connection or mapping with relationship_type and label
            source_entity: EntityReference or mapping for the source
            target_entity: EntityReference or mapping for the target

        Returns:
            ValidationResult: Verdict with every violation found
        """
        findings = _Findings()
        try:
            self._evaluate_connection(findings, relationship, source_entity, target_entity)
        except RuleTableError:
            raise
        except Exception as e:
            LOGGER.error(f"Unexpected error while validating connection: {e}", exc_info=True)
            findings.malformed(f"Connection could not be evaluated: {type(e).__name__}")

        result = self._build_result(findings)
        if not result.valid:
            LOGGER.warning(f"Connection rejected: {', '.join(result.rule_ids)}")
        return result

    def validate_entity(self, entity: Any) -> ValidationResult:
        """Validate an entity reference.

        A redacted entity must not carry a real-looking personal name, and
        its description must not contain inference language.

        Args:
            entity: EntityReference or mapping

        Returns:
            ValidationResult: Verdict with every violation found
        """
        findings = _Findings()
        try:
            self._evaluate_entity(findings, entity)
        except RuleTableError:
            raise
        except Exception as e:
            LOGGER.error(f"Unexpected error while validating entity: {e}", exc_info=True)
            findings.malformed(f"Entity could not be evaluated: {type(e).__name__}")

        result = self._build_result(findings)
        if not result.valid:
            LOGGER.warning(f"Entity rejected: {', '.join(result.rule_ids)}")
        return result

    def resolve_citations(self, citations: Sequence[Any]) -> CitationResolution:
        """Sort citations into resolved, unresolvable and malformed.

        Args:
            citations: StructuredCitation objects, mappings or canonical strings

        Returns:
            CitationResolution
        """
        resolved = []
        unresolvable = []
        malformed = []

        for index, item in enumerate(citations):
            if isinstance(item, StructuredCitation):
                resolved.append(item)
            elif isinstance(item, str):
                parsed = parse_citation(item.strip())
                if parsed:
                    resolved.append(parsed)
                else:
                    unresolvable.append(f"citation {index} ({item[:80]!r}) is not a canonical citation")
            elif isinstance(item, Mapping):
                document_id = item.get("document_id")
                if document_id is None or (isinstance(document_id, str) and not document_id.strip()):
                    unresolvable.append(f"citation {index} has no document_id")
                    continue
                try:
                    resolved.append(StructuredCitation.model_validate(dict(item)))
                except ValidationError as e:
                    error = e.errors()[0]
                    location = ".".join(str(part) for part in error["loc"]) or "citation"
                    malformed.append(f"citation {index}: {location}: {error['msg']}")
            else:
                malformed.append(f"citation {index} has unsupported type {type(item).__name__}")

        return CitationResolution(
            resolved=tuple(resolved),
            unresolvable=tuple(unresolvable),
            malformed=tuple(malformed),
        )

    def _evaluate_packet(
        self,
        findings: _Findings,
        claim: Any,
        claim_type: Any,
        confidence: Any,
        citations: Any,
        uncertainty_notes: Any,
        raw_output: Any,
    ) -> None:
        # 1. Normalize inputs; each malformed field is reported and its rules skipped
        claim_text = claim if isinstance(claim, str) and claim.strip() else None
        if claim_text is None:
            findings.malformed("claim must be a non-empty string")

        resolved_type = coerce_claim_type(claim_type)
        if resolved_type is None:
            findings.malformed(
                f"claim_type must be one of {', '.join(t.value for t in ClaimType)}, got {claim_type!r}"
            )

        if not _is_valid_confidence(confidence):
            findings.malformed(f"confidence must be a number between 0 and 1, got {confidence!r}")

        citation_items = None
        if citations is None:
            citation_items = []
        elif isinstance(citations, (list, tuple)):
            citation_items = list(citations)
        else:
            findings.malformed(f"citations must be a list, got {type(citations).__name__}")

        resolution = None
        if citation_items is not None:
            resolution = self.resolve_citations(citation_items)
            for problem in resolution.malformed:
                findings.malformed(problem)

        notes = None
        if uncertainty_notes is None:
            notes = []
        elif isinstance(uncertainty_notes, (list, tuple)):
            if all(isinstance(n, str) for n in uncertainty_notes):
                notes = [n for n in uncertainty_notes if n.strip()]
            else:
                findings.malformed("uncertainty_notes must contain only strings")
        else:
            findings.malformed(f"uncertainty_notes must be a list, got {type(uncertainty_notes).__name__}")

        raw_text = None
        if isinstance(raw_output, str):
            raw_text = raw_output
        elif raw_output is not None:
            findings.malformed(f"raw_output must be a string, got {type(raw_output).__name__}")

        # 2. Rules, in rule order
        texts = [("claim", claim_text)]
        if notes:
            texts.append(("uncertainty notes", " ".join(notes)))
        self._check_phrases(findings, RuleId.NO_IDENTITY_INFERENCE, texts, raw_text=raw_text)
        self._check_phrases(findings, RuleId.NO_PROBABILISTIC_IDENTITY, texts, raw_text=raw_text)

        if resolved_type is not None and resolution is not None:
            self._check_citations(findings, resolved_type, citation_items, resolution)

        if resolved_type == ClaimType.UNKNOWN and notes is not None:
            self._check_unknowns(findings, claim_text, notes)

        self._check_phrases(findings, RuleId.NO_EXCLUSIVITY_REASONING, texts, raw_text=raw_text)

    def _evaluate_connection(
        self,
        findings: _Findings,
        relationship: Any,
        source_entity: Any,
        target_entity: Any,
    ) -> None:
        connection = _model_or_none(findings, Connection, relationship, "relationship")
        source = _model_or_none(findings, EntityReference, source_entity, "source_entity")
        target = _model_or_none(findings, EntityReference, target_entity, "target_entity")

        endpoints_match = True
        if connection and source and connection.source_entity_id and connection.source_entity_id != source.id:
            endpoints_match = False
            findings.malformed(
                f"relationship source_entity_id {connection.source_entity_id!r} does not match source entity {source.id!r}"
            )
        if connection and target and connection.target_entity_id and connection.target_entity_id != target.id:
            endpoints_match = False
            findings.malformed(
                f"relationship target_entity_id {connection.target_entity_id!r} does not match target entity {target.id!r}"
            )

        label = connection.relationship_label if connection else None
        texts = [("relationship label", label)]
        self._check_phrases(findings, RuleId.NO_IDENTITY_INFERENCE, texts)

        if connection and source and target and endpoints_match and source.is_redacted != target.is_redacted:
            if self.rule_table.is_identity_relationship(connection.normalized_type):
                redacted, named = (source, target) if source.is_redacted else (target, source)
                findings.add(
                    RuleId.NO_ENTITY_COLLAPSE,
                    f"Relationship '{connection.relationship_type}' equates redacted entity "
                    f"{redacted.id!r} with named entity {named.id!r}",
                )

        self._check_phrases(findings, RuleId.NO_PROBABILISTIC_IDENTITY, texts)
        self._check_phrases(findings, RuleId.NO_EXCLUSIVITY_REASONING, texts)

    def _evaluate_entity(self, findings: _Findings, entity: Any) -> None:
        reference = _model_or_none(findings, EntityReference, entity, "entity")
        if reference is None:
            return

        if reference.is_redacted and reference.name.strip():
            if not is_redaction_placeholder(reference.name) and looks_like_personal_name(reference.name):
                findings.add(
                    RuleId.NO_IDENTITY_INFERENCE,
                    f"Redacted entity {reference.id!r} carries a personal name instead of a redaction placeholder",
                    evidence=reference.name,
                )

        texts = [("entity description", reference.description)]
        for rule_id in (
            RuleId.NO_IDENTITY_INFERENCE,
            RuleId.NO_PROBABILISTIC_IDENTITY,
            RuleId.NO_EXCLUSIVITY_REASONING,
        ):
            self._check_phrases(findings, rule_id, texts)

    def _check_phrases(
        self,
        findings: _Findings,
        rule_id: RuleId,
        texts: List[Tuple[str, Optional[str]]],
        raw_text: Optional[str] = None,
    ) -> None:
        rule = self.rule_table.rule(rule_id)
        # Raw agent output is only held to the rules scoped to it
        if raw_text is not None and rule.scope == PhraseScope.CLAIM_AND_RAW_OUTPUT:
            texts = texts + [("raw output", raw_text)]

        for source, text in texts:
            for match in find_phrases(text, rule):
                findings.add(
                    rule_id,
                    f"Forbidden phrase '{match.phrase}' in {source}",
                    severity=rule.severity,
                    evidence=match.context,
                )

    def _check_citations(
        self,
        findings: _Findings,
        claim_type: ClaimType,
        citation_items: List[Any],
        resolution: CitationResolution,
    ) -> None:
        if not claim_type.requires_citation:
            return

        rule = self.rule_table.rule(RuleId.CITATION_REQUIRED)
        if not citation_items:
            findings.add(
                RuleId.CITATION_REQUIRED,
                f"{claim_type.value} claims require at least one citation",
                severity=rule.severity,
            )
        elif not resolution.resolved:
            findings.add(
                RuleId.CITATION_REQUIRED,
                f"None of the {len(citation_items)} citations resolves to a document",
                severity=rule.severity,
            )
        else:
            for problem in resolution.unresolvable:
                findings.add(RuleId.CITATION_REQUIRED, f"Unresolvable {problem}", severity=ViolationSeverity.SOFT)

    def _check_unknowns(self, findings: _Findings, claim_text: Optional[str], notes: List[str]) -> None:
        rule = self.rule_table.rule(RuleId.EXPLICIT_UNKNOWNS)
        if not notes:
            findings.add(
                RuleId.EXPLICIT_UNKNOWNS,
                "Unknown claims must state what is unknown in uncertainty_notes",
                severity=rule.severity,
            )
            return

        if claim_text and self.rule_table.uncertainty_markers:
            lowered = claim_text.lower()
            if not any(marker in lowered for marker in self.rule_table.uncertainty_markers):
                findings.warnings.append(
                    f"Unknown claim does not state its uncertainty in the claim text: {extract_context(claim_text, 0)}"
                )

    def _build_result(self, findings: _Findings) -> ValidationResult:
        if any(v.is_hard for v in findings.violations):
            status = ValidationStatus.REJECTED
        elif findings.violations:
            status = ValidationStatus.FLAGGED
        else:
            status = ValidationStatus.VALID

        return ValidationResult(
            valid=status != ValidationStatus.REJECTED,
            status=status,
            violations=tuple(findings.violations),
            warnings=tuple(findings.warnings),
            rule_version=self.rule_version,
        )


def coerce_claim_type(value: Any) -> Optional[ClaimType]:
    """Resolve a ClaimType from an enum member or a case-insensitive name."""
    if isinstance(value, ClaimType):
        return value
    if isinstance(value, str):
        for claim_type in ClaimType:
            if claim_type.value.lower() == value.strip().lower():
                return claim_type
    return None


def _is_valid_confidence(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and 0.0 <= value <= 1.0


def _model_or_none(findings: _Findings, model, value: Any, name: str):
    try:
        return model.model_validate(value)
    except ValidationError as e:
        error = e.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        detail = f"{location}: {error['msg']}" if location else error["msg"]
        findings.malformed(f"{name} is malformed ({detail})")
        return None


@lru_cache(maxsize=1)
def get_validator() -> RedactionValidator:
    """Process-wide validator over the process-wide rule table."""
    return RedactionValidator()


def validate_evidence_packet(
    claim: Any,
    claim_type: Any,
    confidence: Any,
    citations: Any,
    uncertainty_notes: Any,
    raw_output: Any = None,
) -> ValidationResult:
    """Validate a claim (see RedactionValidator.validate_evidence_packet)."""
    return get_validator().validate_evidence_packet(
        claim, claim_type, confidence, citations, uncertainty_notes, raw_output
    )


def validate_connection(relationship: Any, source_entity: Any, target_entity: Any) -> ValidationResult:
    """Validate a relationship (see RedactionValidator.validate_connection)."""
    return get_validator().validate_connection(relationship, source_entity, target_entity)


def validate_entity(entity: Any) -> ValidationResult:
    """Validate an entity (see RedactionValidator.validate_entity)."""
    return get_validator().validate_entity(entity)
