"""Validation verdict and audit log schemas.

A ``ValidationResult`` is a pure value produced by the rule gate. A
``ValidationLogEntry`` is the append-only audit record built from it.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ValidationStatus(str, Enum):
    """Lifecycle status of a validated evidence item."""

    PENDING = "pending"
    VALID = "valid"
    FLAGGED = "flagged"
    REJECTED = "rejected"


class ViolationSeverity(str, Enum):
    """Hard violations force rejection; soft ones only flag."""

    HARD = "hard"
    SOFT = "soft"


class LogEntityType(str, Enum):
    """Kinds of items whose validation is logged."""

    EVIDENCE_PACKET = "evidence_packet"
    CONNECTION = "connection"
    ENTITY = "entity"


class ValidationViolation(BaseModel):
    """A single rule breach."""

    model_config = ConfigDict(frozen=True)

    rule_id: str = Field(..., description="Rule identifier, e.g. NO_PROBABILISTIC_IDENTITY")
    message: str = Field(..., description="Human-readable explanation")
    severity: ViolationSeverity = Field(default=ViolationSeverity.HARD)
    evidence: Optional[str] = Field(None, description="Context around the offending text")

    @property
    def is_hard(self) -> bool:
        return self.severity == ViolationSeverity.HARD

    def summary(self) -> str:
        """One-line ``[severity] RULE: message`` rendering."""
        return f"[{self.severity.value}] {self.rule_id}: {self.message}"


class ValidationResult(BaseModel):
    """Verdict of the rule gate for one claim, connection or entity."""

    model_config = ConfigDict(frozen=True)

    valid: bool = Field(..., description="False when any hard violation was found")
    status: ValidationStatus = Field(..., description="valid, flagged or rejected")
    violations: Tuple[ValidationViolation, ...] = Field(default=())
    warnings: Tuple[str, ...] = Field(default=())
    rule_version: str = Field(..., description="Version of the rule table that produced the verdict")

    @property
    def rule_ids(self) -> Tuple[str, ...]:
        """Rule ids of all violations, in evaluation order."""
        return tuple(v.rule_id for v in self.violations)

    def has_violation(self, rule_id: str) -> bool:
        return rule_id in self.rule_ids


class ValidationLogEntry(BaseModel):
    """Immutable audit record of one validation decision."""

    model_config = ConfigDict(frozen=True)

    entity_type: LogEntityType = Field(..., description="Kind of validated item")
    entity_id: str = Field(..., description="Id of the validated item")
    rule_version: str = Field(..., description="Rule table version used")
    status: ValidationStatus = Field(..., description="Resulting status")
    violations: Tuple[ValidationViolation, ...] = Field(default=())
    warnings: Tuple[str, ...] = Field(default=())
    subject_excerpt: Optional[str] = Field(None, description="Bounded excerpt of the evaluated text")
    timestamp: datetime = Field(..., description="UTC time the decision was recorded")

    @property
    def rule_violations(self) -> Tuple[str, ...]:
        """Violations rendered as ``[severity] RULE: message`` strings."""
        return tuple(v.summary() for v in self.violations)
