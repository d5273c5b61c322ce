"""Validation status state machine.

    pending  -> valid | flagged | rejected     (first validation)
    valid | flagged | rejected -> valid | flagged | rejected
                                               (explicit revalidation only)

Nothing ever returns to ``pending``.
"""

from forensic_evidence.schemas.evidence import EvidencePacket
from forensic_evidence.schemas.validation import ValidationResult, ValidationStatus
from forensic_evidence.utils.exceptions import InvalidStatusTransitionError

DECIDED_STATUSES = frozenset({ValidationStatus.VALID, ValidationStatus.FLAGGED, ValidationStatus.REJECTED})


def can_transition(current: ValidationStatus, new: ValidationStatus, revalidation: bool = False) -> bool:
    if new not in DECIDED_STATUSES:
        return False
    if current == ValidationStatus.PENDING:
        return True
    return revalidation


def transition_status(
    current: ValidationStatus,
    new: ValidationStatus,
    revalidation: bool = False,
) -> ValidationStatus:
    """Move a packet's validation status.

    Args:
        current: Status before validation
        new: Status produced by validation
        revalidation: Whether this is an explicit revalidation

    Returns:
        ValidationStatus: The new status

    Raises:
        InvalidStatusTransitionError: If the transition is not allowed
    """
    if not can_transition(current, new, revalidation):
        reason = "only explicit revalidation may change a decided status"
        if new == ValidationStatus.PENDING:
            reason = "status cannot return to pending"
        raise InvalidStatusTransitionError(f"Cannot move from {current.value} to {new.value}: {reason}")
    return new


def apply_validation_result(
    packet: EvidencePacket,
    result: ValidationResult,
    revalidation: bool = False,
) -> EvidencePacket:
    """Return a copy of the packet carrying the validation outcome.

    Claim text and citations are left untouched.
    """
    status = transition_status(packet.validation_status, result.status, revalidation)
    return packet.model_copy(
        update={
            "validation_status": status,
            "validation_notes": tuple(result.warnings) + tuple(v.summary() for v in result.violations),
            "rule_version": result.rule_version,
        }
    )
