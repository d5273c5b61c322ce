"""Batch revalidation of stored evidence packets.

A sweep re-runs the rule gate over existing packets, typically after a rule
table version bump. Validation is pure and idempotent, so packets are
processed by a bounded worker pool with no coordination between workers.
The sweep itself owns the timeout and cancellation boundary.
"""

import threading
import time
from collections import Counter
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from forensic_evidence.config.settings import settings
from forensic_evidence.schemas.evidence import EvidencePacket
from forensic_evidence.schemas.validation import (
    LogEntityType,
    ValidationLogEntry,
    ValidationResult,
    ValidationStatus,
)
from forensic_evidence.services.validation.redaction_validator import RedactionValidator, get_validator
from forensic_evidence.services.validation.status_transitions import apply_validation_result
from forensic_evidence.services.validation.validation_log import create_validation_log_entry
from forensic_evidence.utils.exceptions import RevalidationTimeoutError
from forensic_evidence.utils.logging import get_logger

LOGGER = get_logger(__name__)

POLL_INTERVAL_SECONDS = 0.1


@dataclass(frozen=True)
class RevalidationOutcome:
    """Result of revalidating one packet.

    Attributes:
        packet_id: Id of the revalidated packet
        previous_status: Status before the sweep
        new_status: Status after the sweep
        changed: Whether the status changed
        result: Fresh validation verdict
        packet: Packet copy carrying the new status
        log_entry: Audit record of the decision
    """

    packet_id: str
    previous_status: ValidationStatus
    new_status: ValidationStatus
    changed: bool
    result: ValidationResult
    packet: EvidencePacket
    log_entry: ValidationLogEntry


@dataclass
class SweepReport:
    """Outcomes of a sweep, in input order."""

    rule_version: str
    total: int
    outcomes: List[RevalidationOutcome] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    cancelled: bool = False

    @property
    def changed(self) -> List[RevalidationOutcome]:
        return [o for o in self.outcomes if o.changed]

    def status_counts(self) -> Dict[str, int]:
        counts = Counter(o.new_status.value for o in self.outcomes)
        return {status.value: counts.get(status.value, 0) for status in ValidationStatus}


class RevalidationSweep:
    """Revalidates packets with a bounded worker pool.

    Example usage:
        sweep = RevalidationSweep(max_workers=8, timeout_seconds=30)
        report = sweep.run(packets, skip_current=True)
        for outcome in report.changed:
            store.update(outcome.packet, outcome.log_entry)
    """

    def __init__(
        self,
        validator: Optional[RedactionValidator] = None,
        max_workers: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.validator = validator or get_validator()
        self.max_workers = max_workers or settings.revalidation_max_workers
        self.timeout_seconds = timeout_seconds or settings.revalidation_timeout_seconds

    def revalidate(self, packet: EvidencePacket) -> RevalidationOutcome:
        """Revalidate a single packet."""
        result = self.validator.validate_packet(packet)
        updated = apply_validation_result(packet, result, revalidation=True)
        log_entry = create_validation_log_entry(
            LogEntityType.EVIDENCE_PACKET,
            packet.id,
            result,
            subject_text=packet.claim,
        )
        return RevalidationOutcome(
            packet_id=packet.id,
            previous_status=packet.validation_status,
            new_status=updated.validation_status,
            changed=updated.validation_status != packet.validation_status,
            result=result,
            packet=updated,
            log_entry=log_entry,
        )

    def run(
        self,
        packets: Sequence[EvidencePacket],
        skip_current: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> SweepReport:
        """Revalidate packets concurrently.

        Args:
            packets: Packets to revalidate
            skip_current: Skip packets already validated under the current rule version
            cancel_event: Set to stop the sweep early; pending packets are not processed

        Returns:
            SweepReport: Outcomes for every processed packet

        Raises:
            RevalidationTimeoutError: If the sweep exceeds its timeout
        """
        rule_version = self.validator.rule_version
        report = SweepReport(rule_version=rule_version, total=len(packets))

        todo = []
        for packet in packets:
            if skip_current and packet.rule_version == rule_version:
                report.skipped.append(packet.id)
            else:
                todo.append(packet)

        LOGGER.info(
            f"Starting revalidation sweep: {len(todo)} packets "
            f"(skipped {len(report.skipped)}, rules v{rule_version}, workers={self.max_workers})"
        )
        if not todo:
            return report

        deadline = time.monotonic() + self.timeout_seconds
        results: Dict[int, RevalidationOutcome] = {}
        executor = ThreadPoolExecutor(max_workers=self.max_workers)
        try:
            futures: Dict[Future, int] = {
                executor.submit(self.revalidate, packet): index for index, packet in enumerate(todo)
            }
            pending = set(futures)
            while pending:
                if cancel_event is not None and cancel_event.is_set():
                    report.cancelled = True
                    LOGGER.warning(f"Revalidation sweep cancelled after {len(results)}/{len(todo)} packets")
                    break

                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    LOGGER.error(f"Revalidation sweep timed out after {len(results)}/{len(todo)} packets")
                    raise RevalidationTimeoutError(
                        f"Revalidation sweep exceeded {self.timeout_seconds}s",
                        completed=len(results),
                        total=len(todo),
                    )

                done, pending = wait(
                    pending,
                    timeout=min(remaining, POLL_INTERVAL_SECONDS),
                    return_when=FIRST_COMPLETED,
                )
                for future in done:
                    results[futures[future]] = future.result()
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        report.outcomes = [results[i] for i in sorted(results)]
        LOGGER.info(
            f"Revalidation sweep finished: {len(report.outcomes)} processed, "
            f"{len(report.changed)} changed, counts={report.status_counts()}"
        )
        return report
