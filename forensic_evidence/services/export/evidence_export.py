"""Audit-grade evidence export.

Exports carry canonical citation strings with their excerpts so that an
independent auditor can reconstruct every statement from source text.
"""

import csv
import io
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from forensic_evidence.schemas.citation import CitationExcerpt
from forensic_evidence.schemas.evidence import AuditableEvidencePacket, EvidencePacket
from forensic_evidence.schemas.validation import ValidationStatus
from forensic_evidence.services.citation.citation_codec import format_citation
from forensic_evidence.utils.logging import get_logger

LOGGER = get_logger(__name__)

EXPORT_FORMAT_VERSION = "1.0"

CSV_COLUMNS = [
    "packet_id",
    "claim_type",
    "statement",
    "citations",
    "uncertainty_notes",
    "validation_status",
    "created_at",
    "created_by",
]


def to_auditable_packet(packet: EvidencePacket) -> AuditableEvidencePacket:
    """Render a packet in auditor-facing form."""
    citations = [format_citation(c) for c in packet.citations]
    return AuditableEvidencePacket(
        packet_id=packet.id,
        claim_type=packet.claim_type,
        statement=packet.claim,
        citations=citations,
        citation_excerpts=[
            CitationExcerpt(citation=canonical, excerpt=c.excerpt)
            for canonical, c in zip(citations, packet.citations)
        ],
        uncertainty_notes=list(packet.uncertainty_notes),
        validation_status=packet.validation_status,
        created_at=packet.created_at,
        created_by=packet.agent_id or "unknown",
    )


def _select(
    packets: Sequence[EvidencePacket],
    validation_status: Optional[ValidationStatus],
) -> List[EvidencePacket]:
    selected = [p for p in packets if validation_status is None or p.validation_status == validation_status]
    return sorted(selected, key=lambda p: p.created_at)


def build_evidence_export(
    packets: Sequence[EvidencePacket],
    investigation_id: Optional[str] = None,
    investigation_title: Optional[str] = None,
    validation_status: Optional[ValidationStatus] = None,
    include_raw: bool = False,
    exported_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Build the JSON export document.

    Args:
        packets: Packets to export
        investigation_id: Investigation the packets belong to
        investigation_title: Investigation title
        validation_status: Only export packets with this status
        include_raw: Also include the full packet records
        exported_at: Export time (default: now, UTC)

    Returns:
        Dict with ``metadata`` and ``evidence_packets`` (and ``raw_packets``)
    """
    selected = _select(packets, validation_status)
    auditable = [to_auditable_packet(p) for p in selected]

    summary = {status.value: 0 for status in (
        ValidationStatus.VALID,
        ValidationStatus.FLAGGED,
        ValidationStatus.PENDING,
        ValidationStatus.REJECTED,
    )}
    for packet in auditable:
        summary[packet.validation_status.value] += 1

    export = {
        "metadata": {
            "exported_at": (exported_at or datetime.now(timezone.utc)).isoformat(),
            "investigation_id": investigation_id,
            "investigation_title": investigation_title,
            "total_packets": len(auditable),
            "validation_summary": summary,
            "format_version": EXPORT_FORMAT_VERSION,
        },
        "evidence_packets": [p.model_dump(mode="json") for p in auditable],
    }
    if include_raw:
        export["raw_packets"] = [p.model_dump(mode="json") for p in selected]

    LOGGER.info(f"Built evidence export with {len(auditable)} packets (summary={summary})")
    return export


def export_evidence_csv(
    packets: Sequence[EvidencePacket],
    validation_status: Optional[ValidationStatus] = None,
) -> str:
    """Render packets as CSV, one row per packet.

    List fields (citations, uncertainty notes) are joined with ``"; "``.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)

    for packet in _select(packets, validation_status):
        auditable = to_auditable_packet(packet)
        writer.writerow([
            auditable.packet_id,
            auditable.claim_type.value,
            auditable.statement,
            "; ".join(auditable.citations),
            "; ".join(auditable.uncertainty_notes),
            auditable.validation_status.value,
            auditable.created_at.isoformat(),
            auditable.created_by,
        ])

    return buffer.getvalue()
