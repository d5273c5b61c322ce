"""Audit-grade evidence export (JSON and CSV)."""

from forensic_evidence.services.export.evidence_export import (
    CSV_COLUMNS,
    EXPORT_FORMAT_VERSION,
    build_evidence_export,
    export_evidence_csv,
    to_auditable_packet,
)

__all__ = [
    "CSV_COLUMNS",
    "EXPORT_FORMAT_VERSION",
    "build_evidence_export",
    "export_evidence_csv",
    "to_auditable_packet",
]
