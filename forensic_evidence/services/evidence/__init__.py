"""Evidence ingestion gate."""

from forensic_evidence.services.evidence.evidence_gate import EvidenceGate, GateDecision

__all__ = ["EvidenceGate", "GateDecision"]
