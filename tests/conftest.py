"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone

import pytest

from forensic_evidence.schemas.citation import StructuredCitation
from forensic_evidence.schemas.evidence import ClaimType, EvidencePacket
from forensic_evidence.schemas.validation import ValidationStatus
from forensic_evidence.services.chunking import ChunkingConfig, extract_chunks
from forensic_evidence.services.validation import RedactionValidator, get_rule_table


SAMPLE_DOCUMENT = """--- PAGE 1 ---
FLIGHT MANIFEST
Departure: Teterboro, 12 March 1999. Passengers listed: [REDACTED], J. Carter.

--- PAGE 2 ---
Wire transfer received from the account of Carter Holdings on 3 May 1999.
The transfer reference is 88-1042.
"""


@pytest.fixture
def rule_table():
    """Process-wide rule table bundled with the package."""
    return get_rule_table()


@pytest.fixture
def validator(rule_table) -> RedactionValidator:
    """Validator over the bundled rule table.

    Returns:
        RedactionValidator: Validator instance
    """
    return RedactionValidator(rule_table=rule_table)


@pytest.fixture
def chunking_config() -> ChunkingConfig:
    return ChunkingConfig(target_chunk_size=500, max_chunk_size=1000, min_chunk_size=50, split_lookback=100)


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_DOCUMENT


@pytest.fixture
def sample_chunks(sample_text, chunking_config):
    """Chunks of the two-page sample document."""
    return extract_chunks("doc-42", sample_text, chunking_config).chunks


@pytest.fixture
def citation() -> StructuredCitation:
    return StructuredCitation(document_id="doc-42", page=1, start_offset=15, end_offset=30, excerpt="FLIGHT MANIFEST")


@pytest.fixture
def make_packet(citation):
    """Factory for evidence packets with sensible defaults."""

    def _make(**overrides) -> EvidencePacket:
        fields = {
            "id": "packet-1",
            "claim": "The flight manifest lists a departure from Teterboro on 12 March 1999.",
            "claim_type": ClaimType.OBSERVED,
            "confidence": 0.9,
            "citations": (citation,),
            "validation_status": ValidationStatus.PENDING,
            "created_at": datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc),
        }
        fields.update(overrides)
        return EvidencePacket(**fields)

    return _make
