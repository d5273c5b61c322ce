"""Chunking service package.

This package splits OCR'd document text into pages and offset-addressed
chunks, and computes content digests for integrity checks.
"""

from forensic_evidence.services.chunking.chunk_extractor import (
    ChunkExtractor,
    extract_chunks,
    make_chunk_id,
)
from forensic_evidence.services.chunking.content_hash import (
    build_document,
    compute_content_hash,
    verify_content_hash,
)
from forensic_evidence.services.chunking.models import (
    Chunk,
    ChunkExtractionResult,
    ChunkingConfig,
    PageSpan,
)
from forensic_evidence.services.chunking.page_detectors import (
    DEFAULT_DETECTORS,
    NumberedMarkerDetector,
    PageBoundaryDetector,
    SeparatorDetector,
    split_into_pages,
)

__all__ = [
    "Chunk",
    "ChunkExtractionResult",
    "ChunkExtractor",
    "ChunkingConfig",
    "DEFAULT_DETECTORS",
    "NumberedMarkerDetector",
    "PageBoundaryDetector",
    "PageSpan",
    "SeparatorDetector",
    "build_document",
    "compute_content_hash",
    "extract_chunks",
    "make_chunk_id",
    "split_into_pages",
    "verify_content_hash",
]
