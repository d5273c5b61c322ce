"""Offset-preserving chunk extraction.

This module splits OCR text into pages and pages into size-bounded chunks
whose offsets point back into the raw text. Extraction is a pure function of
(text, config): it never raises on string input, never drops text, and
always yields the same chunks for the same input.
"""

from typing import List, Optional, Sequence, Tuple

from forensic_evidence.services.chunking.models import (
    Chunk,
    ChunkExtractionResult,
    ChunkingConfig,
    PageSpan,
)
from forensic_evidence.services.chunking.page_detectors import (
    DEFAULT_DETECTORS,
    PageBoundaryDetector,
    split_into_pages,
)
from forensic_evidence.utils.logging import get_logger

LOGGER = get_logger(__name__)

SENTENCE_END_CHARS = ".!?"


def make_chunk_id(document_id: str, page: int, chunk_index: int) -> str:
    """Generate deterministic chunk ID."""
    return f"doc_{document_id}_p{page}_c{chunk_index}"


class ChunkExtractor:
    """Page-aware chunker producing citable, offset-addressed chunks.

    Pages up to ``max_chunk_size`` characters become a single chunk. Longer
    pages are cut near ``target_chunk_size``, preferring a paragraph break,
    then a sentence end, then any whitespace within the lookback window.
    Unbreakable runs are hard-cut at ``max_chunk_size``. Spans too small to
    stand alone are merged into the previous chunk of the page.
    """

    def __init__(
        self,
        config: Optional[ChunkingConfig] = None,
        detectors: Sequence[PageBoundaryDetector] = DEFAULT_DETECTORS,
    ):
        """Initialize chunk extractor.

        Args:
            config: Chunk size bounds (defaults from settings)
            detectors: Page boundary detectors in priority order
        """
        self.config = config or ChunkingConfig.from_settings()
        self.detectors = tuple(detectors)

    def extract(self, document_id: str, text: str) -> ChunkExtractionResult:
        """Split document text into ordered, offset-addressed chunks.

        Args:
            document_id: Id of the source document
            text: Full OCR text

        Returns:
            ChunkExtractionResult: Chunks, page count and character total
        """
        text = text or ""
        pages, detector_name = split_into_pages(text, self.detectors)

        chunks: List[Chunk] = []
        for page in pages:
            for start, end in self._split_page(text, page):
                chunk_index = len(chunks)
                chunks.append(
                    Chunk(
                        id=make_chunk_id(document_id, page.page_number, chunk_index),
                        document_id=document_id,
                        page=page.page_number,
                        start_offset=start,
                        end_offset=end,
                        text=text[start:end],
                        chunk_index=chunk_index,
                    )
                )

        LOGGER.debug(
            f"Extracted {len(chunks)} chunks from {len(pages)} pages "
            f"(document={document_id}, detector={detector_name or 'none'})"
        )

        return ChunkExtractionResult(
            document_id=document_id,
            chunks=tuple(chunks),
            page_count=len(pages),
            total_characters=len(text),
        )

    def _split_page(self, text: str, page: PageSpan) -> List[Tuple[int, int]]:
        """Compute chunk spans for one page body.

        Args:
            text: Full document text
            page: Page body bounds

        Returns:
            List of (start, end) offsets into text
        """
        body_start, body_end = self._trim(text, page.start, page.end)
        if body_start >= body_end:
            return []

        config = self.config
        spans: List[Tuple[int, int]] = []
        chunk_start = body_start
        pos = body_start

        while pos < body_end:
            # A carried-forward span counts toward the size of the chunk it joins
            anchor = chunk_start if pos - chunk_start < config.max_chunk_size else pos
            if body_end - anchor <= config.max_chunk_size:
                split = body_end
            else:
                split = self._find_split_point(text, anchor, body_end, after=pos)

            if len(text[chunk_start:split].strip()) >= config.min_chunk_size:
                spans.append((chunk_start, split))
                chunk_start = split
            elif spans:
                # Undersized span: fold into the previous chunk
                spans[-1] = (spans[-1][0], split)
                chunk_start = split
            elif split == body_end:
                spans.append((chunk_start, split))
            # else: carry the undersized span into the next one

            pos = split

        return spans

    def _find_split_point(self, text: str, pos: int, limit: int, after: Optional[int] = None) -> int:
        """Find the best split point near the target position.

        Args:
            text: Full document text
            pos: Current chunk start
            limit: End of the page body
            after: Offset the split must lie beyond (default: pos)

        Returns:
            Split offset, strictly greater than after
        """
        config = self.config
        after = pos if after is None else after
        target = pos + config.target_chunk_size
        floor = max(after, target - config.split_lookback)

        # Paragraph break
        for i in range(target, floor, -1):
            if text.startswith("\n\n", i, limit):
                return i + 2

        # Sentence end followed by whitespace
        for i in range(target, floor, -1):
            if i + 1 < limit and text[i] in SENTENCE_END_CHARS and text[i + 1].isspace():
                return i + 2

        # Any whitespace
        for i in range(target, max(after, target - config.split_lookback // 2), -1):
            if text[i].isspace():
                return i + 1

        return pos + config.max_chunk_size

    @staticmethod
    def _trim(text: str, start: int, end: int) -> Tuple[int, int]:
        """Narrow [start, end) to exclude leading and trailing whitespace."""
        while start < end and text[start].isspace():
            start += 1
        while end > start and text[end - 1].isspace():
            end -= 1
        return start, end


def extract_chunks(
    document_id: str,
    text: str,
    config: Optional[ChunkingConfig] = None,
) -> ChunkExtractionResult:
    """Extract chunks from document text.

    Args:
        document_id: Id of the source document
        text: Full OCR text
        config: Optional chunk size bounds

    Returns:
        ChunkExtractionResult: Ordered chunks with page/offset addressing
    """
    return ChunkExtractor(config=config).extract(document_id, text)
