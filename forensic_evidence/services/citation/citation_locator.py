"""Resolve excerpts back to the chunks that contain them.

Exact matching is case-insensitive substring containment. Fuzzy matching
tolerates OCR noise: it drops short tokens from the search text and accepts
a chunk when enough of the remaining tokens appear in it.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from pydantic import ValidationError

from forensic_evidence.config.settings import settings
from forensic_evidence.schemas.citation import EXCERPT_MAX_CHARS, StructuredCitation
from forensic_evidence.services.chunking.models import Chunk
from forensic_evidence.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class MatchConfig:
    """Configuration for excerpt matching."""

    fuzzy_threshold: float = 0.7
    min_token_length: int = 3  # Shorter tokens are ignored in fuzzy mode

    @classmethod
    def from_settings(cls) -> "MatchConfig":
        return cls(
            fuzzy_threshold=settings.fuzzy_match_threshold,
            min_token_length=settings.fuzzy_min_token_length,
        )


class CitationLocator:
    """Finds chunks containing an excerpt and builds citations from them.

    Example usage:
        locator = CitationLocator()
        citation = locator.create_citation(chunks, "wire transfer on 3 May", "doc-42")
        if citation:
            print(citation.canonical)
    """

    def __init__(self, config: Optional[MatchConfig] = None):
        self.config = config or MatchConfig.from_settings()

    def find_chunks_containing(
        self,
        chunks: Sequence[Chunk],
        search_text: str,
        fuzzy: bool = False,
    ) -> List[Chunk]:
        """Find chunks that contain the search text.

        Args:
            chunks: Chunks to search, in document order
            search_text: Text to look for
            fuzzy: Use token-fraction matching instead of substring containment

        Returns:
            Matching chunks, in input order
        """
        normalized_search = (search_text or "").lower().strip()
        if not normalized_search:
            return []

        if not fuzzy:
            return [c for c in chunks if normalized_search in c.text.lower()]

        tokens = [w for w in normalized_search.split() if len(w) >= self.config.min_token_length]
        if not tokens:
            LOGGER.debug("No tokens long enough for fuzzy matching")
            return []

        return [c for c in chunks if self._token_fraction(tokens, c.text.lower()) >= self.config.fuzzy_threshold]

    def create_citation(
        self,
        chunks: Sequence[Chunk],
        excerpt: str,
        document_id: str,
    ) -> Optional[StructuredCitation]:
        """Create a citation from a text excerpt.

        Uses the first chunk that fuzzily contains the excerpt. When the
        excerpt also occurs verbatim (ignoring case) inside that chunk, the
        citation is narrowed to it; otherwise it spans the whole chunk.

        Args:
            chunks: Chunks of the cited document
            excerpt: Text the claim relies on
            document_id: Id of the cited document

        Returns:
            StructuredCitation, or None if no chunk matches
        """
        matching = self.find_chunks_containing(chunks, excerpt, fuzzy=True)
        if not matching:
            LOGGER.debug(f"No chunk matches excerpt (document={document_id})")
            return None

        chunk = matching[0]
        trimmed = excerpt.strip()
        # Match against the original text: lower() can change string length
        match = re.search(re.escape(trimmed), chunk.text, re.IGNORECASE)

        start_offset = chunk.start_offset
        end_offset = chunk.end_offset
        if match:
            start_offset = chunk.start_offset + match.start()
            end_offset = chunk.start_offset + match.end()

        try:
            return StructuredCitation(
                document_id=document_id,
                page=chunk.page,
                start_offset=start_offset,
                end_offset=end_offset,
                excerpt=trimmed[:EXCERPT_MAX_CHARS],
                chunk_id=chunk.id,
            )
        except ValidationError as e:
            LOGGER.warning(f"Cannot build citation for document {document_id!r}: {e.errors()[0]['msg']}")
            return None

    @staticmethod
    def _token_fraction(tokens: List[str], haystack: str) -> float:
        found = sum(1 for token in tokens if token in haystack)
        return found / len(tokens)


def find_chunks_containing(
    chunks: Sequence[Chunk],
    search_text: str,
    fuzzy: bool = False,
) -> List[Chunk]:
    """Find chunks containing text (see CitationLocator.find_chunks_containing)."""
    return CitationLocator().find_chunks_containing(chunks, search_text, fuzzy)


def create_citation_from_excerpt(
    chunks: Sequence[Chunk],
    excerpt: str,
    document_id: str,
) -> Optional[StructuredCitation]:
    """Create a citation from an excerpt (see CitationLocator.create_citation)."""
    return CitationLocator().create_citation(chunks, excerpt, document_id)
