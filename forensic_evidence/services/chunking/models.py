"""Data models for offset-addressed chunk extraction.

Chunks address the raw document text directly: for every chunk,
``raw_text[chunk.start_offset:chunk.end_offset] == chunk.text``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from forensic_evidence.config.settings import settings
from forensic_evidence.utils.exceptions import ConfigurationError


@dataclass(frozen=True)
class ChunkingConfig:
    """Size bounds for splitting page text into chunks.

    Attributes:
        target_chunk_size: Preferred chunk length; split search starts here
        max_chunk_size: Pages up to this length stay whole; also the hard-cut length
        min_chunk_size: Spans with fewer non-blank characters are merged, never dropped
        split_lookback: How far back from the target to search for a boundary
    """

    target_chunk_size: int = 500
    max_chunk_size: int = 1000
    min_chunk_size: int = 50
    split_lookback: int = 100

    def __post_init__(self):
        for name in ("target_chunk_size", "max_chunk_size", "min_chunk_size", "split_lookback"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
        if not self.min_chunk_size <= self.target_chunk_size <= self.max_chunk_size:
            raise ConfigurationError(
                "Chunk sizes must satisfy min_chunk_size <= target_chunk_size <= max_chunk_size "
                f"(got {self.min_chunk_size}, {self.target_chunk_size}, {self.max_chunk_size})"
            )

    @classmethod
    def from_settings(cls) -> "ChunkingConfig":
        """Build a config from the process settings."""
        return cls(
            target_chunk_size=settings.target_chunk_size,
            max_chunk_size=settings.max_chunk_size,
            min_chunk_size=settings.min_chunk_size,
            split_lookback=settings.split_lookback,
        )


@dataclass(frozen=True)
class PageSpan:
    """Body of one detected page within the raw text.

    Attributes:
        page_number: 1-indexed page number
        start: Start offset of the page body (inclusive)
        end: End offset of the page body (exclusive)
    """

    page_number: int
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Chunk:
    """Minimal addressable unit of document text.

    Attributes:
        id: Deterministic chunk id
        document_id: Parent document id
        page: 1-indexed page number
        start_offset: Start offset into the raw text (inclusive)
        end_offset: End offset into the raw text (exclusive)
        text: Exact raw text covered by the offsets
        chunk_index: Position of the chunk across the whole document
    """

    id: str
    document_id: str
    page: int
    start_offset: int
    end_offset: int
    text: str
    chunk_index: int

    def __len__(self) -> int:
        """Return length of text content."""
        return len(self.text)

    def __str__(self) -> str:
        return (
            f"Chunk(index={self.chunk_index}, page={self.page}, "
            f"span={self.start_offset}-{self.end_offset})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert chunk to dictionary for serialization."""
        return {
            "id": self.id,
            "document_id": self.document_id,
            "page": self.page,
            "start_offset": self.start_offset,
            "end_offset": self.end_offset,
            "text": self.text,
            "chunk_index": self.chunk_index,
        }


@dataclass(frozen=True)
class ChunkExtractionResult:
    """Result of extracting chunks from one document."""

    document_id: str
    chunks: Tuple[Chunk, ...]
    page_count: int
    total_characters: int

    def __len__(self) -> int:
        """Return number of chunks."""
        return len(self.chunks)

    def chunks_for_page(self, page: int) -> Tuple[Chunk, ...]:
        return tuple(c for c in self.chunks if c.page == page)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "document_id": self.document_id,
            "chunks": [c.to_dict() for c in self.chunks],
            "page_count": self.page_count,
            "total_characters": self.total_characters,
        }
