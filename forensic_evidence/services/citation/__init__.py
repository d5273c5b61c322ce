"""Citation services for canonical addressing and excerpt resolution."""

from forensic_evidence.services.citation.citation_codec import (
    format_citation,
    is_canonical_citation,
    parse_citation,
)
from forensic_evidence.services.citation.citation_locator import (
    CitationLocator,
    MatchConfig,
    create_citation_from_excerpt,
    find_chunks_containing,
)

__all__ = [
    "CitationLocator",
    "MatchConfig",
    "create_citation_from_excerpt",
    "find_chunks_containing",
    "format_citation",
    "is_canonical_citation",
    "parse_citation",
]
