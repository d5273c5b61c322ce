"""Unit tests for resolving excerpts to chunks."""

import pytest

from forensic_evidence.services.chunking import extract_chunks
from forensic_evidence.services.citation import (
    CitationLocator,
    MatchConfig,
    create_citation_from_excerpt,
    find_chunks_containing,
)


class TestFindChunksContaining:
    """Tests for exact and fuzzy chunk matching."""

    def test_exact_match_is_case_insensitive(self, sample_chunks):
        matches = find_chunks_containing(sample_chunks, "WIRE TRANSFER received")

        assert [c.page for c in matches] == [2]

    def test_exact_match_trims_search_text(self, sample_chunks):
        matches = find_chunks_containing(sample_chunks, "   flight manifest  ")

        assert [c.page for c in matches] == [1]

    def test_exact_mode_rejects_ocr_noise(self, sample_chunks):
        assert find_chunks_containing(sample_chunks, "wire transfer recieved from the account") == []

    def test_fuzzy_mode_tolerates_ocr_noise(self, sample_chunks):
        """Test 5 of 6 qualifying tokens is above the 0.7 threshold."""
        matches = find_chunks_containing(sample_chunks, "wire transfer recieved from the account", fuzzy=True)

        assert [c.page for c in matches] == [2]

    def test_fuzzy_mode_below_threshold(self, sample_chunks):
        assert find_chunks_containing(sample_chunks, "wire payment sent to another bank", fuzzy=True) == []

    def test_fuzzy_mode_ignores_short_tokens(self, sample_chunks):
        assert find_chunks_containing(sample_chunks, "of to a", fuzzy=True) == []

    @pytest.mark.parametrize("search", ["", "   ", None])
    def test_empty_search_matches_nothing(self, sample_chunks, search):
        assert find_chunks_containing(sample_chunks, search) == []
        assert find_chunks_containing(sample_chunks, search, fuzzy=True) == []

    def test_custom_threshold(self, sample_chunks):
        strict = CitationLocator(MatchConfig(fuzzy_threshold=1.0))

        assert strict.find_chunks_containing(sample_chunks, "wire transfer recieved", fuzzy=True) == []


class TestCreateCitationFromExcerpt:
    """Tests for create_citation_from_excerpt."""

    def test_exact_excerpt_tightens_offsets(self, sample_text, sample_chunks):
        excerpt = "Wire transfer received from the account of Carter Holdings"
        citation = create_citation_from_excerpt(sample_chunks, excerpt, "doc-42")

        assert citation is not None
        assert citation.page == 2
        assert sample_text[citation.start_offset:citation.end_offset] == excerpt
        assert citation.excerpt == excerpt
        assert citation.chunk_id == sample_chunks[1].id

    def test_offsets_ignore_case_and_padding(self, sample_text, sample_chunks):
        citation = create_citation_from_excerpt(sample_chunks, "  flight manifest ", "doc-42")

        assert sample_text[citation.start_offset:citation.end_offset] == "FLIGHT MANIFEST"
        assert citation.excerpt == "flight manifest"

    def test_offsets_survive_case_folding_that_changes_length(self, chunking_config):
        """Test characters whose lowercase form is longer do not shift offsets."""
        text = "İstanbul wire transfer received at the harbour office."
        chunks = extract_chunks("doc-9", text, chunking_config).chunks
        citation = create_citation_from_excerpt(chunks, "Wire Transfer", "doc-9")

        assert citation is not None
        assert text[citation.start_offset:citation.end_offset] == "wire transfer"
        assert citation.start_offset == 9

    def test_fuzzy_excerpt_cites_whole_chunk(self, sample_chunks):
        chunk = sample_chunks[1]
        citation = create_citation_from_excerpt(sample_chunks, "wire transfer recieved from the account", "doc-42")

        assert (citation.start_offset, citation.end_offset) == (chunk.start_offset, chunk.end_offset)
        assert citation.canonical == f"doc-42.2.{chunk.start_offset}-{chunk.end_offset}"

    def test_excerpt_truncated_to_200_chars(self, chunking_config):
        text = "evidence " * 60
        chunks = extract_chunks("doc-7", text, chunking_config).chunks
        citation = create_citation_from_excerpt(chunks, text.strip(), "doc-7")

        assert citation is not None
        assert len(citation.excerpt) == 200
        assert citation.end_offset - citation.start_offset == len(text.strip())

    def test_no_match_returns_none(self, sample_chunks):
        assert create_citation_from_excerpt(sample_chunks, "completely unrelated statement here", "doc-42") is None

    def test_invalid_document_id_returns_none(self, sample_chunks):
        assert create_citation_from_excerpt(sample_chunks, "flight manifest", "doc 42") is None
