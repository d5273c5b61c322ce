"""Unit tests for offset-preserving chunk extraction."""

import pytest

from forensic_evidence.services.chunking import (
    ChunkExtractor,
    ChunkingConfig,
    extract_chunks,
    make_chunk_id,
)
from forensic_evidence.utils.exceptions import ConfigurationError


def assert_chunk_invariants(text, result):
    """Offsets are valid, ordered and point back into the raw text."""
    previous_start = -1
    for index, chunk in enumerate(result.chunks):
        assert chunk.chunk_index == index
        assert chunk.end_offset > chunk.start_offset >= 0
        assert chunk.start_offset >= previous_start
        assert text[chunk.start_offset:chunk.end_offset] == chunk.text
        previous_start = chunk.start_offset


class TestChunkSplitting:
    """Tests for splitting a single page into chunks."""

    def test_unpunctuated_text_yields_two_max_size_chunks(self, chunking_config):
        """Test 2000 unbroken characters are hard-cut at the max size."""
        text = "A" * 2000
        result = extract_chunks("doc-1", text, chunking_config)

        assert len(result.chunks) == 2
        assert [(c.start_offset, c.end_offset) for c in result.chunks] == [(0, 1000), (1000, 2000)]
        assert all(c.page == 1 for c in result.chunks)
        assert result.page_count == 1
        assert result.total_characters == 2000

    def test_short_page_is_single_trimmed_chunk(self, chunking_config):
        text = "   A short note about the meeting.   "
        result = extract_chunks("doc-1", text, chunking_config)

        assert len(result.chunks) == 1
        chunk = result.chunks[0]
        assert chunk.text == "A short note about the meeting."
        assert chunk.start_offset == 3
        assert_chunk_invariants(text, result)

    def test_page_at_max_size_stays_whole(self, chunking_config):
        text = "word " * 200
        result = extract_chunks("doc-1", text, chunking_config)

        assert len(result.chunks) == 1

    def test_prefers_paragraph_break(self, chunking_config):
        text = "x" * 450 + "\n\n" + "y" * 700
        result = extract_chunks("doc-1", text, chunking_config)

        assert len(result.chunks) == 2
        assert result.chunks[0].end_offset == 452
        assert result.chunks[1].text == "y" * 700
        assert_chunk_invariants(text, result)

    def test_falls_back_to_sentence_end(self, chunking_config):
        text = "a" * 440 + ". " + "b" * 700
        result = extract_chunks("doc-1", text, chunking_config)

        assert result.chunks[0].end_offset == 442
        assert result.chunks[1].text == "b" * 700

    def test_falls_back_to_whitespace_near_target(self, chunking_config):
        text = "a" * 470 + " " + "b" * 700
        result = extract_chunks("doc-1", text, chunking_config)

        assert result.chunks[0].end_offset == 471
        assert result.chunks[1].text == "b" * 700

    def test_hard_cut_when_whitespace_outside_window(self, chunking_config):
        """Test whitespace beyond half the lookback is not used as a boundary."""
        text = "a" * 420 + " " + "b" * 700
        result = extract_chunks("doc-1", text, chunking_config)

        assert result.chunks[0].end_offset == 1000
        assert result.chunks[1].end_offset == len(text)

    def test_undersized_remainder_is_merged_not_dropped(self, chunking_config):
        """Test a short tail after a hard cut joins the previous chunk."""
        text = "A" * 1010
        result = extract_chunks("doc-1", text, chunking_config)

        assert len(result.chunks) == 1
        assert (result.chunks[0].start_offset, result.chunks[0].end_offset) == (0, 1010)

    def test_carried_span_does_not_exceed_max_size(self, chunking_config):
        """Test a short leading span joins the next chunk without overflowing it."""
        text = "x" * 10 + " " * 480 + "\n\n" + "y" * 1500
        result = extract_chunks("doc-1", text, chunking_config)

        assert [(c.start_offset, c.end_offset) for c in result.chunks] == [(0, 1000), (1000, 1992)]
        assert all(len(c.text) <= chunking_config.max_chunk_size for c in result.chunks)
        assert result.chunks[0].text.startswith("x" * 10)
        assert_chunk_invariants(text, result)

    def test_tiny_page_is_kept(self, chunking_config):
        result = extract_chunks("doc-1", "Hi.", chunking_config)

        assert [c.text for c in result.chunks] == ["Hi."]

    def test_no_text_is_lost_on_long_prose(self, chunking_config):
        sentence = "The courier delivered the parcel to the front desk at noon. "
        text = sentence * 80
        result = extract_chunks("doc-1", text, chunking_config)

        assert len(result.chunks) > 2
        assert_chunk_invariants(text, result)
        covered = "".join(c.text for c in result.chunks)
        assert covered == text.strip()


class TestPagesAndDocuments:
    """Tests for page handling across whole documents."""

    def test_numbered_pages(self, sample_text, chunking_config):
        result = extract_chunks("doc-42", sample_text, chunking_config)

        assert result.page_count == 2
        assert [c.page for c in result.chunks] == [1, 2]
        assert result.chunks[0].text.startswith("FLIGHT MANIFEST")
        assert result.chunks[1].text.endswith("88-1042.")
        assert_chunk_invariants(sample_text, result)

    def test_blank_page_counts_but_has_no_chunks(self, chunking_config):
        text = "--- PAGE 1 ---\nFirst page.\n--- PAGE 2 ---\n\n--- PAGE 3 ---\nThird page.\n"
        result = extract_chunks("doc-1", text, chunking_config)

        assert result.page_count == 3
        assert [c.page for c in result.chunks] == [1, 3]

    def test_empty_text(self, chunking_config):
        result = extract_chunks("doc-1", "", chunking_config)

        assert result.chunks == ()
        assert result.page_count == 1
        assert result.total_characters == 0

    def test_whitespace_only_text(self, chunking_config):
        result = extract_chunks("doc-1", " \n\n\t ", chunking_config)

        assert len(result) == 0

    def test_chunk_ids_are_deterministic(self, sample_text, chunking_config):
        result = extract_chunks("doc-42", sample_text, chunking_config)

        assert [c.id for c in result.chunks] == [make_chunk_id("doc-42", 1, 0), make_chunk_id("doc-42", 2, 1)]
        assert result.chunks[0].id == "doc_doc-42_p1_c0"

    def test_extraction_is_idempotent(self, sample_text, chunking_config):
        first = extract_chunks("doc-42", sample_text, chunking_config)
        second = extract_chunks("doc-42", sample_text, chunking_config)

        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_offsets_non_decreasing_across_pages(self, chunking_config):
        body = "Line of text that continues for a while without stopping. " * 30
        text = "\f".join([body, body, body])
        result = extract_chunks("doc-1", text, chunking_config)

        assert result.page_count == 3
        assert_chunk_invariants(text, result)
        assert result.chunks_for_page(2)

    def test_default_config_from_settings(self):
        extractor = ChunkExtractor()

        assert extractor.config.max_chunk_size >= extractor.config.target_chunk_size


class TestChunkingConfig:
    """Tests for chunk size configuration."""

    def test_defaults(self):
        config = ChunkingConfig()

        assert (config.target_chunk_size, config.max_chunk_size, config.min_chunk_size) == (500, 1000, 50)
        assert config.split_lookback == 100

    @pytest.mark.parametrize(
        "overrides",
        [
            {"target_chunk_size": 0},
            {"max_chunk_size": -1},
            {"min_chunk_size": True},
            {"split_lookback": 1.5},
            {"min_chunk_size": 600},
            {"target_chunk_size": 1200},
        ],
    )
    def test_invalid_config_raises(self, overrides):
        with pytest.raises(ConfigurationError):
            ChunkingConfig(**overrides)
