"""Tests for chunking strategies."""
import pytest
from fileuploader.core.upload.strategies.chunking import FixedSizeChunkingStrategy


class TestFixedSizeChunkingStrategy:
    """Test suite for FixedSizeChunkingStrategy."""

    def test_default_chunk_size(self):
        """Test default 2 KiB chunk size."""
        strategy = FixedSizeChunkingStrategy()
        assert strategy.chunk_size == 2048

    def test_custom_chunk_size(self):
        """Test custom chunk size."""
        strategy = FixedSizeChunkingStrategy(chunk_size=512 * 1024)
        assert strategy.chunk_size == 512 * 1024

    def test_invalid_chunk_size(self):
        """Test invalid chunk size raises error."""
        with pytest.raises(ValueError):
            FixedSizeChunkingStrategy(chunk_size=0)

        with pytest.raises(ValueError):
            FixedSizeChunkingStrategy(chunk_size=-1)

    def test_empty_file(self):
        """Test chunking empty file."""
        strategy = FixedSizeChunkingStrategy()
        chunks = strategy.calculate_chunks(0)
        assert chunks == []

    def test_file_smaller_than_chunk(self):
        """Test file smaller than chunk size."""
        strategy = FixedSizeChunkingStrategy(chunk_size=1024)
        chunks = strategy.calculate_chunks(500)

        assert chunks == [(0, 500)]

    def test_file_exact_multiple(self):
        """Test file size exact multiple of chunk size."""
        strategy = FixedSizeChunkingStrategy(chunk_size=1000)
        chunks = strategy.calculate_chunks(3000)

        assert chunks == [(0, 1000), (1000, 2000), (2000, 3000)]

    def test_last_chunk_is_clamped(self):
        """Test the last chunk never overruns the file."""
        strategy = FixedSizeChunkingStrategy(chunk_size=2048)
        chunks = strategy.calculate_chunks(5000)

        assert chunks == [(0, 2048), (2048, 4096), (4096, 5000)]

    def test_iter_chunks_is_lazy(self):
        """Test boundaries are produced on demand."""
        strategy = FixedSizeChunkingStrategy(chunk_size=1)
        chunks = strategy.iter_chunks(10 ** 12)

        assert next(chunks) == (0, 1)
        assert next(chunks) == (1, 2)

    def test_chunks_cover_entire_file(self):
        """Test that chunks cover entire file."""
        strategy = FixedSizeChunkingStrategy(chunk_size=1000)
        size = 5500
        chunks = strategy.calculate_chunks(size)

        total_covered = sum(end - start for start, end in chunks)
        assert total_covered == size
