"""
Chunking strategies for file uploads.

Implements Strategy Pattern for different chunking algorithms.
Open for extension (new strategies), closed for modification.
"""
from abc import ABC, abstractmethod
from typing import Iterator, List, Tuple

from ..models import DEFAULT_SEGMENT_SIZE


class BaseChunkingStrategy(ABC):
    """Abstract base class for chunking strategies."""

    @abstractmethod
    def iter_chunks(self, file_size: int) -> Iterator[Tuple[int, int]]:
        """Yield chunk boundaries."""
        pass

    def calculate_chunks(self, file_size: int) -> List[Tuple[int, int]]:
        """
        Calculate all chunk boundaries at once.

        Only meant for small files and inspection; uploads iterate lazily.
        """
        return list(self.iter_chunks(file_size))


class FixedSizeChunkingStrategy(BaseChunkingStrategy):
    """
    Simple fixed-size chunking strategy.

    Every chunk has ``chunk_size`` bytes except the last, which is clamped
    to the remaining length of the file.
    """

    DEFAULT_CHUNK_SIZE = DEFAULT_SEGMENT_SIZE

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize with chunk size.

        Args:
            chunk_size: Size of each chunk in bytes
        """
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        self.chunk_size = chunk_size

    def iter_chunks(self, file_size: int) -> Iterator[Tuple[int, int]]:
        """
        Yield fixed-size chunk boundaries.

        Args:
            file_size: Total file size in bytes

        Yields:
            (start, end) tuples
        """
        position = 0

        while position < file_size:
            end = min(position + self.chunk_size, file_size)
            yield position, end
            position = end
