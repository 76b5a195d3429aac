"""
Progress tracking service.

Turns "N bytes written of L" into integer percentages for a listener.
"""
from typing import Iterator, Optional, Tuple

from ..protocols import ChunkingStrategy, ProgressListener
from ..strategies import FixedSizeChunkingStrategy


class ProgressTracker:
    """
    Measures write progress of one file part.

    A tracker belongs to a single upload and must not be reused.

    Responsibilities:
    - Split the file into segments
    - Report the percentage written before each segment is written
    - Skip reports that would repeat the previous percentage
    """

    def __init__(
        self,
        total_bytes: int,
        listener: Optional[ProgressListener] = None,
        chunking_strategy: Optional[ChunkingStrategy] = None
    ):
        """
        Initialize progress tracker.

        Args:
            total_bytes: Length of the file in bytes
            listener: Callback receiving each new percentage
            chunking_strategy: Segment boundaries (defaults to 2 KiB segments)
        """
        if total_bytes < 0:
            raise ValueError("Total bytes cannot be negative")
        self._total = total_bytes
        self._listener = listener
        self._chunking = chunking_strategy or FixedSizeChunkingStrategy()
        self._written = 0
        self._last_percent: Optional[int] = None

    @property
    def total_bytes(self) -> int:
        return self._total

    @property
    def bytes_written(self) -> int:
        return self._written

    @property
    def last_percent(self) -> Optional[int]:
        """Last percentage reported, None before the first report."""
        return self._last_percent

    def percent_for(self, written: int) -> int:
        """Floor percentage of ``written`` bytes, clamped to [0, 100]."""
        if self._total == 0:
            return 100
        return max(0, min(100, written * 100 // self._total))

    def segments(self) -> Iterator[Tuple[int, int]]:
        """
        Yield (start, end) segments, reporting progress before each one.

        The caller must write the whole segment before advancing the
        iterator. An empty file yields nothing and reports nothing.
        """
        for start, end in self._chunking.iter_chunks(self._total):
            self._written = start
            self._report(start)
            yield start, end
        self._written = self._total

    def _report(self, written: int) -> None:
        percent = self.percent_for(written)
        if percent == self._last_percent:
            return
        self._last_percent = percent
        if self._listener is not None:
            self._listener(percent)
