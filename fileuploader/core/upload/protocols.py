"""
Protocol definitions for upload module.

Defines interfaces (protocols) for dependency injection and strategy pattern.
"""
from typing import Iterator, Protocol, Tuple


class ChunkingStrategy(Protocol):
    """
    Protocol for file chunking strategies.

    Allows different chunking algorithms to be plugged in.
    """

    def iter_chunks(self, file_size: int) -> Iterator[Tuple[int, int]]:
        """
        Yield chunk boundaries for a file.

        Args:
            file_size: Total file size in bytes

        Yields:
            (start, end) tuples covering the file, the last one clamped to file_size
        """
        ...


class ProgressListener(Protocol):
    """Callback receiving the integer percentage of the file written."""

    def __call__(self, percent: int) -> None: ...


class LoggerProtocol(Protocol):
    """Protocol for logger objects."""

    def debug(self, msg: str) -> None: ...
    def info(self, msg: str) -> None: ...
    def warning(self, msg: str) -> None: ...
    def error(self, msg: str) -> None: ...
