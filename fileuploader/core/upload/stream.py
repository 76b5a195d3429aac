"""
Upload event stream.

Single-producer / single-consumer channel of UploadState events. The
producer coroutine runs as its own task; the consumer iterates the stream
with ``async for`` from any coroutine.
"""
import asyncio
from typing import Awaitable, Callable, List, Optional

from ..logging import get_logger
from .models import Failed, Started, UploadState

logger = get_logger('upload.stream')

_END = object()


class UploadEventStream:
    """
    Lazily started, non-restartable sequence of upload events.

    ``Started`` is queued as soon as the stream is created. The producer
    task starts on first iteration (or on ``async with``). The queue is
    unbounded so a slow consumer never blocks the producer.

    Closing from the consumer side (``aclose()``, leaving ``async with``, or
    cancelling the task that is waiting on the stream) sets the shared
    cancellation event and cancels the producer; no event is delivered
    afterwards.

    Example:
        >>> async with uploader.upload("photo.jpg") as events:
        ...     async for state in events:
        ...         print(state)
    """

    def __init__(self, producer: Callable[['UploadEventStream'], Awaitable[None]]):
        """
        Initialize event stream.

        Args:
            producer: Coroutine function that performs the upload and
                emits events into the stream it receives
        """
        self._producer = producer
        self._queue: asyncio.Queue = asyncio.Queue()
        self._cancel_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None
        self._terminated = False
        self._closed = False
        self.emit(Started())

    @property
    def cancel_event(self) -> asyncio.Event:
        """Cancellation token shared with the producer."""
        return self._cancel_event

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def terminated(self) -> bool:
        """Returns True once a terminal event has been emitted."""
        return self._terminated

    @property
    def closed(self) -> bool:
        return self._closed

    def emit(self, state: UploadState) -> bool:
        """
        Queue an event for the consumer.

        Args:
            state: Event to deliver

        Returns:
            False if the event was dropped because the stream already
            terminated or was cancelled
        """
        if self._terminated or self._closed or self._cancel_event.is_set():
            logger.debug(f"Dropping {state!r}: stream no longer accepts events")
            return False
        self._queue.put_nowait(state)
        if state.is_terminal:
            self._terminated = True
        return True

    def _ensure_started(self) -> None:
        if self._task is None and not self._closed:
            self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        try:
            await self._producer(self)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Upload producer crashed: {e}")
            self.emit(Failed(e))
        finally:
            self._queue.put_nowait(_END)

    def _abort(self) -> None:
        self._closed = True
        if self._task is not None and not self._task.done() and not self._terminated:
            self._cancel_event.set()
            self._task.cancel()

    def __aiter__(self) -> 'UploadEventStream':
        return self

    async def __anext__(self) -> UploadState:
        if self._closed:
            raise StopAsyncIteration
        self._ensure_started()
        try:
            item = await self._queue.get()
        except asyncio.CancelledError:
            logger.debug("Consumer cancelled while waiting, aborting upload")
            self._abort()
            raise
        if item is _END:
            self._closed = True
            await self._wait_producer()
            raise StopAsyncIteration
        return item

    async def _wait_producer(self) -> None:
        task = self._task
        if task is None:
            return
        if not task.done():
            await asyncio.wait({task})
        if not task.cancelled():
            task.exception()

    async def aclose(self) -> None:
        """
        Close the stream from the consumer side.

        Cancels an upload that has not reached its terminal event and waits
        until the producer released the file handle and network resources.
        Safe to call more than once.
        """
        if not self._terminated and not self._cancel_event.is_set():
            logger.info("Upload cancelled by consumer")
        self._abort()
        if self._task is None:
            self._cancel_event.set()
            return
        await self._wait_producer()

    async def collect(self) -> List[UploadState]:
        """Drain the stream and return every event."""
        async with self:
            return [state async for state in self]

    async def __aenter__(self) -> 'UploadEventStream':
        self._ensure_started()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
