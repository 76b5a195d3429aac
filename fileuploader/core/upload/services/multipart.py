"""
Multipart body encoding service.

Builds the multipart/form-data body of an upload without reading the file
into memory: the file part pulls its bytes from the open handle while the
request is being written.
"""
import asyncio
from typing import Any, AsyncIterator, Optional

from aiohttp import MultipartWriter, payload
from aiohttp.abc import AbstractStreamWriter

from ...exceptions import FileAccessError, UploadCancelledError
from ...logging import get_logger
from ..models import UploadConfig
from .progress import ProgressTracker

logger = get_logger('upload.multipart')


class ProgressFilePayload(payload.Payload):
    """
    File part that reports progress while it is written.

    Reads the async file handle segment by segment as dictated by the
    tracker. Cancellation is honoured between segments.
    """

    def __init__(
        self,
        value: Any,
        size: int,
        tracker: ProgressTracker,
        cancel_event: Optional[asyncio.Event] = None,
        **kwargs: Any
    ):
        """
        Initialize file payload.

        Args:
            value: Open aiofiles binary handle positioned at the start of the file
            size: Length of the file in bytes
            tracker: Progress tracker of this upload
            cancel_event: Set when the consumer cancelled the upload
            **kwargs: Passed to aiohttp Payload (content_type, filename, headers)
        """
        super().__init__(value, **kwargs)
        self._size = size
        self._tracker = tracker
        self._cancel_event = cancel_event

    async def write(self, writer: AbstractStreamWriter) -> None:
        handle = self._value
        for start, end in self._tracker.segments():
            if self._cancel_event is not None and self._cancel_event.is_set():
                raise UploadCancelledError(f"Upload cancelled at byte {start} of {self._size}")
            try:
                chunk = await handle.read(end - start)
            except OSError as e:
                raise FileAccessError(f"Failed to read bytes {start}-{end}: {e}") from e
            if len(chunk) != end - start:
                raise FileAccessError(
                    f"File changed size during upload: expected {self._size} bytes, "
                    f"got {start + len(chunk)}"
                )
            await writer.write(chunk)
        logger.debug(f"File part written ({self._size} bytes)")

    def decode(self, encoding: str = 'utf-8', errors: str = 'strict') -> str:
        raise TypeError("A streamed file part cannot be decoded")


class MultipartBodyEncoder:
    """
    Composes form fields and the file part into one multipart body.

    Parts are written in order: every configured form field, then the file.
    """

    OPAQUE_CONTENT_TYPE = 'application/octet-stream'

    def __init__(self, config: UploadConfig):
        """
        Initialize encoder.

        Args:
            config: Upload configuration (form fields, part params, segment size)
        """
        self._config = config

    def encode(
        self,
        handle: Any,
        file_size: int,
        tracker: Optional[ProgressTracker] = None,
        cancel_event: Optional[asyncio.Event] = None
    ) -> MultipartWriter:
        """
        Build the multipart body.

        Args:
            handle: Open aiofiles binary handle of the file
            file_size: Length of the file in bytes
            tracker: Progress tracker; without one the file is sent as an
                opaque stream with a fixed content type
            cancel_event: Cancellation token checked between file segments

        Returns:
            aiohttp MultipartWriter usable as request data
        """
        writer = MultipartWriter('form-data')

        for key, value in self._config.form_fields.items():
            field_part = payload.StringPayload(value)
            field_part.set_content_disposition('form-data', name=key)
            writer.append_payload(field_part)

        params = self._config.part_params
        if tracker is not None:
            file_part = ProgressFilePayload(
                handle,
                file_size,
                tracker,
                cancel_event,
                content_type=params.mime_type,
                filename=params.file_name
            )
        else:
            file_part = payload.AsyncIterablePayload(
                self._iter_file(handle, cancel_event),
                content_type=self.OPAQUE_CONTENT_TYPE,
                filename=params.file_name
            )
        file_part.set_content_disposition(
            'form-data',
            name=params.field_name,
            filename=params.file_name
        )
        writer.append_payload(file_part)

        logger.debug(
            f"Encoded {len(self._config.form_fields)} form field(s) and file part "
            f"'{params.field_name}' ({file_size} bytes, progress={'on' if tracker else 'off'})"
        )
        return writer

    async def _iter_file(
        self,
        handle: Any,
        cancel_event: Optional[asyncio.Event]
    ) -> AsyncIterator[bytes]:
        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise UploadCancelledError("Upload cancelled")
            try:
                chunk = await handle.read(self._config.segment_size)
            except OSError as e:
                raise FileAccessError(f"Failed to read file: {e}") from e
            if not chunk:
                break
            yield chunk
