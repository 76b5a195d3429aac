"""
Upload executor.

Performs the HTTP POST of one upload and maps its outcome to lifecycle
events. Follows Dependency Inversion Principle - session, validator and
chunking are injectable.
"""
import asyncio
import time
from pathlib import Path
from typing import Optional, Union

import aiofiles
import aiohttp
from multidict import CIMultiDict

from ..exceptions import (
    ConfigurationError,
    FileAccessError,
    NetworkError,
    ServerResponseError,
    UploadCancelledError,
    UploadError
)
from ..logging import get_logger
from .models import Done, Failed, Progress, UploadConfig
from .protocols import ChunkingStrategy, LoggerProtocol
from .services import FileValidator, MultipartBodyEncoder, ProgressTracker
from .strategies import FixedSizeChunkingStrategy
from .stream import UploadEventStream


class UploadExecutor:
    """
    Executes one upload against the configured server.

    Uses dependency injection for all collaborators, making it:
    - Testable (mock the session)
    - Extensible (swap chunking)
    - Free of shared state (a new tracker per run)

    Outcome policy: every HTTP response, whatever its status, becomes
    ``Done`` carrying the response body and status code. Redirects are not
    followed, so a 3xx response is such a ``Done``. Everything that prevents
    a response becomes ``Failed``.
    """

    def __init__(
        self,
        config: UploadConfig,
        session: Optional[aiohttp.ClientSession] = None,
        chunking_strategy: Optional[ChunkingStrategy] = None,
        validator: Optional[FileValidator] = None,
        logger: Optional[LoggerProtocol] = None
    ):
        """
        Initialize upload executor.

        Args:
            config: Upload configuration
            session: Optional shared session; a private one is created and
                closed per upload otherwise
            chunking_strategy: Segment boundaries for progress measurement
            validator: File validator
            logger: Logger instance
        """
        self._config = config
        self._session = session
        self._chunking = chunking_strategy
        self._validator = validator or FileValidator()
        self._logger = logger or get_logger('upload.executor')
        self._encoder = MultipartBodyEncoder(config)

    @property
    def config(self) -> UploadConfig:
        return self._config

    async def run(
        self,
        file_path: Union[str, Path],
        stream: UploadEventStream,
        with_progress: bool = True
    ) -> None:
        """
        Upload a file, emitting events into ``stream``.

        Never raises for upload failures; they are emitted as ``Failed``.
        Emits nothing once the consumer cancelled.

        Args:
            file_path: Path of the file to upload
            stream: Event stream of this upload
            with_progress: Emit Progress events while the file part streams
        """
        upload_start = time.time()
        try:
            done = await self._execute(file_path, stream, with_progress)
        except asyncio.CancelledError:
            self._logger.info(f"Upload of {file_path} cancelled")
            raise
        except Exception as e:
            error = self._classify(e)
            if isinstance(error, UploadCancelledError) or stream.cancelled:
                self._logger.info(f"Upload of {file_path} cancelled")
                return
            upload_time = time.time() - upload_start
            self._logger.error(f"Upload of {file_path} failed after {upload_time:.2f}s: {error}")
            stream.emit(Failed(error))
            return

        upload_time = time.time() - upload_start
        self._logger.info(f"Upload of {file_path} finished in {upload_time:.2f}s (HTTP {done.status})")
        stream.emit(done)

    async def _execute(
        self,
        file_path: Union[str, Path],
        stream: UploadEventStream,
        with_progress: bool
    ) -> Done:
        self._config.validate()
        path, file_size = self._validator.validate(file_path)
        self._logger.info(
            f"Starting upload: {path.name} ({file_size / 1024:.1f} KB) to {self._config.server_url}"
        )

        try:
            handle = await self._open(path)
        except OSError as e:
            raise FileAccessError(f"Cannot open {path}: {e}", file_path=str(path)) from e

        try:
            tracker = None
            if with_progress:
                tracker = ProgressTracker(
                    file_size,
                    listener=lambda percent: stream.emit(Progress(percent)),
                    chunking_strategy=self._chunking or FixedSizeChunkingStrategy(self._config.segment_size)
                )
            body = self._encoder.encode(handle, file_size, tracker, stream.cancel_event)
            return await self._post(body)
        finally:
            await handle.close()
            self._logger.debug(f"File handle closed: {path}")

    async def _open(self, path: Path):
        """
        Open the file for reading.

        The open runs in a worker thread and cannot be interrupted. If the
        upload is cancelled meanwhile, the open is awaited to completion and
        the handle closed before the cancellation propagates.
        """
        opening = asyncio.ensure_future(aiofiles.open(path, 'rb'))
        try:
            return await asyncio.shield(opening)
        except asyncio.CancelledError:
            try:
                orphan = await opening
            except OSError:
                pass
            else:
                await orphan.close()
                self._logger.debug(f"File handle closed after cancelled open: {path}")
            raise

    async def _post(self, body: aiohttp.MultipartWriter) -> Done:
        headers = CIMultiDict(self._config.headers)
        owns_session = self._session is None
        session = self._session or aiohttp.ClientSession()
        try:
            self._logger.debug(f"POST {self._config.server_url} ({len(headers)} header(s))")
            async with session.post(
                self._config.server_url,
                data=body,
                headers=headers,
                timeout=self._config.timeout.to_aiohttp_timeout(),
                allow_redirects=False
            ) as response:
                try:
                    text = await response.text(errors='replace')
                except aiohttp.ClientPayloadError as e:
                    raise ServerResponseError(
                        f"Cannot read response body: {e}", status=response.status
                    ) from e
                if response.status >= 300:
                    self._logger.warning(
                        f"Server answered HTTP {response.status} {response.reason}"
                    )
                return Done(text or self._describe(response), status=response.status)
        finally:
            if owns_session:
                await session.close()

    @staticmethod
    def _describe(response: aiohttp.ClientResponse) -> str:
        """Text standing in for an empty response body."""
        return (
            f"Response{{method={response.method}, status={response.status}, "
            f"reason={response.reason}, url={response.url}}}"
        )

    @staticmethod
    def _classify(exc: BaseException) -> UploadError:
        """
        Map an exception to the upload error taxonomy.

        aiohttp wraps errors raised while writing the body, so the cause
        chain is searched for one of our own errors first.
        """
        current: Optional[BaseException] = exc
        seen = set()
        while current is not None and id(current) not in seen:
            if isinstance(current, UploadError):
                return current
            seen.add(id(current))
            current = current.__cause__ or current.__context__

        if isinstance(exc, aiohttp.InvalidURL):
            error: UploadError = ConfigurationError(f"Malformed server URL: {exc}")
        elif isinstance(exc, (aiohttp.ClientError, asyncio.TimeoutError)):
            error = NetworkError(f"{type(exc).__name__}: {exc}")
        elif isinstance(exc, OSError):
            error = FileAccessError(str(exc))
        elif isinstance(exc, ValueError):
            error = ConfigurationError(str(exc))
        else:
            error = UploadError(f"{type(exc).__name__}: {exc}")
        error.__cause__ = exc
        return error
