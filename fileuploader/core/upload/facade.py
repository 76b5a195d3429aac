"""
Upload facade.

Provides a simplified interface for file uploads.
Follows Facade Pattern - hides the executor and the event plumbing.
"""
from pathlib import Path
from typing import Optional, Union

import aiohttp

from .executor import UploadExecutor
from .models import UploadConfig, UploadConfigBuilder
from .protocols import ChunkingStrategy
from .stream import UploadEventStream


class FileUploader:
    """
    Uploads single files as multipart/form-data POST requests.

    This is the main entry point for uploading files. Each call to
    ``upload`` performs an independent request and yields a fresh stream
    of lifecycle events.

    Example:
        >>> from fileuploader import FileUploader, Progress, Done, Failed
        >>> uploader = (FileUploader.builder()
        ...     .server_url("http://localhost:9999/upload")
        ...     .headers("X-Test", "1")
        ...     .form_fields({"k": "v"})
        ...     .part_params("file", "a.jpg", "image/jpeg")
        ...     .build())
        >>> async with uploader.upload("a.jpg") as events:
        ...     async for state in events:
        ...         print(state)
    """

    def __init__(
        self,
        config: UploadConfig,
        session: Optional[aiohttp.ClientSession] = None,
        chunking_strategy: Optional[ChunkingStrategy] = None
    ):
        """
        Initialize uploader.

        Args:
            config: Upload configuration
            session: Optional aiohttp session shared by all uploads; the
                caller keeps ownership of it
            chunking_strategy: Optional custom segment boundaries
        """
        self._config = config
        self._session = session
        self._chunking = chunking_strategy

    @classmethod
    def builder(cls) -> 'FileUploaderBuilder':
        """Returns a builder producing a FileUploader."""
        return FileUploaderBuilder()

    @property
    def config(self) -> UploadConfig:
        return self._config

    def upload(
        self,
        file_path: Union[str, Path],
        with_progress: bool = True
    ) -> UploadEventStream:
        """
        Upload a file.

        Nothing is read or sent until the returned stream is iterated.
        Failures never raise here; they arrive as a ``Failed`` event.

        Args:
            file_path: Path to the file to upload
            with_progress: Emit Progress events while the file streams

        Returns:
            Stream of Started, Progress..., then Done or Failed
        """
        executor = UploadExecutor(
            self._config,
            session=self._session,
            chunking_strategy=self._chunking
        )
        return UploadEventStream(
            lambda stream: executor.run(file_path, stream, with_progress=with_progress)
        )


class FileUploaderBuilder(UploadConfigBuilder):
    """UploadConfigBuilder whose ``build()`` returns a FileUploader."""

    def build_config(self) -> UploadConfig:
        return super().build()

    def build(self, session: Optional[aiohttp.ClientSession] = None) -> FileUploader:  # type: ignore[override]
        return FileUploader(self.build_config(), session=session)
