"""
fileuploader - Async multipart/form-data file uploads with live progress.

Usage:
    >>> from fileuploader import FileUploader, Progress, Done, Failed
    >>>
    >>> uploader = (FileUploader.builder()
    ...     .server_url("https://example.com/upload")
    ...     .part_params("file", "photo.jpg", "image/jpeg")
    ...     .build())
    >>> async for state in uploader.upload("photo.jpg"):
    ...     print(state)
"""
import logging

from .core.upload import (
    FileUploader,
    FileUploaderBuilder,
    UploadEventStream,
    PartParams,
    TimeoutConfig,
    UploadConfig,
    UploadConfigBuilder,
    UploadState,
    Started,
    Progress,
    Done,
    Failed
)
from .core.exceptions import (
    UploadError,
    ConfigurationError,
    FileAccessError,
    NetworkError,
    ServerResponseError,
    UploadCancelledError
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for fileuploader modules.

    This ensures that all fileuploader loggers are properly configured
    to show log messages at the specified level.

    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'fileuploader',
        'fileuploader.upload',
        'fileuploader.upload.executor',
        'fileuploader.upload.multipart',
        'fileuploader.upload.stream',
        'fileuploader.upload.file',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        # Ensure propagation is enabled
        logger.propagate = True


__all__ = [
    'FileUploader',
    'FileUploaderBuilder',
    'UploadEventStream',
    'PartParams',
    'TimeoutConfig',
    'UploadConfig',
    'UploadConfigBuilder',
    'UploadState',
    'Started',
    'Progress',
    'Done',
    'Failed',
    'UploadError',
    'ConfigurationError',
    'FileAccessError',
    'NetworkError',
    'ServerResponseError',
    'UploadCancelledError',
    'setup_logging',
]
