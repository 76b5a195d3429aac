"""
Upload module for multipart/form-data file uploads.

This module streams a file and its form fields to an HTTP server and reports
the upload's lifecycle as an asynchronous stream of events.
"""
from .facade import FileUploader, FileUploaderBuilder
from .executor import UploadExecutor
from .stream import UploadEventStream
from .models import (
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
from .protocols import ChunkingStrategy, ProgressListener

__all__ = [
    # Main classes
    'FileUploader',
    'FileUploaderBuilder',
    'UploadExecutor',
    'UploadEventStream',

    # Models
    'PartParams',
    'TimeoutConfig',
    'UploadConfig',
    'UploadConfigBuilder',
    'UploadState',
    'Started',
    'Progress',
    'Done',
    'Failed',

    # Protocols
    'ChunkingStrategy',
    'ProgressListener',
]
