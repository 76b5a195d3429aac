"""Upload models."""
from .upload_models import (
    DEFAULT_SEGMENT_SIZE,
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

__all__ = [
    'DEFAULT_SEGMENT_SIZE',
    'PartParams',
    'TimeoutConfig',
    'UploadConfig',
    'UploadConfigBuilder',
    'UploadState',
    'Started',
    'Progress',
    'Done',
    'Failed'
]
