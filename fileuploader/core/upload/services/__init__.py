"""Upload services."""
from .file_service import FileValidator, FileStager
from .progress import ProgressTracker
from .multipart import MultipartBodyEncoder, ProgressFilePayload

__all__ = [
    'FileValidator',
    'FileStager',
    'ProgressTracker',
    'MultipartBodyEncoder',
    'ProgressFilePayload',
]
