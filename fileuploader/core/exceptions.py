"""
Custom exceptions for upload operations.

Every failure of an upload is converted into one of these before it is
delivered to the consumer inside a ``Failed`` event.
"""
from typing import Optional


class UploadError(Exception):
    """Base exception for all upload-related errors."""

    def __init__(self, message: str, error_code: Optional[int] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            error_code: Numeric error code (if available)
        """
        self.error_code = error_code
        super().__init__(message)


class ConfigurationError(UploadError, ValueError):
    """Exception raised for a malformed or unusable upload configuration."""
    pass


class FileAccessError(UploadError):
    """Exception raised when the file to upload cannot be read."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        error_code: Optional[int] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            file_path: Path of the file that failed
            error_code: Numeric error code (if available)
        """
        self.file_path = file_path
        super().__init__(message, error_code)


class NetworkError(UploadError):
    """Exception raised for connection, timeout and transport failures."""
    pass


class ServerResponseError(UploadError):
    """
    Exception raised for unusable server responses.

    Non-2xx statuses are delivered as ``Done`` with the server's body, so this
    is only raised when the response itself cannot be read.
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        self.status = status
        super().__init__(message, status)


class UploadCancelledError(UploadError):
    """Raised inside the producer when the consumer cancelled the upload."""
    pass
