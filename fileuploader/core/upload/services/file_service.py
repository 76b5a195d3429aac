"""
File validation and staging services.

Single Responsibility: Each class handles one specific task.
"""
import os
import shutil
import tempfile
import time
from pathlib import Path
from typing import BinaryIO, Optional, Tuple, Union

from ...exceptions import FileAccessError
from ...logging import get_logger


class FileValidator:
    """
    Validates files before upload.

    Responsibilities:
    - Check file existence
    - Verify file is not a directory
    - Verify file is readable
    - Get file size
    """

    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.

        Args:
            file_path: Path to the file

        Returns:
            Tuple of (validated Path, file size in bytes)

        Raises:
            FileAccessError: If the file is missing, not a regular file or unreadable
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path

        if not path.exists():
            raise FileAccessError(f"File not found: {path}", file_path=str(path))

        if not path.is_file():
            raise FileAccessError(f"Path is not a file: {path}", file_path=str(path))

        if not os.access(path, os.R_OK):
            raise FileAccessError(f"File is not readable: {path}", file_path=str(path))

        try:
            file_size = path.stat().st_size
        except OSError as e:
            raise FileAccessError(f"Cannot stat {path}: {e}", file_path=str(path)) from e

        return path, file_size


class FileStager:
    """
    Copies a byte stream into a local file so it can be uploaded.

    Staged files are named ``<prefix><millis>_<random><suffix>``.
    """

    BUFFER_SIZE = 64 * 1024

    def __init__(
        self,
        directory: Optional[Union[str, Path]] = None,
        prefix: str = 'UPLOAD_',
        suffix: str = ''
    ):
        """
        Initialize file stager.

        Args:
            directory: Target directory (system temp directory if omitted)
            prefix: File name prefix
            suffix: File name suffix, usually the extension
        """
        self._directory = Path(directory) if directory is not None else Path(tempfile.gettempdir())
        self._prefix = prefix
        self._suffix = suffix
        self._logger = get_logger('upload.file')

    def stage(self, source: BinaryIO, suffix: Optional[str] = None) -> Path:
        """
        Copy ``source`` into a new file.

        Args:
            source: Readable binary stream, read until EOF
            suffix: Overrides the configured suffix

        Returns:
            Path of the staged file

        Raises:
            FileAccessError: If the file cannot be created or written
        """
        prefix = f"{self._prefix}{int(time.time() * 1000)}_"
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, name = tempfile.mkstemp(
                suffix=self._suffix if suffix is None else suffix,
                prefix=prefix,
                dir=self._directory
            )
        except OSError as e:
            raise FileAccessError(f"Cannot create staging file in {self._directory}: {e}") from e

        path = Path(name)
        try:
            with os.fdopen(fd, 'wb') as target:
                shutil.copyfileobj(source, target, self.BUFFER_SIZE)
        except OSError as e:
            path.unlink(missing_ok=True)
            raise FileAccessError(f"Cannot stage file {path}: {e}", file_path=str(path)) from e

        self._logger.debug(f"Staged {path.stat().st_size} bytes into {path}")
        return path
