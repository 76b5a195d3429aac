"""
Data models for upload module.

Uses frozen dataclasses for immutable, type-safe data structures.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from yarl import URL

from ...exceptions import ConfigurationError

DEFAULT_SEGMENT_SIZE = 2048


@dataclass(frozen=True)
class PartParams:
    """
    Parameters of the multipart file part.

    Attributes:
        field_name: Form field name of the file part
        file_name: File name reported to the server
        mime_type: Content type of the file part
    """
    field_name: str = ''
    file_name: str = ''
    mime_type: str = ''

    @property
    def is_complete(self) -> bool:
        """Returns True if every parameter is set."""
        return bool(self.field_name and self.file_name and self.mime_type)


@dataclass(frozen=True)
class TimeoutConfig:
    """
    Timeout configuration.

    Granular control over different timeout types. ``None`` disables a timeout.
    """
    total: Optional[float] = 300.0  # Total request timeout
    connect: Optional[float] = 30.0  # Connection timeout
    sock_read: Optional[float] = 60.0  # Socket read timeout
    sock_connect: Optional[float] = 30.0  # Socket connect timeout

    def to_aiohttp_timeout(self):
        """Convert to aiohttp ClientTimeout."""
        import aiohttp
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read,
            sock_connect=self.sock_connect
        )


@dataclass(frozen=True)
class UploadConfig:
    """
    Configuration of one upload.

    Attributes:
        server_url: Absolute http(s) URL the file is POSTed to
        headers: Request headers as ordered (name, value) pairs, kept verbatim
        form_fields: Plain form fields sent before the file part
        part_params: Field name, file name and MIME type of the file part
        timeout: Transport timeouts
        segment_size: Chunk size used to stream the file and measure progress
    """
    server_url: str = ''
    headers: Tuple[Tuple[str, str], ...] = ()
    form_fields: Mapping[str, str] = field(default_factory=dict)
    part_params: PartParams = field(default_factory=PartParams)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    segment_size: int = DEFAULT_SEGMENT_SIZE

    def __post_init__(self):
        # Detach from caller-owned containers
        object.__setattr__(self, 'headers', tuple((str(n), str(v)) for n, v in self.headers))
        object.__setattr__(
            self,
            'form_fields',
            MappingProxyType({str(k): str(v) for k, v in dict(self.form_fields).items()})
        )

    @classmethod
    def create(
        cls,
        server_url: str,
        part_params: PartParams,
        headers: Iterable[Tuple[str, str]] = (),
        form_fields: Optional[Mapping[str, str]] = None,
        **kwargs: Any
    ) -> 'UploadConfig':
        """
        Create a validated configuration.

        Raises:
            ConfigurationError: If the configuration is unusable
        """
        config = cls(
            server_url=server_url,
            headers=tuple(headers),
            form_fields=form_fields or {},
            part_params=part_params,
            **kwargs
        )
        config.validate()
        return config

    @classmethod
    def builder(cls) -> 'UploadConfigBuilder':
        """Returns a fresh builder."""
        return UploadConfigBuilder()

    def validate(self) -> None:
        """
        Check that the configuration can be used for an upload.

        Performs no network or file I/O.

        Raises:
            ConfigurationError: If the URL, part parameters or segment size are unusable
        """
        if not self.server_url:
            raise ConfigurationError("Server URL is empty")
        try:
            url = URL(self.server_url)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Malformed server URL {self.server_url!r}: {e}") from e
        if not url.is_absolute() or url.scheme not in ('http', 'https') or not url.host:
            raise ConfigurationError(f"Server URL must be an absolute http(s) URL: {self.server_url!r}")
        if not self.part_params.is_complete:
            raise ConfigurationError(
                f"Part parameters are incomplete: {self.part_params}"
            )
        if self.segment_size <= 0:
            raise ConfigurationError("Segment size must be positive")


class UploadConfigBuilder:
    """
    Fluent builder for UploadConfig.

    Example:
        >>> config = (UploadConfig.builder()
        ...     .server_url("http://localhost:9999/upload")
        ...     .headers("X-Test", "1")
        ...     .form_fields({"k": "v"})
        ...     .part_params("file", "a.jpg", "image/jpeg")
        ...     .build())
    """

    def __init__(self):
        self._server_url = ''
        self._headers = []
        self._form_fields: Dict[str, str] = {}
        self._part_params = PartParams()
        self._timeout = TimeoutConfig()
        self._segment_size = DEFAULT_SEGMENT_SIZE

    def server_url(self, value: str) -> 'UploadConfigBuilder':
        self._server_url = value
        return self

    def headers(self, *names_and_values: str) -> 'UploadConfigBuilder':
        """
        Replace headers from an alternating name/value sequence.

        Raises:
            ConfigurationError: If the sequence has an odd length
        """
        if len(names_and_values) % 2:
            raise ConfigurationError(
                f"Headers need name/value pairs, got {len(names_and_values)} items"
            )
        self._headers = list(zip(names_and_values[::2], names_and_values[1::2]))
        return self

    def header(self, name: str, value: str) -> 'UploadConfigBuilder':
        """Append a single header pair."""
        self._headers.append((name, value))
        return self

    def form_fields(self, value: Mapping[str, str]) -> 'UploadConfigBuilder':
        self._form_fields = dict(value)
        return self

    def form_field(self, key: str, value: str) -> 'UploadConfigBuilder':
        self._form_fields[key] = value
        return self

    def part_params(self, field_name: str, file_name: str, mime_type: str) -> 'UploadConfigBuilder':
        self._part_params = PartParams(field_name, file_name, mime_type)
        return self

    def timeout(self, total: Optional[float] = None, **kwargs: Optional[float]) -> 'UploadConfigBuilder':
        """Set the transport timeouts (see TimeoutConfig)."""
        self._timeout = TimeoutConfig(total=total, **kwargs)
        return self

    def segment_size(self, value: int) -> 'UploadConfigBuilder':
        self._segment_size = value
        return self

    def build(self) -> UploadConfig:
        """
        Build the immutable configuration.

        URL and part parameters are not validated here; unset values make
        the upload fail with ConfigurationError instead.
        """
        return UploadConfig(
            server_url=self._server_url,
            headers=tuple(self._headers),
            form_fields=self._form_fields,
            part_params=self._part_params,
            timeout=self._timeout,
            segment_size=self._segment_size
        )


class UploadState:
    """Base of the closed set of upload lifecycle events."""

    __slots__ = ()

    @property
    def is_terminal(self) -> bool:
        """Returns True for the final event of an upload."""
        return False


@dataclass(frozen=True)
class Started(UploadState):
    """The upload was invoked; always the first event."""


@dataclass(frozen=True)
class Progress(UploadState):
    """
    File part streaming progress.

    Attributes:
        percent: Integer percentage of the file written, 0..100
    """
    percent: int

    def __post_init__(self):
        if not 0 <= self.percent <= 100:
            raise ValueError(f"Progress percent out of range: {self.percent}")


@dataclass(frozen=True)
class Done(UploadState):
    """
    The server answered.

    Attributes:
        body: Raw response body, or a description of the response if it had none
        status: HTTP status code of the response
    """
    body: str
    status: Optional[int] = None

    @property
    def is_terminal(self) -> bool:
        return True

    @property
    def ok(self) -> bool:
        """Returns True for a 2xx status."""
        return self.status is not None and 200 <= self.status < 300


@dataclass(frozen=True)
class Failed(UploadState):
    """
    The upload failed.

    Attributes:
        cause: The error that terminated the upload
    """
    cause: BaseException

    @property
    def is_terminal(self) -> bool:
        return True
