"""Tests for upload models."""
import dataclasses

import pytest

from fileuploader import ConfigurationError
from fileuploader.core.upload.models import (
    DEFAULT_SEGMENT_SIZE,
    PartParams,
    TimeoutConfig,
    UploadConfig,
    UploadState,
    Started,
    Progress,
    Done,
    Failed
)


class TestPartParams:
    """Test suite for PartParams."""

    def test_defaults_are_incomplete(self):
        """Test default part params are not usable."""
        assert PartParams().is_complete is False

    def test_complete(self):
        """Test fully populated part params."""
        params = PartParams('file', 'a.jpg', 'image/jpeg')

        assert params.is_complete is True
        assert params.field_name == 'file'

    def test_frozen(self):
        """Test part params are immutable."""
        params = PartParams('file', 'a.jpg', 'image/jpeg')

        with pytest.raises(dataclasses.FrozenInstanceError):
            params.file_name = 'b.jpg'


class TestUploadConfigBuilder:
    """Test suite for UploadConfigBuilder."""

    def test_build_reference_config(self):
        """Test building a complete configuration."""
        config = (UploadConfig.builder()
                  .server_url('http://localhost:9999/upload')
                  .headers('X-Test', '1')
                  .form_fields({'k': 'v'})
                  .part_params('file', 'a.jpg', 'image/jpeg')
                  .build())

        assert config.server_url == 'http://localhost:9999/upload'
        assert config.headers == (('X-Test', '1'),)
        assert dict(config.form_fields) == {'k': 'v'}
        assert config.part_params == PartParams('file', 'a.jpg', 'image/jpeg')
        assert config.segment_size == DEFAULT_SEGMENT_SIZE
        config.validate()

    def test_odd_header_list_fails_fast(self):
        """Test an odd name/value list is rejected immediately."""
        with pytest.raises(ConfigurationError, match="pairs"):
            UploadConfig.builder().headers('X-One', '1', 'X-Two')

    def test_headers_keep_duplicates_and_order(self):
        """Test duplicate header names are preserved in order."""
        config = (UploadConfig.builder()
                  .headers('X-Dup', 'a', 'X-Other', 'b', 'X-Dup', 'c')
                  .build())

        assert config.headers == (('X-Dup', 'a'), ('X-Other', 'b'), ('X-Dup', 'c'))

    def test_header_appends(self):
        """Test header() appends single pairs."""
        config = (UploadConfig.builder()
                  .headers('A', '1')
                  .header('B', '2')
                  .build())

        assert config.headers == (('A', '1'), ('B', '2'))

    def test_build_with_defaults_does_not_raise(self):
        """Test unset URL and part params are left for the upload to report."""
        config = UploadConfig.builder().build()

        assert config.server_url == ''
        with pytest.raises(ConfigurationError):
            config.validate()

    def test_builder_changes_do_not_leak_into_built_config(self):
        """Test a built configuration is detached from its builder."""
        builder = UploadConfig.builder().form_field('a', '1')
        config = builder.build()
        builder.form_field('b', '2')

        assert dict(config.form_fields) == {'a': '1'}

    def test_timeout(self):
        """Test timeout configuration."""
        config = UploadConfig.builder().timeout(total=5.0).build()

        assert config.timeout.total == 5.0
        assert config.timeout.connect == TimeoutConfig().connect


class TestUploadConfig:
    """Test suite for UploadConfig."""

    def test_form_fields_are_read_only(self):
        """Test form fields cannot be mutated after construction."""
        config = UploadConfig(form_fields={'k': 'v'})

        with pytest.raises(TypeError):
            config.form_fields['k'] = 'other'

    def test_frozen(self):
        """Test configuration is immutable."""
        config = UploadConfig(server_url='http://example.com')

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.server_url = 'http://other.example.com'

    @pytest.mark.parametrize('url', [
        '',
        'not a url',
        '/relative/path',
        'ftp://example.com/upload',
        'http://',
    ])
    def test_validate_rejects_bad_urls(self, url, part_params):
        """Test malformed URLs are rejected."""
        config = UploadConfig(server_url=url, part_params=part_params)

        with pytest.raises(ConfigurationError):
            config.validate()

    def test_validate_rejects_incomplete_part_params(self):
        """Test incomplete part params are rejected."""
        config = UploadConfig(
            server_url='http://example.com/upload',
            part_params=PartParams('file', '', 'image/jpeg')
        )

        with pytest.raises(ConfigurationError, match="Part parameters"):
            config.validate()

    def test_validate_rejects_bad_segment_size(self, part_params):
        """Test non-positive segment size is rejected."""
        config = UploadConfig(
            server_url='http://example.com/upload',
            part_params=part_params,
            segment_size=0
        )

        with pytest.raises(ConfigurationError, match="Segment"):
            config.validate()

    def test_create_validates(self, part_params):
        """Test the factory fails fast."""
        with pytest.raises(ConfigurationError):
            UploadConfig.create('', part_params)

    def test_create(self, part_params):
        """Test the factory builds a usable configuration."""
        config = UploadConfig.create(
            'https://example.com/upload',
            part_params,
            headers=[('X-Test', '1')],
            form_fields={'k': 'v'}
        )

        assert config.headers == (('X-Test', '1'),)
        assert config.form_fields['k'] == 'v'

    def test_configuration_error_is_value_error(self):
        """Test ConfigurationError can be caught as ValueError."""
        with pytest.raises(ValueError):
            UploadConfig().validate()

    def test_timeout_to_aiohttp(self):
        """Test conversion to aiohttp ClientTimeout."""
        timeout = TimeoutConfig(total=10.0, connect=2.0).to_aiohttp_timeout()

        assert timeout.total == 10.0
        assert timeout.connect == 2.0


class TestUploadStates:
    """Test suite for lifecycle events."""

    def test_closed_set(self):
        """Test every event derives from UploadState."""
        for state in (Started(), Progress(5), Done('x'), Failed(RuntimeError())):
            assert isinstance(state, UploadState)

    def test_terminal_flags(self):
        """Test only Done and Failed are terminal."""
        assert Started().is_terminal is False
        assert Progress(50).is_terminal is False
        assert Done('body').is_terminal is True
        assert Failed(RuntimeError('x')).is_terminal is True

    @pytest.mark.parametrize('percent', [-1, 101])
    def test_progress_range(self, percent):
        """Test progress outside 0..100 is rejected."""
        with pytest.raises(ValueError):
            Progress(percent)

    def test_progress_bounds(self):
        """Test boundary percentages are accepted."""
        assert Progress(0).percent == 0
        assert Progress(100).percent == 100

    def test_started_equality(self):
        """Test Started carries no payload."""
        assert Started() == Started()

    def test_done_ok(self):
        """Test Done.ok reflects 2xx statuses."""
        assert Done('x', status=200).ok is True
        assert Done('x', status=500).ok is False
        assert Done('x').ok is False
