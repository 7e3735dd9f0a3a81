"""Unit tests for ParcelConfig."""

import pydantic
import pytest

from oasislabs.parcel.core import DEFAULT_API_URL, DEFAULT_CHUNK_SIZE, ParcelConfig


class TestParcelConfig:
    """Test ParcelConfig defaults, validation and env loading."""

    def test_defaults(self):
        """Test production defaults."""
        config = ParcelConfig()
        assert config.api_url == DEFAULT_API_URL
        assert config.storage_url == "https://storage.oasislabs.com/v1/parcel"
        assert config.timeout == 30.0
        assert config.chunk_size == DEFAULT_CHUNK_SIZE

    def test_trailing_slash_stripped(self):
        """Test URLs are normalized without trailing slash."""
        config = ParcelConfig(api_url="http://localhost:4242/v1/", storage_url="http://s/x//")
        assert config.api_url == "http://localhost:4242/v1"
        assert config.storage_url == "http://s/x"

    def test_rejects_non_http_url(self):
        """Test non-HTTP URLs are rejected."""
        with pytest.raises(pydantic.ValidationError):
            ParcelConfig(api_url="ftp://example.com")

    @pytest.mark.parametrize("field", ["timeout", "chunk_size"])
    def test_rejects_non_positive(self, field):
        """Test timeout and chunk size must be positive."""
        with pytest.raises(pydantic.ValidationError):
            ParcelConfig(**{field: 0})

    def test_frozen(self):
        """Test config is immutable."""
        config = ParcelConfig()
        with pytest.raises(pydantic.ValidationError):
            config.timeout = 1.0

    def test_from_env(self):
        """Test PARCEL_* variables override defaults."""
        config = ParcelConfig.from_env(
            {
                "PARCEL_API_URL": "http://api.local/",
                "PARCEL_STORAGE_URL": "http://storage.local",
                "PARCEL_TIMEOUT": "5",
            }
        )
        assert config.api_url == "http://api.local"
        assert config.storage_url == "http://storage.local"
        assert config.timeout == 5.0

    def test_from_env_ignores_empty(self):
        """Test empty variables fall back to defaults."""
        config = ParcelConfig.from_env({"PARCEL_API_URL": ""})
        assert config.api_url == DEFAULT_API_URL

    @pytest.mark.parametrize("raw", ["soon", "0", "-1"])
    def test_from_env_rejects_bad_timeout(self, raw):
        """Test a malformed PARCEL_TIMEOUT is reported by model validation."""
        with pytest.raises(pydantic.ValidationError, match="timeout"):
            ParcelConfig.from_env({"PARCEL_TIMEOUT": raw})
