"""
Tests for environment-based configuration.
"""

import pytest
from pydantic import ValidationError

from twitter_http.core.config import HttpClientConfig
from twitter_http.core.env_config import HttpClientSettings, load_from_env
from twitter_http.core.logging import LogFormat, LogLevel


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the developer's environment and .env file."""
    import os

    for name in list(os.environ):
        if name.startswith("TWITTER_HTTP_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


class TestLoadFromEnv:
    """Test loading HttpClientConfig from environment variables."""

    def test_defaults(self):
        config = load_from_env()
        assert isinstance(config, HttpClientConfig)
        assert config.gzip_enabled
        assert config.timeout.as_tuple() == (20.0, 120.0)
        assert not config.proxy.is_configured
        assert config.logging is None

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("TWITTER_HTTP_GZIP_ENABLED", "false")
        monkeypatch.setenv("TWITTER_HTTP_TLS_VERSION", "TLSv1.3")
        monkeypatch.setenv("TWITTER_HTTP_TIMEOUT_READ", "30")
        monkeypatch.setenv("TWITTER_HTTP_PROXY_HOST", "proxy.local")
        monkeypatch.setenv("TWITTER_HTTP_PROXY_PORT", "3128")
        monkeypatch.setenv("TWITTER_HTTP_USER_AGENT", "my-bot/2.0")

        config = load_from_env()

        assert not config.gzip_enabled
        assert config.tls_version == "TLSv1.3"
        assert config.timeout.read == 30.0
        assert config.proxy.as_url() == "http://proxy.local:3128"
        assert config.user_agent == "my-bot/2.0"

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("TWITTER_HTTP_GZIP_ENABLED", "false")
        assert load_from_env(gzip_enabled=True).gzip_enabled

    def test_env_file(self, tmp_path):
        env_file = tmp_path / "client.env"
        env_file.write_text("TWITTER_HTTP_VERIFY_SSL=false\nTWITTER_HTTP_TIMEOUT_CONNECT=3\n")

        config = load_from_env(env_file=str(env_file))

        assert not config.verify_ssl
        assert config.timeout.connect == 3.0

    def test_logging(self, monkeypatch):
        monkeypatch.setenv("TWITTER_HTTP_LOG_ENABLED", "true")
        monkeypatch.setenv("TWITTER_HTTP_LOG_LEVEL", "debug")
        monkeypatch.setenv("TWITTER_HTTP_LOG_FORMAT", "json")

        config = load_from_env()

        assert config.logging.level == LogLevel.DEBUG
        assert config.logging.format == LogFormat.JSON
        assert not config.logging.enable_file

    def test_empty_proxy_host(self, monkeypatch):
        monkeypatch.setenv("TWITTER_HTTP_PROXY_HOST", "  ")
        assert not load_from_env().proxy.is_configured


class TestValidation:
    """Test rejected values."""

    @pytest.mark.parametrize("name,value", [
        ("TWITTER_HTTP_TLS_VERSION", "SSLv3"),
        ("TWITTER_HTTP_TIMEOUT_READ", "0"),
        ("TWITTER_HTTP_PROXY_PORT", "99999"),
        ("TWITTER_HTTP_LOG_FORMAT", "xml"),
        ("TWITTER_HTTP_GZIP_ENABLED", "maybe"),
    ])
    def test_invalid_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValidationError):
            load_from_env()

    def test_port_without_host(self):
        with pytest.raises(ValidationError, match="proxy_port requires proxy_host"):
            HttpClientSettings(proxy_port=3128)
