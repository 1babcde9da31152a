"""
Pytest configuration and fixtures for twitter-http-core tests.
"""

import pytest
import responses as responses_lib

from twitter_http.core.config import HttpClientConfig
from twitter_http.core.http_client import HttpClient
from twitter_http.core.logging import LoggingConfig, clear_request_id
from twitter_http.core.request import HttpResponse


@pytest.fixture
def api_url():
    """Base URL for testing."""
    return "https://api.example.com/1.1"


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def client():
    """API client with default configuration."""
    client = HttpClient(HttpClientConfig())
    yield client
    client.close()


@pytest.fixture
def make_response():
    """Factory for HttpResponse snapshots."""

    def _make(status_code=200, body=b"", headers=None, url="https://api.example.com/1.1/test.json"):
        if isinstance(body, str):
            body = body.encode("utf-8")
        return HttpResponse(status_code=status_code, headers=headers or {}, body=body, url=url)

    return _make


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig fixture with file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "client.log"
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file)
    )


@pytest.fixture(autouse=True)
def _reset_request_id():
    yield
    clear_request_id()
