"""Shared pytest fixtures for reporter tests."""

import pytest
from unittest.mock import MagicMock


@pytest.fixture
def config():
    """Reporter config pointing at a fake collector."""
    from bugsnag_reporter.config import ReporterConfig
    return ReporterConfig(
        api_key="test-api-key",
        endpoint="https://collector.test/notify",
        release_stage="test",
        app_version="1.2.3",
    )


@pytest.fixture
def request_context():
    """Sample request snapshot."""
    from bugsnag_reporter.types import RequestContext
    return RequestContext(
        method="POST",
        url="https://shop.test/orders?page=2&token=abc",
        path="/orders",
        query={"page": "2", "token": "abc"},
        headers={
            "content-type": "application/json",
            "authorization": "Bearer secret",
            "user-agent": "pytest",
        },
        client_ip="10.0.0.7",
        referer="https://shop.test/cart",
    )


@pytest.fixture
def mock_session():
    """requests.Session double whose POST returns 200."""
    session = MagicMock()
    session.post.return_value = MagicMock(status_code=200)
    return session


@pytest.fixture
def mock_connection_manager():
    """Connection manager double recording submitted payloads."""
    return MagicMock()


@pytest.fixture
def inline_reporter(config, mock_connection_manager):
    """Reporter that runs delivery jobs on the calling thread."""
    from bugsnag_reporter.dispatch import run_inline
    from bugsnag_reporter.reporter import Reporter
    return Reporter(
        config,
        connection_manager=mock_connection_manager,
        dispatcher=run_inline,
    )
