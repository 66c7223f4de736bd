"""
Pytest configuration and shared fixtures for unit tests.
"""
from unittest.mock import MagicMock

import pytest

from igcleanup.jobs.cancellation import CancellationRegistry, CancellationToken

# Note: pytest_plugins is defined in the root tests/conftest.py
# to comply with pytest's requirement that it be at the top level


@pytest.fixture
def token():
    """Active cancellation token for job 1."""
    return CancellationToken(1)


@pytest.fixture
def registry():
    return CancellationRegistry()


@pytest.fixture
def mock_progress():
    """
    Create a mock JobProgress object.

    Records log() and record() calls; counters are not tracked.
    """
    progress = MagicMock()
    progress.log.return_value = None
    progress.record.return_value = None
    progress.flush.return_value = None
    return progress


@pytest.fixture
def mock_response():
    """
    Factory for mock Playwright APIResponse objects.

    Usage: mock_response(200, {"status": "ok"})
    """
    from unittest.mock import AsyncMock

    def _make(status: int = 200, payload=None, url: str = "https://www.instagram.com/api/v1/"):
        response = MagicMock()
        response.status = status
        response.url = url
        response.json = AsyncMock(return_value=payload if payload is not None else {"status": "ok"})
        response.text = AsyncMock(return_value=str(payload))
        return response

    return _make
