"""
Root-level pytest configuration and shared fixtures for all tests.

This conftest.py is shared by both unit and integration tests.
It registers pytest markers and exposes the fixture modules.
"""
import sys
from pathlib import Path

import pytest  # noqa: E402

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Expose fixtures from test fixture modules
# Note: pytest_plugins must be defined at the top level (root conftest)
pytest_plugins = [
    "tests.unit.fixtures.mock_cookies",
    "tests.unit.fixtures.mock_session",
]


# Configure pytest markers
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (slower, with dependencies)")


@pytest.fixture
def job_store(tmp_path):
    """JobStore backed by a temporary JSON file."""
    from igcleanup.storage.job_store import JobStore

    return JobStore(tmp_path / "jobs.json")


@pytest.fixture
def fast_rate_limiter():
    """RateLimiter with zero delays, for any speed."""
    from igcleanup.safety.rate_limiter import RateLimiter

    return RateLimiter(speed=1, batch_delay_tiers=((0, 0.0),), page_delay_tiers=((0, 0.0),))
