"""
Tests for CancellationToken and CancellationRegistry.
"""
import threading

import pytest

from igcleanup.jobs.cancellation import CancellationRegistry, CancellationToken


@pytest.mark.unit
class TestCancellationToken:
    def test_new_token_continues(self):
        assert CancellationToken(1).should_continue is True

    def test_cancel(self):
        token = CancellationToken(1)

        token.cancel()
        token.cancel()

        assert token.should_continue is False

    def test_cancel_from_other_thread(self):
        token = CancellationToken(1)

        thread = threading.Thread(target=token.cancel)
        thread.start()
        thread.join()

        assert token.should_continue is False


@pytest.mark.unit
class TestCancellationRegistry:
    """Test CancellationRegistry."""

    def test_register_and_get(self, registry):
        token = registry.register(3)

        assert registry.get(3) is token
        assert 3 in registry
        assert len(registry) == 1

    def test_register_twice_raises(self, registry):
        registry.register(3)

        with pytest.raises(RuntimeError, match="already running"):
            registry.register(3)

    def test_cancel(self, registry):
        token = registry.register(3)

        assert registry.cancel(3) is True
        assert token.should_continue is False

    def test_cancel_unknown_job(self, registry):
        assert registry.cancel(99) is False

    def test_remove(self, registry):
        registry.register(3)

        registry.remove(3)
        registry.remove(3)

        assert registry.get(3) is None
        assert 3 not in registry

    def test_cancel_all(self, registry):
        tokens = [registry.register(job_id) for job_id in (1, 2, 5)]

        assert registry.cancel_all() == 3
        assert not any(token.should_continue for token in tokens)
        assert registry.active_jobs() == [1, 2, 5]
