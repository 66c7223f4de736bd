"""
Tests for JobStore class.
"""
import json
from unittest.mock import patch

import pytest

from igcleanup.models import ACTIVE_STATUSES, JobStatus, TargetType
from igcleanup.storage.job_store import JobStore


@pytest.mark.unit
class TestJobStoreInit:
    """Test JobStore.__init__() method."""

    def test_init_creates_directory(self, tmp_path):
        store_file = tmp_path / "subdir" / "jobs.json"
        assert not store_file.parent.exists()

        JobStore(store_file)

        assert store_file.parent.exists()

    def test_init_does_not_write_file(self, tmp_path):
        store_file = tmp_path / "jobs.json"

        JobStore(store_file)

        assert not store_file.exists()


@pytest.mark.unit
class TestJobStoreJobs:
    """Test job creation, lookup and updates."""

    def test_create_job_defaults(self, job_store):
        job = job_store.create_job(speed=5)

        assert job.id == 1
        assert job.status == JobStatus.PENDING
        assert job.target_type == TargetType.LIKE
        assert job.speed == 5
        assert job.total_to_process == 0
        assert job.total_unliked == 0
        assert job.total_skipped == 0
        assert job.total_errors == 0
        assert job.logs == []

    def test_create_job_ids_increment(self, job_store):
        first = job_store.create_job(speed=5)
        second = job_store.create_job(speed=10, target_type=TargetType.COMMENT)

        assert (first.id, second.id) == (1, 2)
        assert job_store.get_job(2).target_type == TargetType.COMMENT

    def test_get_unknown_job(self, job_store):
        assert job_store.get_job(99) is None

    def test_update_job(self, job_store):
        job = job_store.create_job(speed=5)

        updated = job_store.update_job(job.id, total_unliked=3, total_errors=1)

        assert updated.total_unliked == 3
        assert job_store.get_job(job.id).total_errors == 1

    def test_update_job_keeps_created_at(self, job_store):
        job = job_store.create_job(speed=5)

        updated = job_store.update_job(job.id, total_unliked=1)

        assert updated.created_at == job.created_at

    def test_update_unknown_job(self, job_store):
        assert job_store.update_job(7, total_unliked=1) is None

    def test_get_job_returns_snapshot(self, job_store):
        """Test mutating a returned Job does not change the store."""
        job = job_store.create_job(speed=5)
        job.logs.append("tampered")

        assert job_store.get_job(job.id).logs == []

    def test_persists_across_instances(self, tmp_path):
        store_file = tmp_path / "jobs.json"
        store = JobStore(store_file)
        job = store.create_job(speed=7, target_type=TargetType.COMMENT)
        store.update_job(job.id, status=JobStatus.RUNNING, total_unliked=4)
        store.set_setting("instagram_cookies", "[]")

        reloaded = JobStore(store_file)

        loaded = reloaded.get_job(job.id)
        assert loaded.status == JobStatus.RUNNING
        assert loaded.total_unliked == 4
        assert loaded.speed == 7
        assert reloaded.get_setting("instagram_cookies") == "[]"
        assert reloaded.create_job(speed=5).id == job.id + 1

    def test_corrupted_file_starts_empty(self, tmp_path):
        store_file = tmp_path / "jobs.json"
        store_file.write_text("{ not json", encoding="utf-8")

        store = JobStore(store_file)

        assert store.get_job(1) is None
        assert store.create_job(speed=5).id == 1

    def test_invalid_structure_starts_empty(self, tmp_path):
        store_file = tmp_path / "jobs.json"
        store_file.write_text(json.dumps({"jobs": []}), encoding="utf-8")

        store = JobStore(store_file)

        assert store.create_job(speed=5).id == 1

    def test_save_creates_backup(self, tmp_path):
        store_file = tmp_path / "jobs.json"
        store = JobStore(store_file)
        store.create_job(speed=5)
        store.create_job(speed=5)

        assert store_file.with_suffix(".json.bak").exists()
        assert not store_file.with_suffix(".json.tmp").exists()

    def test_corrupted_file_recovers_from_backup(self, tmp_path):
        """Test ids keep increasing when the main file is damaged."""
        store_file = tmp_path / "jobs.json"
        store = JobStore(store_file)
        store.create_job(speed=5)
        store.create_job(speed=5)
        store_file.write_text("{ truncated", encoding="utf-8")

        recovered = JobStore(store_file)

        assert recovered.get_job(1) is not None
        assert recovered.create_job(speed=5).id == 2


@pytest.mark.unit
class TestJobStoreTransition:
    """Test conditional status transitions."""

    def test_transition_allowed(self, job_store):
        job = job_store.create_job(speed=5)

        result = job_store.transition(job.id, JobStatus.RUNNING, {JobStatus.PENDING})

        assert result.status == JobStatus.RUNNING

    def test_transition_refused(self, job_store):
        job = job_store.create_job(speed=5)
        job_store.update_job(job.id, status=JobStatus.STOPPED)

        result = job_store.transition(job.id, JobStatus.RUNNING, {JobStatus.PENDING})

        assert result.status == JobStatus.STOPPED
        assert job_store.get_job(job.id).status == JobStatus.STOPPED

    def test_terminal_status_is_final(self, job_store):
        job = job_store.create_job(speed=5)
        job_store.transition(job.id, JobStatus.COMPLETED, ACTIVE_STATUSES)

        for status in (JobStatus.RUNNING, JobStatus.STOPPED, JobStatus.FAILED):
            job_store.transition(job.id, status, ACTIVE_STATUSES)

        assert job_store.get_job(job.id).status == JobStatus.COMPLETED

    def test_transition_unknown_job(self, job_store):
        assert job_store.transition(5, JobStatus.RUNNING, {JobStatus.PENDING}) is None


@pytest.mark.unit
class TestJobStoreLogs:
    """Test bounded job logs."""

    def test_append_log(self, job_store):
        job = job_store.create_job(speed=5)

        job_store.append_log(job.id, "[10:00:00] first")
        job_store.append_log(job.id, "[10:00:01] second")

        assert job_store.get_job(job.id).logs == ["[10:00:00] first", "[10:00:01] second"]

    def test_append_log_keeps_last_50(self, job_store):
        job = job_store.create_job(speed=5)

        for i in range(60):
            job_store.append_log(job.id, f"entry {i}")

        logs = job_store.get_job(job.id).logs
        assert len(logs) == 50
        assert logs[0] == "entry 10"
        assert logs[-1] == "entry 59"

    def test_append_log_custom_cap(self, job_store):
        job = job_store.create_job(speed=5)

        for i in range(5):
            job_store.append_log(job.id, f"entry {i}", max_logs=2)

        assert job_store.get_job(job.id).logs == ["entry 3", "entry 4"]

    def test_append_log_unknown_job(self, job_store):
        # Should not raise
        job_store.append_log(3, "orphan")


@pytest.mark.unit
class TestJobStoreSettings:
    """Test string settings."""

    def test_get_unset_setting(self, job_store):
        assert job_store.get_setting("instagram_cookies") is None

    def test_set_and_clear_setting(self, job_store):
        job_store.set_setting("instagram_cookies", '[{"name": "sessionid"}]')
        assert job_store.get_setting("instagram_cookies") == '[{"name": "sessionid"}]'

        job_store.set_setting("instagram_cookies", "")
        assert job_store.get_setting("instagram_cookies") == ""


@pytest.mark.unit
class TestJobStoreAppendLogs:
    """Test batched log and field writes."""

    def test_append_logs_with_fields_is_one_write(self, job_store):
        job = job_store.create_job(speed=5)

        with patch.object(job_store, "_save", wraps=job_store._save) as save:
            updated = job_store.append_logs(
                job.id, [f"entry {i}" for i in range(49)], total_unliked=49
            )

        assert save.call_count == 1
        assert updated.total_unliked == 49
        assert len(updated.logs) == 49

    def test_append_logs_cap(self, job_store):
        job = job_store.create_job(speed=5)
        job_store.append_logs(job.id, [f"old {i}" for i in range(40)])

        updated = job_store.append_logs(job.id, [f"new {i}" for i in range(20)])

        assert len(updated.logs) == 50
        assert updated.logs[0] == "old 10"
        assert updated.logs[-1] == "new 19"

    def test_append_logs_without_entries_keeps_logs(self, job_store):
        job = job_store.create_job(speed=5)
        job_store.append_log(job.id, "kept")

        updated = job_store.append_logs(job.id, [], total_errors=2)

        assert updated.logs == ["kept"]
        assert updated.total_errors == 2

    def test_append_logs_unknown_job(self, job_store):
        assert job_store.append_logs(9, ["x"]) is None
