"""
Job record store persisting jobs and settings to a JSON file.
"""
import json
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from config import settings
from igcleanup.models import Job, JobStatus, TargetType
from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)


class JobStore:
    """
    Durable keyed storage for job records and string settings.

    All reads and writes go through one re-entrant lock so the HTTP thread and
    the job runner loop can share an instance. Every mutation is written to
    disk with an atomic rename.
    """

    def __init__(self, store_path: Path):
        """
        Initialize JobStore.

        Args:
            store_path: Path to the JSON store file
        """
        self.store_path = Path(store_path)
        self.backup_path = self.store_path.with_suffix(".json.bak")
        self.temp_path = self.store_path.with_suffix(".json.tmp")
        self._lock = threading.RLock()
        self._data: Optional[Dict[str, Any]] = None

        # Ensure directory exists
        self.store_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"JobStore initialized with path: {self.store_path}")

    # Jobs

    def create_job(self, speed: int, target_type: TargetType = TargetType.LIKE) -> Job:
        """
        Create a job in pending state with a fresh integer id.

        Args:
            speed: Concurrency level (1-200)
            target_type: Which action the job performs

        Returns:
            The created Job
        """
        with self._lock:
            data = self._get_data()
            job_id = data["next_id"]
            data["next_id"] = job_id + 1

            job = Job(id=job_id, status=JobStatus.PENDING, target_type=target_type, speed=speed)
            data["jobs"][str(job_id)] = job.model_dump(mode="json")
            self._save()

        logger.info(f"Created job {job_id} (target={target_type.value}, speed={speed})")
        return job

    def get_job(self, job_id: int) -> Optional[Job]:
        """
        Get a job by id.

        Returns:
            Job snapshot, or None if unknown
        """
        with self._lock:
            record = self._get_data()["jobs"].get(str(job_id))
            if record is None:
                return None
            return Job.model_validate(record)

    def update_job(self, job_id: int, **fields: Any) -> Optional[Job]:
        """
        Update specific job fields.

        Args:
            job_id: Job id
            **fields: Job fields to update (snake_case names)

        Returns:
            Updated Job, or None if unknown
        """
        with self._lock:
            jobs = self._get_data()["jobs"]
            record = jobs.get(str(job_id))
            if record is None:
                logger.warning(f"Update for unknown job {job_id} ignored")
                return None

            job = Job.model_validate({**record, **fields})
            jobs[str(job_id)] = job.model_dump(mode="json")
            self._save()
            return job

    def transition(
        self, job_id: int, status: JobStatus, allowed_from: Iterable[JobStatus]
    ) -> Optional[Job]:
        """
        Move a job to status only if its current status is in allowed_from.

        Returns:
            Job after the call (unchanged if the transition was refused),
            or None if unknown
        """
        allowed = set(allowed_from)
        with self._lock:
            job = self.get_job(job_id)
            if job is None:
                return None

            if job.status not in allowed:
                logger.debug(
                    f"Job {job_id}: transition {job.status.value} -> {status.value} refused"
                )
                return job

            return self.update_job(job_id, status=status)

    def append_log(self, job_id: int, entry: str, max_logs: Optional[int] = None) -> None:
        """Append one log entry (see append_logs)."""
        self.append_logs(job_id, [entry], max_logs=max_logs)

    def append_logs(
        self, job_id: int, entries: list[str], max_logs: Optional[int] = None, **fields: Any
    ) -> Optional[Job]:
        """
        Append log entries and update fields in a single write.

        Only the most recent max_logs entries are kept.

        Args:
            job_id: Job id
            entries: Log lines (already timestamped), oldest first
            max_logs: Log cap (defaults to settings.MAX_JOB_LOGS)
            **fields: Other job fields to update (snake_case names)

        Returns:
            Updated Job, or None if unknown
        """
        max_logs = max_logs or settings.MAX_JOB_LOGS
        with self._lock:
            job = self.get_job(job_id)
            if job is None:
                return None

            if entries:
                fields["logs"] = [*job.logs, *entries][-max_logs:]
            return self.update_job(job_id, **fields)

    # Settings

    def get_setting(self, key: str) -> Optional[str]:
        with self._lock:
            return self._get_data()["settings"].get(key)

    def set_setting(self, key: str, value: str) -> None:
        with self._lock:
            self._get_data()["settings"][key] = value
            self._save()

    # Persistence

    def _get_data(self) -> Dict[str, Any]:
        if self._data is None:
            self._data = self._load() or self._default_data()
        return self._data

    def _load(self) -> Optional[Dict[str, Any]]:
        """
        Load store data, falling back to the previous version if needed.

        Returns:
            Store dictionary or None if neither file is usable
        """
        data = self._read(self.store_path)
        if data is None and self.backup_path.exists():
            logger.warning(f"Recovering store from backup {self.backup_path}")
            data = self._read(self.backup_path)
        return data

    def _read(self, path: Path) -> Optional[Dict[str, Any]]:
        if not path.exists():
            logger.debug(f"Store file {path} does not exist")
            return None

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupted JSON in store file {path}: {e}")
            return None
        except OSError as e:
            logger.error(f"Failed to load store file {path}: {e}")
            return None

        if not self._validate_data(data):
            logger.warning(f"Invalid store structure in {path}")
            return None

        logger.info(f"Store loaded from {path} ({len(data['jobs'])} jobs)")
        return data

    def _save(self) -> None:
        """
        Write store data to disk.

        The new content goes to a temp file; the current file is renamed to
        the backup path and the temp file renamed into place.
        """
        data = self._get_data()
        data["last_updated"] = datetime.now().isoformat()

        try:
            with open(self.temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)

            if self.store_path.exists():
                self.store_path.replace(self.backup_path)
            self.temp_path.replace(self.store_path)

        except OSError as e:
            logger.error(f"Failed to save store: {e}")
            # Keep running on the in-memory state

    def _default_data(self) -> Dict[str, Any]:
        return {
            "last_updated": datetime.now().isoformat(),
            "next_id": 1,
            "jobs": {},
            "settings": {},
        }

    def _validate_data(self, data: Any) -> bool:
        if not isinstance(data, dict):
            return False

        return (
            isinstance(data.get("next_id"), int)
            and isinstance(data.get("jobs"), dict)
            and isinstance(data.get("settings"), dict)
        )
