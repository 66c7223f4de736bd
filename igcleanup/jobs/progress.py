"""
Job progress tracking: counters, throttled job logs and persistence.
"""
from datetime import datetime
from typing import Optional

from config import settings
from igcleanup.deletion.handlers import ActionResult, Outcome
from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)


class JobProgress:
    """
    In-memory counters and log writer for one running job.

    Counters only ever grow. Per-item results are buffered and written together
    with the counters by flush(), which the engine calls once per batch.
    Lifecycle messages from log() are written immediately, after any buffered
    entries.
    """

    def __init__(
        self,
        store,
        job_id: int,
        max_logs: Optional[int] = None,
        log_every: Optional[int] = None,
        logger_instance=None,
    ):
        """
        Initialize JobProgress.

        Args:
            store: JobStore holding the job record
            job_id: Job id
            max_logs: Job log cap (defaults to settings.MAX_JOB_LOGS)
            log_every: Throttled logging interval (defaults to settings.LOG_EVERY_N)
            logger_instance: Optional logger instance
        """
        self.store = store
        self.job_id = job_id
        self.max_logs = max_logs or settings.MAX_JOB_LOGS
        self.log_every = log_every or settings.LOG_EVERY_N
        self.logger = logger_instance or logger

        self.processed = 0
        self.skipped = 0
        self.errors = 0
        self.total_to_process = 0
        self._pending_logs: list[str] = []

    def log(self, message: str) -> None:
        """Write a timestamped entry to the job log now."""
        self._buffer(message)
        entries, self._pending_logs = self._pending_logs, []
        self.store.append_logs(self.job_id, entries, max_logs=self.max_logs)

    def _buffer(self, message: str) -> None:
        self._pending_logs.append(f"[{datetime.now().strftime('%H:%M:%S')}] {message}")
        self.logger.info(f"Job {self.job_id}: {message}")

    def record(self, result: ActionResult, verbose: bool) -> None:
        """
        Count one action outcome and log it (every one if verbose, else every Nth).

        Args:
            result: Outcome reported by a target handler
            verbose: Log every success/failure instead of every Nth
        """
        if result.outcome == Outcome.SUCCESS:
            self.processed += 1
            if verbose or self.processed % self.log_every == 0:
                self._buffer(result.message)

        elif result.outcome == Outcome.FAILURE:
            self.errors += 1
            if verbose or self.errors % self.log_every == 0:
                self._buffer(result.message)

        else:
            self.skipped += 1
            self.logger.debug(f"Job {self.job_id}: {result.message}")

    def record_error(self) -> None:
        self.errors += 1

    def set_estimate(self, page_items: int, more_available: bool) -> bool:
        """
        Set totalToProcess from the first non-empty page; later calls are ignored.

        Returns:
            True if the estimate was set by this call
        """
        if self.total_to_process:
            return False

        self.total_to_process = page_items + (settings.ESTIMATE_LOOKAHEAD if more_available else 0)
        self.store.update_job(self.job_id, total_to_process=self.total_to_process)
        self.logger.debug(f"Job {self.job_id}: estimated {self.total_to_process} items")
        return True

    def flush(self) -> None:
        """Persist the counters and buffered log entries in one write."""
        entries, self._pending_logs = self._pending_logs, []
        self.store.append_logs(
            self.job_id,
            entries,
            max_logs=self.max_logs,
            total_unliked=self.processed,
            total_skipped=self.skipped,
            total_errors=self.errors,
        )

    def summary(self) -> str:
        return f"{self.processed} processed, {self.skipped} skipped, {self.errors} errors"
