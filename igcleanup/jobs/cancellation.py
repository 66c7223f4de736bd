"""
Per-job cancellation tokens and the process-wide registry holding them.
"""
import threading
from typing import Optional

from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)


class CancellationToken:
    """Cooperative stop flag for one job, polled at batch and page boundaries."""

    def __init__(self, job_id: int):
        self.job_id = job_id
        self._stop = threading.Event()

    @property
    def should_continue(self) -> bool:
        return not self._stop.is_set()

    def cancel(self) -> None:
        self._stop.set()


class CancellationRegistry:
    """Maps job id to the token of the engine executing it."""

    def __init__(self):
        self._lock = threading.Lock()
        self._tokens: dict[int, CancellationToken] = {}

    def register(self, job_id: int) -> CancellationToken:
        """
        Create the token for a job about to run.

        Raises:
            RuntimeError: If the job already has an active token
        """
        with self._lock:
            if job_id in self._tokens:
                raise RuntimeError(f"Job {job_id} is already running")

            token = CancellationToken(job_id)
            self._tokens[job_id] = token

        logger.debug(f"Registered cancellation token for job {job_id}")
        return token

    def get(self, job_id: int) -> Optional[CancellationToken]:
        with self._lock:
            return self._tokens.get(job_id)

    def cancel(self, job_id: int) -> bool:
        """
        Signal a job to stop.

        Returns:
            True if the job had an active token, False otherwise
        """
        token = self.get(job_id)
        if token is None:
            return False

        token.cancel()
        logger.info(f"Stop signaled for job {job_id}")
        return True

    def cancel_all(self) -> int:
        with self._lock:
            tokens = list(self._tokens.values())

        for token in tokens:
            token.cancel()
        return len(tokens)

    def remove(self, job_id: int) -> None:
        with self._lock:
            self._tokens.pop(job_id, None)

        logger.debug(f"Removed cancellation token for job {job_id}")

    def active_jobs(self) -> list[int]:
        with self._lock:
            return sorted(self._tokens)

    def __contains__(self, job_id: int) -> bool:
        with self._lock:
            return job_id in self._tokens

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)
