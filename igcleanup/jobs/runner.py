"""
Background job runner hosting an asyncio event loop in a worker thread.
"""
import asyncio
import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from functools import partial
from typing import Callable, Optional

from igcleanup.jobs.cancellation import CancellationRegistry
from igcleanup.jobs.engine import JobEngine, SessionFactory
from igcleanup.models import Job
from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)

EngineFactory = Callable[..., JobEngine]


class JobRunner:
    """
    Runs job engines as fire-and-forget tasks on a dedicated event loop.

    Callers on other threads (the HTTP server) submit jobs and signal stops;
    no future is handed back to them.
    """

    def __init__(
        self,
        store,
        registry: Optional[CancellationRegistry] = None,
        session_factory: Optional[SessionFactory] = None,
        engine_factory: Optional[EngineFactory] = None,
    ):
        """
        Initialize JobRunner.

        Args:
            store: JobStore shared with the HTTP layer
            registry: Optional CancellationRegistry (a new one if None)
            session_factory: Optional session factory passed to every engine
            engine_factory: Optional JobEngine constructor override
        """
        self.store = store
        self.registry = registry or CancellationRegistry()
        self.session_factory = session_factory
        self.engine_factory = engine_factory or JobEngine

        self.loop: Optional[asyncio.AbstractEventLoop] = None
        self.thread: Optional[threading.Thread] = None
        self._futures: dict[int, Future] = {}
        self._lock = threading.Lock()

    def start(self) -> None:
        """Start the event loop thread (no-op if already running)."""
        with self._lock:
            if self.thread and self.thread.is_alive():
                return

            self.loop = asyncio.new_event_loop()
            self.thread = threading.Thread(target=self._run_loop, name="job-runner", daemon=True)
            self.thread.start()

        logger.info("Job runner started")

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self.loop)
        try:
            self.loop.run_forever()
        finally:
            self.loop.close()
            logger.debug("Job runner loop closed")

    @property
    def is_running(self) -> bool:
        return bool(self.thread and self.thread.is_alive())

    def submit(self, job: Job, cookie_json: str) -> None:
        """
        Schedule the engine for a freshly created job.

        The cancellation token is registered here, before the engine runs, so
        a stop arriving while the job is still pending is observed.

        Args:
            job: Job in pending state
            cookie_json: Raw cookie payload
        """
        if not self.is_running:
            self.start()

        self.registry.register(job.id)
        engine = self.engine_factory(
            self.store,
            job.id,
            cookie_json,
            speed=job.speed,
            target_type=job.target_type,
            registry=self.registry,
            session_factory=self.session_factory,
        )

        future = asyncio.run_coroutine_threadsafe(engine.run(), self.loop)
        with self._lock:
            self._futures[job.id] = future
        future.add_done_callback(partial(self._on_done, job.id))

        logger.info(f"Job {job.id} submitted (target={job.target_type.value}, speed={job.speed})")

    def stop_job(self, job_id: int) -> bool:
        """
        Signal a job to stop at its next batch or page boundary.

        Returns:
            True if the job was executing (or about to)
        """
        return self.registry.cancel(job_id)

    def wait(self, job_id: int, timeout: Optional[float] = None) -> bool:
        """
        Block until a submitted job's engine returns.

        Returns:
            True if the engine finished within timeout
        """
        with self._lock:
            future = self._futures.get(job_id)
        if future is None:
            return True

        try:
            future.result(timeout=timeout)
        except FutureTimeoutError:
            return False
        except Exception:
            # Already reported by _on_done
            pass
        return True

    def shutdown(self, timeout: float = 10.0) -> None:
        """Stop every active job, wait for the engines, then stop the loop."""
        cancelled = self.registry.cancel_all()
        if cancelled:
            logger.info(f"Stopping {cancelled} active jobs...")

        with self._lock:
            futures = list(self._futures.items())

        for job_id, future in futures:
            try:
                future.result(timeout=timeout)
            except FutureTimeoutError:
                logger.warning(f"Job {job_id} did not stop within {timeout}s, cancelling task")
                future.cancel()
            except Exception:
                pass

        if self.loop and self.is_running:
            self.loop.call_soon_threadsafe(self.loop.stop)
            self.thread.join(timeout=timeout)

        logger.info("Job runner stopped")

    def _on_done(self, job_id: int, future: Future) -> None:
        with self._lock:
            self._futures.pop(job_id, None)

        if future.cancelled():
            logger.warning(f"Job {job_id} task was cancelled")
            return

        error = future.exception()
        if error is not None:
            logger.error(f"Job {job_id} task ended with an unhandled error: {error}")
        else:
            logger.info(f"Job {job_id} finished with status {future.result().value}")
