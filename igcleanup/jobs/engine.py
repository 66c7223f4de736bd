"""
Job engine: the full lifecycle of one unlike / comment cleanup run.
"""
import asyncio
from typing import Callable, Optional

from igcleanup.auth.cookie_manager import CookieManager
from igcleanup.auth.session import InstagramSession
from igcleanup.auth.session_validator import SessionValidator
from igcleanup.deletion.deletion_engine import DeletionEngine
from igcleanup.deletion.handlers import TargetHandler, get_handler
from igcleanup.errors import SessionInvalid
from igcleanup.jobs.cancellation import CancellationRegistry
from igcleanup.jobs.progress import JobProgress
from igcleanup.models import ACTIVE_STATUSES, JobStatus, TargetType
from igcleanup.safety.rate_limiter import RateLimiter
from igcleanup.traversal.traversal_engine import TraversalEngine
from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)

SessionFactory = Callable[[list], InstagramSession]


class JobEngine:
    """
    Executes one job from pending to a terminal status.

    run() is the error boundary of the background task: it never raises
    (except for task cancellation) and records every outcome in the store.
    """

    def __init__(
        self,
        store,
        job_id: int,
        cookie_json: str,
        speed: int,
        target_type: TargetType,
        registry: CancellationRegistry,
        session_factory: Optional[SessionFactory] = None,
        handler: Optional[TargetHandler] = None,
        rate_limiter: Optional[RateLimiter] = None,
        session_validator: Optional[SessionValidator] = None,
        logger_instance=None,
    ):
        """
        Initialize JobEngine.

        Args:
            store: JobStore holding the job record
            job_id: Id of a job created in pending state
            cookie_json: Raw cookie payload as submitted
            speed: Concurrency level (1-200)
            target_type: like or comment
            registry: CancellationRegistry; a token is registered if the job has none
            session_factory: Builds an unstarted session from parsed cookies
                (defaults to InstagramSession)
            handler: Optional TargetHandler (defaults to get_handler(target_type))
            rate_limiter: Optional RateLimiter (defaults to speed-scaled tiers)
            session_validator: Optional SessionValidator instance
            logger_instance: Optional logger instance
        """
        self.store = store
        self.job_id = job_id
        self.cookie_json = cookie_json
        self.speed = speed
        self.target_type = TargetType(target_type)
        self.registry = registry
        self.session_factory = session_factory or InstagramSession
        self.handler = handler or get_handler(self.target_type)
        self.rate_limiter = rate_limiter or RateLimiter(speed)
        self.session_validator = session_validator or SessionValidator()
        self.logger = logger_instance or logger

        self.token = registry.get(job_id) or registry.register(job_id)
        self.progress = JobProgress(store, job_id)

    async def run(self) -> JobStatus:
        """
        Run the job to a terminal status.

        Returns:
            Final recorded JobStatus
        """
        try:
            if not self.token.should_continue:
                self.logger.info(f"Job {self.job_id} stopped before it started")
                return self._resolve_stopped()

            job = self.store.transition(self.job_id, JobStatus.RUNNING, {JobStatus.PENDING})
            if job is None or job.status != JobStatus.RUNNING:
                self.logger.warning(f"Job {self.job_id} is not pending, engine not started")
                return job.status if job else JobStatus.FAILED

            self.progress.log(f"Starting automation with speed {self.speed}...")

            cookies = CookieManager.parse(self.cookie_json)
            async with self.session_factory(cookies) as session:
                self.progress.log("Cookies loaded. Verifying session...")
                try:
                    account = await self.session_validator.validate_session(session)
                except SessionInvalid:
                    self.progress.log(
                        "Session verification failed. Cookies might be invalid or expired."
                    )
                    raise

                self.progress.log(f"Logged in as {account.username}")
                await self._process(session, account)

            return self._resolve()

        except asyncio.CancelledError:
            self.logger.warning(f"Job {self.job_id} task cancelled")
            self.progress.log("Job cancelled.")
            self.store.transition(self.job_id, JobStatus.STOPPED, ACTIVE_STATUSES)
            raise

        except Exception as e:
            self.logger.error(f"Job {self.job_id} failed: {e}", exc_info=True)
            self.progress.log(f"Critical error: {e}")
            job = self.store.transition(self.job_id, JobStatus.FAILED, ACTIVE_STATUSES)
            return job.status if job else JobStatus.FAILED

        finally:
            self.registry.remove(self.job_id)

    async def _process(self, session, account) -> None:
        """Walk the handler's sources and mutate every page in batches."""
        traversal = TraversalEngine(
            self.handler.sources(session, account),
            token=self.token,
            rate_limiter=self.rate_limiter,
            progress=self.progress,
        )
        deletion_engine = DeletionEngine(
            session,
            account,
            self.handler,
            speed=self.speed,
            token=self.token,
            progress=self.progress,
            rate_limiter=self.rate_limiter,
        )

        async for page in traversal.traverse():
            items = page["items"]
            self.progress.set_estimate(len(items), page["feed"].is_more_available())
            self.progress.log(
                f"Processing batch of {len(items)} posts concurrently (Speed: {self.speed})..."
            )
            await deletion_engine.process_page(items)

        await asyncio.to_thread(self.progress.flush)

    def _resolve(self) -> JobStatus:
        """Terminal status after traversal: stop wins over natural completion."""
        if not self.token.should_continue:
            return self._resolve_stopped()

        self.progress.log(f"Job completed. {self.progress.summary()}.")
        job = self.store.transition(self.job_id, JobStatus.COMPLETED, {JobStatus.RUNNING})
        return job.status if job else JobStatus.COMPLETED

    def _resolve_stopped(self) -> JobStatus:
        self.progress.log(f"Job stopped. {self.progress.summary()}.")
        job = self.store.transition(self.job_id, JobStatus.STOPPED, ACTIVE_STATUSES)
        return job.status if job else JobStatus.STOPPED
