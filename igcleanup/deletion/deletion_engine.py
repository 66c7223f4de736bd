"""
Deletion engine running a target handler over feed pages in concurrent batches.
"""
import asyncio
from typing import Any, Dict

from igcleanup.deletion.handlers import ActionResult, TargetHandler
from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)


class DeletionEngine:
    """Processes a page of feed items in batches of `speed` concurrent actions."""

    def __init__(
        self,
        session,
        account,
        handler: TargetHandler,
        speed: int,
        token,
        progress,
        rate_limiter,
        logger_instance=None,
    ):
        """
        Initialize DeletionEngine.

        Args:
            session: Started InstagramSession
            account: Account the session belongs to
            handler: TargetHandler applied to each item
            speed: Batch size (concurrent actions per batch)
            token: CancellationToken checked before every batch
            progress: JobProgress receiving counters and log entries
            rate_limiter: RateLimiter providing the post-batch delay
            logger_instance: Optional logger instance
        """
        self.session = session
        self.account = account
        self.handler = handler
        self.speed = max(1, speed)
        self.token = token
        self.progress = progress
        self.rate_limiter = rate_limiter
        self.logger = logger_instance or logger

        self.verbose = handler.is_verbose(self.speed)

    async def process_page(self, items: list[dict]) -> Dict[str, Any]:
        """
        Process all items of one page.

        The cancellation token is checked before each batch; a batch already
        dispatched always runs to completion.

        Args:
            items: Media records of the page

        Returns:
            Dictionary with statistics: {'batches': int, 'items': int, 'cancelled': bool}
        """
        stats: Dict[str, Any] = {"batches": 0, "items": 0, "cancelled": False}

        for start in range(0, len(items), self.speed):
            if not self.token.should_continue:
                self.logger.info(
                    f"Stop requested, skipping {len(items) - start} remaining items on page"
                )
                stats["cancelled"] = True
                break

            batch = items[start : start + self.speed]
            await asyncio.gather(*(self._process_item(item) for item in batch))

            stats["batches"] += 1
            stats["items"] += len(batch)

            # One store write per batch, off the event loop
            await asyncio.to_thread(self.progress.flush)
            await self.rate_limiter.wait_after_batch()

        self.logger.debug(
            f"Page processing complete: {stats['items']}/{len(items)} items "
            f"in {stats['batches']} batches"
        )
        return stats

    async def _process_item(self, item: dict) -> None:
        """Run the handler for one item and record every outcome."""
        try:
            results = await self.handler.process_item(self.session, self.account, item)
        except Exception as e:
            # Handlers report failures as results; this only guards against bugs
            self.logger.error(f"Unexpected error processing item {item.get('id')}: {e}")
            results = [ActionResult.failure(f"[ERROR] Unexpected error: {e}")]

        for result in results:
            self.progress.record(result, verbose=self.verbose)
