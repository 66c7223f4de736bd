"""
Traversal engine walking one or more paginated feeds in order.
"""
from typing import AsyncGenerator, Optional

from igcleanup.errors import ActionBlocked, LoginRequired, PageFetchError
from igcleanup.traversal.pagination import Feed
from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)


class TraversalEngine:
    """
    Yields pages from a chain of feeds, switching to the next feed when one is
    exhausted.

    A feed is exhausted when a page comes back empty or the feed reports no
    further pages. A page fetch error ends the whole traversal: it usually
    means rate limiting or an expired session, so trying another feed would
    fail the same way.
    """

    def __init__(self, sources: list[Feed], token, rate_limiter, progress, logger_instance=None):
        """
        Initialize TraversalEngine.

        Args:
            sources: Feeds in traversal order
            token: CancellationToken polled between pages
            rate_limiter: RateLimiter providing the page delay
            progress: JobProgress receiving job log entries
            logger_instance: Optional logger instance
        """
        self.sources = sources
        self.token = token
        self.rate_limiter = rate_limiter
        self.progress = progress
        self.logger = logger_instance or logger

        self.exhausted = False
        self.fetch_error: Optional[PageFetchError] = None

    async def traverse(self) -> AsyncGenerator[dict, None]:
        """
        Generator over non-empty pages of every source.

        Yields:
            Dictionary with keys: feed, items, page_number, source_index
        """
        for index, feed in enumerate(self.sources):
            if not self.token.should_continue:
                return

            if index == 0:
                self.progress.log(f"Fetching {feed.name}...")
            else:
                self.progress.log(f"Switching to {feed.name}...")

            while self.token.should_continue:
                try:
                    items = await feed.items()
                except PageFetchError as e:
                    self.fetch_error = e
                    self.progress.log(self._feed_error_message(feed, e))
                    self.progress.record_error()
                    self.progress.flush()
                    return

                if not items:
                    self.progress.log(f"No more {feed.name} found.")
                    break

                yield {
                    "feed": feed,
                    "items": items,
                    "page_number": feed.pages_fetched,
                    "source_index": index,
                }

                if not self.token.should_continue:
                    return

                if not feed.is_more_available():
                    self.progress.log(f"Reached end of {feed.name}.")
                    break

                await self.rate_limiter.wait_between_pages()

        if self.token.should_continue:
            self.exhausted = True
            self.logger.debug(f"All {len(self.sources)} sources exhausted")

    def _feed_error_message(self, feed: Feed, error: PageFetchError) -> str:
        cause = error.__cause__
        if isinstance(cause, ActionBlocked):
            return f"Feed error: rate limited by Instagram while loading {feed.name} ({error})"
        if isinstance(cause, LoginRequired):
            return f"Feed error: session expired while loading {feed.name} ({error})"
        return f"Feed error: {error}"
