"""
Paginated Instagram feeds (max_id cursor pagination).
"""
from typing import Optional

from igcleanup.errors import PageFetchError
from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)


class Feed:
    """Lazily fetched feed of media items, one page per items() call."""

    def __init__(self, session, path: str, name: str = "feed", params: Optional[dict] = None):
        """
        Initialize Feed.

        Args:
            session: Object exposing get_json(path, params)
            path: Feed endpoint path
            name: Human-readable name used in job logs
            params: Extra query parameters sent with every page request
        """
        self.session = session
        self.path = path
        self.name = name
        self.params = params or {}

        self.next_max_id: Optional[str] = None
        self.more_available = True
        self.pages_fetched = 0

    async def items(self) -> list[dict]:
        """
        Fetch the next page.

        Returns:
            Media items of the page (empty once the feed is exhausted)

        Raises:
            PageFetchError: If the page request fails
        """
        if not self.more_available:
            return []

        params = dict(self.params)
        if self.next_max_id:
            params["max_id"] = self.next_max_id

        try:
            data = await self.session.get_json(self.path, params=params or None)
        except Exception as e:
            logger.error(f"Failed to fetch page {self.pages_fetched + 1} of {self.name}: {e}")
            raise PageFetchError(str(e)) from e

        self.pages_fetched += 1
        self.next_max_id = data.get("next_max_id")
        self.more_available = bool(data.get("more_available")) and bool(self.next_max_id)

        items = list(data.get("items") or [])
        logger.debug(
            f"{self.name}: page {self.pages_fetched} has {len(items)} items "
            f"(more_available={self.more_available})"
        )
        return items

    def is_more_available(self) -> bool:
        return self.more_available
