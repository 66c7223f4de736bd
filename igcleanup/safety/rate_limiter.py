"""
Speed-scaled delays applied between batches and feed pages.
"""
import asyncio
from typing import Optional, Sequence

from config import settings
from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)

DelayTiers = Sequence[tuple[int, float]]


class RateLimiter:
    """Self-throttle against abuse detection; delays shrink as speed grows."""

    def __init__(
        self,
        speed: int,
        batch_delay_tiers: Optional[DelayTiers] = None,
        page_delay_tiers: Optional[DelayTiers] = None,
    ):
        """
        Initialize RateLimiter.

        Args:
            speed: Job speed (1-200)
            batch_delay_tiers: (speed above, seconds) pairs for the pause after a batch
                (defaults to settings.BATCH_DELAY_TIERS)
            page_delay_tiers: (speed above, seconds) pairs for the pause between pages
                (defaults to settings.PAGE_DELAY_TIERS)
        """
        self.speed = speed
        self.batch_delay_tiers = (
            batch_delay_tiers if batch_delay_tiers is not None else settings.BATCH_DELAY_TIERS
        )
        self.page_delay_tiers = (
            page_delay_tiers if page_delay_tiers is not None else settings.PAGE_DELAY_TIERS
        )

        self.batches_waited = 0
        self.pages_waited = 0

        logger.debug(
            f"RateLimiter initialized: speed={speed}, batch_delay={self.batch_delay()}s, "
            f"page_delay={self.page_delay()}s"
        )

    def batch_delay(self) -> float:
        return self._delay_for(self.batch_delay_tiers)

    def page_delay(self) -> float:
        return self._delay_for(self.page_delay_tiers)

    async def wait_after_batch(self) -> None:
        """Pause after a batch of concurrent actions."""
        self.batches_waited += 1
        await asyncio.sleep(self.batch_delay())

    async def wait_between_pages(self) -> None:
        """Pause before fetching the next feed page."""
        self.pages_waited += 1
        await asyncio.sleep(self.page_delay())

    def get_stats(self) -> dict:
        return {
            "speed": self.speed,
            "batch_delay": self.batch_delay(),
            "page_delay": self.page_delay(),
            "batches_waited": self.batches_waited,
            "pages_waited": self.pages_waited,
        }

    def _delay_for(self, tiers: DelayTiers) -> float:
        for threshold, delay in tiers:
            if self.speed > threshold:
                return delay

        # Speed below every tier: use the slowest one
        return max((delay for _, delay in tiers), default=0.0)
