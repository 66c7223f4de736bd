"""
Base target handler interface using Strategy pattern.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from igcleanup.models import TargetType


class Outcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ActionResult:
    """Outcome of one mutation (or of skipping an item) plus its log line."""

    outcome: Outcome
    message: str

    @classmethod
    def success(cls, message: str) -> "ActionResult":
        return cls(Outcome.SUCCESS, message)

    @classmethod
    def failure(cls, message: str) -> "ActionResult":
        return cls(Outcome.FAILURE, message)

    @classmethod
    def skipped(cls, message: str) -> "ActionResult":
        return cls(Outcome.SKIPPED, message)


class TargetHandler(ABC):
    """
    Abstract base class for the per-target-type job strategy.

    A handler supplies the feeds a job walks and the mutation applied to each
    item of those feeds.
    """

    target_type: TargetType
    # Every success/failure is logged below this speed, every Nth above it
    verbose_below_speed: int

    @abstractmethod
    def sources(self, session, account) -> list:
        """
        Feeds to traverse, in order.

        Args:
            session: Started InstagramSession
            account: Account the session belongs to

        Returns:
            List of Feed objects
        """

    @abstractmethod
    async def process_item(self, session, account, item: dict) -> list[ActionResult]:
        """
        Apply the mutation to one feed item.

        Failures are returned, never raised, so sibling items are unaffected.

        Args:
            session: Started InstagramSession
            account: Account the session belongs to
            item: Media record from a feed page

        Returns:
            One ActionResult per mutation attempted (or a single skip)
        """

    def is_verbose(self, speed: int) -> bool:
        return speed < self.verbose_below_speed
