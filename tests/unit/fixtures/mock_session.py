"""
Fake Instagram session and feed fixtures.

FakeSession implements the session interface the job engine uses
(async context manager, current_user, feeds, unlike, comments) without any
network access.
"""
from typing import Callable, Optional

import pytest

from igcleanup.auth.session import Account
from igcleanup.errors import LoginRequired, MutationError, PageFetchError, RequestFailed

TEST_ACCOUNT = Account(pk="42", username="tester")


def make_media(pk, username: str = "author") -> dict:
    """Media record shaped like an Instagram feed item."""
    return {
        "pk": str(pk),
        "id": f"{pk}_99",
        "code": f"C{pk}",
        "user": {"pk": "99", "username": username},
    }


def make_page(start: int, count: int, username: str = "author") -> list[dict]:
    return [make_media(pk, username) for pk in range(start, start + count)]


def make_comment(pk, user_pk: str = TEST_ACCOUNT.pk, username: str = TEST_ACCOUNT.username) -> dict:
    return {"pk": str(pk), "user_id": user_pk, "user": {"pk": user_pk, "username": username}}


class FakeFeed:
    """Feed returning predefined pages; optionally raises on one page."""

    def __init__(
        self,
        pages: list[list[dict]],
        name: str = "liked posts",
        fail_on_page: Optional[int] = None,
        fail_cause: Optional[Exception] = None,
        on_fetch: Optional[Callable[["FakeFeed"], None]] = None,
    ):
        self.pages = list(pages)
        self.name = name
        self.fail_on_page = fail_on_page
        self.fail_cause = fail_cause
        self.on_fetch = on_fetch
        self.pages_fetched = 0
        self.fetch_calls = 0
        self.more_available = True

    async def items(self) -> list[dict]:
        self.fetch_calls += 1
        if self.on_fetch:
            self.on_fetch(self)

        if self.fail_on_page is not None and self.pages_fetched + 1 == self.fail_on_page:
            raise PageFetchError("Please wait a few minutes before you try again.") from self.fail_cause

        if self.pages_fetched >= len(self.pages):
            self.more_available = False
            return []

        page = self.pages[self.pages_fetched]
        self.pages_fetched += 1
        self.more_available = self.pages_fetched < len(self.pages)
        return list(page)

    def is_more_available(self) -> bool:
        return self.more_available


class FakeSession:
    """In-memory stand-in for InstagramSession."""

    def __init__(
        self,
        liked_feed: Optional[FakeFeed] = None,
        timeline_feed: Optional[FakeFeed] = None,
        account: Account = TEST_ACCOUNT,
        fail_login: bool = False,
        failing_media: Optional[set] = None,
        comments: Optional[dict] = None,
        failing_comments: Optional[set] = None,
        on_unlike: Optional[Callable[[dict], None]] = None,
    ):
        self._liked_feed = liked_feed or FakeFeed([], name="liked posts")
        self._timeline_feed = timeline_feed or FakeFeed([], name="timeline posts")
        self.account = account
        self.fail_login = fail_login
        self.failing_media = failing_media or set()
        self.comments = comments or {}
        self.failing_comments = failing_comments or set()
        self.on_unlike = on_unlike

        self.started = False
        self.closed = False
        self.unliked: list[str] = []
        self.deleted_comments: list[tuple[str, str]] = []
        self.timeline_user_pk: Optional[str] = None

    async def __aenter__(self) -> "FakeSession":
        self.started = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.closed = True
        return False

    async def current_user(self) -> Account:
        if self.fail_login:
            raise LoginRequired("Session rejected: login_required", status=403)
        return self.account

    def liked_feed(self) -> FakeFeed:
        return self._liked_feed

    def timeline_feed(self, user_pk: str) -> FakeFeed:
        self.timeline_user_pk = user_pk
        return self._timeline_feed

    async def unlike(self, media: dict) -> None:
        if self.on_unlike:
            self.on_unlike(media)
        if media["pk"] in self.failing_media:
            raise MutationError("Sorry, this media has been deleted")
        self.unliked.append(media["pk"])

    async def media_comments(self, media: dict) -> list[dict]:
        if media["pk"] in self.failing_media:
            raise RequestFailed("Media not found", status=404)
        return list(self.comments.get(media["pk"], []))

    async def delete_comment(self, media: dict, comment: dict) -> None:
        if comment["pk"] in self.failing_comments:
            raise MutationError("Could not delete comment")
        self.deleted_comments.append((media["pk"], comment["pk"]))


@pytest.fixture
def test_account():
    return TEST_ACCOUNT


@pytest.fixture
def fake_session():
    """FakeSession with one liked page of three posts."""
    return FakeSession(liked_feed=FakeFeed([make_page(1, 3)]))
