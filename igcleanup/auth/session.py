"""
Account session adapter: cookie injection and Instagram web API calls over Playwright.
"""
from dataclasses import dataclass
from typing import Any, Optional

from playwright.async_api import APIRequestContext, APIResponse, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from config import settings
from igcleanup.auth.cookie_manager import CookieManager
from igcleanup.errors import LoginRequired, MutationError, RequestFailed
from igcleanup.safety.error_detector import ErrorDetector
from igcleanup.traversal.pagination import Feed
from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)

CURRENT_USER_PATH = "/api/v1/accounts/current_user/"
LIKED_FEED_PATH = "/api/v1/feed/liked/"
USER_FEED_PATH = "/api/v1/feed/user/{user_pk}/"
UNLIKE_PATH = "/api/v1/web/likes/{media_pk}/unlike/"
COMMENTS_PATH = "/api/v1/media/{media_pk}/comments/"
DELETE_COMMENT_PATH = "/api/v1/web/comments/{media_pk}/delete/{comment_pk}/"
LOGIN_PAGE_PATH = "/accounts/login/"


@dataclass(frozen=True)
class Account:
    """The account the injected cookies belong to."""

    pk: str
    username: str


def media_pk(media: dict) -> str:
    """Numeric media id of a feed item ("<pk>_<owner>" ids are split)."""
    if media.get("pk"):
        return str(media["pk"])
    return str(media["id"]).split("_")[0]


def media_url(media: dict) -> str:
    code = media.get("code")
    if code:
        return f"{settings.INSTAGRAM_BASE_URL}/p/{code}/"
    return f"{settings.INSTAGRAM_BASE_URL}/p/{media_pk(media)}/"


def media_author(media: dict) -> str:
    user = media.get("user") or {}
    return user.get("username") or "unknown"


class InstagramSession:
    """Authenticated Instagram web session built from exported browser cookies."""

    def __init__(
        self,
        cookies: list[Any],
        cookie_manager: Optional[CookieManager] = None,
        error_detector: Optional[ErrorDetector] = None,
        timeout: Optional[int] = None,
        logger_instance=None,
    ):
        """
        Initialize InstagramSession.

        Args:
            cookies: Parsed cookie array (records for other domains are ignored)
            cookie_manager: Optional CookieManager instance
            error_detector: Optional ErrorDetector instance
            timeout: Request timeout in milliseconds (defaults to settings.REQUEST_TIMEOUT_MS)
            logger_instance: Optional logger instance
        """
        self.cookie_manager = cookie_manager or CookieManager()
        self.error_detector = error_detector or ErrorDetector()
        self.timeout = timeout or settings.REQUEST_TIMEOUT_MS
        self.logger = logger_instance or logger

        self.cookies = self.cookie_manager.filter_cookies(cookies)
        self.playwright: Optional[Playwright] = None
        self.request: Optional[APIRequestContext] = None

    async def start(self) -> "InstagramSession":
        """
        Create the request context with the cookies injected.

        Returns:
            self, for chaining
        """
        all_present, missing = self.cookie_manager.check_required_cookies(self.cookies)
        if not all_present:
            # Identity confirmation decides; a partial export may still work
            self.logger.warning(f"Cookie export lacks {missing}, session may be rejected")

        headers = {
            "X-IG-App-ID": settings.INSTAGRAM_APP_ID,
            "X-Requested-With": "XMLHttpRequest",
            "Referer": f"{settings.INSTAGRAM_BASE_URL}/",
        }
        csrf_token = self.cookie_manager.get_cookie_value("csrftoken", self.cookies)
        if csrf_token:
            headers["X-CSRFToken"] = csrf_token

        try:
            self.playwright = await async_playwright().start()
            self.request = await self.playwright.request.new_context(
                base_url=settings.INSTAGRAM_BASE_URL,
                extra_http_headers=headers,
                user_agent=settings.USER_AGENT,
                storage_state=self.cookie_manager.get_storage_state(self.cookies),
                timeout=self.timeout,
            )
        except PlaywrightError:
            await self.close()
            raise

        self.logger.info(f"Request context created with {len(self.cookies)} cookies")
        return self

    async def close(self) -> None:
        """Dispose of the request context and stop Playwright."""
        try:
            if self.request:
                await self.request.dispose()
                self.request = None
                self.logger.debug("Request context disposed")
        except PlaywrightError as e:
            self.logger.debug(f"Error disposing request context: {e}")

        try:
            if self.playwright:
                await self.playwright.stop()
                self.playwright = None
                self.logger.debug("Playwright stopped")
        except PlaywrightError as e:
            self.logger.debug(f"Error stopping playwright: {e}")

    async def __aenter__(self) -> "InstagramSession":
        return await self.start()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.close()
        return False

    # Account

    async def current_user(self) -> Account:
        """Identity call; raises RequestFailed when the cookies are not accepted."""
        data = await self.get_json(CURRENT_USER_PATH, params={"edit": "true"})
        user = data.get("user") or {}
        if not user.get("pk") and not user.get("pk_id"):
            raise RequestFailed("Current user response has no account id")

        return Account(pk=str(user.get("pk") or user.get("pk_id")), username=user.get("username", ""))

    # Feeds

    def liked_feed(self) -> Feed:
        return Feed(self, LIKED_FEED_PATH, name="liked posts")

    def timeline_feed(self, user_pk: str) -> Feed:
        return Feed(self, USER_FEED_PATH.format(user_pk=user_pk), name="timeline posts")

    # Mutations

    async def unlike(self, media: dict) -> None:
        try:
            await self.post_form(UNLIKE_PATH.format(media_pk=media_pk(media)))
        except (RequestFailed, PlaywrightError) as e:
            raise MutationError(str(e)) from e

    async def media_comments(self, media: dict) -> list[dict]:
        data = await self.get_json(
            COMMENTS_PATH.format(media_pk=media_pk(media)), params={"can_support_threading": "true"}
        )
        return list(data.get("comments") or [])

    async def delete_comment(self, media: dict, comment: dict) -> None:
        path = DELETE_COMMENT_PATH.format(media_pk=media_pk(media), comment_pk=comment["pk"])
        try:
            await self.post_form(path)
        except (RequestFailed, PlaywrightError) as e:
            raise MutationError(str(e)) from e

    # Transport

    async def get_json(self, path: str, params: Optional[dict] = None) -> dict:
        request = self._require_context()
        response = await request.get(path, params=params)
        return await self._handle_response(response)

    async def post_form(self, path: str, form: Optional[dict] = None) -> dict:
        request = self._require_context()
        response = await request.post(path, form=form or {})
        data = await self._handle_response(response)
        if data.get("status") != "ok":
            raise RequestFailed(f"Unconfirmed response from {path}", status=response.status)
        return data

    async def _handle_response(self, response: APIResponse) -> dict:
        try:
            payload: Any = await response.json()
        except (PlaywrightError, ValueError):
            payload = await response.text()

        error = self.error_detector.check_response(response.status, payload)
        if error is not None:
            self.logger.debug(f"{response.url} -> {response.status}: {error}")
            raise error

        if not isinstance(payload, dict):
            # HTML instead of JSON: usually the login page of an expired session
            if LOGIN_PAGE_PATH in str(response.url):
                raise LoginRequired("Redirected to the login page", status=response.status)
            raise RequestFailed(f"Non-JSON response (HTTP {response.status})", status=response.status)

        return payload

    def _require_context(self) -> APIRequestContext:
        if self.request is None:
            raise RuntimeError("Session not started. Call start() first.")
        return self.request
