"""
Cookie management module for parsing and filtering exported Instagram cookies.
"""
import json
from typing import Any, Optional

from config import settings
from igcleanup.errors import InvalidInput
from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)

# Cookies Instagram needs for an authenticated web session
REQUIRED_COOKIES = ["sessionid", "csrftoken"]


class CookieManager:
    """Parses a browser cookie export and prepares it for session injection."""

    def __init__(self, domains: Optional[list[str]] = None):
        """
        Initialize CookieManager.

        Args:
            domains: Cookie domains accepted for injection (defaults to settings.INSTAGRAM_DOMAINS)
        """
        self.domains = domains or settings.INSTAGRAM_DOMAINS

    @staticmethod
    def parse(cookie_json: str) -> list[Any]:
        """
        Parse the raw cookie payload.

        Safe to call more than once on the same payload.

        Args:
            cookie_json: String expected to hold a JSON array of cookie records

        Returns:
            The parsed array

        Raises:
            InvalidInput: If the string is not JSON or not a JSON array
        """
        try:
            cookies = json.loads(cookie_json)
        except (TypeError, ValueError) as e:
            raise InvalidInput("Invalid JSON format for cookies", field="cookies") from e

        if not isinstance(cookies, list):
            raise InvalidInput("Cookies must be a JSON array", field="cookies")

        return cookies

    def matches_domain(self, cookie: dict) -> bool:
        """Check if a cookie belongs to the target site (exact or leading-dot domain)."""
        return cookie.get("domain") in self.domains

    def filter_cookies(self, cookies: list[Any]) -> list[dict]:
        """
        Keep only well-formed cookie records for the target site.

        Records for other domains, or missing a name or value, are dropped.

        Args:
            cookies: Parsed cookie array

        Returns:
            List of cookie dictionaries
        """
        kept = []
        for i, cookie in enumerate(cookies):
            if not isinstance(cookie, dict):
                logger.debug(f"Cookie at index {i} is not an object, ignored")
                continue

            if not self.matches_domain(cookie):
                continue

            if not cookie.get("name") or cookie.get("value") is None:
                logger.debug(f"Cookie at index {i} missing name or value, ignored")
                continue

            kept.append(cookie)

        logger.debug(f"Kept {len(kept)} of {len(cookies)} cookies for injection")
        return kept

    def check_required_cookies(self, cookies: list[dict]) -> tuple[bool, list[str]]:
        """
        Check if the cookies an authenticated session needs are present.

        Returns:
            Tuple of (all_present: bool, missing_cookies: list[str])
        """
        cookie_names = {cookie.get("name") for cookie in cookies}
        missing = [name for name in REQUIRED_COOKIES if name not in cookie_names]

        if missing:
            logger.warning(f"Missing required cookies: {missing}")
            return False, missing

        return True, []

    def get_cookie_value(self, name: str, cookies: list[dict]) -> Optional[str]:
        """
        Extract value of a specific cookie by name.

        Returns:
            Cookie value if found, None otherwise
        """
        for cookie in cookies:
            if cookie.get("name") == name:
                return str(cookie.get("value"))

        logger.debug(f"Cookie '{name}' not found")
        return None

    def get_storage_state(self, cookies: list[dict]) -> dict:
        """
        Convert filtered cookies to Playwright storage_state format.

        Args:
            cookies: Cookies returned by filter_cookies()

        Returns:
            Dictionary ready for the storage_state parameter of a request context
        """
        state_cookies = []
        for cookie in cookies:
            state_cookies.append(
                {
                    "name": str(cookie["name"]),
                    "value": str(cookie["value"]),
                    "domain": cookie["domain"],
                    "path": cookie.get("path") or "/",
                    "expires": float(cookie.get("expirationDate", cookie.get("expires", -1)) or -1),
                    "httpOnly": bool(cookie.get("httpOnly", False)),
                    "secure": bool(cookie.get("secure", True)),
                    "sameSite": _same_site(cookie.get("sameSite")),
                }
            )

        return {"cookies": state_cookies, "origins": []}


def _same_site(value: Any) -> str:
    """Map browser-extension sameSite values onto Playwright's Strict/Lax/None."""
    if not isinstance(value, str):
        return "Lax"

    normalized = value.lower()
    if normalized == "strict":
        return "Strict"
    if normalized in ("none", "no_restriction"):
        return "None"
    return "Lax"
