"""
Error detector for Instagram API responses indicating blocks or expired sessions.
"""
from typing import Any, Optional

from igcleanup.errors import ActionBlocked, LoginRequired, RequestFailed
from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)


class ErrorDetector:
    """Classifies Instagram web API error responses."""

    BLOCK_INDICATORS = [
        "feedback_required",
        "Please wait a few minutes",
        "Try Again Later",
        "rate_limit_error",
        "spam",
    ]

    LOGIN_INDICATORS = [
        "login_required",
        "checkpoint_required",
        "challenge_required",
        "user_has_logged_out",
    ]

    def __init__(self, additional_indicators: Optional[list] = None):
        """
        Initialize ErrorDetector.

        Args:
            additional_indicators: Optional list of additional block indicators
        """
        self.block_indicators = self.BLOCK_INDICATORS.copy()
        if additional_indicators:
            self.block_indicators.extend(additional_indicators)

    def check_response(self, status: int, payload: Any) -> Optional[RequestFailed]:
        """
        Inspect a response and build the matching error, if any.

        Args:
            status: HTTP status code
            payload: Decoded JSON body (or raw text when not JSON)

        Returns:
            RequestFailed subclass instance, or None for a successful response
        """
        text = self._payload_text(payload)

        for indicator in self.LOGIN_INDICATORS:
            if indicator.lower() in text:
                logger.warning(f"Login required detected in response: '{indicator}'")
                return LoginRequired(f"Session rejected: {indicator}", status=status)

        if status == 429:
            logger.warning("Rate limit response (429)")
            return ActionBlocked("Rate limited by Instagram (429)", status=status)

        for indicator in self.block_indicators:
            if indicator.lower() in text:
                logger.warning(f"Action block detected in response: '{indicator}'")
                return ActionBlocked(f"Action blocked: {indicator}", status=status)

        if status in (401, 403):
            return LoginRequired(f"Session rejected (HTTP {status})", status=status)

        if status >= 400:
            return RequestFailed(self._message(payload) or f"HTTP {status}", status=status)

        if isinstance(payload, dict) and payload.get("status") == "fail":
            return RequestFailed(self._message(payload) or "Request failed", status=status)

        return None

    def _payload_text(self, payload: Any) -> str:
        if isinstance(payload, dict):
            parts = [str(payload.get(key, "")) for key in ("message", "error_type", "feedback_title")]
            return " ".join(parts).lower()
        return str(payload or "").lower()

    def _message(self, payload: Any) -> Optional[str]:
        if isinstance(payload, dict) and payload.get("message"):
            return str(payload["message"])
        return None
