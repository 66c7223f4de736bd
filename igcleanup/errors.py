"""
Exception types raised across session, traversal and job execution.
"""
from typing import Optional


class InvalidInput(ValueError):
    """Cookie payload or job request failed validation."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class SessionInvalid(RuntimeError):
    """Injected cookies did not produce an authenticated session."""


class RequestFailed(RuntimeError):
    """Instagram web API answered with an error."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class LoginRequired(RequestFailed):
    """Session expired or was challenged (login_required, checkpoint)."""


class ActionBlocked(RequestFailed):
    """Instagram is throttling the account (429, feedback_required)."""


class PageFetchError(RuntimeError):
    """A feed page could not be fetched."""


class MutationError(RuntimeError):
    """An unlike or comment delete call failed; recorded against the item only."""
