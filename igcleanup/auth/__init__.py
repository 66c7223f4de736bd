"""
Authentication and session management modules.
"""
from igcleanup.auth.cookie_manager import CookieManager
from igcleanup.auth.session import Account, InstagramSession
from igcleanup.auth.session_validator import SessionValidator

__all__ = ["CookieManager", "SessionValidator", "InstagramSession", "Account"]
