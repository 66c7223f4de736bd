"""
Session validation module for confirming which account the cookies belong to.
"""
from igcleanup.errors import SessionInvalid
from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)


class SessionValidator:
    """Validates an Instagram session with a single identity call."""

    async def validate_session(self, session):
        """
        Confirm the session is authenticated.

        Args:
            session: Started InstagramSession (or any object with current_user())

        Returns:
            Account the session belongs to

        Raises:
            SessionInvalid: If the identity call fails for any reason
        """
        logger.info("Validating Instagram session...")

        try:
            account = await session.current_user()
        except Exception as e:
            logger.warning(f"Session validation failed: {e}")
            raise SessionInvalid(f"Session verification failed: {e}") from e

        logger.info(f"Session validation successful: @{account.username}")
        return account
