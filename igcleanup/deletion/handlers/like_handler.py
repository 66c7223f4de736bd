"""
Unlike handler for previously liked Instagram posts.
"""
from config import settings
from igcleanup.auth.session import media_author, media_url
from igcleanup.deletion.handlers.base_handler import ActionResult, TargetHandler
from igcleanup.models import TargetType
from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)


class UnlikeHandler(TargetHandler):
    """Walks the liked-media feed and unlikes every post."""

    target_type = TargetType.LIKE
    verbose_below_speed = settings.LIKE_VERBOSE_BELOW_SPEED

    def sources(self, session, account) -> list:
        return [session.liked_feed()]

    async def process_item(self, session, account, item: dict) -> list[ActionResult]:
        author = media_author(item)
        url = media_url(item)

        try:
            await session.unlike(item)
        except Exception as e:
            logger.debug(f"Unlike failed for {url}: {e}")
            return [ActionResult.failure(f"[ERROR] Failed to unlike post by @{author}: {e}")]

        return [ActionResult.success(f"[SUCCESS] Unliked post by @{author}: {url}")]
