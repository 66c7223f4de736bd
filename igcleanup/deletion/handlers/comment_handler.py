"""
Comment deletion handler for the account's own Instagram comments.
"""
from config import settings
from igcleanup.auth.session import media_author, media_url
from igcleanup.deletion.handlers.base_handler import ActionResult, TargetHandler
from igcleanup.models import TargetType
from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)


class CommentDeletionHandler(TargetHandler):
    """
    Deletes the account's comments found on candidate posts.

    Candidates come from the account's timeline first, then from its liked
    posts. Each post's comment list is fetched and every comment authored by
    the account is deleted, one call per comment.
    """

    target_type = TargetType.COMMENT
    verbose_below_speed = settings.COMMENT_VERBOSE_BELOW_SPEED

    def sources(self, session, account) -> list:
        return [session.timeline_feed(account.pk), session.liked_feed()]

    async def process_item(self, session, account, item: dict) -> list[ActionResult]:
        author = media_author(item)
        url = media_url(item)

        try:
            comments = await session.media_comments(item)
        except Exception as e:
            logger.debug(f"Could not load comments for {url}: {e}")
            return [ActionResult.failure(f"[ERROR] Failed to load comments on post by @{author}: {e}")]

        own_comments = [comment for comment in comments if self.is_own_comment(comment, account)]
        if not own_comments:
            return [ActionResult.skipped(f"No comments by @{account.username} on {url}")]

        results = []
        # Sequential per post so fan-out stays bounded by speed
        for comment in own_comments:
            try:
                await session.delete_comment(item, comment)
            except Exception as e:
                logger.debug(f"Delete failed for comment {comment.get('pk')} on {url}: {e}")
                results.append(
                    ActionResult.failure(f"[ERROR] Failed to delete comment on post by @{author}: {e}")
                )
                continue

            results.append(ActionResult.success(f"[SUCCESS] Deleted comment on post by @{author}: {url}"))

        return results

    @staticmethod
    def is_own_comment(comment: dict, account) -> bool:
        user = comment.get("user") or {}
        author_pk = comment.get("user_id") or user.get("pk") or user.get("pk_id")
        if author_pk is not None:
            return str(author_pk) == str(account.pk)
        return bool(user.get("username")) and user.get("username") == account.username
