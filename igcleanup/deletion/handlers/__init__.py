"""
Target handlers registry.
"""
from igcleanup.deletion.handlers.base_handler import ActionResult, Outcome, TargetHandler
from igcleanup.deletion.handlers.comment_handler import CommentDeletionHandler
from igcleanup.deletion.handlers.like_handler import UnlikeHandler
from igcleanup.models import TargetType
from igcleanup.utils.logging import get_logger

logger = get_logger(__name__)

_HANDLERS: dict[TargetType, type[TargetHandler]] = {
    TargetType.LIKE: UnlikeHandler,
    TargetType.COMMENT: CommentDeletionHandler,
}


def get_handler(target_type: TargetType) -> TargetHandler:
    """
    Get the handler for a job target type.

    Args:
        target_type: TargetType (or its string value)

    Returns:
        TargetHandler instance

    Raises:
        ValueError: If no handler is registered for the target type
    """
    target_type = TargetType(target_type)
    handler_cls = _HANDLERS.get(target_type)
    if handler_cls is None:
        raise ValueError(f"No handler registered for target type: {target_type.value}")

    logger.debug(f"Selected handler: {handler_cls.__name__}")
    return handler_cls()


__all__ = [
    "ActionResult",
    "Outcome",
    "TargetHandler",
    "UnlikeHandler",
    "CommentDeletionHandler",
    "get_handler",
]
