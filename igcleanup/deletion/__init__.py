"""
Target handlers and batch mutation engine.
"""
from igcleanup.deletion.deletion_engine import DeletionEngine
from igcleanup.deletion.handlers import (
    ActionResult,
    CommentDeletionHandler,
    Outcome,
    TargetHandler,
    UnlikeHandler,
    get_handler,
)

__all__ = [
    "DeletionEngine",
    "ActionResult",
    "Outcome",
    "TargetHandler",
    "UnlikeHandler",
    "CommentDeletionHandler",
    "get_handler",
]
