"""
Feed pagination and source traversal.
"""

from igcleanup.traversal.pagination import Feed
from igcleanup.traversal.traversal_engine import TraversalEngine

__all__ = ["Feed", "TraversalEngine"]
