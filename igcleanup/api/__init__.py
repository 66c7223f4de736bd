"""
HTTP job control API.
"""
from igcleanup.api.app import create_app

__all__ = ["create_app"]
