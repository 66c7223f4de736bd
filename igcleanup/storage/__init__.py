"""
Persistent job and settings storage.
"""
from igcleanup.storage.job_store import JobStore

__all__ = ["JobStore"]
