"""
Job execution: cancellation, progress tracking, engine and background runner.
"""
from igcleanup.jobs.cancellation import CancellationRegistry, CancellationToken
from igcleanup.jobs.engine import JobEngine
from igcleanup.jobs.progress import JobProgress
from igcleanup.jobs.runner import JobRunner

__all__ = ["CancellationRegistry", "CancellationToken", "JobEngine", "JobProgress", "JobRunner"]
