"""
Job and request models shared by the store, the engine and the HTTP API.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from config import settings


class JobStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    STOPPED = "stopped"


ACTIVE_STATUSES = frozenset({JobStatus.PENDING, JobStatus.RUNNING})


class TargetType(str, Enum):
    LIKE = "like"
    COMMENT = "comment"


class Job(BaseModel):
    """Observable state of one automation run."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    status: JobStatus = JobStatus.PENDING
    target_type: TargetType = TargetType.LIKE
    total_to_process: int = 0
    total_unliked: int = 0
    total_skipped: int = 0
    total_errors: int = 0
    speed: int = settings.DEFAULT_SPEED
    logs: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)

    def to_response(self) -> dict:
        """JSON-ready dict with camelCase keys, as served by the API."""
        return self.model_dump(mode="json", by_alias=True)


class CreateJobRequest(BaseModel):
    """Body of POST /api/jobs."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    cookies: str = Field(min_length=1)
    speed: Optional[int] = Field(default=None, ge=settings.MIN_SPEED, le=settings.MAX_SPEED)
    target_type: TargetType = TargetType.LIKE

    @property
    def effective_speed(self) -> int:
        return self.speed or settings.DEFAULT_SPEED
