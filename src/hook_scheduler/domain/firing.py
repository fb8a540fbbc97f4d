import uuid
from enum import Enum
from typing import Any, Dict, Optional
from datetime import datetime
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(ZoneInfo("UTC"))


class FiringStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


class Firing(BaseModel):
    """
    Represents one firing of a job and the outcome of its dispatch.
    """
    id: str = Field(default_factory=lambda: f"fir_{uuid.uuid4().hex[:12]}", description="Unique firing identifier")
    job_id: str = Field(..., description="The job this firing belongs to")
    status: FiringStatus = FiringStatus.PENDING
    scheduled_for: Optional[datetime] = Field(None, description="The instant the firing was scheduled for")
    result: Optional[Dict[str, Any]] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def is_finished(self) -> bool:
        return self.status in (FiringStatus.SUCCEEDED, FiringStatus.FAILED, FiringStatus.SKIPPED)

    def set_status(self, status: FiringStatus):
        """
        Update the status of the firing.
        """
        self.status = status
        if status == FiringStatus.RUNNING:
            self.started_at = _utcnow()
        elif self.is_finished:
            self.finished_at = _utcnow()

    def set_result(self, result: Dict[str, Any], status: FiringStatus = FiringStatus.SUCCEEDED):
        """
        Set the outcome of the dispatch.
        """
        if status not in (FiringStatus.SUCCEEDED, FiringStatus.FAILED, FiringStatus.SKIPPED):
            raise ValueError("Status must be SUCCEEDED, FAILED or SKIPPED")
        self.result = result
        self.set_status(status)
