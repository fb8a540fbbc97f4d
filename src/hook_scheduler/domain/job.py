import uuid
import logging
from datetime import datetime
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


def new_job_id() -> str:
    return f"job_{uuid.uuid4().hex}"


class JobPayload(BaseModel):
    """
    Describes the outbound notification sent each time a job fires.
    """
    model_config = ConfigDict(frozen=True)

    url: Optional[str] = Field(None, description="The URL the notification is posted to")
    body: Optional[Dict[str, Any]] = Field(None, description="JSON body sent with the notification")

    @property
    def is_dispatchable(self) -> bool:
        return bool(self.url)


class Job(BaseModel):
    """
    A named recurring job bound to a recurrence expression.

    The live trigger bound to a job is held by the registry, never by the job
    itself, so every field here is safe to persist.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(default_factory=new_job_id, description="Unique job identifier")
    name: str = Field(..., description="Human-readable label")
    schedule: str = Field(..., description="Recurrence expression the job fires on")
    payload: Optional[JobPayload] = Field(None, description="Outbound notification, a no-op firing when absent")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(ZoneInfo("UTC")),
        alias="createdAt",
        description="Job creation timestamp with UTC timezone",
    )

    @field_validator("created_at")
    def check_timezone(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            logger.warning("Job timestamp does not include a timezone, assuming UTC")
            return v.replace(tzinfo=ZoneInfo("UTC"))
        return v

    def public_dict(self) -> Dict[str, Any]:
        """
        Return the public and persisted representation of the job.
        """
        return self.model_dump(mode="json", by_alias=True)
