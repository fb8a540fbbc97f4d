from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from hook_scheduler.domain.firing import Firing, FiringStatus
from hook_scheduler.domain.job import Job, JobPayload


def test_job_public_dict_uses_persisted_field_names() -> None:
    job = Job(name="ping", schedule="* * * * *", payload=JobPayload(url="http://x/y", body={"a": 1}))

    data = job.public_dict()

    assert set(data) == {"id", "name", "schedule", "payload", "createdAt"}
    assert data["id"].startswith("job_")
    assert data["payload"] == {"url": "http://x/y", "body": {"a": 1}}
    assert Job.model_validate(data) == job


def test_job_ids_are_unique() -> None:
    ids = {Job(name="n", schedule="* * * * *").id for _ in range(100)}
    assert len(ids) == 100


def test_naive_created_at_is_assumed_utc() -> None:
    job = Job.model_validate({
        "id": "job_1",
        "name": "ping",
        "schedule": "* * * * *",
        "payload": None,
        "createdAt": "2024-01-01T12:00:00",
    })
    assert job.created_at == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)


def test_job_is_immutable() -> None:
    job = Job(name="ping", schedule="* * * * *")
    with pytest.raises(ValidationError):
        job.schedule = "0 0 * * *"


def test_payload_without_url_is_not_dispatchable() -> None:
    assert JobPayload(url="http://x/y").is_dispatchable
    assert not JobPayload(body={"a": 1}).is_dispatchable


def test_firing_status_transitions() -> None:
    firing = Firing(job_id="job_1")
    assert firing.status == FiringStatus.PENDING

    firing.set_status(FiringStatus.RUNNING)
    assert firing.started_at is not None
    assert not firing.is_finished

    firing.set_result({"status": 200})
    assert firing.status == FiringStatus.SUCCEEDED
    assert firing.finished_at is not None


def test_firing_rejects_unfinished_result_status() -> None:
    with pytest.raises(ValueError, match="Status must be"):
        Firing(job_id="job_1").set_result({}, status=FiringStatus.RUNNING)
