import asyncio
import logging
from datetime import datetime, timezone, tzinfo
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from hook_scheduler.dispatchers.protocol import Dispatcher
from hook_scheduler.domain.firing import Firing
from hook_scheduler.domain.job import Job, JobPayload, new_job_id
from hook_scheduler.domain.schedule import validate
from hook_scheduler.errors import (
    InvalidInputError,
    InvalidScheduleError,
    JobNotFoundError,
    RegistryClosedError,
    StoreWriteError,
)
from hook_scheduler.storages.protocol import JobStore
from hook_scheduler.trigger import TriggerEngine

logger = logging.getLogger(__name__)


class JobRegistry:
    """
    In-memory map of job id to the job's trigger engine.

    This is the source of truth while the process runs. Every mutation,
    iteration and store save happens under a single lock, and every mutation
    is followed by a full snapshot save.
    """

    def __init__(
        self,
        store: JobStore,
        dispatcher: Dispatcher,
        tz: tzinfo = timezone.utc,
        history_limit: int = 20,
    ):
        self.store: JobStore = store
        self.dispatcher: Dispatcher = dispatcher
        self.tz: tzinfo = tz
        self.history_limit: int = history_limit
        self._engines: Dict[str, TriggerEngine] = {}
        self._lock = asyncio.Lock()
        self._closed: bool = False

    def __len__(self) -> int:
        return len(self._engines)

    def __contains__(self, job_id: str) -> bool:
        return job_id in self._engines

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def create(
        self,
        name: Optional[str],
        schedule: Optional[str],
        payload: Union[JobPayload, Dict[str, Any], None] = None,
    ) -> Job:
        """
        Validate, persist and arm a new job.

        Raises:
            InvalidInputError: If name or schedule is missing, or the payload is malformed.
            InvalidScheduleError: If the schedule is not a valid recurrence expression.
            RegistryClosedError: If the registry has been shut down.
        """
        if not isinstance(name, str) or not name.strip():
            raise InvalidInputError("name is required")
        if not isinstance(schedule, str) or not schedule.strip():
            raise InvalidInputError("schedule is required")
        schedule = schedule.strip()
        if not validate(schedule):
            raise InvalidScheduleError(schedule)
        if payload is not None and not isinstance(payload, JobPayload):
            try:
                payload = JobPayload.model_validate(payload)
            except ValidationError as e:
                raise InvalidInputError(f"Invalid payload: {e}") from e

        async with self._lock:
            if self._closed:
                raise RegistryClosedError("Registry is shut down")
            job_id = new_job_id()
            while job_id in self._engines:
                job_id = new_job_id()
            job = Job(id=job_id, name=name, schedule=schedule, payload=payload)
            try:
                job.public_dict()
            except PydanticSerializationError as e:
                raise InvalidInputError(f"Invalid payload: {e}") from e
            self._arm(job)
            await self._save()
        return job

    async def restore(self, job: Job) -> None:
        """
        Arm a previously persisted job without saving the store.

        Raises:
            InvalidScheduleError: If the persisted schedule is not valid.
            InvalidInputError: If a job with the same id is already registered.
        """
        if not validate(job.schedule):
            raise InvalidScheduleError(job.schedule)
        async with self._lock:
            if self._closed:
                raise RegistryClosedError("Registry is shut down")
            if job.id in self._engines:
                raise InvalidInputError(f"Duplicate job id '{job.id}'")
            self._arm(job)

    async def list(self) -> List[Job]:
        async with self._lock:
            return [engine.job.model_copy(deep=True) for engine in self._engines.values()]

    async def get(self, job_id: str) -> Job:
        async with self._lock:
            return self._engine(job_id).job.model_copy(deep=True)

    async def delete(self, job_id: str) -> None:
        """
        Disarm the job's trigger, remove it and save the store.

        Raises:
            JobNotFoundError: If no job has the given id.
        """
        async with self._lock:
            engine = self._engine(job_id)
            engine.disarm()
            del self._engines[job_id]
            await self._save()
        logger.info("Deleted job %s", job_id)

    async def recent_firings(self, job_id: str, limit: int = 20) -> List[Firing]:
        async with self._lock:
            return self._engine(job_id).recent_firings(limit)

    async def next_fire_at(self, job_id: str) -> Optional[datetime]:
        async with self._lock:
            return self._engine(job_id).next_fire_at

    async def close(self) -> List[Job]:
        """
        Disarm every trigger, then save and return the registry contents.

        Once closed, the registry rejects new jobs. Calling close again only
        returns the contents.
        """
        # disarm before waiting on the lock so no firing starts while a save is pending
        already_closed = self._closed
        self._closed = True
        for engine in self._engines.values():
            engine.disarm()

        async with self._lock:
            jobs = [engine.job for engine in self._engines.values()]
            if already_closed:
                return jobs
            await self._save()
        logger.info("Registry closed with %d jobs", len(jobs))
        return jobs

    def _engine(self, job_id: str) -> TriggerEngine:
        engine = self._engines.get(job_id)
        if engine is None:
            raise JobNotFoundError(job_id)
        return engine

    def _arm(self, job: Job) -> None:
        engine = TriggerEngine(job, self.dispatcher, tz=self.tz, history_limit=self.history_limit)
        self._engines[job.id] = engine
        engine.arm()

    async def _save(self) -> None:
        try:
            await self.store.save([engine.job for engine in self._engines.values()])
        except StoreWriteError:
            logger.exception("Failed to save job store, in-memory state is kept")
