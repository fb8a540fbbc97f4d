import asyncio
import logging
from collections import deque
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Deque, List, Optional, Set

from hook_scheduler.dispatchers.protocol import Dispatcher
from hook_scheduler.domain.firing import Firing, FiringStatus
from hook_scheduler.domain.job import Job
from hook_scheduler.domain.schedule import next_fire_time

logger = logging.getLogger(__name__)


class TriggerState(str, Enum):
    IDLE = "idle"
    ARMED = "armed"
    FIRING = "firing"
    STOPPED = "stopped"


class TriggerEngine:
    """
    Fires a single job on its schedule using its own asyncio timer task.

    Each firing hands the job's payload to the dispatcher in a detached task
    and re-arms for the next occurrence right away, so a slow dispatch never
    delays the next firing. Occurrences missed while the process was down are
    not fired retroactively.
    """

    def __init__(self, job: Job, dispatcher: Dispatcher, tz: tzinfo = timezone.utc, history_limit: int = 20):
        self.job: Job = job
        self.dispatcher: Dispatcher = dispatcher
        self.tz: tzinfo = tz
        self.state: TriggerState = TriggerState.IDLE
        self.next_fire_at: Optional[datetime] = None
        self.history: Deque[Firing] = deque(maxlen=history_limit)
        self._timer: Optional[asyncio.Task] = None
        self._in_flight: Set[asyncio.Task] = set()

    @property
    def job_id(self) -> str:
        return self.job.id

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def recent_firings(self, limit: int) -> List[Firing]:
        return [firing.model_copy() for firing in list(self.history)[-limit:]]

    def arm(self) -> None:
        """
        Start the timer task. Must be called from within a running event loop.
        """
        if self.state != TriggerState.IDLE:
            return
        self.state = TriggerState.ARMED
        self._timer = asyncio.create_task(self._run(), name=f"trigger:{self.job_id}")
        logger.info("Armed job %s (%s) on schedule '%s'", self.job_id, self.job.name, self.job.schedule)

    def disarm(self) -> None:
        """
        Stop the engine. Safe to call repeatedly and while a dispatch is in flight;
        in-flight dispatches complete but no further firing starts.
        """
        if self.state == TriggerState.STOPPED:
            return
        self.state = TriggerState.STOPPED
        self.next_fire_at = None
        if self._timer and not self._timer.done():
            self._timer.cancel()
        logger.info("Disarmed job %s", self.job_id)

    def _now(self) -> datetime:
        return datetime.now(self.tz)

    async def _sleep_until(self, when: datetime) -> None:
        # asyncio.sleep runs on the monotonic clock and can wake slightly early
        while True:
            delay = (when - self._now()).total_seconds()
            if delay <= 0:
                return
            await asyncio.sleep(delay)

    async def _run(self) -> None:
        """
        Sleep until the next occurrence, fire, and loop until disarmed.
        """
        after = self._now()
        try:
            while self.state != TriggerState.STOPPED:
                fire_at = next_fire_time(self.job.schedule, after)
                self.next_fire_at = fire_at
                await self._sleep_until(fire_at)
                if self.state == TriggerState.STOPPED:
                    break
                self._fire(fire_at)
                after = max(self._now(), fire_at)
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Trigger for job %s crashed, no further firings", self.job_id)
            self.state = TriggerState.STOPPED
            self.next_fire_at = None

    def _fire(self, scheduled_for: datetime) -> None:
        self.state = TriggerState.FIRING
        firing = Firing(job_id=self.job_id, scheduled_for=scheduled_for)
        self.history.append(firing)
        task = asyncio.create_task(self._dispatch(firing), name=f"dispatch:{self.job_id}:{firing.id}")
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        self.state = TriggerState.ARMED

    async def _dispatch(self, firing: Firing) -> None:
        try:
            await self.dispatcher.dispatch(firing, self.job.payload)
        except asyncio.CancelledError:
            firing.set_result({"error": "Cancelled"}, status=FiringStatus.FAILED)
            raise
        except Exception as e:
            logger.exception("Dispatcher raised for job %s", self.job_id)
            firing.set_result({"error": f"Unexpected error: {e}"}, status=FiringStatus.FAILED)
