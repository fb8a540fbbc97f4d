from typing import Optional, Protocol

from hook_scheduler.domain.firing import Firing
from hook_scheduler.domain.job import JobPayload


class Dispatcher(Protocol):
    """
    Protocol class for dispatchers.
    """

    async def dispatch(self, firing: Firing, payload: Optional[JobPayload]) -> Firing:
        """
        Perform the side effect of one firing and record its outcome on the firing.

        Must never raise for a failed side effect; failures are recorded on
        the returned firing instead.

        Args:
            firing (Firing): The firing being dispatched.
            payload (Optional[JobPayload]): The job's payload, if any.
        """
        ...
