import logging

from hook_scheduler.errors import InvalidInputError, StoreCorruptError, StoreWriteError
from hook_scheduler.registry import JobRegistry

logger = logging.getLogger(__name__)


class LifecycleManager:
    """
    Restores persisted jobs on startup and shuts the registry down on exit.
    """

    def __init__(self, registry: JobRegistry):
        self.registry: JobRegistry = registry
        self.is_running: bool = False

    async def startup(self) -> int:
        """
        Load the store and arm every job with a valid schedule.

        A corrupt store or an invalid record never aborts startup.
        Returns the number of jobs armed.
        """
        try:
            jobs = await self.registry.store.load()
        except StoreCorruptError:
            logger.exception("Job store is corrupt, starting with no jobs")
            jobs = []
        except StoreWriteError:
            logger.exception("Job store could not be created, starting with no jobs")
            jobs = []

        armed = 0
        for job in jobs:
            try:
                await self.registry.restore(job)
            except InvalidInputError as e:
                # InvalidScheduleError is a subclass
                logger.warning("Skipping persisted job %s: %s", job.id, e)
                continue
            armed += 1

        self.is_running = True
        logger.info("Scheduler started, %d of %d persisted jobs armed", armed, len(jobs))
        return armed

    async def shutdown(self) -> None:
        """
        Disarm every trigger and flush the store. Does not wait for in-flight dispatches.
        """
        if not self.is_running:
            return
        self.is_running = False
        jobs = await self.registry.close()
        logger.info("Scheduler stopped, %d jobs saved", len(jobs))
