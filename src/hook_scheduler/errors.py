class SchedulerError(Exception):
    """
    Base class for all errors raised by the scheduler.
    """


class InvalidInputError(SchedulerError, ValueError):
    """
    A required field is missing or malformed.
    """


class InvalidScheduleError(InvalidInputError):
    """
    The recurrence expression does not pass validation.
    """

    def __init__(self, schedule):
        self.schedule = schedule
        super().__init__(f"Invalid schedule expression: {schedule!r}")


class JobNotFoundError(SchedulerError, KeyError):
    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(job_id)

    def __str__(self) -> str:
        return f"Job '{self.job_id}' not found"


class RegistryClosedError(SchedulerError):
    """
    The registry has been shut down and no longer accepts new jobs.
    """


class StoreCorruptError(SchedulerError):
    """
    The persisted job file exists but cannot be parsed.
    """


class StoreWriteError(SchedulerError):
    """
    The persisted job file could not be written.
    """
