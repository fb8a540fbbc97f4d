from .job import Job, JobPayload
from .firing import Firing, FiringStatus
from .schedule import validate, next_fire_time

__all__ = ["Job", "JobPayload", "Firing", "FiringStatus", "validate", "next_fire_time"]
