"""
Recurring Webhook Scheduler

This module defines the core concepts and components of a recurring job scheduler.

Core Concepts:

Job:
    A Job is a named unit of work bound to a recurrence (cron-style) expression
    and an optional payload describing an outbound HTTP notification.
    A Job defines the work to be done but does not represent an actual execution.

Firing:
    A Firing represents a single occurrence of a Job's schedule.
    Each Firing dispatches the Job's payload once and records the outcome.

Trigger:
    Every armed Job owns one trigger, an independent timer that sleeps until
    the Job's next occurrence, fires it and re-arms without waiting for the
    dispatch to finish.

Relationships:
    - A Job produces many Firings, one per occurrence of its schedule.
    - Jobs are persisted to a single JSON file; triggers and firings are not.
"""

from .domain import Job, JobPayload, Firing, FiringStatus
from .registry import JobRegistry
from .lifecycle import LifecycleManager

__all__ = ["Job", "JobPayload", "Firing", "FiringStatus", "JobRegistry", "LifecycleManager"]
