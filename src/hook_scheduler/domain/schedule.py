"""
Recurrence expressions.

A schedule is a cron-style expression with either five fields::

    minute hour day-of-month month day-of-week

or six fields, with seconds first::

    second minute hour day-of-month month day-of-week

Each field is a comma-separated list of items, where an item is ``*``, a
number ``N``, or a range ``A-B``; ``*`` and ranges may carry a step ``/S``.
When both day-of-month and day-of-week are restricted, an instant has to
match both of them.
"""
import re
from datetime import datetime, timezone
from typing import Any, List, Tuple

from croniter import croniter

from hook_scheduler.errors import InvalidScheduleError

_FIVE_FIELD_BOUNDS: List[Tuple[int, int]] = [
    (0, 59),  # minute
    (0, 23),  # hour
    (1, 31),  # day of month
    (1, 12),  # month
    (0, 7),   # day of week, 0 and 7 are both Sunday
]
_SIX_FIELD_BOUNDS: List[Tuple[int, int]] = [(0, 59)] + _FIVE_FIELD_BOUNDS

_ITEM_PATTERN = re.compile(r"^(?:(?P<star>\*)|(?P<low>\d+)(?:-(?P<high>\d+))?)(?:/(?P<step>\d+))?$")

# Reference instant for the reachability check; any fixed point works.
_REFERENCE_TIME = datetime(2000, 1, 1, tzinfo=timezone.utc)


def _valid_item(item: str, low_bound: int, high_bound: int) -> bool:
    match = _ITEM_PATTERN.match(item)
    if match is None:
        return False
    step = match.group("step")
    if step is not None and int(step) < 1:
        return False
    if match.group("star"):
        return True
    low = int(match.group("low"))
    high = match.group("high")
    if high is None:
        # a bare number with a step ("5/10") is not part of the grammar
        return step is None and low_bound <= low <= high_bound
    high = int(high)
    return low_bound <= low <= high <= high_bound


def _is_well_formed(expression: Any) -> bool:
    if not isinstance(expression, str):
        return False
    fields = expression.split()
    if len(fields) == 5:
        bounds = _FIVE_FIELD_BOUNDS
    elif len(fields) == 6:
        bounds = _SIX_FIELD_BOUNDS
    else:
        return False
    for field, (low_bound, high_bound) in zip(fields, bounds):
        items = field.split(",")
        if not all(_valid_item(item, low_bound, high_bound) for item in items):
            return False
    return True


def _iterator(expression: str, start: datetime) -> croniter:
    normalized = " ".join(expression.split())
    return croniter(normalized, start, day_or=False, second_at_beginning=True)


def validate(expression: Any) -> bool:
    """
    Check whether the expression is a usable recurrence expression.

    Rejects wrong field counts, out-of-range values, malformed tokens, and
    expressions that can never occur on the calendar (e.g. February 30th).
    Never raises.
    """
    if not _is_well_formed(expression):
        return False
    try:
        _iterator(expression, _REFERENCE_TIME).get_next(datetime)
    except ValueError:
        # CroniterError and its subclasses derive from ValueError
        return False
    return True


def next_fire_time(expression: str, after: datetime) -> datetime:
    """
    Return the first instant strictly after ``after`` matching the expression.

    The result is expressed in the timezone of ``after``.

    Raises:
        InvalidScheduleError: If the expression is malformed or never matches.
    """
    if not _is_well_formed(expression):
        raise InvalidScheduleError(expression)
    try:
        return _iterator(expression, after).get_next(datetime)
    except ValueError as e:
        raise InvalidScheduleError(expression) from e
