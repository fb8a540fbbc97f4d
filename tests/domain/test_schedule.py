from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from hook_scheduler.domain.schedule import next_fire_time, validate
from hook_scheduler.errors import InvalidScheduleError


@pytest.mark.parametrize("expression", [
    "* * * * *",
    "*/15 0-6 * * 1-5",
    "0 9 1,15 * *",
    "0 0 * * 7",
    "30 8 * 1-12/2 0",
    "0 0 29 2 *",
    "0-30/10,45 * * * *",
    "  5 4 * * *  ",
    "* * * * * *",
    "*/10 0 */5 * * *",
])
def test_validate_accepts_valid_expressions(expression: str) -> None:
    assert validate(expression) is True


@pytest.mark.parametrize("expression", [
    "",
    "* * * *",
    "* * * * * * *",
    "99 * * * *",
    "60 * * * *",
    "* 24 * * *",
    "* * 0 * *",
    "* * 32 * *",
    "* * * 13 *",
    "* * * 0 *",
    "* * * * 8",
    "-1 * * * *",
    "*/0 * * * *",
    "5-1 * * * *",
    "5/10 * * * *",
    "a * * * *",
    "1,,2 * * * *",
    "1- * * * *",
    "60 * * * * *",
    "0 0 30 2 *",
    "0 0 31 4 *",
])
def test_validate_rejects_invalid_expressions(expression: str) -> None:
    assert validate(expression) is False


@pytest.mark.parametrize("value", [None, 42, ["*", "*", "*", "*", "*"]])
def test_validate_rejects_non_strings(value) -> None:
    assert validate(value) is False


def test_next_fire_time_is_strictly_after() -> None:
    after = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert next_fire_time("* * * * *", after) == datetime(2024, 1, 1, 12, 1, tzinfo=timezone.utc)

    after = datetime(2024, 1, 1, 12, 0, 30, tzinfo=timezone.utc)
    assert next_fire_time("* * * * *", after) == datetime(2024, 1, 1, 12, 1, tzinfo=timezone.utc)


def test_next_fire_time_with_seconds_field() -> None:
    after = datetime(2024, 1, 1, 12, 0, 5, tzinfo=timezone.utc)
    assert next_fire_time("*/10 * * * * *", after) == datetime(2024, 1, 1, 12, 0, 10, tzinfo=timezone.utc)


def test_next_fire_time_intersects_day_fields() -> None:
    # Friday the 13th: both day-of-month and day-of-week must match
    after = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert next_fire_time("0 0 13 * 5", after) == datetime(2024, 9, 13, tzinfo=timezone.utc)


def test_next_fire_time_keeps_timezone() -> None:
    tz = ZoneInfo("America/New_York")
    after = datetime(2024, 6, 1, 10, 0, tzinfo=tz)
    result = next_fire_time("0 9 * * *", after)
    assert result.utcoffset() == after.utcoffset()
    assert (result.year, result.month, result.day, result.hour) == (2024, 6, 2, 9)


@pytest.mark.parametrize("expression", ["99 * * * *", "0 0 30 2 *", "not a schedule"])
def test_next_fire_time_rejects_invalid_expressions(expression: str) -> None:
    with pytest.raises(InvalidScheduleError):
        next_fire_time(expression, datetime.now(timezone.utc))
