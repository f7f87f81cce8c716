"""
Calendar arithmetic helpers for instants and calendar dates.

**Conceptual**: This module collects small, pure date/time functions that keep
turning up across services: normalizing a timestamp to the start or end of its
day, stepping over weekends, counting business days, finding the next Monday,
computing someone's age. None of them holds state; each call takes values in
and hands a new value back.

**Two representations**:
  - Instant: a `datetime` (pandas `Timestamp` included, since it subclasses
    `datetime`). Its `tzinfo` is the zone marker: `timezone.utc`, some other
    zone, or `None` for "unspecified". Helpers carry the marker through
    unchanged and never convert between zones.
  - CalendarDate: a plain `date` with no time of day and no zone.

Functions accept either representation wherever a calendar-only analog makes
sense. Because `datetime` subclasses `date`, every dispatch checks for
`datetime` first.

**Business day rule**: Monday to Friday. Saturday and Sunday are the only
non-business days; there is no holiday calendar.
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from enum import IntEnum
from typing import Optional, TypeVar, Union

import pandas as pd

from core_helpers.utils.time import Clock, get_default_clock

DateLike = TypeVar("DateLike", date, datetime)

ONE_DAY = timedelta(days=1)


class Weekday(IntEnum):
    """Day of week numbered like `date.weekday()` (Monday is 0)."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


WEEKEND_DAYS = frozenset({Weekday.SATURDAY, Weekday.SUNDAY})


def _smallest_tick(value: datetime) -> timedelta:
    # pandas Timestamps resolve to the nanosecond, stdlib datetimes to the microsecond
    if isinstance(value, pd.Timestamp):
        return pd.Timedelta(1, unit="ns")
    return timedelta(microseconds=1)


def _add_days(value: DateLike, days: int) -> DateLike:
    # DateOffset steps pandas Timestamps by calendar day, keeping wall-clock time across DST
    if isinstance(value, pd.Timestamp):
        return value + pd.DateOffset(days=days)
    return value + timedelta(days=days)


def _calendar_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def get_start_of_day(value: Union[date, datetime]) -> datetime:
    """
    Return midnight of the calendar day that `value` falls on.

    **Functionally**:
    - Instant input: same date, time set to 00:00:00, same `tzinfo` as input.
    - CalendarDate input: a naive `datetime` at midnight of that date.
    - pandas `Timestamp` input stays a `Timestamp` (via `normalize()`).

    Args:
        value: Instant or CalendarDate.

    Returns:
        Midnight of the same day.
    """
    if isinstance(value, pd.Timestamp):
        return value.normalize()
    if isinstance(value, datetime):
        return value.replace(hour=0, minute=0, second=0, microsecond=0)
    return datetime.combine(value, time.min)


def get_end_of_day(value: Union[date, datetime]) -> datetime:
    """
    Return the last representable instant of the calendar day.

    **Mathematical**: end_of_day(x) = start_of_day(x) + 1 day - tick, where tick
    is the smallest unit the value can represent (1 microsecond for `datetime`,
    1 nanosecond for `pandas.Timestamp`).

    **Functionally**:
    - The zone marker of an Instant is preserved.
    - A CalendarDate yields a naive `datetime` at 23:59:59.999999.

    Args:
        value: Instant or CalendarDate.

    Returns:
        The last tick before the next midnight.
    """
    start = get_start_of_day(value)
    return _add_days(start, 1) - _smallest_tick(start)


def add_business_days(value: DateLike, days: int) -> DateLike:
    """
    Move `value` by `days` business days, skipping Saturdays and Sundays.

    **Conceptual**: "Ship in 3 business days" from a Friday lands on the
    following Wednesday. The walk advances one calendar day at a time and only
    counts days that are Monday to Friday, so it always ends on a business day
    (unless `days` is 0, in which case `value` comes back as is).

    **Negative counts** walk backwards with the same rule: -1 from a Monday is
    the previous Friday.

    **Functionally**:
    - Only the date component moves; time of day and `tzinfo` are preserved.
    - Returns the same kind (Instant or CalendarDate) as the input.
    - O(days) loop rather than closed-form arithmetic.

    Args:
        value: Instant or CalendarDate to start from.
        days: Number of business days to move (signed).

    Returns:
        The Instant/CalendarDate reached.

    Example:
        >>> add_business_days(date(2025, 1, 17), 3)  # Friday
        datetime.date(2025, 1, 22)
    """
    step = 1 if days >= 0 else -1
    remaining = abs(days)
    current = value
    while remaining > 0:
        current = _add_days(current, step)
        if not is_weekend(current):
            remaining -= 1
    return current


def combine(
    calendar_date: date,
    time_of_day: time,
    tz: Optional[tzinfo] = timezone.utc,
) -> datetime:
    """
    Compose a CalendarDate and a TimeOfDay into an Instant.

    The result carries `tz` as its zone marker (UTC unless told otherwise).
    Pass `tz=None` for an unspecified (naive) Instant. Any `tzinfo` already
    attached to `time_of_day` is replaced.
    """
    return datetime.combine(_calendar_date(calendar_date), time_of_day, tzinfo=tz)


def get_time(instant: datetime) -> time:
    """Project the time of day out of an Instant (date and zone are dropped)."""
    return instant.time()


def is_weekend(value: Union[date, datetime]) -> bool:
    """True if `value` falls on a Saturday or Sunday."""
    return value.weekday() in WEEKEND_DAYS


def get_next_weekday(start: DateLike, weekday: Union[Weekday, int]) -> DateLike:
    """
    Return the next occurrence of `weekday` strictly after `start`.

    **Functionally**:
    - If `start` already falls on `weekday`, the result is 7 days later,
      never `start` itself.
    - Time of day and zone marker of an Instant are preserved.

    Args:
        start: Instant or CalendarDate.
        weekday: Target day (`Weekday` member or int 0-6, Monday = 0).

    Returns:
        The next matching day, 1 to 7 days after `start`.

    Raises:
        ValueError: If `weekday` is not in 0-6.
    """
    target = Weekday(weekday)
    days_to_add = (target - start.weekday()) % 7
    return _add_days(start, days_to_add or 7)


def get_business_days_between(
    start: Union[date, datetime],
    end: Union[date, datetime],
) -> int:
    """
    Count Monday-Friday days in the inclusive range [start, end].

    Both ends are reduced to their calendar date first, so times of day do not
    matter. If `end` is before `start` the range is empty and the count is 0.

    Example:
        >>> get_business_days_between(date(2025, 1, 13), date(2025, 1, 24))
        10
    """
    current = _calendar_date(start)
    last = _calendar_date(end)
    business_days = 0
    while current <= last:
        if not is_weekend(current):
            business_days += 1
        current += ONE_DAY
    return business_days


def get_weekends_between(
    start: Union[date, datetime],
    end: Union[date, datetime],
) -> int:
    """
    Count weekends touched by the inclusive range [start, end].

    **Functionally**:
    - Both ends are reduced to calendar dates.
    - A Saturday counts as one weekend and its Sunday is skipped, so a full
      Saturday/Sunday pair counts once.
    - A Sunday reached on its own (the range starts on a Sunday) also counts
      as one; so does a trailing Saturday whose Sunday lies past `end`.
    - `end` before `start` gives 0.

    Example:
        >>> get_weekends_between(date(2025, 1, 1), date(2025, 1, 31))
        4
    """
    current = _calendar_date(start)
    last = _calendar_date(end)
    weekends = 0
    while current <= last:
        weekday = current.weekday()
        if weekday == Weekday.SATURDAY:
            weekends += 1
            current += 2 * ONE_DAY
            continue
        if weekday == Weekday.SUNDAY:
            weekends += 1
        current += ONE_DAY
    return weekends


def _subtract_years(value: DateLike, years: int) -> DateLike:
    # Feb 29 clamps to Feb 28 when the target year is not a leap year
    try:
        return value.replace(year=value.year - years)
    except ValueError:
        return value.replace(year=value.year - years, day=28)


def calculate_age(
    birth: Union[date, datetime],
    reference: Optional[Union[date, datetime]] = None,
    clock: Optional[Clock] = None,
) -> int:
    """
    Compute full years elapsed from `birth` to `reference`.

    **Mathematical**:
        age = reference.year - birth.year
        if birth > reference - age years: age -= 1
    The second step corrects for a birthday that has not happened yet in the
    reference year.

    **Functionally**:
    - `reference` defaults to "today" according to `clock` (the default clock
      honours the CORE_HELPERS_FROZEN_TODAY setting). For a CalendarDate birth
      that is today's date; for an Instant birth it is today's midnight with
      the birth's `tzinfo`.
    - If one argument is an Instant and the other a CalendarDate, both are
      compared on their calendar dates.
    - Two Instants with different zone markers are compared on their
      wall-clock values; no zone conversion takes place.
    - A Feb 29 reference shifted into a common year clamps to Feb 28. A
      leap-day birth therefore gains a year on Mar 1 in common years.

    Args:
        birth: Date of birth (Instant or CalendarDate).
        reference: Date to measure the age at. Defaults to today.
        clock: Time source for "today" (defaults to `get_default_clock()`).

    Returns:
        Age in whole years.

    Example:
        >>> calculate_age(date(1985, 12, 31), date(2024, 12, 31))
        39
    """
    if reference is None:
        now = (clock or get_default_clock()).now()
        if isinstance(birth, datetime):
            reference = get_start_of_day(now).replace(tzinfo=birth.tzinfo)
        else:
            reference = now.date()

    if isinstance(birth, datetime) != isinstance(reference, datetime):
        birth = _calendar_date(birth)
        reference = _calendar_date(reference)
    elif isinstance(birth, datetime) and birth.tzinfo != reference.tzinfo:
        # zone markers are carried, not converted: compare wall-clock values
        birth = birth.replace(tzinfo=None)
        reference = reference.replace(tzinfo=None)

    age = reference.year - birth.year
    if birth > _subtract_years(reference, age):
        age -= 1
    return age
