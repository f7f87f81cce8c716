"""
Clock abstractions for answering "what day is it today?".

**Conceptual**: A few helpers need a notion of "now" (the default reference
date for `calculate_age`, for instance). Reading `datetime.now()` inline makes
those helpers untestable on the day someone's birthday rolls over. Instead they
ask a Clock, which is either the real system clock or a clock frozen at a
fixed instant.

The default clock is chosen by configuration: when CORE_HELPERS_FROZEN_TODAY
is set, every caller that does not pass its own clock sees that date.
"""

from datetime import datetime, time, timezone
from typing import Protocol

from core_helpers.config.settings import get_settings


class Clock(Protocol):
    """
    Source of the current time.

    **Usage**: Accept a Clock as an optional argument and call `clock.now()`
    wherever "today" or "now" is needed. Production code gets a RealClock,
    tests pass a FrozenClock.

    **Example**:
        def days_until(deadline: date, clock: Clock) -> int:
            return (deadline - clock.now().date()).days

        days_until(date(2025, 3, 1), FrozenClock(datetime(2025, 2, 1, tzinfo=timezone.utc)))
    """

    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime (UTC preferred)."""
        ...


class RealClock:
    """Clock backed by the system time, always in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FrozenClock:
    """
    Clock that always returns the same instant.

    **Usage**:
        clock = FrozenClock(datetime(2024, 12, 31, tzinfo=timezone.utc))
        calculate_age(date(1985, 12, 31), clock=clock)  # 39, every time
    """

    def __init__(self, fixed_now: datetime):
        """
        Args:
            fixed_now: The instant returned by every call to now().
                       Should be timezone-aware (UTC recommended).
        """
        self._fixed_now = fixed_now

    def now(self) -> datetime:
        return self._fixed_now


def get_real_clock() -> Clock:
    """Factory for a RealClock."""
    return RealClock()


def get_frozen_clock(fixed_now: datetime) -> Clock:
    """Factory for a FrozenClock stopped at `fixed_now`."""
    return FrozenClock(fixed_now)


def get_default_clock() -> Clock:
    """
    Return the clock helpers use when the caller does not supply one.

    **Functionally**:
    - If settings carry a `frozen_today` date, returns a FrozenClock at
      midnight UTC of that date.
    - Otherwise returns a RealClock.

    Settings are read through `get_settings()`, so tests that change the
    environment should call `reset_settings()` first.

    Returns:
        Clock instance.
    """
    frozen_today = get_settings().frozen_today
    if frozen_today is not None:
        return FrozenClock(datetime.combine(frozen_today, time.min, tzinfo=timezone.utc))
    return RealClock()
