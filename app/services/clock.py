"""
Time source for report calculations.

Reports that depend on "today" take a clock instead of reading the wall
clock, so tests can pin the date.
"""

from datetime import date, datetime, timezone


class Clock:
    """Wall clock (UTC)."""

    def today(self) -> date:
        return datetime.now(timezone.utc).date()


class FixedClock(Clock):
    """Clock pinned to a single date."""

    def __init__(self, fixed: date):
        self.fixed = fixed

    def today(self) -> date:
        return self.fixed


_system_clock = Clock()


def get_clock() -> Clock:
    """Dependency for getting the report clock."""
    return _system_clock
