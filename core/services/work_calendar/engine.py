# core/services/work_calendar/engine.py
from __future__ import annotations

from datetime import date, timedelta
from typing import FrozenSet, Iterable, Optional

from core.domain.calendar import SUNDAY_TO_THURSDAY
from core.exceptions import ValidationError


class WorkCalendarEngine:
    """
    Working-day arithmetic over a weekly pattern and a set of non-working dates.

    Weekdays use date.weekday() numbering (Monday = 0 ... Sunday = 6).
    Dates returned by add_working_days are exclusive ends: a task starting on a
    working day ``es`` with duration ``n`` occupies the ``n`` working days in
    ``[es, add_working_days(es, n))``.
    """

    def __init__(
        self,
        working_days: Optional[Iterable[int]] = None,
        non_working_dates: Iterable[date] = (),
    ):
        days = frozenset(SUNDAY_TO_THURSDAY if working_days is None else working_days)
        if not days:
            raise ValidationError(
                "Working calendar needs at least one working weekday.",
                code="CALENDAR_NO_WORKING_DAYS",
            )
        invalid = [d for d in days if not isinstance(d, int) or d < 0 or d > 6]
        if invalid:
            raise ValidationError(
                f"Invalid weekday index in working days: {sorted(invalid, key=str)!r}.",
                code="CALENDAR_INVALID_WEEKDAY",
            )
        self._working_days: FrozenSet[int] = days
        self._non_working: FrozenSet[date] = frozenset(non_working_dates)

    @property
    def working_days(self) -> FrozenSet[int]:
        return self._working_days

    @property
    def non_working_dates(self) -> FrozenSet[date]:
        return self._non_working

    def for_person(
        self,
        working_days: Optional[Iterable[int]] = None,
        extra_non_working: Iterable[date] = (),
    ) -> "WorkCalendarEngine":
        """Calendar of one person: own work week, project holidays plus own time off."""
        days = self._working_days if working_days is None else working_days
        return WorkCalendarEngine(days, self._non_working | frozenset(extra_non_working))

    def is_working_day(self, d: date) -> bool:
        if d.weekday() not in self._working_days:
            return False
        return d not in self._non_working

    def next_working_day(self, d: date, include_today: bool = True) -> date:
        current = d if include_today else d + timedelta(days=1)
        while not self.is_working_day(current):
            current += timedelta(days=1)
        return current

    def previous_working_day(self, d: date, include_today: bool = True) -> date:
        current = d if include_today else d - timedelta(days=1)
        while not self.is_working_day(current):
            current -= timedelta(days=1)
        return current

    def add_working_days(self, start: date, working_days: int) -> date:
        # 0 is the identity, even on a non-working date; callers roll first if needed.
        if working_days == 0:
            return start

        step = timedelta(days=1 if working_days > 0 else -1)
        days_remaining = abs(working_days)
        current = start
        while days_remaining > 0:
            current += step
            if self.is_working_day(current):
                days_remaining -= 1
        return current

    def count_working_days(self, start: date, end: date) -> int:
        """Working days in [start, end); negative when end is before start."""
        if end < start:
            return -self.count_working_days(end, start)
        count = 0
        current = start
        while current < end:
            if self.is_working_day(current):
                count += 1
            current += timedelta(days=1)
        return count
