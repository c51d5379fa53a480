from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Set

from core.domain.enums import CalendarExceptionType
from core.domain.identifiers import ensure_id

# date.weekday(): Monday = 0 ... Sunday = 6
SUNDAY_TO_THURSDAY: frozenset[int] = frozenset({6, 0, 1, 2, 3})


@dataclass
class WorkingCalendar:
    id: str
    name: str = "Default"
    working_days: Set[int] = field(default_factory=lambda: set(SUNDAY_TO_THURSDAY))
    hours_per_day: float = 8.0

    @staticmethod
    def create_default() -> "WorkingCalendar":
        return WorkingCalendar(id="default", name="Default")


@dataclass
class CalendarException:
    """A project-wide non-working date, or inclusive range when end_date is set."""

    id: str
    date: date
    end_date: Optional[date] = None
    type: CalendarExceptionType = CalendarExceptionType.HOLIDAY
    name: str = ""

    @staticmethod
    def create(
        date_: date,
        end_date: Optional[date] = None,
        type: CalendarExceptionType = CalendarExceptionType.HOLIDAY,
        name: str = "",
    ) -> "CalendarException":
        return CalendarException(
            id=ensure_id(None),
            date=date_,
            end_date=end_date,
            type=type,
            name=name.strip(),
        )


__all__ = ["SUNDAY_TO_THURSDAY", "WorkingCalendar", "CalendarException"]
