from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Union

from core.domain.calendar import CalendarException
from core.domain.enums import CalendarExceptionType, TimeOffStatus
from core.domain.resource import TimeOff
from core.exceptions import ValidationError

_BLOCKING_EXCEPTION_TYPES = (CalendarExceptionType.HOLIDAY, CalendarExceptionType.NON_WORKING)

HolidayInput = Union[date, CalendarException]


def _iter_days(start: date, end: date):
    cur = start
    while cur <= end:
        yield cur
        cur += timedelta(days=1)


def expand_calendar_exceptions(exceptions: Iterable[HolidayInput]) -> set[date]:
    """
    Expand calendar exceptions into individual non-working dates.

    Plain dates pass through unchanged, so callers that already expanded their
    exceptions can hand them in as-is.
    """
    dates: set[date] = set()
    for item in exceptions:
        if isinstance(item, CalendarException):
            if item.type not in _BLOCKING_EXCEPTION_TYPES:
                continue
            end = item.end_date or item.date
            if end < item.date:
                raise ValidationError(
                    "Calendar exception end_date must be on or after its date.",
                    code="CALENDAR_EXCEPTION_RANGE",
                )
            dates.update(_iter_days(item.date, end))
        else:
            dates.add(item)
    return dates


def expand_time_off(time_off: Iterable[TimeOff]) -> dict[str, set[date]]:
    """Approved time off per member id, expanded to individual dates."""
    by_member: dict[str, set[date]] = defaultdict(set)
    for entry in time_off:
        if entry.status != TimeOffStatus.APPROVED:
            continue
        if entry.end_date < entry.start_date:
            raise ValidationError(
                "Time off end_date must be on or after start_date.",
                code="TIME_OFF_RANGE",
            )
        by_member[entry.member_id].update(_iter_days(entry.start_date, entry.end_date))
    return dict(by_member)


__all__ = ["HolidayInput", "expand_calendar_exceptions", "expand_time_off"]
