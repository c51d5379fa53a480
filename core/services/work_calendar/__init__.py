from .engine import WorkCalendarEngine
from .expansion import HolidayInput, expand_calendar_exceptions, expand_time_off

__all__ = [
    "WorkCalendarEngine",
    "HolidayInput",
    "expand_calendar_exceptions",
    "expand_time_off",
]
