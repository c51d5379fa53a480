from __future__ import annotations

from enum import Enum


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class TaskPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DependencyType(str, Enum):
    FINISH_TO_START = "FS"
    FINISH_TO_FINISH = "FF"
    START_TO_START = "SS"
    START_TO_FINISH = "SF"


class ConstraintType(str, Enum):
    NONE = "none"
    START_NO_EARLIER_THAN = "start_no_earlier_than"
    MUST_START_ON = "must_start_on"
    FINISH_NO_LATER_THAN = "finish_no_later_than"


class SchedulingMode(str, Enum):
    AUTO = "auto"
    MANUAL = "manual"


class CalendarExceptionType(str, Enum):
    HOLIDAY = "holiday"
    NON_WORKING = "non_working"


class TimeOffType(str, Enum):
    VACATION = "vacation"
    SICK = "sick"
    PERSONAL = "personal"
    OTHER = "other"


class TimeOffStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PhaseStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"


class PhaseLockReason(str, Enum):
    FIRST_PHASE = "first_phase"
    PREVIOUS_PHASE_COMPLETE = "previous_phase_complete"
    PREVIOUS_PHASE_INCOMPLETE = "previous_phase_incomplete"


__all__ = [
    "TaskStatus",
    "TaskPriority",
    "DependencyType",
    "ConstraintType",
    "SchedulingMode",
    "CalendarExceptionType",
    "TimeOffType",
    "TimeOffStatus",
    "PhaseStatus",
    "PhaseLockReason",
]
