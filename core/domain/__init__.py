from core.domain.calendar import SUNDAY_TO_THURSDAY, CalendarException, WorkingCalendar
from core.domain.enums import (
    CalendarExceptionType,
    ConstraintType,
    DependencyType,
    PhaseLockReason,
    PhaseStatus,
    SchedulingMode,
    TaskPriority,
    TaskStatus,
    TimeOffStatus,
    TimeOffType,
)
from core.domain.identifiers import ensure_id, generate_id
from core.domain.project import ProjectPhase
from core.domain.resource import TeamMember, TimeOff
from core.domain.schedule import ProjectSchedule, TaskSchedule
from core.domain.task import Task, TaskAssignment, TaskDependency

__all__ = [
    "generate_id",
    "ensure_id",
    "TaskStatus",
    "TaskPriority",
    "DependencyType",
    "ConstraintType",
    "CalendarExceptionType",
    "TimeOffType",
    "TimeOffStatus",
    "PhaseStatus",
    "SchedulingMode",
    "PhaseLockReason",
    "SUNDAY_TO_THURSDAY",
    "WorkingCalendar",
    "CalendarException",
    "Task",
    "TaskAssignment",
    "TaskDependency",
    "TeamMember",
    "TimeOff",
    "ProjectPhase",
    "ProjectSchedule",
    "TaskSchedule",
]
