# core/models.py
"""Flat import surface for the domain records; definitions live in core.domain."""
from __future__ import annotations

from core.domain import (
    SUNDAY_TO_THURSDAY,
    CalendarException,
    CalendarExceptionType,
    ConstraintType,
    DependencyType,
    PhaseLockReason,
    PhaseStatus,
    SchedulingMode,
    ProjectPhase,
    ProjectSchedule,
    Task,
    TaskAssignment,
    TaskDependency,
    TaskPriority,
    TaskSchedule,
    TaskStatus,
    TeamMember,
    TimeOff,
    TimeOffStatus,
    TimeOffType,
    WorkingCalendar,
    generate_id,
)

__all__ = [
    "generate_id",
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
