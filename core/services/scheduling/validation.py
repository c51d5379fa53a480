from __future__ import annotations

import math
from typing import Dict, Optional, Sequence

from core.exceptions import InvalidDurationError, ValidationError
from core.models import DependencyType, SchedulingMode, Task, TaskAssignment, TaskDependency, TeamMember


def _check_amount(task_id: str, field: str, value: Optional[float]) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidDurationError(task_id, field, value)
    if not math.isfinite(value) or value < 0:
        raise InvalidDurationError(task_id, field, value)


def validate_tasks(tasks: Sequence[Task]) -> None:
    """Reject the whole batch on the first corrupt duration or hour estimate."""
    for task in tasks:
        _check_amount(task.id, "duration", task.duration)
        _check_amount(task.id, "estimated_hours", task.estimated_hours)
        try:
            SchedulingMode(task.scheduling_mode)
        except ValueError:
            raise ValidationError(
                f"Task '{task.id}' has an unknown scheduling mode {task.scheduling_mode!r}.",
                code="SCHEDULING_MODE_INVALID",
            ) from None


def validate_dependencies(deps: Sequence[TaskDependency]) -> None:
    for dep in deps:
        try:
            DependencyType(dep.dependency_type)
        except ValueError:
            raise ValidationError(
                f"Unknown dependency type {dep.dependency_type!r}.",
                code="DEPENDENCY_TYPE_INVALID",
            ) from None
        if isinstance(dep.lag_days, bool) or not isinstance(dep.lag_days, int):
            raise ValidationError(
                f"Dependency lag must be a whole number of days, got {dep.lag_days!r}.",
                code="DEPENDENCY_LAG_INVALID",
            )


def validate_assignments(assignments: Sequence[TaskAssignment]) -> None:
    for assignment in assignments:
        _check_amount(assignment.task_id, "allocated_hours", assignment.allocated_hours)


def validate_team_members(members: Sequence[TeamMember]) -> None:
    for member in members:
        hours = member.work_hours_per_day
        if hours is None or not math.isfinite(hours) or hours <= 0:
            raise ValidationError(
                f"Team member '{member.name}' needs positive work_hours_per_day.",
                code="MEMBER_HOURS_INVALID",
            )
        if member.work_days is not None and not member.work_days:
            raise ValidationError(
                f"Team member '{member.name}' has no working weekdays.",
                code="MEMBER_NO_WORKING_DAYS",
            )


def is_manual(task: Task) -> bool:
    """Manual tasks with a start date are pinned; without one they are scheduled normally."""
    return task.scheduling_mode == SchedulingMode.MANUAL and task.start_date is not None


def effective_duration(task: Task, hours_per_day: float) -> int:
    """
    Task-level duration in whole working days.

    Explicit duration wins; otherwise estimated hours at the default day
    length; otherwise the task is a milestone.
    """
    if task.duration is not None:
        return int(math.ceil(task.duration))
    if task.estimated_hours:
        return int(math.ceil(task.estimated_hours / hours_per_day))
    return 0


def resolve_durations(tasks: Sequence[Task], hours_per_day: float) -> Dict[str, int]:
    return {task.id: effective_duration(task, hours_per_day) for task in tasks}


__all__ = [
    "validate_tasks",
    "validate_dependencies",
    "validate_assignments",
    "validate_team_members",
    "is_manual",
    "effective_duration",
    "resolve_durations",
]
