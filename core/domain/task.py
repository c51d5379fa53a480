from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.domain.enums import (
    ConstraintType,
    DependencyType,
    SchedulingMode,
    TaskPriority,
    TaskStatus,
)
from core.domain.identifiers import ensure_id


@dataclass
class Task:
    id: str
    name: str
    duration: Optional[float] = None
    estimated_hours: Optional[float] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee_id: Optional[str] = None
    phase_id: Optional[str] = None
    constraint_type: ConstraintType = ConstraintType.NONE
    constraint_date: Optional[date] = None
    # manual tasks keep start_date and are not moved by the network
    scheduling_mode: SchedulingMode = SchedulingMode.AUTO
    start_date: Optional[date] = None

    # scheduling outputs, written only by the engine
    es: Optional[date] = None
    ef: Optional[date] = None
    ls: Optional[date] = None
    lf: Optional[date] = None
    slack: Optional[int] = None
    is_critical: bool = False

    @staticmethod
    def create(name: str, task_id: str | None = None, **extra) -> "Task":
        return Task(id=ensure_id(task_id), name=name, **extra)


@dataclass
class TaskAssignment:
    id: str
    task_id: str
    member_id: str
    allocated_hours: Optional[float] = None

    @staticmethod
    def create(
        task_id: str,
        member_id: str,
        allocated_hours: Optional[float] = None,
    ) -> "TaskAssignment":
        return TaskAssignment(
            id=ensure_id(None),
            task_id=task_id,
            member_id=member_id,
            allocated_hours=allocated_hours,
        )


@dataclass
class TaskDependency:
    id: str
    predecessor_task_id: str
    successor_task_id: str
    dependency_type: DependencyType = DependencyType.FINISH_TO_START
    lag_days: int = 0

    @staticmethod
    def create(
        predecessor_id: str,
        successor_id: str,
        dependency_type: DependencyType = DependencyType.FINISH_TO_START,
        lag_days: int = 0,
    ) -> "TaskDependency":
        return TaskDependency(
            id=ensure_id(None),
            predecessor_task_id=predecessor_id,
            successor_task_id=successor_id,
            dependency_type=dependency_type,
            lag_days=lag_days,
        )


__all__ = ["Task", "TaskAssignment", "TaskDependency"]
