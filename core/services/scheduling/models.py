from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from core.models import Task
from core.services.scheduling.leveling_models import AllocationBlock


@dataclass
class TaskScheduleReport:
    """Report-only flags for one task; never persisted with the task."""

    task_id: str
    constraint_overridden: bool = False
    driving_predecessor_id: Optional[str] = None
    driving_predecessor_name: Optional[str] = None
    deadline_violated: bool = False
    deadline: Optional[date] = None
    late_by_days: Optional[int] = None
    overallocated: bool = False

    @property
    def has_warnings(self) -> bool:
        return self.constraint_overridden or self.deadline_violated or self.overallocated


@dataclass
class ScheduleResult:
    tasks: List[Task]
    critical_path_ids: List[str]
    project_end_date: Optional[date]
    reports: Dict[str, TaskScheduleReport] = field(default_factory=dict)
    allocations: Dict[str, List[AllocationBlock]] = field(default_factory=dict)
    leveled: bool = False

    def task(self, task_id: str) -> Task:
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise KeyError(task_id)

    def warnings(self) -> List[TaskScheduleReport]:
        return [report for report in self.reports.values() if report.has_warnings]
