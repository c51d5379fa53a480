from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Dict, List, Mapping, Optional, Sequence

from core.models import Task
from core.services.scheduling.constraints import ConstraintResolver, StartResolution
from core.services.scheduling.leveling_models import AllocationBlock
from core.services.scheduling.models import ScheduleResult, TaskScheduleReport
from core.services.work_calendar.engine import WorkCalendarEngine


def build_schedule_result(
    tasks: Sequence[Task],
    topo_order: List[str],
    es: Mapping[str, date],
    ef: Mapping[str, date],
    ls: Mapping[str, date],
    lf: Mapping[str, date],
    calendar: WorkCalendarEngine,
    resolver: ConstraintResolver,
    resolutions: Mapping[str, StartResolution],
    allocations: Optional[Dict[str, List[AllocationBlock]]] = None,
    leveled: bool = False,
) -> ScheduleResult:
    """
    Assemble new task records plus report flags.

    Slack at or below zero is critical. Without manual tasks the pure CPM path
    never goes below zero; a manual task pinned ahead of its predecessors, or
    leveling, can push it negative. Only leveled runs flag overallocation.
    """
    names = {task.id: task.name for task in tasks}
    scheduled: List[Task] = []
    reports: Dict[str, TaskScheduleReport] = {}
    slack_by_id: Dict[str, int] = {}

    for task in tasks:
        est, eft, lst, lft = es[task.id], ef[task.id], ls[task.id], lf[task.id]
        slack = calendar.count_working_days(est, lst)
        is_critical = slack <= 0
        slack_by_id[task.id] = slack

        scheduled.append(
            replace(
                task,
                es=est,
                ef=eft,
                ls=lst,
                lf=lft,
                slack=slack,
                is_critical=is_critical,
            )
        )

        resolution = resolutions.get(task.id)
        deadline = resolver.check_deadline(task, est, eft)
        driver_id = resolution.driving_predecessor_id if resolution and resolution.overridden else None
        reports[task.id] = TaskScheduleReport(
            task_id=task.id,
            constraint_overridden=bool(resolution and resolution.overridden),
            driving_predecessor_id=driver_id,
            driving_predecessor_name=names.get(driver_id) if driver_id else None,
            deadline_violated=deadline.violated,
            deadline=deadline.deadline,
            late_by_days=deadline.late_by_days,
            overallocated=leveled and slack < 0,
        )

    critical_ids = [
        task_id
        for task_id in topo_order
        if slack_by_id[task_id] <= 0
    ]
    project_end = max(ef.values()) if ef else None

    return ScheduleResult(
        tasks=scheduled,
        critical_path_ids=critical_ids,
        project_end_date=project_end,
        reports=reports,
        allocations=allocations or {},
        leveled=leveled,
    )
