# core/services/scheduling/engine.py
from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Sequence

from core.exceptions import ValidationError
from core.models import Task, TaskAssignment, TaskDependency, TeamMember, TimeOff
from core.services.scheduling.constraints import ConstraintResolver
from core.services.scheduling.graph import build_project_dependency_graph
from core.services.scheduling.leveling import ResourceLevelingEngine
from core.services.scheduling.models import ScheduleResult
from core.services.scheduling.passes import run_backward_pass, run_forward_pass
from core.services.scheduling.results import build_schedule_result
from core.services.scheduling.validation import (
    resolve_durations,
    validate_assignments,
    validate_dependencies,
    validate_tasks,
    validate_team_members,
)
from core.services.work_calendar.engine import WorkCalendarEngine
from core.services.work_calendar.expansion import HolidayInput, expand_calendar_exceptions

logger = logging.getLogger(__name__)


class SchedulingEngine:
    """
    CPM-style scheduling engine:
    - Forward pass: ES/EF
    - Backward pass: LS/LF
    - FS, FF, SS, SF with lag_days (negative lag is a lead)
    - Start / finish constraints as floors and report-only deadlines
    - Optional resource leveling per assigned person

    Holds no state between calls; each call validates its snapshot, computes,
    and returns new task records.
    """

    def __init__(self, hours_per_day: float = 8.0):
        if hours_per_day <= 0:
            raise ValidationError("hours_per_day must be positive.", code="HOURS_PER_DAY_INVALID")
        self._hours_per_day = hours_per_day

    def compute_schedule(
        self,
        tasks: Sequence[Task],
        dependencies: Sequence[TaskDependency],
        project_start: date,
        work_days: Optional[Iterable[int]] = None,
        holidays: Iterable[HolidayInput] = (),
    ) -> ScheduleResult:
        return self._compute(tasks, dependencies, project_start, work_days, holidays)

    def compute_schedule_with_resources(
        self,
        tasks: Sequence[Task],
        dependencies: Sequence[TaskDependency],
        project_start: date,
        work_days: Optional[Iterable[int]] = None,
        holidays: Iterable[HolidayInput] = (),
        team_members: Sequence[TeamMember] = (),
        time_off: Sequence[TimeOff] = (),
        assignments: Sequence[TaskAssignment] = (),
    ) -> ScheduleResult:
        return self._compute(
            tasks,
            dependencies,
            project_start,
            work_days,
            holidays,
            team_members=team_members,
            time_off=time_off,
            assignments=assignments,
            with_resources=True,
        )

    def _compute(
        self,
        tasks: Sequence[Task],
        dependencies: Sequence[TaskDependency],
        project_start: date,
        work_days: Optional[Iterable[int]],
        holidays: Iterable[HolidayInput],
        team_members: Sequence[TeamMember] = (),
        time_off: Sequence[TimeOff] = (),
        assignments: Sequence[TaskAssignment] = (),
        with_resources: bool = False,
    ) -> ScheduleResult:
        tasks = list(tasks)
        dependencies = list(dependencies)
        assignments = list(assignments)

        # structural checks first: nothing below runs on a corrupt snapshot
        validate_tasks(tasks)
        validate_dependencies(dependencies)
        graph = build_project_dependency_graph(tasks, dependencies)
        if with_resources:
            validate_team_members(team_members)
            validate_assignments(assignments)

        if not tasks:
            return ScheduleResult(tasks=[], critical_path_ids=[], project_end_date=None)
        if project_start is None:
            raise ValidationError("Project start date is required.", code="PROJECT_START_REQUIRED")

        calendar = WorkCalendarEngine(work_days, expand_calendar_exceptions(holidays))
        resolver = ConstraintResolver(calendar)
        tasks_by_id = {task.id: task for task in tasks}
        durations = resolve_durations(tasks, self._hours_per_day)
        topo_order = graph.topological_order()

        forward = run_forward_pass(
            tasks_by_id=tasks_by_id,
            topo_order=topo_order,
            graph=graph,
            durations=durations,
            calendar=calendar,
            project_start=project_start,
            resolver=resolver,
        )
        ls, lf = run_backward_pass(
            topo_order=topo_order,
            graph=graph,
            durations=durations,
            calendar=calendar,
            project_early_finish=forward.project_early_finish,
            forward=forward,
        )

        es, ef = forward.es, forward.ef
        allocations = None
        leveled = with_resources and ResourceLevelingEngine.is_applicable(
            tasks, team_members, assignments
        )
        if leveled:
            outcome = ResourceLevelingEngine(calendar, self._hours_per_day).level(
                tasks_by_id=tasks_by_id,
                graph=graph,
                topo_order=topo_order,
                durations=durations,
                cpm=forward,
                project_start=project_start,
                team_members=team_members,
                time_off=time_off,
                assignments=assignments,
            )
            es, ef, allocations = outcome.es, outcome.ef, outcome.allocations

        result = build_schedule_result(
            tasks=tasks,
            topo_order=topo_order,
            es=es,
            ef=ef,
            ls=ls,
            lf=lf,
            calendar=calendar,
            resolver=resolver,
            resolutions=forward.resolutions,
            allocations=allocations,
            leveled=leveled,
        )
        logger.info(
            "Scheduled %d tasks (%d critical, leveled=%s); project end %s.",
            len(result.tasks),
            len(result.critical_path_ids),
            leveled,
            result.project_end_date.isoformat() if result.project_end_date else "-",
        )
        return result


_default_engine = SchedulingEngine()


def compute_schedule(
    tasks: Sequence[Task],
    dependencies: Sequence[TaskDependency],
    project_start: date,
    work_days: Optional[Iterable[int]] = None,
    holidays: Iterable[HolidayInput] = (),
) -> ScheduleResult:
    return _default_engine.compute_schedule(tasks, dependencies, project_start, work_days, holidays)


def compute_schedule_with_resources(
    tasks: Sequence[Task],
    dependencies: Sequence[TaskDependency],
    project_start: date,
    work_days: Optional[Iterable[int]] = None,
    holidays: Iterable[HolidayInput] = (),
    team_members: Sequence[TeamMember] = (),
    time_off: Sequence[TimeOff] = (),
    assignments: Sequence[TaskAssignment] = (),
) -> ScheduleResult:
    return _default_engine.compute_schedule_with_resources(
        tasks,
        dependencies,
        project_start,
        work_days,
        holidays,
        team_members,
        time_off,
        assignments,
    )
