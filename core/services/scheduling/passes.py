from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Mapping, Optional, Set

from core.exceptions import ValidationError
from core.models import Task
from core.services.scheduling.constraints import ConstraintResolver, StartResolution
from core.services.scheduling.graph import DependencyGraph
from core.services.scheduling.rules import Window, kind_for
from core.services.scheduling.validation import is_manual
from core.services.work_calendar.engine import WorkCalendarEngine


@dataclass
class ForwardPassResult:
    es: Dict[str, date]
    ef: Dict[str, date]
    resolutions: Dict[str, StartResolution] = field(default_factory=dict)
    # manual tasks pinned to their user start date
    pinned: Set[str] = field(default_factory=set)

    @property
    def project_early_finish(self) -> date:
        if not self.ef:
            raise ValidationError("No computed finish dates; the schedule has no tasks.")
        return max(self.ef.values())


def dependency_floor(
    task_id: str,
    duration: int,
    graph: DependencyGraph,
    calendar: WorkCalendarEngine,
    starts: Mapping[str, date],
    finishes: Mapping[str, date],
    base: date,
) -> tuple[date, Optional[str]]:
    """
    Earliest start allowed by the incoming dependencies and the base date.

    Returns the start (rolled to a working day) and the predecessor that
    pushed it past the base, if any.
    """
    earliest = base
    driver: Optional[str] = None
    for dep in graph.incoming(task_id):
        pred_id = dep.predecessor_task_id
        pred_window = Window(starts[pred_id], finishes[pred_id])
        candidate = kind_for(dep).forward(calendar, dep, pred_window, duration)
        if candidate > earliest:
            earliest = candidate
            driver = pred_id
    return calendar.next_working_day(earliest), driver


def finish_floor(
    task_id: str,
    graph: DependencyGraph,
    calendar: WorkCalendarEngine,
    starts: Mapping[str, date],
    finishes: Mapping[str, date],
) -> Optional[date]:
    """Earliest exclusive finish required by incoming FF/SF links, or None."""
    earliest: Optional[date] = None
    for dep in graph.incoming(task_id):
        rule = kind_for(dep).finish
        if rule is None:
            continue
        pred_id = dep.predecessor_task_id
        candidate = rule(calendar, dep, Window(starts[pred_id], finishes[pred_id]))
        if earliest is None or candidate > earliest:
            earliest = candidate
    return earliest


def run_forward_pass(
    tasks_by_id: Mapping[str, Task],
    topo_order: List[str],
    graph: DependencyGraph,
    durations: Mapping[str, int],
    calendar: WorkCalendarEngine,
    project_start: date,
    resolver: ConstraintResolver,
) -> ForwardPassResult:
    base = calendar.next_working_day(project_start)
    result = ForwardPassResult(es={}, ef={})

    for task_id in topo_order:
        task = tasks_by_id[task_id]
        duration = durations[task_id]
        if is_manual(task):
            # user date is kept as entered, predecessors and constraints do not move it
            result.pinned.add(task_id)
            result.es[task_id] = task.start_date
            result.ef[task_id] = calendar.add_working_days(task.start_date, duration)
            continue

        network_es, driver = dependency_floor(
            task_id, duration, graph, calendar, result.es, result.ef, base
        )
        resolution = resolver.resolve_start(task, network_es, driver)
        result.resolutions[task_id] = resolution
        result.es[task_id] = resolution.es
        result.ef[task_id] = calendar.add_working_days(resolution.es, duration)

    return result


def run_backward_pass(
    topo_order: List[str],
    graph: DependencyGraph,
    durations: Mapping[str, int],
    calendar: WorkCalendarEngine,
    project_early_finish: date,
    forward: Optional[ForwardPassResult] = None,
) -> tuple[Dict[str, date], Dict[str, date]]:
    ls: Dict[str, date] = {}
    lf: Dict[str, date] = {}
    pinned = forward.pinned if forward is not None else set()

    for task_id in reversed(topo_order):
        if task_id in pinned:
            ls[task_id] = forward.es[task_id]
            lf[task_id] = forward.ef[task_id]
            continue

        duration = durations[task_id]
        # every task has to be done by the project finish, not only end tasks
        late_finish = project_early_finish
        for dep in graph.outgoing(task_id):
            succ_id = dep.successor_task_id
            succ_window = Window(ls[succ_id], lf[succ_id])
            candidate = kind_for(dep).backward(calendar, dep, succ_window, duration)
            if candidate < late_finish:
                late_finish = candidate
        lf[task_id] = late_finish
        ls[task_id] = calendar.add_working_days(late_finish, -duration)

    return ls, lf
