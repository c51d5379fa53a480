from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Optional

from core.models import DependencyType, TaskDependency
from core.services.work_calendar.engine import WorkCalendarEngine


@dataclass(frozen=True)
class Window:
    """Start and exclusive finish of one task, as seen by a dependency rule."""

    start: date
    finish: date


# (calendar, dependency, predecessor window, successor duration) -> successor ES candidate
ForwardRule = Callable[[WorkCalendarEngine, TaskDependency, Window, int], date]
# (calendar, dependency, successor late window, predecessor duration) -> predecessor LF candidate
BackwardRule = Callable[[WorkCalendarEngine, TaskDependency, Window, int], date]
# (calendar, dependency, predecessor window) -> earliest successor finish
FinishRule = Callable[[WorkCalendarEngine, TaskDependency, Window], date]


@dataclass(frozen=True)
class DependencyKind:
    dependency_type: DependencyType
    forward: ForwardRule
    backward: BackwardRule
    # only finish-anchored links bound the successor finish directly
    finish: Optional[FinishRule] = None


def _fs_forward(cal: WorkCalendarEngine, dep: TaskDependency, pred: Window, duration: int) -> date:
    return cal.add_working_days(pred.finish, dep.lag_days)


def _fs_backward(cal: WorkCalendarEngine, dep: TaskDependency, succ: Window, duration: int) -> date:
    return cal.add_working_days(succ.start, -dep.lag_days)


def _ss_forward(cal: WorkCalendarEngine, dep: TaskDependency, pred: Window, duration: int) -> date:
    return cal.add_working_days(pred.start, dep.lag_days)


def _ss_backward(cal: WorkCalendarEngine, dep: TaskDependency, succ: Window, duration: int) -> date:
    # LS_p <= LS_s - lag => LF_p <= LS_s - lag + duration_p
    latest_start = cal.add_working_days(succ.start, -dep.lag_days)
    return cal.add_working_days(latest_start, duration)


def _ff_forward(cal: WorkCalendarEngine, dep: TaskDependency, pred: Window, duration: int) -> date:
    # EF_s >= EF_p + lag => ES_s >= EF_p + lag - duration_s
    earliest_finish = cal.add_working_days(pred.finish, dep.lag_days)
    return cal.add_working_days(earliest_finish, -duration)


def _ff_finish(cal: WorkCalendarEngine, dep: TaskDependency, pred: Window) -> date:
    return cal.add_working_days(pred.finish, dep.lag_days)


def _ff_backward(cal: WorkCalendarEngine, dep: TaskDependency, succ: Window, duration: int) -> date:
    return cal.add_working_days(succ.finish, -dep.lag_days)


def _sf_forward(cal: WorkCalendarEngine, dep: TaskDependency, pred: Window, duration: int) -> date:
    # EF_s >= ES_p + lag => ES_s >= ES_p + lag - duration_s
    earliest_finish = cal.add_working_days(pred.start, dep.lag_days)
    return cal.add_working_days(earliest_finish, -duration)


def _sf_finish(cal: WorkCalendarEngine, dep: TaskDependency, pred: Window) -> date:
    return cal.add_working_days(pred.start, dep.lag_days)


def _sf_backward(cal: WorkCalendarEngine, dep: TaskDependency, succ: Window, duration: int) -> date:
    # ES_p + lag <= EF_s => LS_p <= LF_s - lag => LF_p <= LF_s - lag + duration_p
    latest_start = cal.add_working_days(succ.finish, -dep.lag_days)
    return cal.add_working_days(latest_start, duration)


DEPENDENCY_KINDS: Dict[DependencyType, DependencyKind] = {
    DependencyType.FINISH_TO_START: DependencyKind(
        DependencyType.FINISH_TO_START, _fs_forward, _fs_backward
    ),
    DependencyType.START_TO_START: DependencyKind(
        DependencyType.START_TO_START, _ss_forward, _ss_backward
    ),
    DependencyType.FINISH_TO_FINISH: DependencyKind(
        DependencyType.FINISH_TO_FINISH, _ff_forward, _ff_backward, _ff_finish
    ),
    DependencyType.START_TO_FINISH: DependencyKind(
        DependencyType.START_TO_FINISH, _sf_forward, _sf_backward, _sf_finish
    ),
}


def kind_for(dep: TaskDependency) -> DependencyKind:
    return DEPENDENCY_KINDS[DependencyType(dep.dependency_type)]


__all__ = ["Window", "DependencyKind", "DEPENDENCY_KINDS", "kind_for"]
