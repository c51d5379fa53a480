from dataclasses import replace
from datetime import date

import pytest

from core.exceptions import CycleDetectedError, InvalidDurationError, ValidationError
from core.models import (
    CalendarException,
    ConstraintType,
    DependencyType,
    SchedulingMode,
    Task,
    TaskDependency,
)
from core.services.scheduling import SchedulingEngine, compute_schedule


def _task(tid, **kwargs):
    return Task.create(f"Task {tid}", task_id=tid, **kwargs)


def test_linear_finish_to_start_chain(project_start):
    a = _task("A", duration=2)
    b = _task("B", duration=3)
    deps = [TaskDependency.create("A", "B", DependencyType.FINISH_TO_START, 0)]

    result = compute_schedule([a, b], deps, project_start)
    ra, rb = result.task("A"), result.task("B")

    assert ra.es == project_start
    assert ra.ef == date(2024, 6, 4)
    assert rb.es == ra.ef
    # Wed, Thu, (weekend), Sun
    assert rb.ef == date(2024, 6, 9)
    assert ra.slack == 0 and rb.slack == 0
    assert ra.is_critical and rb.is_critical
    assert result.critical_path_ids == ["A", "B"]
    assert result.project_end_date == date(2024, 6, 9)


def test_start_to_start_lag_ignores_predecessor_duration(project_start):
    a = _task("A", duration=4)
    b = _task("B", duration=2)
    deps = [TaskDependency.create("A", "B", DependencyType.START_TO_START, 1)]

    result = compute_schedule([a, b], deps, project_start)
    ra, rb = result.task("A"), result.task("B")

    assert rb.es == date(2024, 6, 3)
    assert rb.ef == date(2024, 6, 5)
    assert ra.ef == date(2024, 6, 6)
    assert rb.ls == date(2024, 6, 4)
    assert rb.slack == 1
    assert not rb.is_critical
    assert result.critical_path_ids == ["A"]


def test_finish_to_finish_aligns_finishes(project_start):
    a = _task("A", duration=3)
    b = _task("B", duration=1)
    deps = [TaskDependency.create("A", "B", DependencyType.FINISH_TO_FINISH, 0)]

    result = compute_schedule([a, b], deps, project_start)

    assert result.task("B").es == date(2024, 6, 4)
    assert result.task("B").ef == result.task("A").ef


def test_start_to_finish_with_lag(project_start):
    a = _task("A", duration=2)
    b = _task("B", duration=1)
    deps = [TaskDependency.create("A", "B", DependencyType.START_TO_FINISH, 3)]

    result = compute_schedule([a, b], deps, project_start)

    assert result.task("B").es == date(2024, 6, 4)
    assert result.task("B").ef == date(2024, 6, 5)


def test_negative_lag_is_a_lead(project_start):
    a = _task("A", duration=3)
    b = _task("B", duration=2)
    deps = [TaskDependency.create("A", "B", DependencyType.FINISH_TO_START, -1)]

    result = compute_schedule([a, b], deps, project_start)

    assert result.task("A").ef == date(2024, 6, 5)
    assert result.task("B").es == date(2024, 6, 4)


def test_successor_never_starts_before_project_start(project_start):
    a = _task("A", duration=2)
    b = _task("B", duration=1)
    deps = [TaskDependency.create("A", "B", DependencyType.START_TO_FINISH, 0)]

    result = compute_schedule([a, b], deps, project_start)

    assert result.task("B").es == project_start


def test_weekend_project_start_rolls_forward():
    friday = date(2024, 6, 7)
    result = compute_schedule([_task("A", duration=1)], [], friday)

    assert result.task("A").es == date(2024, 6, 9)


def test_holidays_extend_the_schedule(project_start):
    holidays = [CalendarException.create(date(2024, 6, 3), end_date=date(2024, 6, 4), name="Eid")]

    result = compute_schedule([_task("A", duration=2)], [], project_start, holidays=holidays)

    assert result.task("A").ef == date(2024, 6, 6)


def test_custom_work_week(project_start):
    # Monday to Friday
    result = compute_schedule([_task("A", duration=1)], [], project_start, work_days={0, 1, 2, 3, 4})

    assert result.task("A").es == date(2024, 6, 3)


def test_duration_derived_from_estimated_hours(project_start):
    engine = SchedulingEngine(hours_per_day=8.0)
    result = engine.compute_schedule([_task("A", estimated_hours=20)], [], project_start)

    # 20h -> 3 working days
    assert result.task("A").ef == date(2024, 6, 5)


def test_milestone_has_equal_start_and_finish(project_start):
    a = _task("A", duration=2)
    m = _task("M", duration=0)
    deps = [TaskDependency.create("A", "M")]

    result = compute_schedule([a, m], deps, project_start)

    assert result.task("M").es == result.task("M").ef == date(2024, 6, 4)
    assert result.task("M").is_critical


def test_cycle_aborts_with_no_partial_result(project_start):
    tasks = [_task("A", duration=1), _task("B", duration=1), _task("C", duration=1)]
    deps = [
        TaskDependency.create("A", "B"),
        TaskDependency.create("B", "C", DependencyType.START_TO_START),
        TaskDependency.create("C", "A", DependencyType.FINISH_TO_FINISH),
    ]

    with pytest.raises(CycleDetectedError) as exc:
        compute_schedule(tasks, deps, project_start)

    assert exc.value.cycle in (["A", "B", "C"], ["B", "C", "A"], ["C", "A", "B"])
    assert all(t.es is None for t in tasks)


def test_invalid_duration_rejects_whole_batch(project_start):
    tasks = [_task("A", duration=2), _task("B", duration=-1)]

    with pytest.raises(InvalidDurationError) as exc:
        compute_schedule(tasks, [], project_start)

    assert exc.value.task_id == "B"
    assert exc.value.field == "duration"


def test_non_finite_estimate_rejected(project_start):
    with pytest.raises(InvalidDurationError):
        compute_schedule([_task("A", estimated_hours=float("nan"))], [], project_start)


def test_empty_input_returns_empty_result(project_start):
    result = compute_schedule([], [], project_start)

    assert result.tasks == []
    assert result.critical_path_ids == []
    assert result.project_end_date is None


def test_missing_project_start_rejected():
    with pytest.raises(ValidationError):
        compute_schedule([_task("A", duration=1)], [], None)


def test_non_positive_hours_per_day_rejected():
    with pytest.raises(ValidationError):
        SchedulingEngine(hours_per_day=0)


def _network():
    tasks = [
        _task("A", duration=3),
        _task("B", duration=2),
        _task("C", duration=4),
        _task("D", duration=1),
        _task("E", duration=2),
        _task("F", duration=0),
    ]
    deps = [
        TaskDependency.create("A", "B"),
        TaskDependency.create("A", "C", DependencyType.START_TO_START, 1),
        TaskDependency.create("B", "D"),
        TaskDependency.create("C", "E", DependencyType.FINISH_TO_FINISH, 1),
        TaskDependency.create("D", "F"),
        TaskDependency.create("E", "F"),
    ]
    return tasks, deps


def test_pure_cpm_invariants_hold(project_start):
    tasks, deps = _network()
    result = compute_schedule(tasks, deps, project_start, holidays=[date(2024, 6, 11)])

    for task in result.tasks:
        assert task.es <= task.ls
        assert task.ef <= task.lf
        assert task.slack >= 0
        assert task.is_critical == (task.slack == 0)
    assert set(result.critical_path_ids) == {t.id for t in result.tasks if t.slack == 0}
    assert result.project_end_date == max(t.ef for t in result.tasks)
    assert result.critical_path_ids


def test_recompute_is_idempotent_and_ignores_stale_outputs(project_start):
    tasks, deps = _network()
    first = compute_schedule(tasks, deps, project_start)

    # feed the computed records back in, as a caller re-running on saved rows would
    second = compute_schedule(first.tasks, deps, project_start)

    assert first.tasks == second.tasks
    assert first.critical_path_ids == second.critical_path_ids
    assert first.project_end_date == second.project_end_date


def test_input_tasks_are_not_mutated(project_start):
    a = _task("A", duration=2)
    snapshot = replace(a)

    compute_schedule([a], [], project_start)

    assert a == snapshot


def test_manual_task_keeps_its_start_date(project_start):
    a = _task("A", duration=3)
    b = _task("B", duration=1, scheduling_mode=SchedulingMode.MANUAL, start_date=date(2024, 6, 3))
    deps = [TaskDependency.create("A", "B", DependencyType.FINISH_TO_START)]

    result = compute_schedule([a, b], deps, project_start)
    ra, rb = result.task("A"), result.task("B")

    assert rb.es == date(2024, 6, 3)
    assert rb.ef == date(2024, 6, 4)
    assert rb.ls == rb.es and rb.lf == rb.ef
    assert rb.slack == 0
    # A would have to finish before B's user date
    assert ra.lf == date(2024, 6, 3)
    assert ra.slack == -2
    assert ra.is_critical
    assert not result.reports["A"].overallocated
    assert result.project_end_date == date(2024, 6, 5)


def test_manual_task_ignores_start_constraint(project_start):
    task = _task(
        "A",
        duration=2,
        scheduling_mode=SchedulingMode.MANUAL,
        start_date=date(2024, 6, 4),
        constraint_type=ConstraintType.MUST_START_ON,
        constraint_date=date(2024, 6, 10),
    )

    result = compute_schedule([task], [], project_start)

    assert result.task("A").es == date(2024, 6, 4)
    assert result.task("A").ef == date(2024, 6, 6)
    assert not result.reports["A"].constraint_overridden


def test_manual_task_without_start_date_is_scheduled(project_start):
    a = _task("A", duration=2)
    b = _task("B", duration=1, scheduling_mode=SchedulingMode.MANUAL)
    deps = [TaskDependency.create("A", "B", DependencyType.FINISH_TO_START)]

    result = compute_schedule([a, b], deps, project_start)

    assert result.task("B").es == date(2024, 6, 4)


def test_successor_of_manual_task_follows_its_dates(project_start):
    m = _task("M", duration=2, scheduling_mode=SchedulingMode.MANUAL, start_date=date(2024, 6, 5))
    b = _task("B", duration=1)
    deps = [TaskDependency.create("M", "B", DependencyType.FINISH_TO_START)]

    result = compute_schedule([m, b], deps, project_start)

    assert result.task("M").ef == date(2024, 6, 9)
    assert result.task("B").es == date(2024, 6, 9)


def test_unknown_scheduling_mode_rejected(project_start):
    task = _task("A", duration=1, scheduling_mode="fixed")

    with pytest.raises(ValidationError):
        compute_schedule([task], [], project_start)
