from datetime import date

import pytest

from core.exceptions import ValidationError
from core.models import (
    DependencyType,
    SchedulingMode,
    Task,
    TaskAssignment,
    TaskDependency,
    TaskPriority,
    TeamMember,
    TimeOff,
    TimeOffStatus,
)
from core.services.scheduling import compute_schedule_with_resources
from core.services.scheduling.leveling import collect_assignees, priority_rank


@pytest.fixture
def member():
    return TeamMember.create("Layla", work_hours_per_day=8.0, hourly_rate=50.0, member_id="m1")


def test_same_person_tasks_are_serialised_with_negative_slack(project_start, member):
    a = Task.create("Wiring", task_id="A", duration=2, assignee_id="m1")
    b = Task.create("Plumbing", task_id="B", duration=2, assignee_id="m1")

    result = compute_schedule_with_resources(
        [a, b], [], project_start, team_members=[member]
    )
    ra, rb = result.task("A"), result.task("B")

    assert result.leveled
    assert ra.es == project_start and ra.ef == date(2024, 6, 4)
    # pushed to the first free day of the person after A
    assert rb.es == ra.ef
    assert rb.ef == date(2024, 6, 6)
    # ls stays the CPM value
    assert rb.ls == project_start
    assert rb.slack == -2
    assert rb.is_critical
    assert result.reports["B"].overallocated
    assert not result.reports["A"].overallocated
    assert result.critical_path_ids == ["A", "B"]
    assert result.project_end_date == date(2024, 6, 6)


def test_allocation_ledger_records_blocks_and_cost(project_start, member):
    a = Task.create("Wiring", task_id="A", duration=2, assignee_id="m1")
    b = Task.create("Plumbing", task_id="B", duration=2, assignee_id="m1")

    result = compute_schedule_with_resources(
        [a, b], [], project_start, team_members=[member]
    )
    blocks = result.allocations["m1"]

    assert [blk.task_id for blk in blocks] == ["A", "B"]
    assert blocks[0].working_days == 2
    assert blocks[0].hours == 16
    assert blocks[0].cost == 800
    assert blocks[0].member_name == "Layla"
    assert blocks[1].start == date(2024, 6, 4)
    assert blocks[1].end == date(2024, 6, 6)
    assert blocks[1].occupies(date(2024, 6, 5))
    assert not blocks[1].occupies(date(2024, 6, 6))


def test_allocated_hours_drive_block_length(project_start, member):
    task = Task.create("Survey", task_id="A", duration=1)
    assignment = TaskAssignment.create("A", "m1", allocated_hours=12)

    result = compute_schedule_with_resources(
        [task], [], project_start, team_members=[member], assignments=[assignment]
    )
    block = result.allocations["m1"][0]

    assert block.working_days == 2
    assert block.hours == 12
    assert result.task("A").ef == date(2024, 6, 4)


def test_time_off_pushes_work_past_absence(project_start, member):
    task = Task.create("Survey", task_id="A", duration=1, assignee_id="m1")
    leave = [
        TimeOff.create("m1", date(2024, 6, 2), date(2024, 6, 3)),
        TimeOff.create("m1", date(2024, 6, 4), date(2024, 6, 4), status=TimeOffStatus.PENDING),
    ]

    result = compute_schedule_with_resources(
        [task], [], project_start, team_members=[member], time_off=leave
    )

    assert result.task("A").es == date(2024, 6, 4)
    assert result.task("A").ef == date(2024, 6, 5)
    assert result.reports["A"].overallocated


def test_leveling_never_breaks_dependencies(project_start, member):
    other = TeamMember.create("Omar", member_id="m2")
    a = Task.create("Frame", task_id="A", duration=2, assignee_id="m1")
    b = Task.create("Roof", task_id="B", duration=1, assignee_id="m2")
    c = Task.create("Paint", task_id="C", duration=1, assignee_id="m1")
    deps = [TaskDependency.create("A", "B", DependencyType.FINISH_TO_START)]

    leave = [TimeOff.create("m1", date(2024, 6, 2), date(2024, 6, 2))]
    result = compute_schedule_with_resources(
        [a, b, c], deps, project_start, team_members=[member, other], time_off=leave
    )

    ra, rb = result.task("A"), result.task("B")
    assert ra.es == date(2024, 6, 3)
    assert rb.es >= ra.ef
    for task in result.tasks:
        assert task.es >= project_start


def test_multi_assignee_task_keeps_task_dates_and_books_each_person(project_start, member):
    other = TeamMember.create("Omar", member_id="m2")
    task = Task.create("Pour slab", task_id="A", duration=2)
    assignments = [
        TaskAssignment.create("A", "m1", allocated_hours=8),
        TaskAssignment.create("A", "m2", allocated_hours=24),
    ]

    result = compute_schedule_with_resources(
        [task], [], project_start, team_members=[member, other], assignments=assignments
    )

    assert result.task("A").es == project_start
    assert result.task("A").ef == date(2024, 6, 4)
    assert result.allocations["m1"][0].working_days == 1
    assert result.allocations["m2"][0].working_days == 3
    assert result.allocations["m2"][0].cost is None


def test_no_team_members_falls_back_to_pure_cpm(project_start):
    a = Task.create("Wiring", task_id="A", duration=2, assignee_id="m1")
    b = Task.create("Plumbing", task_id="B", duration=2, assignee_id="m1")

    result = compute_schedule_with_resources([a, b], [], project_start)

    assert not result.leveled
    assert result.allocations == {}
    assert result.task("B").es == project_start


def test_unknown_assignee_is_not_leveled(project_start, member):
    task = Task.create("Survey", task_id="A", duration=1, assignee_id="ghost")
    other = Task.create("Map", task_id="B", duration=1, assignee_id="m1")

    result = compute_schedule_with_resources(
        [task, other], [], project_start, team_members=[member]
    )

    assert result.task("A").es == project_start
    assert "ghost" not in result.allocations


def test_invalid_member_hours_rejected(project_start):
    member = TeamMember.create("Layla", work_hours_per_day=0, member_id="m1")
    task = Task.create("Survey", task_id="A", duration=1, assignee_id="m1")

    with pytest.raises(ValidationError):
        compute_schedule_with_resources([task], [], project_start, team_members=[member])


def test_collect_assignees_merges_legacy_and_assignment_records():
    task = Task.create("Survey", task_id="A", assignee_id="m1")
    seats = collect_assignees(
        [task],
        [TaskAssignment.create("A", "m1", allocated_hours=6), TaskAssignment.create("A", "m2")],
    )

    assert [(s.member_id, s.allocated_hours) for s in seats["A"]] == [("m1", 6), ("m2", None)]


def test_priority_rank_orders_critical_first():
    ranks = [
        priority_rank(Task.create("x", priority=p))
        for p in (TaskPriority.CRITICAL, TaskPriority.HIGH, TaskPriority.MEDIUM, TaskPriority.LOW)
    ]
    assert ranks == sorted(ranks)
    assert priority_rank(Task.create("x", priority="unknown")) == priority_rank(Task.create("y"))


def test_finish_to_finish_holds_when_hours_shorten_the_block(project_start, member):
    a = Task.create("Frame", task_id="A", duration=3)
    b = Task.create("Inspect", task_id="B", duration=3)
    deps = [TaskDependency.create("A", "B", DependencyType.FINISH_TO_FINISH)]
    assignment = TaskAssignment.create("B", "m1", allocated_hours=8)

    result = compute_schedule_with_resources(
        [a, b], deps, project_start, team_members=[member], assignments=[assignment]
    )
    ra, rb = result.task("A"), result.task("B")

    assert ra.ef == date(2024, 6, 5)
    assert rb.es == date(2024, 6, 4)
    assert rb.ef == ra.ef
    assert result.allocations["m1"][0].working_days == 1


def test_start_to_finish_holds_when_hours_shorten_the_block(project_start, member):
    a = Task.create("Order", task_id="A", duration=3)
    b = Task.create("Deliver", task_id="B", duration=3)
    deps = [TaskDependency.create("A", "B", DependencyType.START_TO_FINISH, 2)]
    assignment = TaskAssignment.create("B", "m1", allocated_hours=8)

    result = compute_schedule_with_resources(
        [a, b], deps, project_start, team_members=[member], assignments=[assignment]
    )
    rb = result.task("B")

    # finish no earlier than two working days after A starts
    assert rb.ef >= date(2024, 6, 4)
    assert rb.es == date(2024, 6, 3)
    assert rb.ef == date(2024, 6, 4)


def test_finish_link_checked_on_person_calendar(project_start):
    # works Fri but not Sun, so a one-day block can end before the project day it must reach
    weekday_member = TeamMember.create("Omar", work_days=[0, 1, 2, 3, 4], member_id="m2")
    a = Task.create("Frame", task_id="A", duration=5)
    b = Task.create("Inspect", task_id="B", duration=1, assignee_id="m2")
    deps = [TaskDependency.create("A", "B", DependencyType.FINISH_TO_FINISH)]

    result = compute_schedule_with_resources(
        [a, b], deps, project_start, team_members=[weekday_member]
    )
    ra, rb = result.task("A"), result.task("B")

    assert ra.ef == date(2024, 6, 9)
    assert rb.ef >= ra.ef
    assert rb.es == date(2024, 6, 7)
    assert rb.ef == date(2024, 6, 10)


def test_zero_allocated_hours_books_nothing(project_start, member):
    a = Task.create("Review", task_id="A", duration=2)
    b = Task.create("Survey", task_id="B", duration=1, assignee_id="m1")
    assignment = TaskAssignment.create("A", "m1", allocated_hours=0)

    result = compute_schedule_with_resources(
        [a, b], [], project_start, team_members=[member], assignments=[assignment]
    )

    assert result.task("A").es == project_start
    assert result.task("A").ef == date(2024, 6, 4)
    assert [blk.task_id for blk in result.allocations["m1"]] == ["B"]
    assert result.task("B").es == project_start


def test_manual_task_stays_pinned_during_leveling(project_start, member):
    a = Task.create("Wiring", task_id="A", duration=2, assignee_id="m1")
    m = Task.create(
        "Site visit",
        task_id="M",
        duration=2,
        assignee_id="m1",
        scheduling_mode=SchedulingMode.MANUAL,
        start_date=date(2024, 6, 3),
    )

    result = compute_schedule_with_resources(
        [a, m], [], project_start, team_members=[member]
    )
    rm = result.task("M")

    assert rm.es == date(2024, 6, 3)
    assert rm.ef == date(2024, 6, 5)
    assert result.task("A").es == project_start
    booked = {blk.task_id: blk for blk in result.allocations["m1"]}
    assert booked["M"].start == date(2024, 6, 3)
