from __future__ import annotations

import heapq
import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, List, Mapping, Optional, Sequence

from core.models import Task, TaskAssignment, TaskPriority, TeamMember, TimeOff
from core.services.scheduling.graph import DependencyGraph
from core.services.scheduling.leveling_models import AllocationBlock
from core.services.scheduling.passes import ForwardPassResult, dependency_floor, finish_floor
from core.services.work_calendar.engine import WorkCalendarEngine
from core.services.work_calendar.expansion import expand_time_off

logger = logging.getLogger(__name__)

_PRIORITY_RANK = {
    TaskPriority.CRITICAL: 0,
    TaskPriority.HIGH: 1,
    TaskPriority.MEDIUM: 2,
    TaskPriority.LOW: 3,
}


def priority_rank(task: Task) -> int:
    """Lower rank is served first; unknown priorities sort with medium."""
    try:
        return _PRIORITY_RANK[TaskPriority(task.priority)]
    except ValueError:
        return _PRIORITY_RANK[TaskPriority.MEDIUM]


@dataclass
class _Seat:
    member_id: str
    allocated_hours: Optional[float] = None


@dataclass
class LevelingOutcome:
    es: Dict[str, date]
    ef: Dict[str, date]
    allocations: Dict[str, List[AllocationBlock]] = field(default_factory=dict)


def collect_assignees(
    tasks: Sequence[Task],
    assignments: Sequence[TaskAssignment],
) -> Dict[str, List[_Seat]]:
    """Legacy assignee_id first, then assignment records; duplicates collapse."""
    seats: Dict[str, List[_Seat]] = defaultdict(list)
    for task in tasks:
        if task.assignee_id:
            seats[task.id].append(_Seat(task.assignee_id))
    for assignment in assignments:
        existing = next(
            (s for s in seats[assignment.task_id] if s.member_id == assignment.member_id),
            None,
        )
        if existing is None:
            seats[assignment.task_id].append(
                _Seat(assignment.member_id, assignment.allocated_hours)
            )
        elif assignment.allocated_hours is not None:
            existing.allocated_hours = assignment.allocated_hours
    return {task_id: items for task_id, items in seats.items() if items}


class ResourceLevelingEngine:
    """
    Single deterministic first-fit pass that serialises each person's work.

    Tasks are released once every predecessor has realised dates; among the
    released ones the earliest CPM start goes first, then topological position,
    then priority. A task never starts before its CPM early start nor before
    its predecessors allow on their realised dates.
    """

    def __init__(self, calendar: WorkCalendarEngine, hours_per_day: float = 8.0):
        self._calendar = calendar
        self._hours_per_day = hours_per_day

    @staticmethod
    def is_applicable(
        tasks: Sequence[Task],
        team_members: Sequence[TeamMember],
        assignments: Sequence[TaskAssignment] = (),
    ) -> bool:
        if not team_members:
            return False
        task_ids = {task.id for task in tasks}
        return any(task.assignee_id for task in tasks) or any(
            a.task_id in task_ids for a in assignments
        )

    def level(
        self,
        tasks_by_id: Mapping[str, Task],
        graph: DependencyGraph,
        topo_order: List[str],
        durations: Mapping[str, int],
        cpm: ForwardPassResult,
        project_start: date,
        team_members: Sequence[TeamMember],
        time_off: Sequence[TimeOff] = (),
        assignments: Sequence[TaskAssignment] = (),
    ) -> LevelingOutcome:
        members = {member.id: member for member in team_members}
        time_off_by_member = expand_time_off(time_off)
        person_calendars = {
            member_id: self._calendar.for_person(
                member.work_days,
                time_off_by_member.get(member_id, ()),
            )
            for member_id, member in members.items()
        }
        occupied: Dict[str, set[date]] = {member_id: set() for member_id in members}
        ledger: Dict[str, List[AllocationBlock]] = {member_id: [] for member_id in members}

        seats_by_task = collect_assignees(list(tasks_by_id.values()), assignments)
        for task_id, seats in seats_by_task.items():
            unknown = [s.member_id for s in seats if s.member_id not in members]
            if unknown:
                logger.debug("Task %s assigned to unknown members %s; not leveled for them.", task_id, unknown)

        base = self._calendar.next_working_day(project_start)
        remaining = {task_id: len(graph.incoming(task_id)) for task_id in topo_order}
        ready: list[tuple[date, int, int, str]] = []
        for task_id in topo_order:
            if remaining[task_id] == 0:
                heapq.heappush(ready, self._queue_key(tasks_by_id[task_id], cpm, graph))

        es: Dict[str, date] = {}
        ef: Dict[str, date] = {}
        while ready:
            _es, _topo, _rank, task_id = heapq.heappop(ready)
            task = tasks_by_id[task_id]
            duration = durations[task_id]

            seats = [s for s in seats_by_task.get(task_id, []) if s.member_id in members]
            seat_days = [
                self._block_days(members[seat.member_id], self._seat_hours(task, seat), duration)
                for seat in seats
            ]
            pinned = task_id in cpm.pinned
            # a lone assignee's block sets the task dates, so links are checked on its length
            single = len(seats) == 1 and seat_days[0] > 0 and not pinned

            if pinned:
                floor = cpm.es[task_id]
            else:
                floor, _driver = dependency_floor(
                    task_id,
                    seat_days[0] if single else duration,
                    graph,
                    self._calendar,
                    es,
                    ef,
                    base,
                )
                floor = max(floor, cpm.es[task_id])
            must_finish = finish_floor(task_id, graph, self._calendar, es, ef) if single else None

            blocks = [
                self._reserve(
                    task=task,
                    member=members[seat.member_id],
                    calendar=person_calendars[seat.member_id],
                    occupied=occupied[seat.member_id],
                    floor=floor,
                    hours=self._seat_hours(task, seat),
                    days=days,
                    finish_by=must_finish,
                    pinned=pinned,
                )
                for seat, days in zip(seats, seat_days)
            ]
            for block in blocks:
                if block is not None:
                    ledger[block.member_id].append(block)

            if pinned:
                es[task_id] = cpm.es[task_id]
                ef[task_id] = cpm.ef[task_id]
            elif single:
                es[task_id] = blocks[0].start
                ef[task_id] = blocks[0].end
            else:
                es[task_id] = floor
                ef[task_id] = self._calendar.add_working_days(floor, duration)

            if es[task_id] > cpm.es[task_id]:
                logger.debug(
                    "Leveling moved task %s from %s to %s.",
                    task_id,
                    cpm.es[task_id].isoformat(),
                    es[task_id].isoformat(),
                )

            for dep in graph.outgoing(task_id):
                succ_id = dep.successor_task_id
                remaining[succ_id] -= 1
                if remaining[succ_id] == 0:
                    heapq.heappush(ready, self._queue_key(tasks_by_id[succ_id], cpm, graph))

        allocations = {
            member_id: sorted(blocks, key=lambda b: (b.start, b.task_id))
            for member_id, blocks in ledger.items()
            if blocks
        }
        return LevelingOutcome(es=es, ef=ef, allocations=allocations)

    @staticmethod
    def _queue_key(task: Task, cpm: ForwardPassResult, graph: DependencyGraph) -> tuple[date, int, int, str]:
        return (cpm.es[task.id], graph.topo_index(task.id), priority_rank(task), task.id)

    @staticmethod
    def _seat_hours(task: Task, seat: _Seat) -> Optional[float]:
        if seat.allocated_hours is not None:
            return float(seat.allocated_hours)
        if task.estimated_hours:
            return float(task.estimated_hours)
        return None

    def _block_days(self, member: TeamMember, hours: Optional[float], duration: int) -> int:
        if hours is None:
            return duration
        hours_per_day = member.work_hours_per_day or self._hours_per_day
        return int(math.ceil(hours / hours_per_day))

    def _reserve(
        self,
        task: Task,
        member: TeamMember,
        calendar: WorkCalendarEngine,
        occupied: set[date],
        floor: date,
        hours: Optional[float],
        days: int,
        finish_by: Optional[date] = None,
        pinned: bool = False,
    ) -> Optional[AllocationBlock]:
        """
        First contiguous run of free working days at or after floor.

        Pinned tasks are booked where they stand, clashes included. A
        finish_by date pushes the block until its end reaches that date.
        """
        if days <= 0:
            return None

        start = floor if pinned else calendar.next_working_day(floor)
        while True:
            block_days: List[date] = []
            clash: Optional[date] = None
            current = start
            while len(block_days) < days:
                if calendar.is_working_day(current):
                    if current in occupied and not pinned:
                        clash = current
                        break
                    block_days.append(current)
                current += timedelta(days=1)
            if clash is not None:
                start = calendar.next_working_day(clash, include_today=False)
                continue
            end = calendar.add_working_days(calendar.next_working_day(start), days)
            if finish_by is not None and end < finish_by:
                start = calendar.next_working_day(start, include_today=False)
                continue
            break

        occupied.update(block_days)
        hours_per_day = member.work_hours_per_day or self._hours_per_day
        booked_hours = hours if hours is not None else days * hours_per_day
        cost = booked_hours * member.hourly_rate if member.hourly_rate is not None else None
        return AllocationBlock(
            member_id=member.id,
            member_name=member.name,
            task_id=task.id,
            task_name=task.name,
            start=start,
            end=end,
            working_days=days,
            hours=booked_hours,
            cost=cost,
        )


__all__ = ["LevelingOutcome", "ResourceLevelingEngine", "collect_assignees", "priority_rank"]
