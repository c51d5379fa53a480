# core/services/scheduling_service.py
from __future__ import annotations

import logging
import threading
from contextlib import nullcontext
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, ContextManager, Dict, Iterable, Optional, Sequence

from sqlalchemy.orm import Session

from core.events.domain_events import (
    ConstraintOverridden,
    DeadlineViolated,
    DomainEvents,
    ResourceOverallocated,
    ScheduleRecalculated,
    domain_events,
)
from core.interfaces import ScheduleRepository
from core.models import Task, TaskAssignment, TaskDependency, TeamMember, TimeOff
from core.services.common.base import ServiceBase
from core.services.scheduling.engine import SchedulingEngine
from core.services.scheduling.models import ScheduleResult
from core.services.work_calendar.expansion import HolidayInput

logger = logging.getLogger(__name__)


class GenerationCounter:
    """Monotonic per-project counter; the highest issued number is the latest run."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._latest: Dict[str, int] = {}

    def next(self, project_id: str, at_least: int = 0) -> int:
        """Issue the next number, above at_least (the last generation already stored)."""
        with self._lock:
            value = max(self._latest.get(project_id, 0), at_least) + 1
            self._latest[project_id] = value
            return value

    def latest(self, project_id: str) -> int:
        with self._lock:
            return self._latest.get(project_id, 0)

    def is_latest(self, project_id: str, generation: int) -> bool:
        with self._lock:
            return self._latest.get(project_id, 0) == generation


@dataclass
class ScheduleInputs:
    tasks: Sequence[Task]
    dependencies: Sequence[TaskDependency]
    project_start: date
    work_days: Optional[Iterable[int]] = None
    holidays: Sequence[HolidayInput] = ()
    team_members: Sequence[TeamMember] = ()
    time_off: Sequence[TimeOff] = ()
    assignments: Sequence[TaskAssignment] = field(default_factory=tuple)


@dataclass
class ScheduleRun:
    project_id: str
    generation: int
    result: ScheduleResult


class ScheduleRecalculationService(ServiceBase):
    """
    Runs the engine for one project snapshot and writes the outcome back.

    Computation is synchronous; callers that move it to a worker thread hand
    the finished run to `persist`, which drops anything superseded by a newer
    `recalculate` for the same project.
    """

    def __init__(
        self,
        engine: SchedulingEngine,
        schedule_repo: ScheduleRepository,
        session: Session,
        events: Optional[DomainEvents] = None,
        counter: Optional[GenerationCounter] = None,
        trace_scope: Optional[Callable[[str], ContextManager]] = None,
    ):
        super().__init__(session)
        self._engine = engine
        self._schedule_repo = schedule_repo
        self._events = events or domain_events
        self._counter = counter or GenerationCounter()
        self._trace_scope = trace_scope or (lambda _trace_id: nullcontext())

    @property
    def counter(self) -> GenerationCounter:
        return self._counter

    def recalculate(self, project_id: str, inputs: ScheduleInputs) -> ScheduleRun:
        stored = self._schedule_repo.get_project_schedule(project_id)
        generation = self._counter.next(project_id, stored.generation if stored else 0)
        with self._trace_scope(f"schedule-{project_id}-{generation}"):
            with_resources = bool(inputs.team_members)
            if with_resources:
                result = self._engine.compute_schedule_with_resources(
                    inputs.tasks,
                    inputs.dependencies,
                    inputs.project_start,
                    inputs.work_days,
                    inputs.holidays,
                    team_members=inputs.team_members,
                    time_off=inputs.time_off,
                    assignments=inputs.assignments,
                )
            else:
                result = self._engine.compute_schedule(
                    inputs.tasks,
                    inputs.dependencies,
                    inputs.project_start,
                    inputs.work_days,
                    inputs.holidays,
                )
            logger.info("Project %s recalculated as generation %d.", project_id, generation)
            run = ScheduleRun(project_id=project_id, generation=generation, result=result)
            self._publish(run)
        return run

    def persist(self, run: ScheduleRun) -> bool:
        if not self._counter.is_latest(run.project_id, run.generation):
            logger.info(
                "Skipping stale schedule for project %s: generation %d, latest %d.",
                run.project_id,
                run.generation,
                self._counter.latest(run.project_id),
            )
            return False
        try:
            saved = self._schedule_repo.save_schedule(run.project_id, run.generation, run.result)
        except Exception:
            self.rollback()
            raise
        if not saved:
            self.rollback()
            logger.info(
                "Skipping schedule for project %s: generation %d is not newer than the stored one.",
                run.project_id,
                run.generation,
            )
            return False
        self.commit()
        return True

    def recalculate_and_persist(self, project_id: str, inputs: ScheduleInputs) -> ScheduleRun:
        run = self.recalculate(project_id, inputs)
        self.persist(run)
        return run

    def _publish(self, run: ScheduleRun) -> None:
        result = run.result
        names = {task.id: task.name for task in result.tasks}
        self._events.schedule_recalculated.emit(
            ScheduleRecalculated(
                project_id=run.project_id,
                generation=run.generation,
                project_end_date=result.project_end_date,
                critical_path_ids=tuple(result.critical_path_ids),
            )
        )
        for report in result.warnings():
            task_name = names.get(report.task_id, report.task_id)
            if report.constraint_overridden:
                self._events.constraint_overridden.emit(
                    ConstraintOverridden(
                        project_id=run.project_id,
                        task_id=report.task_id,
                        task_name=task_name,
                        driving_predecessor_id=report.driving_predecessor_id,
                        driving_predecessor_name=report.driving_predecessor_name,
                    )
                )
            if report.deadline_violated and report.deadline is not None:
                self._events.deadline_violated.emit(
                    DeadlineViolated(
                        project_id=run.project_id,
                        task_id=report.task_id,
                        task_name=task_name,
                        deadline=report.deadline,
                        late_by_days=report.late_by_days,
                    )
                )
            if report.overallocated:
                self._events.resource_overallocated.emit(
                    ResourceOverallocated(
                        project_id=run.project_id,
                        task_id=report.task_id,
                        task_name=task_name,
                        slack=result.task(report.task_id).slack or 0,
                    )
                )


__all__ = [
    "GenerationCounter",
    "ScheduleInputs",
    "ScheduleRun",
    "ScheduleRecalculationService",
]
