"""Schedule and phase notifications for caller-side listeners (toasts, caches, sync)."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.events.signal import Signal


@dataclass(frozen=True)
class ScheduleRecalculated:
    project_id: str
    generation: int
    project_end_date: Optional[date]
    critical_path_ids: tuple[str, ...]


@dataclass(frozen=True)
class ConstraintOverridden:
    project_id: str
    task_id: str
    task_name: str
    driving_predecessor_id: Optional[str]
    driving_predecessor_name: Optional[str]


@dataclass(frozen=True)
class DeadlineViolated:
    project_id: str
    task_id: str
    task_name: str
    deadline: date
    late_by_days: Optional[int]


@dataclass(frozen=True)
class ResourceOverallocated:
    project_id: str
    task_id: str
    task_name: str
    slack: int


@dataclass(frozen=True)
class PhaseUnlocked:
    project_id: str
    phase_id: str
    phase_name: str
    completed_phase_id: Optional[str]
    completed_phase_name: Optional[str]


class DomainEvents:
    def __init__(self) -> None:
        self.schedule_recalculated: Signal[ScheduleRecalculated] = Signal("schedule_recalculated")
        self.constraint_overridden: Signal[ConstraintOverridden] = Signal("constraint_overridden")
        self.deadline_violated: Signal[DeadlineViolated] = Signal("deadline_violated")
        self.resource_overallocated: Signal[ResourceOverallocated] = Signal("resource_overallocated")
        self.phase_unlocked: Signal[PhaseUnlocked] = Signal("phase_unlocked")

    def disconnect_all(self) -> None:
        for signal in (
            self.schedule_recalculated,
            self.constraint_overridden,
            self.deadline_violated,
            self.resource_overallocated,
            self.phase_unlocked,
        ):
            signal.disconnect_all()


# SINGLE global instance
domain_events = DomainEvents()
