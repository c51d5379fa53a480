from .phases import PhaseLockInfo, PhaseUnlockTracker, evaluate_phase_locks
from .scheduling import (
    ScheduleResult,
    SchedulingEngine,
    TaskScheduleReport,
    compute_schedule,
    compute_schedule_with_resources,
)
from .scheduling_service import (
    GenerationCounter,
    ScheduleInputs,
    ScheduleRecalculationService,
    ScheduleRun,
)
from .work_calendar import WorkCalendarEngine

__all__ = [
    "WorkCalendarEngine",
    "SchedulingEngine",
    "ScheduleResult",
    "TaskScheduleReport",
    "compute_schedule",
    "compute_schedule_with_resources",
    "PhaseLockInfo",
    "PhaseUnlockTracker",
    "evaluate_phase_locks",
    "GenerationCounter",
    "ScheduleInputs",
    "ScheduleRun",
    "ScheduleRecalculationService",
]
