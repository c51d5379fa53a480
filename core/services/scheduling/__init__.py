from .engine import SchedulingEngine, compute_schedule, compute_schedule_with_resources
from .graph import DependencyGraph
from .leveling import ResourceLevelingEngine
from .leveling_models import AllocationBlock
from .models import ScheduleResult, TaskScheduleReport

__all__ = [
    "SchedulingEngine",
    "compute_schedule",
    "compute_schedule_with_resources",
    "DependencyGraph",
    "ResourceLevelingEngine",
    "AllocationBlock",
    "ScheduleResult",
    "TaskScheduleReport",
]
