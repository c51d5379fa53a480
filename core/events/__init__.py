from core.events.domain_events import (
    ConstraintOverridden,
    DeadlineViolated,
    DomainEvents,
    PhaseUnlocked,
    ResourceOverallocated,
    ScheduleRecalculated,
    domain_events,
)
from core.events.signal import Signal

__all__ = [
    "Signal",
    "DomainEvents",
    "domain_events",
    "ScheduleRecalculated",
    "ConstraintOverridden",
    "DeadlineViolated",
    "ResourceOverallocated",
    "PhaseUnlocked",
]
