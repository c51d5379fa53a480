from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, List, Mapping, Optional, Sequence

from core.events.domain_events import DomainEvents, PhaseUnlocked, domain_events
from core.models import ProjectPhase, Task
from core.services.phases.lock import PhaseLockInfo, evaluate_phase_locks

logger = logging.getLogger(__name__)


def detect_phase_unlocks(
    project_id: str,
    previous: Mapping[str, PhaseLockInfo],
    current: Mapping[str, PhaseLockInfo],
    phases: Sequence[ProjectPhase],
) -> List[PhaseUnlocked]:
    """Phases that were locked in `previous` and are open in `current`."""
    names = {phase.id: phase.name for phase in phases}
    events: List[PhaseUnlocked] = []
    for phase_id, info in current.items():
        before = previous.get(phase_id)
        if before is None or not before.is_locked or info.is_locked:
            continue
        events.append(
            PhaseUnlocked(
                project_id=project_id,
                phase_id=phase_id,
                phase_name=names.get(phase_id, phase_id),
                completed_phase_id=before.blocked_by_phase_id,
                completed_phase_name=before.blocked_by_phase_name,
            )
        )
    return events


class PhaseUnlockTracker:
    """
    Remembers the last lock map of the project in view and fires phase_unlocked on
    locked -> unlocked transitions.

    The first observation of a project only records a baseline, so opening a
    project (or switching to another one) never produces notifications.
    """

    def __init__(self, events: Optional[DomainEvents] = None):
        self._events = events or domain_events
        self._baseline: Optional[Dict[str, PhaseLockInfo]] = None
        self._current_project: Optional[str] = None
        self._lock = Lock()

    def observe(
        self,
        project_id: str,
        phases: Sequence[ProjectPhase],
        tasks: Sequence[Task],
    ) -> List[PhaseUnlocked]:
        lock_map = evaluate_phase_locks(phases, tasks)
        if not lock_map:
            return []
        with self._lock:
            if self._baseline is None or self._current_project != project_id:
                self._current_project = project_id
                self._baseline = lock_map
                return []
            previous = self._baseline
            self._baseline = lock_map

        unlocked = detect_phase_unlocks(project_id, previous, lock_map, phases)
        for event in unlocked:
            logger.info(
                "Phase %s unlocked after %s completed.",
                event.phase_name,
                event.completed_phase_name or "-",
            )
            self._events.phase_unlocked.emit(event)
        return unlocked

    def reset(self) -> None:
        with self._lock:
            self._baseline = None
            self._current_project = None


__all__ = ["detect_phase_unlocks", "PhaseUnlockTracker"]
