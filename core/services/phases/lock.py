from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from core.models import PhaseLockReason, ProjectPhase, Task, TaskStatus


@dataclass(frozen=True)
class PhaseLockInfo:
    phase_id: str
    is_locked: bool
    reason: PhaseLockReason
    blocked_by_phase_id: Optional[str] = None
    blocked_by_phase_name: Optional[str] = None


def evaluate_phase_locks(
    phases: Sequence[ProjectPhase],
    tasks: Sequence[Task],
) -> Dict[str, PhaseLockInfo]:
    """
    Lock verdict per phase, keyed by phase id.

    The first phase by phase_order is always open. Any later phase is locked
    while a task of the phase right before it is not done; a phase without
    tasks never blocks. Tasks without a phase are ignored.
    """
    result: Dict[str, PhaseLockInfo] = {}
    if not phases:
        return result

    ordered = sorted(phases, key=lambda p: p.phase_order)
    first = ordered[0]
    result[first.id] = PhaseLockInfo(
        phase_id=first.id,
        is_locked=False,
        reason=PhaseLockReason.FIRST_PHASE,
    )

    for previous, current in zip(ordered, ordered[1:]):
        previous_tasks = [t for t in tasks if t.phase_id == previous.id]
        complete = all(t.status == TaskStatus.DONE for t in previous_tasks)
        if complete:
            result[current.id] = PhaseLockInfo(
                phase_id=current.id,
                is_locked=False,
                reason=PhaseLockReason.PREVIOUS_PHASE_COMPLETE,
            )
        else:
            result[current.id] = PhaseLockInfo(
                phase_id=current.id,
                is_locked=True,
                reason=PhaseLockReason.PREVIOUS_PHASE_INCOMPLETE,
                blocked_by_phase_id=previous.id,
                blocked_by_phase_name=previous.name,
            )

    return result


def is_phase_locked(
    phase_id: str,
    phases: Sequence[ProjectPhase],
    tasks: Sequence[Task],
) -> bool:
    info = evaluate_phase_locks(phases, tasks).get(phase_id)
    return info.is_locked if info else False


__all__ = ["PhaseLockInfo", "evaluate_phase_locks", "is_phase_locked"]
