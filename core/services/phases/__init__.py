from .lock import PhaseLockInfo, evaluate_phase_locks, is_phase_locked
from .notifier import PhaseUnlockTracker, detect_phase_unlocks

__all__ = [
    "PhaseLockInfo",
    "evaluate_phase_locks",
    "is_phase_locked",
    "PhaseUnlockTracker",
    "detect_phase_unlocks",
]
