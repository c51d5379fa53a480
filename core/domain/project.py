from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.domain.enums import PhaseStatus
from core.domain.identifiers import ensure_id


@dataclass
class ProjectPhase:
    id: str
    name: str
    phase_order: int
    status: PhaseStatus = PhaseStatus.PENDING
    description: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    task_count: int = 0
    completed_task_count: int = 0

    @staticmethod
    def create(name: str, phase_order: int, phase_id: str | None = None, **extra) -> "ProjectPhase":
        return ProjectPhase(id=ensure_id(phase_id), name=name, phase_order=phase_order, **extra)


__all__ = ["ProjectPhase"]
