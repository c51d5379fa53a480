from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class AllocationBlock:
    """One contiguous stretch of a person's working days reserved for a task."""

    member_id: str
    member_name: str
    task_id: str
    task_name: str
    start: date
    end: date  # exclusive, on the member's own calendar
    working_days: int
    hours: float
    cost: Optional[float] = None

    def occupies(self, day: date) -> bool:
        return self.start <= day < self.end


__all__ = ["AllocationBlock"]
