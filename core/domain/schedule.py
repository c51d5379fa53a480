from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional


@dataclass
class ProjectSchedule:
    """Header row of the last persisted computation for a project."""

    project_id: str
    generation: int
    project_end_date: Optional[date] = None
    critical_path_ids: List[str] = field(default_factory=list)
    leveled: bool = False
    computed_at: Optional[datetime] = None


@dataclass
class TaskSchedule:
    project_id: str
    task_id: str
    es: Optional[date] = None
    ef: Optional[date] = None
    ls: Optional[date] = None
    lf: Optional[date] = None
    slack: Optional[int] = None
    is_critical: bool = False
