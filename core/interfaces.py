# core/interfaces.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

from core.models import ProjectSchedule, TaskSchedule

if TYPE_CHECKING:
    from core.services.scheduling.models import ScheduleResult


class ScheduleRepository(ABC):
    @abstractmethod
    def save_schedule(self, project_id: str, generation: int, result: "ScheduleResult") -> bool:
        """
        Replace the stored schedule of the project with this computation.

        Returns False and writes nothing when the stored generation is not
        older than this one.
        """

    @abstractmethod
    def get_project_schedule(self, project_id: str) -> Optional[ProjectSchedule]: ...

    @abstractmethod
    def list_task_schedules(self, project_id: str) -> List[TaskSchedule]: ...


__all__ = ["ScheduleRepository"]
