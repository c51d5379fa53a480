from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.interfaces import ScheduleRepository
from core.models import ProjectSchedule, TaskSchedule
from core.services.scheduling.models import ScheduleResult
from infra.db.models import ProjectScheduleORM, TaskScheduleORM
from infra.db.schedule.mapper import (
    project_schedule_from_orm,
    task_schedule_from_orm,
    task_schedule_to_orm,
)


class SqlAlchemyScheduleRepository(ScheduleRepository):
    def __init__(self, session: Session):
        self.session = session

    def save_schedule(self, project_id: str, generation: int, result: ScheduleResult) -> bool:
        stored = self.session.get(
            ProjectScheduleORM,
            project_id,
            with_for_update=True,
            populate_existing=True,
        )
        # a newer or equal run already landed, possibly from another process
        if stored is not None and stored.generation >= generation:
            return False
        self.session.merge(
            ProjectScheduleORM(
                project_id=project_id,
                generation=generation,
                project_end_date=result.project_end_date,
                critical_path_ids=list(result.critical_path_ids),
                leveled=result.leveled,
                computed_at=datetime.now(timezone.utc).replace(tzinfo=None),
            )
        )
        current_ids = {task.id for task in result.tasks}
        stmt = select(TaskScheduleORM).where(TaskScheduleORM.project_id == project_id)
        for row in self.session.execute(stmt).scalars().all():
            # task removed since the previous run
            if row.task_id not in current_ids:
                self.session.delete(row)
        for task in result.tasks:
            self.session.merge(task_schedule_to_orm(project_id, task))
        self.session.flush()
        return True

    def get_project_schedule(self, project_id: str) -> Optional[ProjectSchedule]:
        obj = self.session.get(ProjectScheduleORM, project_id)
        return project_schedule_from_orm(obj) if obj else None

    def list_task_schedules(self, project_id: str) -> List[TaskSchedule]:
        stmt = (
            select(TaskScheduleORM)
            .where(TaskScheduleORM.project_id == project_id)
            .order_by(TaskScheduleORM.es, TaskScheduleORM.task_id)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [task_schedule_from_orm(row) for row in rows]


__all__ = ["SqlAlchemyScheduleRepository"]
