from infra.db.schedule.mapper import (
    project_schedule_from_orm,
    task_schedule_from_orm,
    task_schedule_to_orm,
)
from infra.db.schedule.repository import SqlAlchemyScheduleRepository

__all__ = [
    "task_schedule_to_orm",
    "task_schedule_from_orm",
    "project_schedule_from_orm",
    "SqlAlchemyScheduleRepository",
]
