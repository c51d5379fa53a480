from __future__ import annotations

from core.models import ProjectSchedule, Task, TaskSchedule
from infra.db.models import ProjectScheduleORM, TaskScheduleORM


def task_schedule_to_orm(project_id: str, task: Task) -> TaskScheduleORM:
    return TaskScheduleORM(
        project_id=project_id,
        task_id=task.id,
        es=task.es,
        ef=task.ef,
        ls=task.ls,
        lf=task.lf,
        slack=task.slack,
        is_critical=bool(task.is_critical),
    )


def task_schedule_from_orm(obj: TaskScheduleORM) -> TaskSchedule:
    return TaskSchedule(
        project_id=obj.project_id,
        task_id=obj.task_id,
        es=obj.es,
        ef=obj.ef,
        ls=obj.ls,
        lf=obj.lf,
        slack=obj.slack,
        is_critical=bool(obj.is_critical),
    )


def project_schedule_from_orm(obj: ProjectScheduleORM) -> ProjectSchedule:
    return ProjectSchedule(
        project_id=obj.project_id,
        generation=obj.generation,
        project_end_date=obj.project_end_date,
        critical_path_ids=list(obj.critical_path_ids or []),
        leveled=bool(obj.leveled),
        computed_at=obj.computed_at,
    )


__all__ = ["task_schedule_to_orm", "task_schedule_from_orm", "project_schedule_from_orm"]
