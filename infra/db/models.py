# infra/db/models.py
from __future__ import annotations
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from infra.db.base import Base


class ProjectScheduleORM(Base):
    __tablename__ = "project_schedules"

    project_id: Mapped[str] = mapped_column(String, primary_key=True)
    generation: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    project_end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    critical_path_ids: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    leveled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    computed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


class TaskScheduleORM(Base):
    __tablename__ = "task_schedules"

    project_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("project_schedules.project_id", ondelete="CASCADE"),
        primary_key=True,
    )
    task_id: Mapped[str] = mapped_column(String, primary_key=True)
    es: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    ef: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    ls: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    lf: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    slack: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_critical: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_task_schedules_critical", "project_id", "is_critical"),
    )
