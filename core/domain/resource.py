from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Set

from core.domain.enums import TimeOffStatus, TimeOffType
from core.domain.identifiers import ensure_id


@dataclass
class TeamMember:
    id: str
    name: str
    work_hours_per_day: float = 8.0
    # None means "same as the project work week"
    work_days: Optional[Set[int]] = None
    hourly_rate: Optional[float] = None
    is_active: bool = True

    @staticmethod
    def create(
        name: str,
        work_hours_per_day: float = 8.0,
        work_days: Optional[Set[int]] = None,
        hourly_rate: Optional[float] = None,
        member_id: str | None = None,
    ) -> "TeamMember":
        return TeamMember(
            id=ensure_id(member_id),
            name=name,
            work_hours_per_day=work_hours_per_day,
            work_days=set(work_days) if work_days is not None else None,
            hourly_rate=hourly_rate,
        )


@dataclass
class TimeOff:
    id: str
    member_id: str
    start_date: date
    end_date: date
    type: TimeOffType = TimeOffType.VACATION
    status: TimeOffStatus = TimeOffStatus.APPROVED
    notes: str = ""

    @staticmethod
    def create(
        member_id: str,
        start_date: date,
        end_date: date,
        type: TimeOffType = TimeOffType.VACATION,
        status: TimeOffStatus = TimeOffStatus.APPROVED,
    ) -> "TimeOff":
        return TimeOff(
            id=ensure_id(None),
            member_id=member_id,
            start_date=start_date,
            end_date=end_date,
            type=type,
            status=status,
        )


__all__ = ["TeamMember", "TimeOff"]
