from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from core.models import ConstraintType, Task
from core.services.work_calendar.engine import WorkCalendarEngine

logger = logging.getLogger(__name__)

_START_CONSTRAINTS = (ConstraintType.START_NO_EARLIER_THAN, ConstraintType.MUST_START_ON)


@dataclass
class StartResolution:
    es: date
    constraint_applied: bool = False
    overridden: bool = False
    driving_predecessor_id: Optional[str] = None


@dataclass
class DeadlineCheck:
    violated: bool
    deadline: Optional[date] = None
    late_by_days: Optional[int] = None


class ConstraintResolver:
    """
    Per-task date constraints applied on top of the dependency network.

    Start constraints are floors: they can delay a task but never pull it in
    front of a predecessor. A start date that the network pushes past is
    reported as overridden with the predecessor that drove it. A
    finish-no-later-than date is only checked.
    """

    def __init__(self, calendar: WorkCalendarEngine):
        self._calendar = calendar

    def resolve_start(
        self,
        task: Task,
        network_es: date,
        driving_predecessor_id: Optional[str] = None,
    ) -> StartResolution:
        constraint_type = ConstraintType(task.constraint_type or ConstraintType.NONE)
        if constraint_type not in _START_CONSTRAINTS or task.constraint_date is None:
            return StartResolution(es=network_es)

        constraint_start = self._calendar.next_working_day(task.constraint_date)
        if constraint_start > network_es:
            return StartResolution(es=constraint_start, constraint_applied=True)

        if network_es > constraint_start:
            logger.info(
                "Constraint on task %s overridden: network start %s is after %s.",
                task.id,
                network_es.isoformat(),
                constraint_start.isoformat(),
            )
            return StartResolution(
                es=network_es,
                overridden=True,
                driving_predecessor_id=driving_predecessor_id,
            )
        return StartResolution(es=network_es)

    def check_deadline(self, task: Task, es: Optional[date], ef: Optional[date]) -> DeadlineCheck:
        """
        Compare the last working day of the task with its deadline.

        ef is exclusive, so the task is finished on the working day before it;
        a milestone finishes on its start day.
        """
        if (
            task.constraint_type != ConstraintType.FINISH_NO_LATER_THAN
            or task.constraint_date is None
            or es is None
            or ef is None
        ):
            return DeadlineCheck(violated=False)
        finish_day = es if ef <= es else self._calendar.previous_working_day(ef, include_today=False)
        if finish_day <= task.constraint_date:
            return DeadlineCheck(violated=False, deadline=task.constraint_date)
        one_day = timedelta(days=1)
        return DeadlineCheck(
            violated=True,
            deadline=task.constraint_date,
            late_by_days=self._calendar.count_working_days(
                task.constraint_date + one_day, finish_day + one_day
            ),
        )

__all__ = ["StartResolution", "DeadlineCheck", "ConstraintResolver"]
