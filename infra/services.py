from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.orm import Session

from core.events.domain_events import DomainEvents, domain_events
from core.services.phases import PhaseUnlockTracker
from core.services.scheduling import SchedulingEngine
from core.services.scheduling_service import GenerationCounter, ScheduleRecalculationService
from infra.db.schedule import SqlAlchemyScheduleRepository
from infra.operational_support import bind_trace_id
from infra.settings import SchedulerSettings, load_settings


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    settings: SchedulerSettings
    scheduling_engine: SchedulingEngine
    schedule_repo: SqlAlchemyScheduleRepository
    schedule_service: ScheduleRecalculationService
    phase_tracker: PhaseUnlockTracker

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "settings": self.settings,
            "scheduling_engine": self.scheduling_engine,
            "schedule_repo": self.schedule_repo,
            "schedule_service": self.schedule_service,
            "phase_tracker": self.phase_tracker,
        }


def build_service_graph(
    session: Session,
    settings: Optional[SchedulerSettings] = None,
    events: Optional[DomainEvents] = None,
    counter: Optional[GenerationCounter] = None,
) -> ServiceGraph:
    settings = settings or load_settings()
    events = events or domain_events

    scheduling_engine = SchedulingEngine(hours_per_day=settings.hours_per_day)
    schedule_repo = SqlAlchemyScheduleRepository(session)
    schedule_service = ScheduleRecalculationService(
        scheduling_engine,
        schedule_repo,
        session,
        events=events,
        counter=counter,
        trace_scope=bind_trace_id,
    )
    phase_tracker = PhaseUnlockTracker(events=events)

    return ServiceGraph(
        session=session,
        settings=settings,
        scheduling_engine=scheduling_engine,
        schedule_repo=schedule_repo,
        schedule_service=schedule_service,
        phase_tracker=phase_tracker,
    )


__all__ = ["ServiceGraph", "build_service_graph"]
