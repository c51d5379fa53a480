# tests/conftest.py
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import infra.db.models  # noqa: F401  (registers the tables on Base)
from core.events.domain_events import DomainEvents
from infra.db.base import Base
from infra.services import build_service_graph
from infra.settings import SchedulerSettings

# 2024-06-02 is a Sunday, the first day of the Sun-Thu work week
PROJECT_START = date(2024, 6, 2)


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = create_engine("sqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def settings():
    return SchedulerSettings(db_url="sqlite:///:memory:", log_to_file=False)


@pytest.fixture
def events():
    bus = DomainEvents()
    yield bus
    bus.disconnect_all()


@pytest.fixture
def services(session, settings, events):
    # Recreate what the application wiring does, but with the test session
    return build_service_graph(session, settings=settings, events=events).as_dict()


@pytest.fixture
def project_start():
    return PROJECT_START
