# infra/db/base.py
from __future__ import annotations
import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from infra.settings import SchedulerSettings, load_settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_engine(settings: Optional[SchedulerSettings] = None) -> Engine:
    settings = settings or load_settings()
    logger.info("Using database at: %s", settings.db_url)
    return create_engine(settings.db_url, echo=False, future=True)


def build_session_factory(engine: Engine, create_schema: bool = True) -> sessionmaker:
    if create_schema:
        # imported for its table definitions
        import infra.db.models  # noqa: F401

        Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


__all__ = ["Base", "build_engine", "build_session_factory"]
