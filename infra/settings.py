# infra/settings.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import FrozenSet, Mapping, Optional

from core.domain.calendar import SUNDAY_TO_THURSDAY
from core.exceptions import ValidationError
from infra.path import default_db_path

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class SchedulerSettings:
    db_url: str
    log_level: int = logging.INFO
    work_days: FrozenSet[int] = field(default_factory=lambda: SUNDAY_TO_THURSDAY)
    hours_per_day: float = 8.0
    log_to_file: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SchedulerSettings":
        return load_settings(environ)


def _parse_work_days(raw: str) -> FrozenSet[int]:
    try:
        days = frozenset(int(part) for part in raw.split(",") if part.strip())
    except ValueError:
        raise ValidationError(
            f"SCHEDULER_WORK_DAYS must be comma-separated weekday numbers, got {raw!r}.",
            code="SETTINGS_WORK_DAYS",
        ) from None
    if not days or any(d < 0 or d > 6 for d in days):
        raise ValidationError(
            f"SCHEDULER_WORK_DAYS must list weekdays between 0 and 6, got {raw!r}.",
            code="SETTINGS_WORK_DAYS",
        )
    return days


def _parse_hours(raw: str) -> float:
    try:
        hours = float(raw)
    except ValueError:
        hours = -1.0
    if not 0 < hours <= 24:
        raise ValidationError(
            f"SCHEDULER_HOURS_PER_DAY must be a number in (0, 24], got {raw!r}.",
            code="SETTINGS_HOURS_PER_DAY",
        )
    return hours


def _parse_level(raw: str) -> int:
    name = raw.strip().upper()
    if name not in _LOG_LEVELS:
        raise ValidationError(
            f"SCHEDULER_LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {raw!r}.",
            code="SETTINGS_LOG_LEVEL",
        )
    return getattr(logging, name)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> SchedulerSettings:
    env = os.environ if environ is None else environ

    db_url = (env.get("SCHEDULER_DB_URL") or "").strip()
    if not db_url:
        db_url = f"sqlite:///{default_db_path().as_posix()}"

    raw_days = (env.get("SCHEDULER_WORK_DAYS") or "").strip()
    raw_hours = (env.get("SCHEDULER_HOURS_PER_DAY") or "").strip()
    raw_level = (env.get("SCHEDULER_LOG_LEVEL") or "").strip()
    raw_file = (env.get("SCHEDULER_LOG_TO_FILE") or "").strip().lower()

    return SchedulerSettings(
        db_url=db_url,
        log_level=_parse_level(raw_level) if raw_level else logging.INFO,
        work_days=_parse_work_days(raw_days) if raw_days else SUNDAY_TO_THURSDAY,
        hours_per_day=_parse_hours(raw_hours) if raw_hours else 8.0,
        log_to_file=raw_file not in ("0", "false", "no", "off"),
    )


__all__ = ["SchedulerSettings", "load_settings"]
