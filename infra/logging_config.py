# infra/logging_config.py
from __future__ import annotations
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from infra.operational_support import TraceIdLogFilter
from infra.path import user_data_dir
from infra.settings import SchedulerSettings, load_settings


def setup_logging(settings: Optional[SchedulerSettings] = None, log_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Configure application logging.

    Records go to a rotating file under the per-user data directory (unless
    disabled in settings) and to the console. Returns the log file path, or
    None when file logging is off.
    """
    settings = settings or load_settings()

    logger = logging.getLogger()
    logger.setLevel(settings.log_level)

    # Clear any existing handlers so repeated setup does not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    trace_filter = TraceIdLogFilter()
    log_file: Optional[Path] = None

    if settings.log_to_file:
        target_dir = log_dir or (user_data_dir() / "logs")
        target_dir.mkdir(parents=True, exist_ok=True)
        log_file = target_dir / "scheduler.log"

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=1_000_000,  # 1 MB per file
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.addFilter(trace_filter)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] trace=%(trace_id)s %(name)s - %(message)s")
        )
        logger.addHandler(file_handler)

    console = logging.StreamHandler()
    console.addFilter(trace_filter)
    console.setFormatter(logging.Formatter("%(levelname)s [trace=%(trace_id)s]: %(message)s"))
    logger.addHandler(console)

    if log_file is not None:
        logger.info("Logging initialized. Log file at %s", log_file)
    else:
        logger.info("Logging initialized (console only).")
    return log_file
