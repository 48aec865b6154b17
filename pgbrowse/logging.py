"""Diagnostic log file for the browser.

The interactive UI draws over the whole terminal, so log records only go
to `<PGBROWSE_LOG_DIR>/pgbrowse.log`, rolled over every midnight.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from .settings import Settings

LOG_FILE_NAME = "pgbrowse.log"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _resolve_log_dir(settings: object) -> Path:
    raw = getattr(settings, "PGBROWSE_LOG_DIR", Path("_logs"))
    p = raw if isinstance(raw, Path) else Path(str(raw))
    # Relative directories follow the shell the browser was started from.
    return p if p.is_absolute() else Path.cwd() / p


def _level_name(settings: object) -> str:
    return str(getattr(settings, "PGBROWSE_LOG_LEVEL", "INFO") or "INFO").strip().upper()


def _rotating_handler(log_file: Path, level: int, backups: int) -> logging.Handler:
    handler = TimedRotatingFileHandler(
        filename=str(log_file),
        when="midnight",
        interval=1,
        backupCount=max(0, backups),
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def setup_logging(settings: Settings | object) -> Path:
    """Point the root logger at the rotating browser log.

    Any handlers already on the root logger are closed and replaced, so
    calling this twice leaves exactly one file handler.

    Returns:
        Path of the active log file.
    """
    log_dir = _resolve_log_dir(settings)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    level_name = _level_name(settings)
    level = getattr(logging, level_name, logging.INFO)
    backups = int(getattr(settings, "PGBROWSE_LOG_BACKUP_COUNT", 14) or 0)

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    root.setLevel(level)
    root.addHandler(_rotating_handler(log_file, level, backups))

    # psycopg logs every query at DEBUG.
    logging.getLogger("psycopg").setLevel(max(level, logging.INFO))

    logging.getLogger("pgbrowse").info(
        "Logging to %s at %s", os.fspath(log_file), level_name
    )
    return log_file
