from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace

from pgbrowse.logging import setup_logging
from pgbrowse.settings import Settings, load_settings


def test_defaults(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    s = load_settings()
    assert s.PGBROWSE_HOST == "localhost"
    assert s.PGBROWSE_PORT == 5432
    assert s.bootstrap_credentials() == ("postgres", "postgres", "postgres")


def test_env_overrides(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PGBROWSE_PORT", "6543")
    monkeypatch.setenv("PGBROWSE_BOOTSTRAP_USER", "admin")
    s = Settings()
    assert s.PGBROWSE_PORT == 6543
    assert s.bootstrap_credentials()[0] == "admin"


def test_dotenv_file_is_read(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("PGBROWSE_HOST=db.internal\nUNRELATED=1\n", encoding="utf-8")
    assert Settings().PGBROWSE_HOST == "db.internal"


def test_load_settings_clamps_workers(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PGBROWSE_MAX_WORKERS", "0")
    assert load_settings().PGBROWSE_MAX_WORKERS == 1


def test_setup_logging_writes_to_file(tmp_path: Path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        settings = SimpleNamespace(
            PGBROWSE_LOG_DIR=tmp_path / "logs",
            PGBROWSE_LOG_LEVEL="debug",
            PGBROWSE_LOG_BACKUP_COUNT=3,
        )
        log_file = setup_logging(settings)
        logging.getLogger("pgbrowse.test").debug("hello from test")
        for handler in root.handlers:
            handler.flush()

        assert log_file == tmp_path / "logs" / "pgbrowse.log"
        assert "hello from test" in log_file.read_text(encoding="utf-8")
        assert root.level == logging.DEBUG
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)


def test_setup_logging_twice_keeps_one_file_handler(tmp_path: Path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        settings = SimpleNamespace(PGBROWSE_LOG_DIR=tmp_path, PGBROWSE_LOG_LEVEL="bogus")
        setup_logging(settings)
        setup_logging(settings)

        assert len(root.handlers) == 1
        assert root.level == logging.INFO
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)
