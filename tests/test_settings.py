# tests/test_settings.py

from __future__ import annotations

import logging

from gantt_app.logging_setup import setup_logging
from gantt_app.settings import load_settings


def test_load_settings_defaults(monkeypatch):
    for name in ("DATABASE_URL", "GANTT_SQL_ECHO", "GANTT_LOG_LEVEL", "GANTT_SEED_DEMO", "GANTT_PORT"):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.database_url == "sqlite:///./gantt.db"
    assert settings.sql_echo is False
    assert settings.log_level == "INFO"
    assert settings.seed_demo is False
    assert settings.port == 8000


def test_load_settings_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://gantt@localhost/gantt")
    monkeypatch.setenv("GANTT_SQL_ECHO", "yes")
    monkeypatch.setenv("GANTT_LOG_LEVEL", "debug")
    monkeypatch.setenv("GANTT_PORT", "not-a-port")

    settings = load_settings()

    assert settings.database_url == "postgresql://gantt@localhost/gantt"
    assert settings.sql_echo is True
    assert settings.log_level == "DEBUG"
    assert settings.port == 8000


def test_setup_logging_does_not_duplicate_handlers():
    root = logging.getLogger()
    before = list(root.handlers)
    previous_level = root.level
    try:
        setup_logging("DEBUG")
        setup_logging("WARNING")

        ours = [h for h in root.handlers if h.get_name() == "gantt_app.console"]
        assert len(ours) == 1
        assert root.level == logging.WARNING
    finally:
        for handler in list(root.handlers):
            if handler not in before:
                root.removeHandler(handler)
        root.setLevel(previous_level)
