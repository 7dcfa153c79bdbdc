# gantt_app/settings.py
"""Configuración cargada desde variables de entorno (+ .env opcional)."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Un .env local nunca pisa variables ya definidas en el entorno
load_dotenv(override=False)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    database_url: str
    sql_echo: bool
    log_level: str
    create_tables: bool
    seed_demo: bool
    host: str
    port: int


def load_settings() -> Settings:
    return Settings(
        database_url=os.getenv("DATABASE_URL") or "sqlite:///./gantt.db",
        sql_echo=_env_bool("GANTT_SQL_ECHO", False),
        log_level=(os.getenv("GANTT_LOG_LEVEL") or "INFO").upper(),
        create_tables=_env_bool("GANTT_CREATE_TABLES", True),
        seed_demo=_env_bool("GANTT_SEED_DEMO", False),
        host=os.getenv("GANTT_HOST") or "127.0.0.1",
        port=_env_int("GANTT_PORT", 8000),
    )


settings = load_settings()

DATABASE_URL = settings.database_url
