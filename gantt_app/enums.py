# gantt_app/enums.py
"""
Enums persistidos en la BD.

Cada enum es la única tabla de traducción entre almacenamiento y JSON:
la BD guarda el nombre del miembro (``MILESTONE``) y la API usa su valor
en minúsculas (``"milestone"``).
"""

import enum
from typing import Optional, Type, TypeVar

E = TypeVar("E", bound=enum.Enum)


class TaskType(str, enum.Enum):
    PROJECT = "project"
    SUMMARY = "summary"
    TASK = "task"
    MILESTONE = "milestone"


class LinkType(str, enum.Enum):
    FS = "fs"  # finish-to-start
    SF = "sf"  # start-to-finish
    SS = "ss"  # start-to-start
    FF = "ff"  # finish-to-finish
    E2S = "e2s"
    S2S = "s2s"
    S2E = "s2e"
    E2E = "e2e"


class ScaleUnit(str, enum.Enum):
    YEAR = "year"
    QUARTER = "quarter"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"


class ViewRange(str, enum.Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


def resolve(enum_cls: Type[E], raw: Optional[str], default: E) -> E:
    """Busca ``raw`` sin distinguir mayúsculas; si no existe devuelve ``default``."""
    if isinstance(raw, enum_cls):
        return raw
    if not isinstance(raw, str) or not raw:
        return default
    try:
        return enum_cls(raw.strip().lower())
    except ValueError:
        return default


def to_wire(value: enum.Enum) -> str:
    return value.value
