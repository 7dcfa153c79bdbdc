# gantt_app/seed.py
"""
Datos de demostración: el programa "Svar Willow".

Uso: python -m gantt_app.seed  (borra y vuelve a cargar todo)
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy import text
from sqlalchemy.orm import Session

from . import models
from .database import SessionLocal, engine
from .enums import LinkType, ScaleUnit, TaskType, ViewRange, resolve
from .logging_setup import setup_logging
from .settings import settings

logger = logging.getLogger(__name__)

BASE_DATE = datetime(2024, 4, 1)


def _day(offset: int) -> datetime:
    return BASE_DATE + timedelta(days=offset)


RESOURCES = [
    {"id": 1, "name": "Program Management", "role": "Program", "color": "#6366f1"},
    {"id": 2, "name": "Design", "role": "UX", "color": "#ec4899"},
    {"id": 3, "name": "Frontend", "role": "Engineering", "color": "#0ea5e9"},
    {"id": 4, "name": "Backend", "role": "Engineering", "color": "#14b8a6"},
    {"id": 5, "name": "QA", "role": "Quality", "color": "#f97316"},
]

# (id, texto, tipo, inicio, fin, progreso %, padre, recursos)
TASKS = [
    (100, "Svar Willow Program", "project", 0, 90, 42, None, []),
    (110, "Discovery", "summary", 0, 20, 75, 100, [1]),
    (111, "Stakeholder Interviews", "task", 1, 7, 100, 110, [1]),
    (112, "Experience Mapping", "task", 4, 14, 60, 110, [2]),
    (120, "Design System", "summary", 18, 40, 55, 100, [2]),
    (121, "Visual Exploration", "task", 18, 27, 90, 120, [2]),
    (122, "Component Library", "task", 25, 40, 30, 120, [2, 3]),
    (130, "Implementation", "summary", 38, 78, 35, 100, [3, 4]),
    (131, "Frontend Sprint", "task", 38, 58, 55, 130, [3]),
    (132, "API Stabilization", "task", 44, 70, 25, 130, [4]),
    (140, "Validation", "summary", 70, 90, 10, 100, [5]),
    (141, "Regression Suite", "task", 70, 85, 10, 140, [5]),
    (142, "Launch", "milestone", 90, None, 0, 140, [1, 3, 5]),
]

LINKS = [
    (1, 111, 112, "fs"),
    (2, 112, 121, "fs"),
    (3, 121, 122, "fs"),
    (4, 122, 131, "fs"),
    (5, 131, 132, "fs"),
    (6, 132, 141, "fs"),
    (7, 141, 142, "fs"),
]

SCALES = [
    ("month", 1, "MMMM yyyy"),
    ("week", 1, "'Week' w"),
    ("day", 1, "dd"),
]


def reset(db: Session) -> None:
    # Orden inverso a las claves foráneas
    db.query(models.TaskResource).delete()
    db.query(models.Link).delete()
    db.query(models.Task).delete()
    db.query(models.Resource).delete()
    db.query(models.ScalePreset).delete()
    db.expunge_all()


def seed_demo(db: Session) -> None:
    reset(db)

    db.add_all(models.Resource(**resource) for resource in RESOURCES)

    # Los padres van antes que los hijos en la lista
    for task_id, name, kind, start, end, progress, parent_id, resource_ids in TASKS:
        db.add(
            models.Task(
                id=task_id,
                text=name,
                type=resolve(TaskType, kind, TaskType.TASK),
                start_date=_day(start),
                end_date=_day(end) if end is not None else None,
                progress=progress,
                duration=(end - start) if end is not None else 0,
                parent_id=parent_id,
                assigned=str(resource_ids[0]) if resource_ids else None,
                open=True,
            )
        )
        db.flush()
        db.add_all(
            models.TaskResource(task_id=task_id, resource_id=resource_id)
            for resource_id in resource_ids
        )

    db.add_all(
        models.Link(
            id=link_id,
            type=resolve(LinkType, kind, LinkType.FS),
            source_id=source,
            target_id=target,
        )
        for link_id, source, target, kind in LINKS
    )

    db.add_all(
        models.ScalePreset(
            name=f"Default-{unit}-{step}-{index}",
            unit=resolve(ScaleUnit, unit, ScaleUnit.MONTH),
            step=step,
            format=fmt,
            order=index,
            view=ViewRange.MONTH,
        )
        for index, (unit, step, fmt) in enumerate(SCALES)
    )

    db.flush()
    _sync_sequences(db)
    db.commit()
    logger.info(
        "Datos demo cargados: %d tareas, %d enlaces, %d escalas",
        len(TASKS), len(LINKS), len(SCALES),
    )


def seed_if_empty(db: Session) -> bool:
    if db.query(models.Task).count():
        return False
    seed_demo(db)
    return True


def _sync_sequences(db: Session) -> None:
    # En PostgreSQL los ids explícitos no avanzan la secuencia del SERIAL
    if db.get_bind().dialect.name != "postgresql":
        return
    for table in ("tasks", "links", "resources"):
        db.execute(
            text(
                f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
                f"(SELECT COALESCE(MAX(id), 1) FROM {table}))"
            )
        )


def main() -> None:
    setup_logging(settings.log_level)
    models.Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        seed_demo(db)


if __name__ == "__main__":
    main()
