# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.orm import sessionmaker

from gantt_app import models
from gantt_app.database import get_db, make_engine
from gantt_app.enums import LinkType, TaskType
from gantt_app.main import app


@pytest.fixture()
def engine(tmp_path: Path):
    """SQLite real en un archivo temporal, con las tablas creadas."""
    engine = make_engine(f"sqlite:///{tmp_path / 'gantt_test.db'}")
    models.Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        # Sin "with": no se ejecuta el lifespan (no toca la BD configurada)
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


def add_task(db, task_id: int, parent_id: int | None = None, **fields) -> models.Task:
    values = {
        "text": f"Task {task_id}",
        "type": TaskType.TASK,
        "start_date": datetime(2024, 4, 1),
        "end_date": datetime(2024, 4, 5),
        "progress": 0,
        "open": True,
    }
    values.update(fields)
    task = models.Task(id=task_id, parent_id=parent_id, **values)
    db.add(task)
    db.flush()
    return task


@pytest.fixture()
def tree(db) -> dict:
    """
    Dos árboles con enlaces y asignaciones:

        1 (root) ── 2 (c1) ── 4 (g1)
                 └─ 3 (c2)
        5 (other)
    """
    db.add(models.Resource(id=1, name="Design", role="UX", color="#ec4899"))
    add_task(db, 1, type=TaskType.PROJECT, text="Root")
    add_task(db, 2, parent_id=1, type=TaskType.SUMMARY, text="Child 1")
    add_task(db, 3, parent_id=1, text="Child 2")
    add_task(db, 4, parent_id=2, text="Grandchild")
    add_task(db, 5, text="Other root")

    db.add_all(
        [
            models.Link(id=1, type=LinkType.FS, source_id=2, target_id=3),
            models.Link(id=2, type=LinkType.SS, source_id=4, target_id=5),
            models.Link(id=3, type=LinkType.E2E, source_id=5, target_id=1),
            models.Link(id=4, type=LinkType.FF, source_id=5, target_id=5),
        ]
    )
    db.add_all(
        [
            models.TaskResource(task_id=2, resource_id=1),
            models.TaskResource(task_id=4, resource_id=1),
            models.TaskResource(task_id=5, resource_id=1),
        ]
    )
    db.commit()
    return {"root": 1, "c1": 2, "c2": 3, "g1": 4, "other": 5}


@pytest.fixture()
def failing_task_delete(engine):
    """Hace fallar el DELETE sobre `tasks`, después de borrar enlaces y asignaciones."""

    def fail(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("DELETE FROM TASKS "):
            raise RuntimeError("simulated storage failure")

    event.listen(engine, "before_cursor_execute", fail)
    try:
        yield
    finally:
        event.remove(engine, "before_cursor_execute", fail)
