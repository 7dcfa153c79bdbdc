# gantt_app/crud.py
import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from . import models, schemas
from .enums import TaskType, resolve
from .exceptions import InvalidInput, NotFound

logger = logging.getLogger(__name__)


# === Coerción de campos del payload ===

def parse_task_id(raw: Any) -> int:
    """Convierte el id recibido (normalmente de la URL) en un entero positivo."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidInput("Task id must be a positive number")
    if not math.isfinite(value) or value <= 0 or not value.is_integer():
        raise InvalidInput("Task id must be a positive number")
    return int(value)


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Fecha del payload -> datetime naive en UTC (precisión de milisegundos).

    Acepta datetime, cadenas ISO-8601 (con o sin 'Z') y números como
    milisegundos desde epoch. Lo que no se pueda interpretar devuelve None.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed.replace(microsecond=parsed.microsecond // 1000 * 1000)


def clamp_progress(value: Optional[float]) -> int:
    if value is None or math.isnan(value):
        return 0
    # Redondeo "mitad hacia arriba", no el redondeo bancario de round()
    return min(100, max(0, math.floor(value + 0.5)))


def to_parent_id(value: Any) -> Optional[int]:
    """0, vacío o no numérico = tarea raíz (None)."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0 or not number.is_integer():
        return None
    return int(number)


def to_assigned(value: Any) -> Optional[str]:
    """Id de recurso o etiqueta libre; los números se guardan como texto (3.0 -> "3")."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# === Construcción de los datos para la BD ===

def build_create(payload: schemas.TaskPayload) -> Dict[str, Any]:
    """Payload de creación -> columnas de models.Task (todas rellenas)."""
    if not payload.text:
        raise InvalidInput("Task title is required")
    start_date = parse_datetime(payload.start)
    if start_date is None:
        raise InvalidInput("Valid start date is required")

    return {
        "text": payload.text,
        "type": resolve(TaskType, payload.type, TaskType.TASK),
        "start_date": start_date,
        "end_date": parse_datetime(payload.end),
        "progress": clamp_progress(payload.progress),
        "duration": payload.duration,
        "parent_id": to_parent_id(payload.parent),
        "details": payload.details,
        "assigned": to_assigned(payload.assigned),
        "open": True if payload.open is None else payload.open,
        "base_start": parse_datetime(payload.base_start),
        "base_end": parse_datetime(payload.base_end),
    }


def build_update(payload: schemas.TaskPayload) -> Dict[str, Any]:
    """
    Payload parcial -> solo las columnas de los campos que vinieron.

    Los campos ausentes no aparecen en el resultado (quedan como están en la BD).
    """
    sent = payload.model_fields_set
    data: Dict[str, Any] = {}

    if "text" in sent:
        if not payload.text:
            raise InvalidInput("Task title cannot be empty")
        data["text"] = payload.text
    if "type" in sent:
        data["type"] = resolve(TaskType, payload.type, TaskType.TASK)
    if "start" in sent:
        start_date = parse_datetime(payload.start)
        if start_date is None:
            raise InvalidInput("start must be a valid date")
        data["start_date"] = start_date
    if "end" in sent:
        data["end_date"] = parse_datetime(payload.end)
    if "progress" in sent:
        data["progress"] = clamp_progress(payload.progress)
    if "duration" in sent:
        data["duration"] = payload.duration
    if "parent" in sent:
        data["parent_id"] = to_parent_id(payload.parent)
    if "details" in sent:
        data["details"] = payload.details
    if "assigned" in sent:
        data["assigned"] = to_assigned(payload.assigned)
    if "open" in sent:
        data["open"] = True if payload.open is None else payload.open
    if "base_start" in sent:
        data["base_start"] = parse_datetime(payload.base_start)
    if "base_end" in sent:
        data["base_end"] = parse_datetime(payload.base_end)

    if not data:
        raise InvalidInput("No fields provided for update")
    return data


# === Lecturas ===

def get_task(db: Session, task_id: int) -> Optional[models.Task]:
    return db.query(models.Task).filter(models.Task.id == task_id).first()


def require_task(db: Session, task_id: int) -> models.Task:
    db_task = get_task(db, task_id)
    if db_task is None:
        raise NotFound("Task not found")
    return db_task


def list_tasks(db: Session) -> List[models.Task]:
    return db.query(models.Task).order_by(models.Task.id).all()


def list_links(db: Session) -> List[models.Link]:
    return db.query(models.Link).order_by(models.Link.id).all()


def list_scales(db: Session) -> List[models.ScalePreset]:
    return (
        db.query(models.ScalePreset)
        .order_by(models.ScalePreset.order, models.ScalePreset.id)
        .all()
    )


# === Jerarquía ===

def collect_descendant_ids(db: Session, task_id: int) -> List[int]:
    """
    Recorrido en anchura: la tarea y todos sus descendientes, en orden de
    descubrimiento (nivel por nivel, por id dentro de cada nivel).

    Solo se encolan ids nuevos, así que termina aunque los datos tengan un ciclo.
    """
    ids = [task_id]
    seen = {task_id}
    frontier = [task_id]

    while frontier:
        children = (
            db.query(models.Task.id)
            .filter(models.Task.parent_id.in_(frontier))
            .order_by(models.Task.id)
            .all()
        )
        frontier = []
        for (child_id,) in children:
            if child_id in seen:
                logger.warning("Ciclo en la jerarquía: la tarea %s ya fue recorrida", child_id)
                continue
            seen.add(child_id)
            ids.append(child_id)
            frontier.append(child_id)

    return ids


def _check_parent(db: Session, parent_id: Optional[int], task_id: Optional[int] = None) -> None:
    if parent_id is None:
        return
    if get_task(db, parent_id) is None:
        raise InvalidInput("Parent task does not exist")
    # Mover una tarea debajo de sí misma o de un descendiente crearía un ciclo
    if task_id is not None and parent_id in collect_descendant_ids(db, task_id):
        raise InvalidInput("A task cannot be moved under itself or its descendants")


# === Escrituras ===

def create_task(db: Session, payload: schemas.TaskPayload) -> models.Task:
    data = build_create(payload)
    _check_parent(db, data["parent_id"])

    db_task = models.Task(**data)
    db.add(db_task)
    db.commit()
    db.refresh(db_task)
    logger.info("Tarea %s creada (padre=%s)", db_task.id, db_task.parent_id)
    return db_task


def update_task(db: Session, task_id: int, payload: schemas.TaskPayload) -> models.Task:
    data = build_update(payload)
    db_task = require_task(db, task_id)
    if "parent_id" in data:
        _check_parent(db, data["parent_id"], task_id=task_id)

    for column, value in data.items():
        setattr(db_task, column, value)
    db.commit()
    db.refresh(db_task)
    logger.info("Tarea %s actualizada: %s", task_id, sorted(data))
    return db_task


def cascade_delete(db: Session, task_id: int) -> List[int]:
    """
    Borra la tarea, todos sus descendientes, sus enlaces y sus asignaciones.

    Todo ocurre en una sola transacción: si algún paso falla se hace rollback
    y no queda nada a medio borrar. Devuelve los ids borrados.
    """
    try:
        require_task(db, task_id)
        ids = collect_descendant_ids(db, task_id)

        # 1. Enlaces que salen o llegan a cualquiera de las tareas
        db.query(models.Link).filter(
            or_(models.Link.source_id.in_(ids), models.Link.target_id.in_(ids))
        ).delete(synchronize_session="fetch")
        # 2. Asignaciones de recursos
        db.query(models.TaskResource).filter(
            models.TaskResource.task_id.in_(ids)
        ).delete(synchronize_session="fetch")
        # 3. Las tareas
        db.query(models.Task).filter(models.Task.id.in_(ids)).delete(synchronize_session="fetch")

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Tarea %s borrada en cascada: %s", task_id, ids)
    return ids
