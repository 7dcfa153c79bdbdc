# gantt_app/schemas.py
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from . import models
from .enums import to_wire


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    """Fecha UTC guardada (naive) -> ISO-8601 con milisegundos y sufijo Z."""
    if value is None:
        return None
    return value.isoformat(timespec="milliseconds") + "Z"


# --- Payload de entrada (POST / PATCH) ---
# Todos los campos son opcionales y de tipo laxo: la coerción y validación
# de cada uno se hace en crud.build_create / crud.build_update.
# Qué campos llegaron se consulta con `model_fields_set`.
class TaskPayload(BaseModel):
    text: Optional[str] = None
    type: Optional[str] = None
    start: Optional[Union[datetime, str]] = None
    end: Optional[Union[datetime, str]] = None
    progress: Optional[float] = None
    duration: Optional[int] = None
    parent: Optional[Union[int, float, str]] = None
    details: Optional[str] = None
    assigned: Optional[Union[int, float, str]] = None
    open: Optional[bool] = None
    base_start: Optional[Union[datetime, str]] = None
    base_end: Optional[Union[datetime, str]] = None


# --- Formato de salida (lo que consume el componente Gantt) ---
class TaskOut(BaseModel):
    id: int
    text: str
    type: str
    start: str
    end: Optional[str] = None
    progress: int
    duration: Optional[int] = None
    parent: int = 0  # 0 = tarea raíz
    details: Optional[str] = None
    assigned: Optional[str] = None
    open: bool = True
    base_start: Optional[str] = None
    base_end: Optional[str] = None

    @classmethod
    def from_model(cls, task: models.Task) -> "TaskOut":
        return cls(
            id=task.id,
            text=task.text,
            type=to_wire(task.type),
            start=format_datetime(task.start_date),
            end=format_datetime(task.end_date),
            progress=task.progress,
            duration=task.duration,
            parent=task.parent_id or 0,
            details=task.details,
            assigned=task.assigned,
            open=True if task.open is None else task.open,
            base_start=format_datetime(task.base_start),
            base_end=format_datetime(task.base_end),
        )


class LinkOut(BaseModel):
    id: int
    type: str
    source: int
    target: int

    @classmethod
    def from_model(cls, link: models.Link) -> "LinkOut":
        return cls(
            id=link.id,
            type=to_wire(link.type),
            source=link.source_id,
            target=link.target_id,
        )


class ScaleOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    unit: str
    step: int
    format: str
    css_class: Optional[str] = Field(default=None, alias="cssClass")
    view: str
    order: int

    @classmethod
    def from_model(cls, scale: models.ScalePreset) -> "ScaleOut":
        return cls(
            id=scale.id,
            unit=to_wire(scale.unit),
            step=scale.step,
            format=scale.format,
            css_class=scale.css_class,
            view=to_wire(scale.view),
            order=scale.order,
        )


class GanttSnapshot(BaseModel):
    tasks: List[TaskOut] = []
    links: List[LinkOut] = []
    scales: List[ScaleOut] = []


class DeletedOut(BaseModel):
    deleted: List[int]


class ErrorOut(BaseModel):
    error: str
