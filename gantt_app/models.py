# gantt_app/models.py
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from .database import Base
from .enums import LinkType, ScaleUnit, TaskType, ViewRange


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    text = Column(String, nullable=False)
    type = Column(Enum(TaskType, name="task_type"), nullable=False, default=TaskType.TASK)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)  # sin fin para los hitos
    progress = Column(Integer, nullable=False, default=0)
    duration = Column(Integer, nullable=True)
    details = Column(Text, nullable=True)
    # Texto: puede ser el id de un recurso o una etiqueta libre
    assigned = Column(String, nullable=True)
    open = Column(Boolean, nullable=False, default=True)
    base_start = Column(DateTime, nullable=True)
    base_end = Column(DateTime, nullable=True)

    # --- Jerarquía: un ID que apunta a otra tarea en esta misma tabla ---
    parent_id = Column(Integer, ForeignKey("tasks.id"), nullable=True, index=True)

    subtasks = relationship("Task", back_populates="parent")
    parent = relationship("Task", back_populates="subtasks", remote_side=[id])

    resources = relationship("TaskResource", back_populates="task")


class Link(Base):
    __tablename__ = "links"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(Enum(LinkType, name="link_type"), nullable=False, default=LinkType.FS)
    source_id = Column(Integer, ForeignKey("tasks.id"), nullable=False, index=True)
    target_id = Column(Integer, ForeignKey("tasks.id"), nullable=False, index=True)

    source = relationship("Task", foreign_keys=[source_id])
    target = relationship("Task", foreign_keys=[target_id])


class Resource(Base):
    __tablename__ = "resources"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    role = Column(String)
    color = Column(String)

    assignments = relationship("TaskResource", back_populates="resource")


class TaskResource(Base):
    """Asignación de un recurso a una tarea."""

    __tablename__ = "task_resources"

    task_id = Column(Integer, ForeignKey("tasks.id"), primary_key=True)
    resource_id = Column(Integer, ForeignKey("resources.id"), primary_key=True)

    task = relationship("Task", back_populates="resources")
    resource = relationship("Resource", back_populates="assignments")


class ScalePreset(Base):
    __tablename__ = "scale_presets"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    unit = Column(Enum(ScaleUnit, name="scale_unit"), nullable=False)
    step = Column(Integer, nullable=False, default=1)
    # Patrón estático ("MMMM yyyy") o nombre de un formateador del cliente
    format = Column(String, nullable=False, default="")
    css_class = Column(String, nullable=True)
    order = Column(Integer, nullable=False, default=0)
    view = Column(Enum(ViewRange, name="view_range"), nullable=False, default=ViewRange.MONTH)
