# gantt_app/__init__.py
"""API de datos para el diagrama de Gantt (tareas, enlaces y escalas)."""

__version__ = "0.1.0"
