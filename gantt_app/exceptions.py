# gantt_app/exceptions.py


class InvalidInput(Exception):
    """Error causado por el cliente (campo faltante, fecha inválida...). HTTP 400."""


class NotFound(Exception):
    """La tarea referenciada no existe. HTTP 404."""

    def __init__(self, message: str = "Task not found"):
        super().__init__(message)
