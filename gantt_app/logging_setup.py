# gantt_app/logging_setup.py
from __future__ import annotations

import logging
import sys

FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"

_HANDLER_NAME = "gantt_app.console"


def setup_logging(level: str | int = "INFO") -> None:
    """
    Configura el logging de la aplicación (consola, un solo handler).

    Se puede llamar más de una vez: el handler se reemplaza, no se duplica.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(FORMAT, DATEFMT))
    handler.setLevel(level)
    root.addHandler(handler)

    logging.getLogger(__name__).debug(
        "Logging inicializado en %s", logging.getLevelName(level)
    )
