"""Configuracion de logging para consultationradar.

Una ejecucion del CLI configura el logger del paquete una sola vez; volver a
llamar a ``configure_logging`` sustituye los handlers anteriores.
"""

from __future__ import annotations

import atexit
import logging
from contextlib import suppress
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from queue import Queue
from typing import Optional

from consultationradar.config import REPO_ROOT, Settings

PACKAGE_LOGGER = "consultationradar"
_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DEBUG_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(filename)s:%(lineno)d | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_file_listener: Optional[QueueListener] = None


def log_file_path(file_name: str) -> Path:
    """Ruta del fichero de log; los nombres relativos van a ``<repo>/logs``."""
    path = Path(file_name.strip() or "consultationradar.log").expanduser()
    if path.is_absolute():
        return path
    return (REPO_ROOT / "logs" / path).resolve()


def stop_file_logging() -> None:
    """Vacia la cola y cierra el fichero de log, si lo hay."""
    global _file_listener
    if _file_listener is None:
        return
    _file_listener.stop()
    for handler in _file_listener.handlers:
        with suppress(OSError):
            handler.close()
    _file_listener = None


def _file_queue_handler(path: Path, level: int, formatter: logging.Formatter) -> QueueHandler:
    global _file_listener
    path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(path, encoding="utf-8", delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    queue: Queue[logging.LogRecord] = Queue(-1)
    _file_listener = QueueListener(queue, file_handler, respect_handler_level=True)
    _file_listener.start()
    return QueueHandler(queue)


def configure_logging(settings: Settings | None = None) -> logging.Logger:
    """Configura el logger ``consultationradar`` segun ``Settings``.

    - LOG_ENABLED=false: NullHandler y logger deshabilitado.
    - LOG_TO_FILE=true: QueueHandler -> QueueListener -> FileHandler.
    - En otro caso, consola (stderr).
    """
    cfg = settings or Settings()
    logger = logging.getLogger(PACKAGE_LOGGER)

    stop_file_logging()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    if not cfg.log_enabled:
        logger.disabled = True
        logger.addHandler(logging.NullHandler())
        return logger

    level = logging.DEBUG if cfg.log_debug else logging.INFO
    logger.disabled = False
    logger.setLevel(level)
    formatter = logging.Formatter(_DEBUG_LOG_FORMAT if cfg.log_debug else _LOG_FORMAT, _DATE_FORMAT)

    if cfg.log_to_file:
        handler: logging.Handler = _file_queue_handler(
            log_file_path(cfg.log_file_name), level, formatter
        )
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
    handler.setLevel(level)
    logger.addHandler(handler)
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Devuelve un logger hijo de ``consultationradar``."""
    return logging.getLogger(name or PACKAGE_LOGGER)


atexit.register(stop_file_logging)
