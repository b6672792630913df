"""
Logging Service
Rotating file log plus an in-memory tail of recent records for /logs/recent.

Records from the projection engine are tagged with the engine component that
emitted them (e.g. "transform_cache", "definition_resolver") so the tail can
be filtered down to cache, lookup or transform activity.
"""
import logging
import os
import threading
from collections import deque
from logging.handlers import RotatingFileHandler
from typing import Any, Deque, Dict, List, Optional

from config.settings import LOG_DIR, LOG_FILE_NAME, LOG_LEVEL, RING_BUFFER_MIN_LEVEL, RING_BUFFER_SIZE

ENGINE_LOGGER_PREFIX = "pipelines.mapping.projection"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def engine_component(logger_name: str) -> Optional[str]:
    """Engine module that owns a logger, or None for loggers outside the engine"""
    if logger_name == ENGINE_LOGGER_PREFIX:
        return "projection"
    if logger_name.startswith(ENGINE_LOGGER_PREFIX + "."):
        return logger_name[len(ENGINE_LOGGER_PREFIX) + 1:].split(".")[0]
    return None


class RingBufferHandler(logging.Handler):
    """Keeps the newest `maxlen` records as plain dicts"""

    def __init__(self, maxlen: int = RING_BUFFER_SIZE):
        super().__init__()
        self._records: Deque[Dict[str, Any]] = deque(maxlen=maxlen)
        self._records_lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = {
                "ts": record.created,
                "level": record.levelname,
                "name": record.name,
                "component": engine_component(record.name),
                "message": record.getMessage(),
                "lineno": record.lineno,
            }
        except Exception:
            self.handleError(record)
            return
        with self._records_lock:
            self._records.append(entry)

    def get_recent(
        self,
        limit: int = 500,
        component: Optional[str] = None,
        engine_only: bool = False,
    ) -> List[Dict[str, Any]]:
        """
        Newest records last.

        Args:
            limit: Maximum number of records; 0 or less returns everything kept
            component: Only records from this engine component
            engine_only: Only records from the projection engine
        """
        with self._records_lock:
            records = list(self._records)
        if component is not None:
            records = [r for r in records if r["component"] == component]
        elif engine_only:
            records = [r for r in records if r["component"] is not None]
        if limit <= 0:
            return records
        return records[-limit:]

    def clear(self) -> None:
        with self._records_lock:
            self._records.clear()


_ring_handler: Optional[RingBufferHandler] = None


def get_ring_handler() -> RingBufferHandler:
    global _ring_handler
    if _ring_handler is None:
        _ring_handler = RingBufferHandler()
    return _ring_handler


def log_file_path() -> str:
    return os.path.join(LOG_DIR, LOG_FILE_NAME)


def init_logging(log_to_file: bool = True) -> None:
    """
    Attach the file and ring-buffer handlers to the root logger.

    Safe to call more than once: the ring buffer is attached a single time.

    Raises:
        OSError: the log directory or file cannot be created
    """
    root = logging.getLogger()
    if root.level in (logging.NOTSET, logging.WARNING):
        root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    formatter = logging.Formatter(LOG_FORMAT)

    if log_to_file:
        os.makedirs(LOG_DIR, exist_ok=True)
        path = log_file_path()
        already_attached = any(
            isinstance(h, RotatingFileHandler) and h.baseFilename == os.path.abspath(path)
            for h in root.handlers
        )
        if not already_attached:
            file_handler = RotatingFileHandler(path, maxBytes=5_000_000, backupCount=5, encoding="utf-8")
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

    ring = get_ring_handler()
    ring.setFormatter(formatter)
    ring.setLevel(getattr(logging, RING_BUFFER_MIN_LEVEL, logging.INFO))
    if ring not in root.handlers:
        root.addHandler(ring)

    # pyproj and requests chatter drowns out engine records
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("pyproj").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
