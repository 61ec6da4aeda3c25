from __future__ import annotations

import atexit
import copy
import logging
import queue
import sys
from datetime import datetime, timezone
from logging.handlers import QueueHandler, QueueListener
from typing import Any, Optional

import structlog

from streamhop.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)

_QUEUE_LISTENER: Optional[QueueListener] = None


def _drop_color_message(_: Any, __: Any, event_dict: dict[str, Any]) -> dict[str, Any]:
    # uvicorn duplicates every message as "color_message"
    event_dict.pop("color_message", None)
    return event_dict


def _add_record_created_timestamp_utc(
    _: Any, __: Any, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Stamp foreign (stdlib) records with their creation time, not format time."""
    record = event_dict.get("_record")
    if isinstance(record, logging.LogRecord):
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        event_dict["timestamp"] = dt.isoformat().replace("+00:00", "Z")
    return event_dict


def _renderer(config: AppConfig) -> structlog.typing.Processor:
    if config.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def build_processor_formatter(config: AppConfig) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            _drop_color_message,
            structlog.contextvars.merge_contextvars,
            _add_record_created_timestamp_utc,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(config),
        ],
    )


class _LevelRangeFilter(logging.Filter):
    def __init__(self, min_level: int = logging.NOTSET, max_level: int = logging.CRITICAL) -> None:
        super().__init__()
        self._min_level = min_level
        self._max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return self._min_level <= record.levelno <= self._max_level


class _StructlogPreservingQueueHandler(QueueHandler):
    """QueueHandler that keeps structlog's dict ``record.msg`` intact."""

    def prepare(self, record: logging.LogRecord) -> logging.LogRecord:
        # The base implementation flattens record.msg to a string.
        return copy.copy(record)


def _stop_listener() -> None:
    global _QUEUE_LISTENER
    if _QUEUE_LISTENER is not None:
        try:
            _QUEUE_LISTENER.stop()
        finally:
            _QUEUE_LISTENER = None


def _build_handlers(config: AppConfig, *, stderr_only: bool) -> list[logging.Handler]:
    formatter = build_processor_formatter(config)

    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setFormatter(formatter)
    if stderr_only:
        return [stderr_handler]

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.addFilter(_LevelRangeFilter(max_level=logging.WARNING))
    stderr_handler.addFilter(_LevelRangeFilter(min_level=logging.ERROR))
    return [stdout_handler, stderr_handler]


def configure_logging(config: AppConfig, *, stderr_only: bool = False) -> None:
    """
    Configure structlog on top of stdlib logging.

    All records go through a queue and are emitted from a background
    listener thread, so the event loop never blocks on log I/O.
    DEBUG..WARNING go to stdout and ERROR+ to stderr, unless
    *stderr_only* is set (CLI commands that print results on stdout).
    """
    global _QUEUE_LISTENER

    structlog.configure(
        processors=[
            _drop_color_message,
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _stop_listener()
    q: queue.Queue[logging.LogRecord] = queue.Queue()

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_StructlogPreservingQueueHandler(q))
    root.setLevel(config.log_level)

    # uvicorn and friends install their own handlers; route them through root
    for name in list(logging.root.manager.loggerDict.keys()):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(config.log_level)

    _QUEUE_LISTENER = QueueListener(
        q, *_build_handlers(config, stderr_only=stderr_only), respect_handler_level=True
    )
    _QUEUE_LISTENER.start()
    atexit.register(_stop_listener)

    log.info("logging_configured", log_format=config.log_format, log_level=config.log_level)
