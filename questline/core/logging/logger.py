"""
Questline Logging
=================

Structured logging for the engine and its persistence boundary.

- Records are produced through a QueueHandler and written by a
  QueueListener thread, so a slow sink never stalls a player operation.
- `LogContext` binds the current account and operation in a ContextVar;
  `ContextFilter` copies it onto every record on the producer side.
- Console output is JSON in production (or when LOG_JSON is set) and
  plain or colored text otherwise. An optional daily-rotating file sink
  always writes JSON.

Settings come from `Config` (LOG_LEVEL, LOG_JSON, LOG_COLORS, LOG_TO_FILE,
LOGS_DIR). Logging is configured once at import.
"""

from __future__ import annotations

import json
import logging
import queue
import sys
import uuid
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from logging import Logger
from logging.handlers import QueueHandler, QueueListener, TimedRotatingFileHandler
from typing import Any, Dict, List, Optional

from questline.core.config.config import Config

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(account_id)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "questline.json.log"
QUEUE_MAX_SIZE = 10_000

# Fields every record carries once ContextFilter has run
CONTEXT_FIELDS = ("account_id", "operation", "component", "correlation_id")

_context: ContextVar[Dict[str, Any]] = ContextVar("questline_log_context", default={})

_listener: Optional[QueueListener] = None
_queue_handler: Optional[QueueHandler] = None


# ============================================================================
# Context
# ============================================================================


class LogContext:
    """
    Bind account/operation context for the duration of a block.

    Usable with ``with`` and ``async with``; nested contexts inherit the
    outer fields they do not override and restore them on exit.

    >>> async with LogContext(account_id="acct-1", operation="complete_quest"):
    ...     logger.info("Completing quest")
    """

    def __init__(
        self,
        account_id: Optional[str] = None,
        operation: Optional[str] = None,
        component: Optional[str] = None,
        correlation_id: Optional[str] = None,
        **extra: Any,
    ) -> None:
        self.fields: Dict[str, Any] = {
            key: value
            for key, value in {
                "account_id": str(account_id) if account_id is not None else None,
                "operation": operation,
                "component": component,
                "correlation_id": correlation_id,
                **extra,
            }.items()
            if value is not None
        }
        self.context: Dict[str, Any] = {}
        self._token: Optional[Token[Dict[str, Any]]] = None

    def __enter__(self) -> LogContext:
        parent = _context.get()
        self.context = {**parent, **self.fields}
        self.context.setdefault("correlation_id", uuid.uuid4().hex[:8])
        self._token = _context.set(self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _context.reset(self._token)
            self._token = None

    async def __aenter__(self) -> LogContext:
        return self.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)


def current_log_context() -> Dict[str, Any]:
    return dict(_context.get())


class ContextFilter(logging.Filter):
    """Stamp the bound context onto a record; explicit `extra` wins."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        context = _context.get()
        for field in CONTEXT_FIELDS:
            if not hasattr(record, field):
                setattr(record, field, context.get(field, "N/A"))
        return True


# ============================================================================
# Formatters
# ============================================================================


class ColoredFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\033[90m",
        "INFO": "\033[94m",
        "WARNING": "\033[93m",
        "ERROR": "\033[91m",
        "CRITICAL": "\033[91m\033[1m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        original = record.levelname
        color = self.COLORS.get(original)
        if color:
            record.levelname = f"{color}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


class JSONFormatter(logging.Formatter):
    """One JSON object per record; non-standard attributes go under "extra"."""

    # Attributes present on every LogRecord
    _RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value not in (None, "N/A"):
                payload[field] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self._RESERVED and key not in CONTEXT_FIELDS and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra
        return json.dumps(payload, ensure_ascii=False, default=str)


# ============================================================================
# Setup / Teardown
# ============================================================================


def _log_level() -> int:
    return getattr(logging, str(Config.LOG_LEVEL).upper(), logging.INFO)


def _use_json() -> bool:
    return Config.is_production() if Config.LOG_JSON is None else bool(Config.LOG_JSON)


def _build_handlers() -> List[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    if _use_json():
        console.setFormatter(JSONFormatter())
    elif Config.LOG_COLORS and sys.stdout.isatty():
        console.setFormatter(ColoredFormatter(CONSOLE_FORMAT, DATE_FORMAT))
    else:
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
    handlers: List[logging.Handler] = [console]

    if Config.LOG_TO_FILE:
        Config.LOGS_DIR.mkdir(parents=True, exist_ok=True)
        daily = TimedRotatingFileHandler(
            Config.LOGS_DIR / LOG_FILE_NAME,
            when="midnight",
            backupCount=1,
            encoding="utf-8",
            utc=True,
        )
        daily.setFormatter(JSONFormatter())
        handlers.append(daily)
    return handlers


def setup_logging() -> None:
    """Install the queue pipeline on the root logger (idempotent)."""
    global _listener, _queue_handler

    if _queue_handler is not None:
        return

    level = _log_level()
    log_queue: "queue.Queue[logging.LogRecord]" = queue.Queue(QUEUE_MAX_SIZE)

    _listener = QueueListener(log_queue, *_build_handlers(), respect_handler_level=True)
    _listener.start()

    _queue_handler = QueueHandler(log_queue)
    _queue_handler.setLevel(level)
    # Read ContextVars in the caller's context, not the listener thread
    _queue_handler.addFilter(ContextFilter())

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(_queue_handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging initialized",
        extra={"environment": Config.ENVIRONMENT, "json": _use_json(), "file": Config.LOG_TO_FILE},
    )


def shutdown_logging() -> None:
    """Flush queued records and detach the pipeline."""
    global _listener, _queue_handler

    if _queue_handler is None:
        return

    if _listener is not None:
        _listener.stop()
        _listener = None

    logging.getLogger().removeHandler(_queue_handler)
    _queue_handler.close()
    _queue_handler = None


def get_logger(name: str) -> Logger:
    return logging.getLogger(name)


setup_logging()
