"""Structured logging configuration with JSON output and rotation."""

from __future__ import annotations

import atexit
import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path

from .config import BaseConfig

ROOT_LOGGER_NAME = "billstack"

_SESSION_BUFFER: list[str] = []
_SESSION_START = datetime.now()
_SESSION_LOG_PATH: Path | None = None


class SessionBufferHandler(logging.Handler):
    """Collect formatted lines for the current session; flushed to disk at exit."""

    def __init__(self, formatter: logging.Formatter):
        super().__init__()
        self.setFormatter(formatter)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            _SESSION_BUFFER.append(self.format(record))
        except Exception:  # pragma: no cover
            self.handleError(record)


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    _STANDARD_ATTRS = {
        "name", "msg", "args", "created", "filename", "funcName", "levelname",
        "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
        "processName", "relativeCreated", "thread", "threadName", "exc_info",
        "exc_text", "stack_info", "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": self.formatException(record.exc_info),
            }

        # Fields passed through ``extra={...}``
        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self._STANDARD_ATTRS
        }
        if extra:
            payload["extra"] = extra

        return json.dumps(payload, default=str, ensure_ascii=False)


def _flush_session() -> None:  # pragma: no cover - runs at interpreter exit
    if not _SESSION_BUFFER or _SESSION_LOG_PATH is None:
        return
    try:
        _SESSION_LOG_PATH.parent.mkdir(parents=True, exist_ok=True)
        with _SESSION_LOG_PATH.open("w", encoding="utf-8") as fh:
            fh.write("# BillStack session log\n")
            fh.write(f"# Started: {_SESSION_START.isoformat()}\n")
            fh.write(f"# Entries: {len(_SESSION_BUFFER)}\n\n")
            for line in _SESSION_BUFFER:
                fh.write(line + "\n")
    except OSError as exc:
        sys.stderr.write(f"Failed to flush session log: {exc}\n")


def setup_logging(config: BaseConfig) -> logging.Logger:
    """Configure the ``billstack`` logger.

    Installs three handlers: a console handler (verbose in dev mode, warnings
    only otherwise), a rotating JSON-lines file under ``<DATA_DIR>/logs`` and
    an in-memory session buffer written to a timestamped file at exit.

    Args:
        config: Application configuration with DATA_DIR and DEV_MODE

    Returns:
        The configured package logger
    """
    logs_dir = Path(config.DATA_DIR) / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if config.DEV_MODE else logging.INFO)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if config.DEV_MODE:
        console_formatter = logging.Formatter(
            fmt="[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s",
            datefmt="%H:%M:%S",
        )
    else:
        console_formatter = logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO if config.DEV_MODE else logging.WARNING)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    log_file = logs_dir / "billstack.log"
    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(JSONFormatter())
    logger.addHandler(file_handler)

    session_handler = SessionBufferHandler(console_formatter)
    session_handler.setLevel(logging.DEBUG)
    logger.addHandler(session_handler)

    global _SESSION_LOG_PATH  # noqa: PLW0603
    _SESSION_LOG_PATH = logs_dir / _SESSION_START.strftime("session_%Y%m%d_%H%M%S.log")
    atexit.unregister(_flush_session)
    atexit.register(_flush_session)

    logger.info(
        "Logging initialized",
        extra={"dev_mode": config.DEV_MODE, "log_file": str(log_file)},
    )
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under ``billstack``."""

    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def session_log_path() -> Path | None:
    """Return the path where the in-memory session log will be flushed on exit."""
    return _SESSION_LOG_PATH
