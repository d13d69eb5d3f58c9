# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Loguru setup with a per-request id carried in a ContextVar."""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[request_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)
_NO_REQUEST = "-"
DEFAULT_LOG_FILE = Path("instance") / "nestfinder.log"

_REQUEST_ID: ContextVar[str] = ContextVar("request_id", default=_NO_REQUEST)

# Libraries that are chatty at INFO.
_QUIET_LOGGERS = {"httpx": logging.WARNING, "httpcore": logging.WARNING, "sqlalchemy.engine": logging.WARNING}


def _log_file() -> Path | None:
    configured = os.getenv("LOG_FILE")
    if configured is None:
        return DEFAULT_LOG_FILE.resolve()
    return Path(configured).resolve() if configured else None


class _StdlibBridge(logging.Handler):
    """Forward stdlib records (werkzeug, sqlalchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.opt(depth=6, exception=record.exc_info).bind(
            request_id=_REQUEST_ID.get()
        ).log(level, record.getMessage())


class ContextualLogger:
    """Every attribute lookup returns loguru bound to the current request id."""

    def __getattr__(self, name):  # pragma: no cover
        return getattr(_logger.bind(request_id=_REQUEST_ID.get()), name)


def set_request_id(value: str | None) -> None:
    _REQUEST_ID.set(value or _NO_REQUEST)


def get_request_id() -> str:
    return _REQUEST_ID.get()


def clear_request_id() -> None:
    _REQUEST_ID.set(_NO_REQUEST)


def setup_logging(level: str | None = None, *, debug_mode: bool = False) -> None:
    """Install the stderr sink and, unless LOG_FILE is empty, a rotating file sink."""
    level = (level or os.getenv("LOG_LEVEL") or ("DEBUG" if debug_mode else "INFO")).upper()

    _logger.remove()
    _logger.configure(extra={"request_id": _NO_REQUEST})
    sink_options = {"level": level, "format": _FMT, "filter": sanitize_record, "diagnose": False}
    _logger.add(sys.stderr, colorize=True, backtrace=debug_mode, **sink_options)

    log_file = _log_file()
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _logger.add(
            log_file,
            colorize=False,
            backtrace=False,
            enqueue=True,
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
            **sink_options,
        )

    logging.basicConfig(handlers=[_StdlibBridge()], level=0, force=True)
    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


logger = ContextualLogger()

__all__ = [
    "clear_request_id",
    "get_request_id",
    "logger",
    "set_request_id",
    "setup_logging",
]
