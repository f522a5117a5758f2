"""Structured logging for the adapter engine and the chat layer.

All loggers live under the ``chat_providers`` hierarchy. The root of that
hierarchy owns one stderr handler (JSON by default) and still propagates, so
host applications and pytest's ``caplog`` see every record.

Events are single JSON objects built by ``log_event``. Request lifecycle
events go through ``normalized_log_event``, which guarantees the keys
``phase``, ``attempt``, ``error_code``, ``emitted`` and ``tokens`` so they can
be filtered the same way for every provider.

Environment:
    CHAT_PROVIDERS_LOG_LEVEL: level name applied to the package logger.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "chat_providers"
LOG_LEVEL_ENV = "CHAT_PROVIDERS_LOG_LEVEL"

REQUIRED_NORMALIZED_KEYS = ("phase", "attempt", "error_code", "emitted", "tokens")

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_LEVEL_ALIASES = {"WARN": logging.WARNING, "FATAL": logging.CRITICAL}
_FILE_MAX_BYTES = 10 * 1024 * 1024
_FILE_BACKUPS = 5

_console: Optional[logging.Handler] = None
_file: Optional[RotatingFileHandler] = None


def _parse_level(value: Union[str, int, None], default: int = logging.INFO) -> int:
    """Resolve a level given as a number or a name; unknown names yield ``default``."""
    if isinstance(value, int):
        return value
    if not value:
        return default
    name = value.strip().upper()
    if name in _LEVEL_ALIASES:
        return _LEVEL_ALIASES[name]
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _base_logger(json_mode: bool = True) -> logging.Logger:
    global _console
    logger = logging.getLogger(BASE_LOGGER_NAME)
    if _console is None:
        _console = logging.StreamHandler(sys.stderr)
        _console.setFormatter(_formatter(json_mode))
        logger.addHandler(_console)
        logger.propagate = True
        logger.setLevel(_parse_level(os.getenv(LOG_LEVEL_ENV)))
    return logger


def get_logger(name: str = BASE_LOGGER_NAME) -> logging.Logger:
    """Return ``name`` as a logger inside the package hierarchy.

    ``"adapter.openai"`` becomes ``"chat_providers.adapter.openai"``.
    """
    base = _base_logger()
    if name == BASE_LOGGER_NAME:
        return base
    if not name.startswith(BASE_LOGGER_NAME + "."):
        name = f"{BASE_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logger(
    *,
    level: Union[int, str, None] = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Adjust the package logger at runtime.

    Parameters
    ----------
    level:
        New level, numeric or by name; ``None`` leaves it unchanged.
    file_path:
        Attach a rotating file handler writing there (10 MB x 5 backups),
        replacing one attached earlier. ``None`` detaches it.
    json_mode:
        JSON lines (default) or the plain text format, for both handlers.
    """
    global _file
    logger = _base_logger(json_mode)
    if level is not None:
        logger.setLevel(_parse_level(level, default=logger.level))
    if _console is not None:
        _console.setFormatter(_formatter(json_mode))

    target = str(Path(file_path).expanduser().resolve()) if file_path else None
    if _file is not None and _file.baseFilename != target:
        logger.removeHandler(_file)
        _file.close()
        _file = None
    if target is not None and _file is None:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        _file = RotatingFileHandler(target, maxBytes=_FILE_MAX_BYTES, backupCount=_FILE_BACKUPS, encoding="utf-8")
        logger.addHandler(_file)
    if _file is not None:
        _file.setFormatter(_formatter(json_mode))
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: Optional[LogContext] = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Log ``{"event": event, **ctx, **fields}`` as one JSON string.

    ``None`` values are dropped unless ``keep_none`` is set.
    """
    if not logger.isEnabledFor(level):
        return
    payload: Dict[str, Any] = {"event": event}
    if ctx is not None:
        payload.update(ctx.to_dict())
    payload.update(fields if keep_none else {k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


def _tokens_field(tokens: Any) -> Optional[Dict[str, Any]]:
    if tokens is None:
        return None
    if isinstance(tokens, int):
        return {"count": tokens}
    try:
        return dict(tokens)
    except (TypeError, ValueError):
        return {"value": repr(tokens)}


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: Optional[LogContext] = None,
    *,
    phase: str,
    attempt: Optional[int] = None,
    error_code: Optional[str] = None,
    emitted: Union[int, bool, None] = None,
    tokens: Any = None,
    level: int = logging.INFO,
    **extra: Any,
) -> None:
    """Log a lifecycle event carrying every key of ``REQUIRED_NORMALIZED_KEYS``.

    Extra fields never replace a normalized key and are dropped when ``None``.
    """
    fields: Dict[str, Any] = {
        "phase": phase,
        "attempt": attempt,
        "error_code": error_code,
        "emitted": emitted,
        "tokens": _tokens_field(tokens),
    }
    for key, value in extra.items():
        if value is not None and key not in fields:
            fields[key] = value
    log_event(logger, event, ctx, level=level, keep_none=True, **fields)


__all__ = [
    "BASE_LOGGER_NAME",
    "LOG_LEVEL_ENV",
    "LogContext",
    "REQUIRED_NORMALIZED_KEYS",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
]
