"""Focused tests for chat_providers.base.logging.

Covers:
- _parse_level string parsing
- get_logger hierarchy
- normalized_log_event emits required keys and never lets extras overwrite them
- JsonFormatter hoists JSON message keys
- configure_logger attaches and removes a rotating file handler
"""
from __future__ import annotations

import json
import logging

from chat_providers.base.log_support import JsonFormatter, LogContext
from chat_providers.base.logging import (
    BASE_LOGGER_NAME,
    REQUIRED_NORMALIZED_KEYS,
    _parse_level,  # type: ignore[attr-defined]
    configure_logger,
    get_logger,
    log_event,
    normalized_log_event,
)


class _ListHandler(logging.Handler):
    """Capture log records into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - exercised via tests
        self.messages.append(record.getMessage())


def test_parse_level_variants():
    assert _parse_level(None) == logging.INFO  # nosec B101
    assert _parse_level("debug") == logging.DEBUG  # nosec B101
    assert _parse_level("WARN") == logging.WARNING  # nosec B101
    assert _parse_level("unknown", default=logging.ERROR) == logging.ERROR  # nosec B101


def test_get_logger_prefixes_names_into_hierarchy():
    logger = get_logger("adapter.test")
    assert logger.name == f"{BASE_LOGGER_NAME}.adapter.test"  # nosec B101
    assert get_logger(f"{BASE_LOGGER_NAME}.chat").name == f"{BASE_LOGGER_NAME}.chat"  # nosec B101


def test_normalized_log_event_emits_required_keys():
    logger = get_logger("tests.logging.normalized")
    handler = _ListHandler()
    logger.addHandler(handler)
    try:
        ctx = LogContext(provider="p", model="m", request_id="r1")
        normalized_log_event(
            logger,
            "stream.end",
            ctx,
            phase="finalize",
            error_code="timeout",
            emitted=3,
            tokens={"prompt": 10, "completion": 5},
            phase_override="ignored",
            emitted_count=3,
        )
    finally:
        logger.removeHandler(handler)

    payload = json.loads(handler.messages[-1])
    for key in REQUIRED_NORMALIZED_KEYS:
        assert key in payload, f"missing normalized key {key}"  # nosec B101
    assert payload["event"] == "stream.end"  # nosec B101
    assert payload["provider"] == "p" and payload["request_id"] == "r1"  # nosec B101
    assert payload["tokens"] == {"prompt": 10, "completion": 5}  # nosec B101
    assert payload["emitted_count"] == 3  # nosec B101


def test_log_event_drops_none_fields():
    logger = get_logger("tests.logging.plain")
    handler = _ListHandler()
    logger.addHandler(handler)
    try:
        log_event(logger, "auth.validate", valid=False, error_code=None)
    finally:
        logger.removeHandler(handler)
    payload = json.loads(handler.messages[-1])
    assert payload == {"event": "auth.validate", "valid": False}  # nosec B101


def test_json_formatter_hoists_message_keys():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, json.dumps({"event": "e", "phase": "start"}), None, None)
    out = json.loads(JsonFormatter().format(record))
    assert out["event"] == "e" and out["phase"] == "start"  # nosec B101
    assert out["level"] == "INFO"  # nosec B101


def test_configure_logger_file_handler_roundtrip(tmp_path):
    target = tmp_path / "logs" / "chat.log"
    logger = configure_logger(file_path=str(target))
    resolved = str(target.resolve())
    try:
        assert any(getattr(h, "baseFilename", None) == resolved for h in logger.handlers)  # nosec B101
        assert target.parent.is_dir()  # nosec B101
    finally:
        logger = configure_logger(file_path=None)
    assert not any(getattr(h, "baseFilename", None) == resolved for h in logger.handlers)  # nosec B101
