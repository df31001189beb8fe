import json
import logging
from logging.handlers import RotatingFileHandler

import pytest
import structlog

from Swordsaga.logging import redact_settings, setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers:
        h.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_file_handler_writes_json(settings, restore_logging):
    s = settings.model_copy(
        update={"logging_file": "INFO", "logging_to_file": True, "logging_console": "NONE"}
    )
    setup_logging(s)
    structlog.get_logger("test").info("roll.logged", final_total=42)
    for h in logging.getLogger().handlers:
        h.flush()

    with open(s.logging_file_path, encoding="utf-8") as f:
        records = [json.loads(line) for line in f if line.strip()]
    rec = next(r for r in records if r["event"] == "roll.logged")
    assert rec["final_total"] == 42
    assert rec["level"] == "info"
    assert "timestamp" in rec


def _json_handlers():
    return [
        h
        for h in logging.getLogger().handlers
        if isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)
    ]


def test_disabled_logging_installs_null_handler(settings, restore_logging):
    setup_logging(settings.model_copy(update={"logging_enabled": False}))
    handlers = logging.getLogger().handlers
    assert any(isinstance(h, logging.NullHandler) for h in handlers)
    assert _json_handlers() == []


def test_none_levels_skip_handlers(settings, restore_logging):
    setup_logging(settings.model_copy(update={"logging_console": "NONE"}))
    assert _json_handlers() == []
    assert not any(isinstance(h, RotatingFileHandler) for h in logging.getLogger().handlers)


def test_redact_settings(settings):
    data = redact_settings(settings)
    assert data["presets_path"] == "presets.json"
    assert data["logging_file_path"] == "swordsaga.jsonl"
    assert data["ledger_capacity"] == 30
