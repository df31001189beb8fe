# logging.py

import logging
import os
from logging.handlers import RotatingFileHandler

import structlog
from structlog.contextvars import merge_contextvars

from Swordsaga.config import Settings

_DEFAULTS = Settings.model_fields


def _json_formatter() -> structlog.stdlib.ProcessorFormatter:
    # Renders structlog events and foreign stdlib records alike as one JSON line
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            merge_contextvars,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        foreign_pre_chain=[structlog.processors.add_log_level, merge_contextvars],
    )


def _handler_level(settings: Settings | None, per_handler: str, legacy_flag: str, overall: str) -> str:
    """Resolve a handler level name; "NONE" disables the handler."""
    name = getattr(settings, per_handler, None) if settings is not None else None
    if name is None:
        enabled = True if settings is None else getattr(settings, legacy_flag, True)
        name = overall if enabled else "NONE"
    return (name or "").upper()


def _setting(settings: Settings | None, name: str):
    return getattr(settings, name) if settings is not None else _DEFAULTS[name].default


def _build_handlers(settings: Settings | None, level_name: str) -> list[logging.Handler]:
    if settings is not None and not settings.logging_enabled:
        return [logging.NullHandler()]

    formatter = _json_formatter()
    fallback = getattr(logging, level_name, logging.INFO)
    handlers: list[logging.Handler] = []

    console = _handler_level(settings, "logging_console", "logging_to_console", level_name)
    if console != "NONE":
        handlers.append(logging.StreamHandler())
        handlers[-1].setLevel(getattr(logging, console, fallback))

    to_file = _handler_level(settings, "logging_file", "logging_to_file", level_name)
    if to_file != "NONE":
        path = _setting(settings, "logging_file_path")
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                path,
                maxBytes=_setting(settings, "logging_max_bytes"),
                backupCount=_setting(settings, "logging_backup_count"),
                encoding="utf-8",
            )
        )
        handlers[-1].setLevel(getattr(logging, to_file, fallback))

    for h in handlers:
        h.setFormatter(formatter)
    return handlers


def setup_logging(settings: Settings | None = None) -> None:
    """Route structlog through stdlib logging with JSON output.

    Without settings: INFO on the console and logs/swordsaga.jsonl.
    """
    level_name = str(_setting(settings, "logging_level")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.captureWarnings(True)
    # force=True replaces whatever an earlier call (or a test runner) installed
    logging.basicConfig(level=level, handlers=_build_handlers(settings, level_name), force=True)

    structlog.configure(
        processors=[
            merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def redact_settings(settings: Settings) -> dict:
    """Settings as a dict that is safe to log.

    Paths are reduced to their basename; token/secret/key fields are masked.
    """
    data = settings.model_dump()
    for k, v in data.items():
        if k.endswith("_path") and isinstance(v, str):
            data[k] = os.path.basename(v)
        elif k.endswith(("_token", "_secret", "_key")):
            data[k] = "[REDACTED]"
    return data
