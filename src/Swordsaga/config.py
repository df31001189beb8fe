"""Swordsaga settings: init kwargs, .env, SWORDSAGA_* env vars, then config.toml."""

from pathlib import Path
from typing import Any

import tomllib
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_TOML = Path("config.toml")

# (section, key) in config.toml -> Settings field
_TOML_FIELDS: dict[tuple[str, str], str] = {
    ("app", "env"): "env",
    ("dice", "seed"): "dice_seed",
    ("presets", "path"): "presets_path",
    ("ledger", "capacity"): "ledger_capacity",
    ("logging", "enabled"): "logging_enabled",
    ("logging", "level"): "logging_level",
    ("logging", "file_path"): "logging_file_path",
    ("logging", "max_bytes"): "logging_max_bytes",
    ("logging", "backup_count"): "logging_backup_count",
}


def _handler_setting(value: Any, overall: str) -> tuple[str, bool | None]:
    """Map a [logging] console/to_file value to (level, legacy on/off flag).

    Strings are levels (``NONE`` disables the handler); booleans switch the
    handler between the overall level and ``NONE``.
    """
    if isinstance(value, bool):
        return (overall if value else "NONE"), value
    if isinstance(value, str):
        return value.upper(), None
    return overall, None


def _toml_settings_source() -> dict[str, Any]:
    """Read config.toml from the working directory; lowest-priority source."""
    if not CONFIG_TOML.exists():
        return {}
    with CONFIG_TOML.open("rb") as f:
        doc = tomllib.load(f)

    out: dict[str, Any] = {}
    for (section, key), name in _TOML_FIELDS.items():
        value = (doc.get(section) or {}).get(key)
        if value is not None:
            out[name] = value

    log_cfg = doc.get("logging") or {}
    overall = str(out.get("logging_level", "INFO")).upper()
    for key, level_field, flag_field in (
        ("console", "logging_console", "logging_to_console"),
        ("to_file", "logging_file", "logging_to_file"),
    ):
        if key not in log_cfg and "level" not in log_cfg:
            continue
        level, flag = _handler_setting(log_cfg.get(key), overall)
        out[level_field] = level
        if flag is not None:
            out[flag_field] = flag
    return out


class Settings(BaseSettings):
    env: str = Field(default="dev")

    # Fixed seed makes every roll in a session reproducible (demos, bug reports)
    dice_seed: int | None = None

    presets_path: str = "data/swordsaga_presets.json"
    ledger_capacity: int = Field(default=30, ge=1)

    # Handler levels accept INFO|DEBUG|WARNING|ERROR|CRITICAL|NONE
    logging_enabled: bool = True
    logging_level: str = "INFO"
    logging_console: str = "INFO"
    logging_file: str = "INFO"
    logging_to_console: bool = True
    logging_to_file: bool = True
    logging_file_path: str = "logs/swordsaga.jsonl"
    logging_max_bytes: int = 5_000_000
    logging_backup_count: int = 5

    model_config = SettingsConfigDict(
        env_prefix="SWORDSAGA_",
        case_sensitive=False,
        env_file=".env",
        extra="ignore",
    )

    @field_validator("logging_level", "logging_console", "logging_file")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return (v or "INFO").upper()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Explicit kwargs win, then .env, then the process environment, then TOML
        return (
            init_settings,
            dotenv_settings,
            env_settings,
            _toml_settings_source,
            file_secret_settings,
        )


def load_settings() -> Settings:
    return Settings()
