"""Per-stat dice presets persisted as one flat JSON object.

File shape::

    {"STR": {"baseDie": "d12", "bonusDie": "d4"}, "DEX": {"baseDie": "d20", "bonusDie": "none"}}

The file is read once when the store is created and rewritten wholesale on
every save. Anything unreadable degrades to an empty preset map.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import structlog
from pydantic import BaseModel, Field, TypeAdapter

from Swordsaga.metrics import inc_counter
from Swordsaga.rules.dice import DieType

log = structlog.get_logger()

NO_BONUS = "none"


@dataclass(frozen=True)
class Stat:
    id: str
    label: str


STATS: tuple[Stat, ...] = (
    Stat("STR", "Strength"),
    Stat("DEX", "Dexterity"),
    Stat("MAS", "Mastery"),
    Stat("KNO", "Knowledge"),
    Stat("RAP", "Rapport"),
    Stat("MEN", "Menace"),
    Stat("INT", "Introversion"),
)


class StatPreset(BaseModel):
    base_die: DieType = Field(default=DieType.D20, alias="baseDie")
    bonus_die: DieType | Literal["none"] = Field(default=NO_BONUS, alias="bonusDie")

    model_config = dict(populate_by_name=True, extra="forbid", frozen=True)

    @property
    def dice(self) -> list[DieType]:
        if self.bonus_die == NO_BONUS:
            return [self.base_die]
        return [self.base_die, DieType(self.bonus_die)]


DEFAULT_PRESET = StatPreset()

_PRESET_MAP = TypeAdapter(dict[str, StatPreset])


class PresetStore:
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._presets: dict[str, StatPreset] = self._load()

    def _load(self) -> dict[str, StatPreset]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            presets = _PRESET_MAP.validate_python(raw)
        except (OSError, ValueError) as exc:
            # ValidationError and JSONDecodeError are both ValueErrors
            inc_counter("presets.load_failed")
            log.warning("presets.load_failed", path=str(self.path), error=str(exc)[:200])
            return {}
        log.info("presets.loaded", path=str(self.path), count=len(presets))
        return presets

    def get(self, stat_id: str) -> StatPreset:
        return self._presets.get(stat_id.upper(), DEFAULT_PRESET)

    def has(self, stat_id: str) -> bool:
        return stat_id.upper() in self._presets

    def all(self) -> dict[str, StatPreset]:
        return dict(self._presets)

    def save(self, stat_id: str, preset: StatPreset) -> None:
        self._presets[stat_id.upper()] = preset
        self._write()
        inc_counter("presets.saved")
        log.info(
            "presets.saved",
            stat=stat_id.upper(),
            base_die=preset.base_die.value,
            bonus_die=str(getattr(preset.bonus_die, "value", preset.bonus_die)),
        )

    def wipe(self) -> None:
        self._presets = {}
        self.path.unlink(missing_ok=True)
        log.info("presets.wiped", path=str(self.path))

    def _write(self) -> None:
        payload = {
            stat: preset.model_dump(by_alias=True, mode="json")
            for stat, preset in self._presets.items()
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, sort_keys=True), encoding="utf-8")
