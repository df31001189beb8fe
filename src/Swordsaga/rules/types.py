from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from Swordsaga.rules.dice import DieResult, RollMode


class SourceTab(str, Enum):
    HERO = "hero"
    MASTER = "master"
    COMBAT = "combat"
    AIM = "aim"
    ARMOR = "armor"
    EVADE = "evade"
    CUSTOM = "custom"


@dataclass(frozen=True)
class RollTotals:
    base_sum: int
    total_multiplier: float
    final_total: int


@dataclass(frozen=True)
class RollSummary:
    id: str
    timestamp: datetime
    label: str
    dice: tuple[DieResult, ...]
    mode: RollMode
    base_sum: int
    total_multiplier: float
    final_total: int
    source_tab: SourceTab = SourceTab.CUSTOM
    tension_dice: tuple[DieResult, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ArmorOutcome:
    incoming_damage: int
    divisor: int
    final_damage: int


@dataclass(frozen=True)
class EvadeOutcome:
    aim: int
    roll_total: int
    dodged: bool


@dataclass(frozen=True)
class ContestOutcome:
    player_total: int
    master_total: int
    won: bool
