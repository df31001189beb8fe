"""Explicit roll session: the staging state a table screen would hold.

One session belongs to one user at one table. It owns the staged dice, the
last player and master results, the roll ledger and the preset store, and
it is the only place those are mutated.
"""
from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from Swordsaga.config import Settings
from Swordsaga.events.ledger import DEFAULT_LEDGER_CAPACITY, RollLedger
from Swordsaga.rules.dice import DieType, RollMode, coerce_die_type
from Swordsaga.rules.difficulty import DifficultyLevel, get_difficulty_dice
from Swordsaga.rules.engine import SwordSagaRuleset
from Swordsaga.rules.pool import DicePool
from Swordsaga.rules.types import (
    ArmorOutcome,
    ContestOutcome,
    EvadeOutcome,
    RollSummary,
    SourceTab,
)
from Swordsaga.services.preset_service import NO_BONUS, PresetStore, StatPreset

log = structlog.get_logger()

POOL_TABS = (SourceTab.COMBAT, SourceTab.AIM, SourceTab.EVADE)
TENSION_TABS = (SourceTab.HERO, SourceTab.MASTER)
# Rolls resolved on their own (soak, dodge, aim) are not contested against the master
UNCONTESTED_TABS = (SourceTab.ARMOR, SourceTab.EVADE, SourceTab.AIM)


@dataclass
class RollSession:
    ruleset: SwordSagaRuleset = field(default_factory=SwordSagaRuleset)
    ledger: RollLedger = field(default_factory=lambda: RollLedger(DEFAULT_LEDGER_CAPACITY))
    presets: PresetStore | None = None

    active_tab: SourceTab = SourceTab.HERO
    mode: RollMode = RollMode.NORMAL
    surge: int = 0

    # Hero staging
    base_die: DieType = DieType.D20
    bonus_die: DieType | None = None
    proficient: bool = False
    active_stat: str | None = None

    # Master staging
    difficulty: DifficultyLevel = DifficultyLevel.NORMAL

    pools: dict[SourceTab, DicePool] = field(
        default_factory=lambda: {tab: DicePool() for tab in POOL_TABS}
    )

    # Armor staging
    armor_die: DieType = DieType.D8
    armor_charges: int = 1
    incoming_damage: int = 0

    # Evade staging
    aim_to_beat: int = 0

    last_roll: RollSummary | None = None
    last_master_roll: RollSummary | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> RollSession:
        settings = settings or Settings()
        return cls(
            ruleset=SwordSagaRuleset(settings.dice_seed),
            ledger=RollLedger(settings.ledger_capacity),
            presets=PresetStore(settings.presets_path),
        )

    # --- staging -------------------------------------------------------

    def pool(self, tab: SourceTab | str) -> DicePool:
        return self.pools[SourceTab(tab)]

    def adjust_pool(self, tab: SourceTab | str, die: DieType | str, delta: int) -> int:
        return self.pool(tab).adjust(die, delta)

    def set_armor_charges(self, charges: int) -> int:
        self.armor_charges = max(1, int(charges))
        return self.armor_charges

    def add_surge(self, count: int = 1) -> int:
        self.surge = max(0, self.surge + int(count))
        return self.surge

    def set_bonus_die(self, die: DieType | str | None) -> None:
        if die is None or str(getattr(die, "value", die)).lower() == NO_BONUS:
            self.bonus_die = None
        else:
            self.bonus_die = coerce_die_type(die)

    def dice_for(self, tab: SourceTab | str | None = None) -> list[DieType]:
        tab = SourceTab(tab or self.active_tab)
        if tab is SourceTab.MASTER:
            return get_difficulty_dice(self.difficulty)

        if tab is SourceTab.HERO:
            dice = [self.base_die]
            if self.bonus_die is not None:
                dice.append(self.bonus_die)
            if self.proficient:
                dice.append(DieType.D6)
        elif tab is SourceTab.ARMOR:
            dice = [self.armor_die] * self.armor_charges
        elif tab in POOL_TABS:
            dice = self.pool(tab).expand()
        else:
            dice = []
        return dice + [DieType.D6] * self.surge

    # --- rolling -------------------------------------------------------

    def roll(
        self,
        tab: SourceTab | str | None = None,
        *,
        label: str | None = None,
        master: bool = False,
    ) -> RollSummary | None:
        """Roll whatever is staged for ``tab``; None when nothing is staged."""
        tab = SourceTab.MASTER if master else SourceTab(tab or self.active_tab)
        dice = self.dice_for(tab)
        if not dice:
            log.info("session.roll.empty", tab=tab.value)
            return None

        if tab is SourceTab.MASTER:
            label = f"Master: {self.difficulty.value}"
        summary = self.ruleset.roll_summary(
            dice,
            label=label or tab.value.title(),
            mode=self.mode,
            source_tab=tab,
        )
        if tab is SourceTab.MASTER:
            self.last_master_roll = summary
        else:
            self.last_roll = summary
        self.ledger.record(summary)
        return summary

    def add_tension(self, player: bool = True) -> RollSummary | None:
        """Escalate the held hero (or master) roll; pool and armor rolls never take tension."""
        target = self.last_roll if player else self.last_master_roll
        if target is None or target.source_tab not in TENSION_TABS:
            return None
        updated = self.ruleset.escalate_with_tension(target)
        if player:
            self.last_roll = updated
        else:
            self.last_master_roll = updated
        return updated

    def contest_outcome(self) -> ContestOutcome | None:
        if self.last_roll is None or self.last_master_roll is None:
            return None
        if self.last_roll.source_tab in UNCONTESTED_TABS:
            return None
        return self.ruleset.resolve_contest(self.last_roll, self.last_master_roll)

    def armor_outcome(self) -> ArmorOutcome | None:
        if self.last_roll is None or self.last_roll.source_tab is not SourceTab.ARMOR:
            return None
        return self.ruleset.resolve_armor(self.incoming_damage, self.last_roll)

    def evade_outcome(self) -> EvadeOutcome | None:
        if self.last_roll is None or self.last_roll.source_tab is not SourceTab.EVADE:
            return None
        return self.ruleset.resolve_evade(self.aim_to_beat, self.last_roll)

    # --- presets -------------------------------------------------------

    def _stored_preset(self, stat_id: str) -> StatPreset:
        if self.presets is None:
            return StatPreset()
        return self.presets.get(stat_id)

    def select_stat(self, stat_id: str) -> StatPreset | None:
        """Toggle the active stat; selecting it again clears the selection."""
        stat_id = stat_id.upper()
        if self.active_stat == stat_id:
            self.active_stat = None
            self.base_die, self.bonus_die = DieType.D20, None
            return None
        self.active_stat = stat_id
        preset = self._stored_preset(stat_id)
        self.base_die = preset.base_die
        self.set_bonus_die(preset.bonus_die)
        return preset

    def current_preset(self) -> StatPreset:
        return StatPreset(
            base_die=self.base_die,
            bonus_die=self.bonus_die if self.bonus_die is not None else NO_BONUS,
        )

    @property
    def is_dirty(self) -> bool:
        if self.active_stat is None:
            return False
        return self.current_preset() != self._stored_preset(self.active_stat)

    def save_current_preset(self) -> StatPreset | None:
        if self.active_stat is None or self.presets is None:
            return None
        preset = self.current_preset()
        self.presets.save(self.active_stat, preset)
        return preset

    # --- resets --------------------------------------------------------

    def clear_staged(self) -> None:
        for p in self.pools.values():
            p.clear()
        self.surge = 0
        self.last_roll = None
        self.last_master_roll = None
        self.mode = RollMode.NORMAL
        self.armor_charges = 1
        self.incoming_damage = 0
        self.aim_to_beat = 0
        self.active_stat = None
        self.base_die = DieType.D20
        self.bonus_die = None
        self.proficient = False

    def hard_reset(self) -> None:
        if self.presets is not None:
            self.presets.wipe()
        self.ledger.clear()
        self.clear_staged()
        log.info("session.hard_reset")
