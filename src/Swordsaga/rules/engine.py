from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import Protocol

import structlog

from Swordsaga.rules.dice import DiceRNG, DieResult, DieType, RandomSource, RollMode
from Swordsaga.rules.difficulty import DifficultyLevel, get_difficulty_dice
from Swordsaga.rules.outcome import calculate_roll, summarize
from Swordsaga.rules.tension import escalate_with_tension
from Swordsaga.rules.types import (
    ArmorOutcome,
    ContestOutcome,
    EvadeOutcome,
    RollSummary,
    RollTotals,
    SourceTab,
)

log = structlog.get_logger()


class Ruleset(Protocol):
    """
    Defines the interface for a game system's rules, abstracting away
    the specific mechanics of dice rolling and roll resolution.
    """
    def roll_dice_set(
        self, die_types: Iterable[DieType | str], mode: RollMode = RollMode.NORMAL
    ) -> list[DieResult]:
        ...

    def calculate_roll(self, results: Sequence[DieResult]) -> RollTotals:
        ...

    def get_difficulty_dice(self, level: DifficultyLevel | str) -> list[DieType]:
        ...

    def escalate_with_tension(self, summary: RollSummary) -> RollSummary:
        ...

    def roll_summary(
        self,
        die_types: Iterable[DieType | str],
        *,
        label: str,
        mode: RollMode = RollMode.NORMAL,
        source_tab: SourceTab = SourceTab.CUSTOM,
    ) -> RollSummary:
        ...

    def resolve_armor(self, incoming_damage: int, summary: RollSummary) -> ArmorOutcome:
        ...

    def resolve_evade(self, aim: int, summary: RollSummary) -> EvadeOutcome:
        ...

    def resolve_contest(self, player: RollSummary, master: RollSummary) -> ContestOutcome:
        ...


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


class SwordSagaRuleset:
    """
    Sword Saga implementation of the Ruleset interface.

    Crits multiply the whole roll by half the critting die's faces; tension
    compounds a finished roll.
    """
    def __init__(self, seed: int | None = None, *, rng: RandomSource | None = None):
        self.rng = DiceRNG(seed, rng=rng)

    def roll_dice_set(
        self, die_types: Iterable[DieType | str], mode: RollMode = RollMode.NORMAL
    ) -> list[DieResult]:
        return self.rng.roll_dice_set(die_types, mode)

    def calculate_roll(self, results: Sequence[DieResult]) -> RollTotals:
        return calculate_roll(results)

    def get_difficulty_dice(self, level: DifficultyLevel | str) -> list[DieType]:
        return get_difficulty_dice(level)

    def escalate_with_tension(self, summary: RollSummary) -> RollSummary:
        return escalate_with_tension(summary, rng=self.rng)

    def roll_summary(
        self,
        die_types: Iterable[DieType | str],
        *,
        label: str,
        mode: RollMode = RollMode.NORMAL,
        source_tab: SourceTab = SourceTab.CUSTOM,
    ) -> RollSummary:
        # Armor soaks are never subject to advantage/disadvantage
        if SourceTab(source_tab) is SourceTab.ARMOR:
            mode = RollMode.NORMAL
        results = self.roll_dice_set(die_types, mode)
        return summarize(results, label=label, mode=mode, source_tab=source_tab)

    def resolve_armor(self, incoming_damage: int, summary: RollSummary) -> ArmorOutcome:
        # The armor roll divides incoming damage; a zero roll still divides by 1
        divisor = max(1, summary.final_total)
        final_damage = _round_half_up(max(0, incoming_damage) / divisor)
        log.info(
            "rules.armor.resolved",
            incoming_damage=incoming_damage,
            divisor=divisor,
            final_damage=final_damage,
        )
        return ArmorOutcome(incoming_damage=incoming_damage, divisor=divisor, final_damage=final_damage)

    def resolve_evade(self, aim: int, summary: RollSummary) -> EvadeOutcome:
        # Ties go to the defender
        dodged = summary.final_total >= aim
        log.info("rules.evade.resolved", aim=aim, roll_total=summary.final_total, dodged=dodged)
        return EvadeOutcome(aim=aim, roll_total=summary.final_total, dodged=dodged)

    def resolve_contest(self, player: RollSummary, master: RollSummary) -> ContestOutcome:
        # Ties go to the player
        won = player.final_total >= master.final_total
        log.info(
            "rules.contest.resolved",
            player_total=player.final_total,
            master_total=master.final_total,
            won=won,
        )
        return ContestOutcome(player_total=player.final_total, master_total=master.final_total, won=won)
