"""Tension: compound an already-final roll with one extra d6."""

from __future__ import annotations

from dataclasses import replace

import structlog

from Swordsaga.metrics import inc_counter, observe_histogram
from Swordsaga.rules.dice import DiceRNG, DieType, RollMode
from Swordsaga.rules.types import RollSummary

log = structlog.get_logger()

# A six is deliberately capped at x3.
TENSION_MULTIPLIERS: dict[int, int] = {1: 1, 2: 2, 3: 3, 4: 4, 5: 5, 6: 3}


def tension_multiplier(value: int) -> int:
    return TENSION_MULTIPLIERS[value]


def escalate_with_tension(summary: RollSummary, *, rng: DiceRNG | None = None) -> RollSummary:
    """Return a new summary scaled by one tension die.

    The displayed final total is multiplied directly; base values are not
    revisited, so repeated escalation compounds.
    """
    rng = rng or DiceRNG()
    tension_die = rng.roll_dice_set([DieType.D6], RollMode.NORMAL)[0]
    factor = tension_multiplier(tension_die.value)
    escalated = replace(
        summary,
        total_multiplier=summary.total_multiplier * factor,
        final_total=summary.final_total * factor,
        tension_dice=(*summary.tension_dice, tension_die),
    )
    inc_counter("tension.escalated")
    observe_histogram("tension.final_total", escalated.final_total)
    log.info(
        "rules.tension.escalated",
        summary_id=summary.id,
        tension_value=tension_die.value,
        factor=factor,
        previous_total=summary.final_total,
        final_total=escalated.final_total,
        escalations=len(escalated.tension_dice),
    )
    return escalated
