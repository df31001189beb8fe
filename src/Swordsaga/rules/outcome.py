"""Reduce individual die results into a roll summary."""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime, timezone

import structlog

from Swordsaga.metrics import inc_counter, observe_histogram
from Swordsaga.rules.dice import DieResult, RollMode
from Swordsaga.rules.types import RollSummary, RollTotals, SourceTab
from Swordsaga.tools.ulid import generate_ulid

log = structlog.get_logger()


def calculate_roll(results: Sequence[DieResult]) -> RollTotals:
    """Sum values, multiply multipliers, floor the product.

    Empty input gives (0, 1, 0): the additive and multiplicative identities.
    """
    base_sum = sum(r.value for r in results)
    total_multiplier = math.prod((r.multiplier for r in results), start=1.0)
    return RollTotals(
        base_sum=base_sum,
        total_multiplier=total_multiplier,
        final_total=math.floor(base_sum * total_multiplier),
    )


def summarize(
    results: Sequence[DieResult],
    *,
    label: str,
    mode: RollMode = RollMode.NORMAL,
    source_tab: SourceTab = SourceTab.CUSTOM,
    timestamp: datetime | None = None,
) -> RollSummary:
    totals = calculate_roll(results)
    summary = RollSummary(
        id=generate_ulid(),
        timestamp=timestamp or datetime.now(timezone.utc),
        label=label,
        dice=tuple(results),
        mode=RollMode(mode),
        base_sum=totals.base_sum,
        total_multiplier=totals.total_multiplier,
        final_total=totals.final_total,
        source_tab=SourceTab(source_tab),
    )
    inc_counter("roll.summary.created")
    observe_histogram("roll.final_total", summary.final_total)
    log.info(
        "rules.outcome.summarized",
        summary_id=summary.id,
        label=label,
        source_tab=summary.source_tab.value,
        base_sum=summary.base_sum,
        total_multiplier=summary.total_multiplier,
        final_total=summary.final_total,
    )
    return summary
