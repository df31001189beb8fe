"""Plain-text rendering of roll summaries for chat-style responders."""
from __future__ import annotations

from Swordsaga.rules.dice import DieResult
from Swordsaga.rules.tension import tension_multiplier
from Swordsaga.rules.types import ArmorOutcome, ContestOutcome, EvadeOutcome, RollSummary, SourceTab

_HEADLINES = {
    SourceTab.ARMOR: "Final Damage",
    SourceTab.EVADE: "Evasion Resolve",
    SourceTab.AIM: "Aim Result",
    SourceTab.MASTER: "Master Result",
}


def render_die(d: DieResult) -> str:
    text = f"{d.type.value}:{d.value}"
    if d.rerolled:
        text += f" (was {d.original_value})"
    if d.is_crit:
        text += f" CRIT x{d.multiplier:g}"
    return text


def render_summary(summary: RollSummary) -> str:
    headline = _HEADLINES.get(summary.source_tab, "Hero Result")
    lines = [
        f"🎲 **{summary.label}** [{summary.mode.value}]",
        "• dice: " + ", ".join(render_die(d) for d in summary.dice),
        f"• {summary.base_sum} × {summary.total_multiplier:.1f}x",
    ]
    if summary.tension_dice:
        factors = " ".join(f"x{tension_multiplier(t.value)}" for t in summary.tension_dice)
        lines.append(f"• 🔥 tension: {factors}")
    lines.append(f"= **{summary.final_total}** ({headline})")
    return "\n".join(lines)


def render_armor(outcome: ArmorOutcome) -> str:
    return (
        f"🛡️ {outcome.incoming_damage} / {outcome.divisor}"
        f" → **{outcome.final_damage}** damage taken"
    )


def render_evade(outcome: EvadeOutcome) -> str:
    verdict = "✅ DODGED" if outcome.dodged else "❌ HIT"
    return f"💨 Aim: {outcome.aim} • Roll: {outcome.roll_total} → {verdict}"


def render_contest(outcome: ContestOutcome) -> str:
    verdict = "🏆 WIN" if outcome.won else "💀 LOSS"
    return f"⚔️ Hero {outcome.player_total} vs Master {outcome.master_total} → **{verdict}**"


def render_history_line(index: int, summary: RollSummary) -> str:
    stamp = summary.timestamp.strftime("%H:%M:%S")
    tension = f" 🔥x{len(summary.tension_dice)}" if summary.tension_dice else ""
    return f"{index:>2}. [{stamp}] {summary.label}: **{summary.final_total}**{tension}"
