# src/Swordsaga/commands/roll.py
from pydantic import Field

from Swordsaga.commanding import Invocation, slash_command
from Swordsaga.commands._common import (
    MAX_TENSION,
    RollOpts,
    reply_invalid_die,
    reply_invalid_options,
    send_contest,
    send_roll,
)
from Swordsaga.metrics import inc_counter
from Swordsaga.rules.dice import InvalidDieType, coerce_die_type
from Swordsaga.rules.types import SourceTab
from Swordsaga.services.preset_service import STATS

_STAT_LABELS = {s.id: s.label for s in STATS}


class HeroRollOpts(RollOpts):
    stat: str | None = Field(default=None, max_length=8, description="Stat preset (e.g., STR, DEX)")
    base: str | None = Field(default=None, description="Base die (overrides the stat preset)")
    bonus: str | None = Field(default=None, description="Bonus die, or 'none'")
    proficient: bool = Field(default=False, description="Add a d6 proficiency die")
    tension: int = Field(
        default=0, ge=0, le=MAX_TENSION, description="Tension dice to apply after the roll"
    )


@slash_command(
    name="roll",
    description="Hero roll: base die, optional bonus and proficiency, surge and tension.",
    option_model=HeroRollOpts,
)
async def roll(inv: Invocation, opts: HeroRollOpts):
    session = inv.get_session()
    stat = (opts.stat or "").strip().upper() or None
    if stat and stat not in _STAT_LABELS:
        await reply_invalid_options(inv, f"Unknown stat {stat!r}.")
        return
    try:
        # Re-selecting the active stat would toggle it off
        if stat and session.active_stat != stat:
            session.select_stat(stat)
        if opts.base:
            session.base_die = coerce_die_type(opts.base)
        if opts.bonus is not None:
            session.set_bonus_die(opts.bonus)
    except InvalidDieType as exc:
        await reply_invalid_die(inv, exc)
        return

    session.proficient = opts.proficient
    session.surge = opts.surge
    session.mode = opts.mode
    label = opts.label or _STAT_LABELS.get(stat or "") or "Hero"
    inc_counter("command.roll")
    summary = session.roll(SourceTab.HERO, label=label)
    if await send_roll(inv, session, summary, tension=opts.tension) is not None:
        await send_contest(inv, session)
