"""Option fields and replies shared by the roll commands."""
from __future__ import annotations

import structlog
from pydantic import Field

from Swordsaga.commanding import Invocation, Option
from Swordsaga.metrics import inc_counter
from Swordsaga.rules.dice import InvalidDieType, RollMode
from Swordsaga.rules.types import RollSummary
from Swordsaga.services.renderer import render_contest, render_summary
from Swordsaga.session import RollSession

log = structlog.get_logger()

MAX_TENSION = 10


class RollOpts(Option):
    mode: RollMode = Field(default=RollMode.NORMAL, description="Normal, Advantage or Disadvantage")
    surge: int = Field(default=0, ge=0, le=20, description="Extra d6 surge dice")
    label: str | None = Field(default=None, max_length=64, description="Label shown in history")


async def reply_invalid_options(inv: Invocation, message: str) -> None:
    inc_counter("command.invalid_options")
    log.info("command.invalid_options", command=inv.name, message=message)
    await inv.responder.send(f"❌ {message}", ephemeral=True)


async def reply_invalid_die(inv: Invocation, exc: InvalidDieType) -> None:
    await reply_invalid_options(inv, f"{exc}. Use d4, d6, d8, d10, d12 or d20.")


async def send_roll(
    inv: Invocation,
    session: RollSession,
    summary: RollSummary | None,
    *,
    tension: int = 0,
    master: bool = False,
) -> RollSummary | None:
    if summary is None:
        await inv.responder.send("🎲 Nothing staged to roll.", ephemeral=True)
        return None
    for _ in range(tension):
        summary = session.add_tension(player=not master)
    await inv.responder.send(render_summary(summary))
    return summary


async def send_contest(inv: Invocation, session: RollSession) -> None:
    """Follow a hero or master roll with the WIN/LOSS verdict once both exist."""
    outcome = session.contest_outcome()
    if outcome is not None:
        await inv.responder.send(render_contest(outcome))
