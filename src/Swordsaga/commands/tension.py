# src/Swordsaga/commands/tension.py
from typing import Literal

from pydantic import Field

from Swordsaga.commanding import Invocation, Option, slash_command
from Swordsaga.commands._common import MAX_TENSION, send_contest
from Swordsaga.metrics import inc_counter
from Swordsaga.services.renderer import render_summary
from Swordsaga.session import TENSION_TABS


class TensionOpts(Option):
    target: Literal["player", "master"] = Field(default="player", description="Which last roll to escalate")
    times: int = Field(default=1, ge=1, le=MAX_TENSION, description="Tension dice to roll")


@slash_command(
    name="tension",
    description="Escalate the last roll with tension dice (a 6 counts as x3).",
    option_model=TensionOpts,
)
async def tension(inv: Invocation, opts: TensionOpts):
    session = inv.get_session()
    player = opts.target == "player"
    held = session.last_roll if player else session.last_master_roll
    if held is None:
        await inv.responder.send(f"🔥 No {opts.target} roll to escalate yet.", ephemeral=True)
        return
    if held.source_tab not in TENSION_TABS:
        await inv.responder.send(
            f"🔥 Tension only applies to hero and master rolls, not {held.source_tab.value}.",
            ephemeral=True,
        )
        return

    summary = held
    for _ in range(opts.times):
        summary = session.add_tension(player=player)
    inc_counter("command.tension")
    await inv.responder.send(render_summary(summary))
    await send_contest(inv, session)
