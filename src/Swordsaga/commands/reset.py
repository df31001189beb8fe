# src/Swordsaga/commands/reset.py
from pydantic import Field

from Swordsaga.commanding import Invocation, Option, slash_command


class ResetOpts(Option):
    hard: bool = Field(default=False, description="Also wipe saved presets and roll history")


@slash_command(name="reset", description="Clear staged dice and last results.", option_model=ResetOpts)
async def reset(inv: Invocation, opts: ResetOpts):
    session = inv.get_session()
    if opts.hard:
        session.hard_reset()
        await inv.responder.send("♻️ Presets, history and staging wiped.", ephemeral=True)
        return
    session.clear_staged()
    await inv.responder.send("♻️ Staging cleared.", ephemeral=True)
