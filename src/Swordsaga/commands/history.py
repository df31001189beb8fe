# src/Swordsaga/commands/history.py
from pydantic import Field

from Swordsaga.commanding import Invocation, Option, slash_command
from Swordsaga.services.renderer import render_history_line


class HistoryOpts(Option):
    limit: int = Field(default=10, ge=1, le=30, description="How many recent rolls to show")


@slash_command(name="history", description="Show recent rolls, newest first.", option_model=HistoryOpts)
async def history(inv: Invocation, opts: HistoryOpts):
    entries = inv.get_session().ledger.entries()[: opts.limit]
    if not entries:
        await inv.responder.send("📜 No rolls yet.", ephemeral=True)
        return
    lines = ["📜 Recent rolls:"]
    lines.extend(render_history_line(i, s) for i, s in enumerate(entries, start=1))
    await inv.responder.send("\n".join(lines), ephemeral=True)
