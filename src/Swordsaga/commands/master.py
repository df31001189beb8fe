# src/Swordsaga/commands/master.py
from pydantic import Field

from Swordsaga.commanding import Invocation, Option, slash_command
from Swordsaga.commands._common import MAX_TENSION, send_contest, send_roll
from Swordsaga.metrics import inc_counter
from Swordsaga.rules.dice import RollMode
from Swordsaga.rules.difficulty import DifficultyLevel, parse_difficulty


class MasterOpts(Option):
    difficulty: str = Field(
        default=DifficultyLevel.NORMAL.value,
        description="Difficulty tier (e.g., 'hard' or 'd20 + d4 + d6')",
    )
    mode: RollMode = Field(default=RollMode.NORMAL, description="Normal, Advantage or Disadvantage")
    tension: int = Field(default=0, ge=0, le=MAX_TENSION, description="Tension dice to apply")


@slash_command(
    name="master",
    description="Master roll against a difficulty tier.",
    option_model=MasterOpts,
)
async def master(inv: Invocation, opts: MasterOpts):
    session = inv.get_session()
    # Unknown tiers roll a plain d20 rather than erroring
    session.difficulty = parse_difficulty(opts.difficulty) or DifficultyLevel.NORMAL
    session.mode = opts.mode
    inc_counter("command.master")
    summary = session.roll(master=True)
    if await send_roll(inv, session, summary, tension=opts.tension, master=True) is not None:
        await send_contest(inv, session)
