# src/Swordsaga/commands/pools.py
"""Pool-driven rolls: combat, aim and evade all roll whatever dice are staged."""
from pydantic import Field

from Swordsaga.commanding import Invocation, slash_command
from Swordsaga.commands._common import RollOpts, reply_invalid_die, reply_invalid_options, send_roll
from Swordsaga.metrics import inc_counter
from Swordsaga.rules.dice import InvalidDieType
from Swordsaga.rules.pool import TooManyDice, parse_dice_spec
from Swordsaga.rules.types import SourceTab
from Swordsaga.services.renderer import render_evade
from Swordsaga.session import RollSession


class PoolRollOpts(RollOpts):
    dice: str = Field(default="", description="Dice to stage, e.g. '2d6 d8'")


class EvadeOpts(PoolRollOpts):
    aim: int = Field(default=0, ge=0, description="Attacker's aim result to beat")


def _stage(session: RollSession, tab: SourceTab, opts: PoolRollOpts) -> None:
    staged = parse_dice_spec(opts.dice)
    pool = session.pool(tab)
    pool.clear()
    for die in staged:
        pool.add(die)
    session.surge = opts.surge
    session.mode = opts.mode


async def _pool_roll(inv: Invocation, opts: PoolRollOpts, tab: SourceTab):
    session = inv.get_session()
    try:
        _stage(session, tab, opts)
    except InvalidDieType as exc:
        await reply_invalid_die(inv, exc)
        return None
    except TooManyDice as exc:
        await reply_invalid_options(inv, f"{exc}.")
        return None
    inc_counter(f"command.{tab.value}")
    summary = session.roll(tab, label=opts.label or tab.value.title())
    return await send_roll(inv, session, summary)


@slash_command(name="combat", description="Roll a staged combat pool.", option_model=PoolRollOpts)
async def combat(inv: Invocation, opts: PoolRollOpts):
    await _pool_roll(inv, opts, SourceTab.COMBAT)


@slash_command(name="aim", description="Roll an aim pool for an attack.", option_model=PoolRollOpts)
async def aim(inv: Invocation, opts: PoolRollOpts):
    await _pool_roll(inv, opts, SourceTab.AIM)


@slash_command(name="evade", description="Roll an evade pool against an aim result.", option_model=EvadeOpts)
async def evade(inv: Invocation, opts: EvadeOpts):
    session = inv.get_session()
    session.aim_to_beat = opts.aim
    summary = await _pool_roll(inv, opts, SourceTab.EVADE)
    if summary is None:
        return
    outcome = session.evade_outcome()
    if outcome is not None:
        await inv.responder.send(render_evade(outcome))
