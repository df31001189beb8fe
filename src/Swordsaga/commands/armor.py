# src/Swordsaga/commands/armor.py
from pydantic import Field

from Swordsaga.commanding import Invocation, Option, slash_command
from Swordsaga.commands._common import reply_invalid_die, send_roll
from Swordsaga.metrics import inc_counter
from Swordsaga.rules.dice import DieType, InvalidDieType, coerce_die_type
from Swordsaga.rules.types import SourceTab
from Swordsaga.services.renderer import render_armor


class ArmorOpts(Option):
    die: str = Field(default=DieType.D8.value, description="Armor die")
    charges: int = Field(default=1, ge=1, le=20, description="Armor charges to spend")
    damage: int = Field(default=0, ge=0, description="Incoming damage")
    surge: int = Field(default=0, ge=0, le=20, description="Extra d6 surge dice")


@slash_command(
    name="armor",
    description="Soak incoming damage: damage is divided by the armor roll.",
    option_model=ArmorOpts,
)
async def armor(inv: Invocation, opts: ArmorOpts):
    session = inv.get_session()
    try:
        session.armor_die = coerce_die_type(opts.die)
    except InvalidDieType as exc:
        await reply_invalid_die(inv, exc)
        return
    session.set_armor_charges(opts.charges)
    session.incoming_damage = opts.damage
    session.surge = opts.surge
    inc_counter("command.armor")
    summary = session.roll(SourceTab.ARMOR, label="Armor")
    if await send_roll(inv, session, summary) is None:
        return
    outcome = session.armor_outcome()
    if outcome is not None:
        await inv.responder.send(render_armor(outcome))
