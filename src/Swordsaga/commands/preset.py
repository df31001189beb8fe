# src/Swordsaga/commands/preset.py
from pydantic import Field

from Swordsaga.commanding import Invocation, Option, slash_command
from Swordsaga.commands._common import reply_invalid_die, reply_invalid_options
from Swordsaga.rules.dice import InvalidDieType, coerce_die_type
from Swordsaga.services.preset_service import STATS, StatPreset


class PresetShowOpts(Option):
    pass


class PresetSaveOpts(Option):
    stat: str = Field(description="Stat id (STR, DEX, MAS, KNO, RAP, MEN, INT)")
    base: str = Field(default="d20", description="Base die")
    bonus: str = Field(default="none", description="Bonus die, or 'none'")


def _describe(preset: StatPreset) -> str:
    bonus = getattr(preset.bonus_die, "value", preset.bonus_die)
    return f"{preset.base_die.value} + {bonus}" if bonus != "none" else preset.base_die.value


@slash_command(
    name="preset",
    subcommand="show",
    description="Show saved dice presets per stat.",
    option_model=PresetShowOpts,
)
async def preset_show(inv: Invocation, opts: PresetShowOpts):
    session = inv.get_session()
    lines = ["📋 Stat presets:"]
    for stat in STATS:
        preset = session.presets.get(stat.id) if session.presets is not None else StatPreset()
        marker = "" if session.presets is not None and session.presets.has(stat.id) else " (default)"
        lines.append(f"• {stat.id} {stat.label}: {_describe(preset)}{marker}")
    await inv.responder.send("\n".join(lines), ephemeral=True)


@slash_command(
    name="preset",
    subcommand="save",
    description="Save the base/bonus dice for a stat.",
    option_model=PresetSaveOpts,
)
async def preset_save(inv: Invocation, opts: PresetSaveOpts):
    session = inv.get_session()
    stat = opts.stat.strip().upper()
    if stat not in {s.id for s in STATS}:
        await reply_invalid_options(inv, f"Unknown stat {stat!r}.")
        return
    try:
        base = coerce_die_type(opts.base)
        if opts.bonus.strip().lower() != "none":
            coerce_die_type(opts.bonus)
    except InvalidDieType as exc:
        await reply_invalid_die(inv, exc)
        return

    if session.active_stat != stat:
        session.select_stat(stat)
    session.base_die = base
    session.set_bonus_die(opts.bonus)
    saved = session.save_current_preset()
    if saved is None:
        await inv.responder.send("❌ Presets are not available in this session.", ephemeral=True)
        return
    await inv.responder.send(f"✅ Preset saved for **{stat}**: {_describe(saved)}")
