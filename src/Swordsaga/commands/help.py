from __future__ import annotations

from pydantic import Field

from Swordsaga.commanding import Invocation, Option, find_command, slash_command
from Swordsaga.metrics import inc_counter


class HelpOpts(Option):
	# Optional focus area; capped to keep payloads tiny.
	topic: str | None = Field(
		default=None,
		description="Optional topic to focus help on (e.g., roll, master, tension)",
		max_length=24,
	)


def _has_command(name: str, sub: str | None = None) -> bool:
	return find_command(name, sub) is not None


def _build_help_text(topic: str | None) -> str:
	lines: list[str] = []

	lines.append("Swordsaga — Quick Start")
	lines.append("")

	lines.append("Quick start:")
	if _has_command("roll", None):
		lines.append("• Hero roll: /roll with a stat (STR, DEX, ...) or a base and bonus die.")
	if _has_command("master", None):
		lines.append("• Master roll: /master with a difficulty such as 'hard' or 'd20 + d4'.")
	if _has_command("combat", None):
		lines.append("• Pools: /combat, /aim and /evade roll dice like '2d6 d8'.")
	if _has_command("armor", None):
		lines.append("• Soak damage: /armor divides incoming damage by the armor roll.")

	if topic in (None, "crit", "tension", "roll"):
		lines.append("")
		lines.append("Rules:")
		lines.append("• A die on its top face crits and multiplies the roll by half its faces.")
		lines.append("• Advantage rerolls low dice once; disadvantage rerolls high dice once.")
		if _has_command("tension", None):
			lines.append("• /tension multiplies the last result by a d6 (a 6 counts as x3).")

	show_any = _has_command("preset", "save") or _has_command("history", None)
	if show_any:
		lines.append("")
		lines.append("Next steps:")
		if _has_command("preset", "save"):
			lines.append("• Save stat dice: /preset save with stat, base and bonus.")
		if _has_command("history", None):
			lines.append("• Review: /history lists the last 30 rolls, newest first.")

	lines.append("")
	lines.append("Troubleshooting:")
	lines.append("• Invalid dice: only d4, d6, d8, d10, d12 and d20 are accepted.")
	if _has_command("reset", None):
		lines.append("• Start over: /reset clears staging; /reset --hard also wipes presets.")

	return "\n".join(lines)


@slash_command(
	name="help",
	description="Show quick-start help for Swordsaga.",
	option_model=HelpOpts,
)
async def help_cmd(inv: Invocation, opts: HelpOpts):
	inc_counter("help.view")

	topic = (opts.topic or "").strip().lower() or None
	text = _build_help_text(topic)
	await inv.responder.send(text, ephemeral=True)
