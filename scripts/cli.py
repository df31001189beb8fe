#!/usr/bin/env python3
"""
Click front end generated from the Swordsaga command registry.

Examples:
  PYTHONPATH=./src python scripts/cli.py roll --stat STR --mode Advantage
  PYTHONPATH=./src python scripts/cli.py master --difficulty hard --tension 1
  PYTHONPATH=./src python scripts/cli.py preset save --stat DEX --base d12 --bonus d4
  PYTHONPATH=./src python scripts/cli.py shell

One-shot commands get a fresh session (presets are still loaded from disk).
`shell` keeps one session alive so tension and history see earlier rolls.
"""
from __future__ import annotations

import asyncio
import inspect
import shlex
from enum import Enum
from types import UnionType
from typing import Any, Literal, Union, get_args, get_origin

import click
import structlog
from pydantic import ValidationError
from pydantic.fields import FieldInfo

from Swordsaga.command_loader import load_all_commands
from Swordsaga.commanding import Command, Invocation, all_commands
from Swordsaga.config import load_settings
from Swordsaga.logging import redact_settings, setup_logging
from Swordsaga.session import RollSession

PROMPT = "swordsaga> "


class PrintResponder:
    async def send(self, content: str, *, ephemeral: bool = False) -> None:  # pragma: no cover
        click.echo(("(ephemeral) " if ephemeral else "") + str(content))


def _param_type(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Literal:
        return click.Choice([str(a) for a in get_args(annotation)], case_sensitive=False)
    if origin in (Union, UnionType):
        # Optional[X] -> X
        inner = [a for a in get_args(annotation) if a is not type(None)]
        return _param_type(inner[0]) if inner else str
    if inspect.isclass(annotation) and issubclass(annotation, Enum):
        return click.Choice([e.value for e in annotation], case_sensitive=False)
    if annotation in (int, float):
        return annotation
    return str


def _option(name: str, field: FieldInfo) -> click.Option:
    flag = "--" + (field.alias or name).replace("_", "-")
    help_text = field.description or ""
    if field.is_required():
        return click.Option([flag], type=_param_type(field.annotation), required=True, help=help_text)

    default = field.default
    if isinstance(default, Enum):
        default = default.value
    if field.annotation is bool:
        return click.Option([flag], is_flag=True, default=bool(default), help=help_text)
    return click.Option(
        [flag],
        type=_param_type(field.annotation),
        default=default,
        show_default=default is not None,
        help=help_text,
    )


def _session_for(ctx: click.Context) -> tuple[Any, RollSession]:
    obj = ctx.find_root().obj or {}
    settings = obj.get("settings")
    session = obj.get("session") or RollSession.from_settings(settings)
    return settings, session


def _describe_errors(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'options'}: {err['msg']}" for err in exc.errors()
    )


def _click_command(cmd: Command) -> click.Command:
    @click.pass_context
    def callback(ctx: click.Context, **kwargs: Any) -> None:
        settings, session = _session_for(ctx)
        inv = Invocation(
            name=cmd.name,
            subcommand=cmd.subcommand,
            options=kwargs,
            user_id="cli",
            responder=PrintResponder(),
            settings=settings,
            session=session,
        )
        try:
            opts = cmd.parse(kwargs)
        except ValidationError as e:
            raise click.UsageError(f"Invalid options: {_describe_errors(e)}", ctx=ctx) from e
        asyncio.run(cmd.handler(inv, opts))

    params = [_option(n, f) for n, f in cmd.option_model.model_fields.items()]
    return click.Command(
        name=cmd.subcommand or cmd.name,
        params=params,
        callback=callback,
        help=cmd.description,
    )


def _shell(app: click.Group) -> click.Command:
    @click.command(name="shell", help="Interactive session; type 'quit' to leave.")
    @click.pass_context
    def shell(ctx: click.Context) -> None:
        root = ctx.find_root()
        root.obj["session"] = RollSession.from_settings(root.obj.get("settings"))
        while True:
            try:
                line = input(PROMPT).strip()
            except EOFError:
                break
            if line in ("quit", "exit"):
                break
            try:
                args = shlex.split(line.lstrip("/"))
            except ValueError as e:
                click.echo(f"❌ Could not parse input: {e}")
                continue
            if not args or args[0] == "shell":
                continue
            try:
                app.main(args, prog_name="swordsaga", obj=root.obj, standalone_mode=False)
            except click.ClickException as e:
                e.show()
            except ValueError as e:
                click.echo(f"❌ {e}")
            except click.exceptions.Abort:
                break

    return shell


def build_app() -> click.Group:
    load_all_commands()

    @click.group(help="Swordsaga dice engine.")
    @click.pass_context
    def app(ctx: click.Context) -> None:
        ctx.ensure_object(dict)
        if "settings" not in ctx.obj:
            settings = load_settings()
            setup_logging(settings)
            structlog.get_logger().debug("cli.start", settings=redact_settings(settings))
            ctx.obj["settings"] = settings

    groups: dict[str, click.Group] = {}
    for cmd in all_commands().values():
        if cmd.subcommand is None:
            app.add_command(_click_command(cmd))
            continue
        grp = groups.get(cmd.name)
        if grp is None:
            grp = groups[cmd.name] = click.Group(name=cmd.name)
            app.add_command(grp)
        grp.add_command(_click_command(cmd))

    app.add_command(_shell(app))
    return app


def main() -> None:  # pragma: no cover
    build_app()(obj={})


if __name__ == "__main__":  # pragma: no cover
    main()
