# src/Swordsaga/commanding.py
"""Command registry shared by every front end.

Handlers are plain coroutines registered with ``@slash_command``; the CLI and
tests build an ``Invocation`` and await the handler directly.
"""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from pydantic import BaseModel

if TYPE_CHECKING:
    from Swordsaga.session import RollSession


class Responder(Protocol):
    async def send(self, content: str, *, ephemeral: bool = False) -> None: ...


@dataclass
class Invocation:
    name: str
    subcommand: str | None
    options: dict[str, Any]
    user_id: str
    responder: Responder
    settings: Any | None = None
    # One session per user at the table; built on first use when not injected
    session: RollSession | None = None

    def get_session(self) -> RollSession:
        if self.session is None:
            from Swordsaga.session import RollSession

            self.session = RollSession.from_settings(self.settings)
        return self.session


class Option(BaseModel):
    """Base for command options; each command declares its own fields."""


Handler = Callable[[Invocation, Option], Awaitable[None]]


def command_key(name: str, subcommand: str | None = None) -> str:
    return f"{name}:{subcommand}" if subcommand else name


@dataclass(frozen=True)
class Command:
    name: str
    description: str
    option_model: type[Option]
    handler: Handler
    subcommand: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def key(self) -> str:
        return command_key(self.name, self.subcommand)

    def parse(self, options: dict[str, Any]) -> Option:
        return self.option_model.model_validate(options)


_REGISTRY: dict[str, Command] = {}


def slash_command(
    name: str,
    description: str,
    option_model: type[Option] = Option,
    subcommand: str | None = None,
    **metadata: Any,
) -> Callable[[Handler], Handler]:
    def register(func: Handler) -> Handler:
        cmd = Command(name, description, option_model, func, subcommand, metadata)
        _REGISTRY[cmd.key] = cmd
        return func

    return register


def all_commands() -> dict[str, Command]:
    return dict(_REGISTRY)


def find_command(name: str, subcommand: str | None) -> Command | None:
    """Exact ``name:sub`` match first, then the bare top-level command."""
    return _REGISTRY.get(command_key(name, subcommand)) or _REGISTRY.get(name)
