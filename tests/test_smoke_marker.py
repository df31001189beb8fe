import pytest

from Swordsaga.command_loader import load_all_commands
from Swordsaga.commanding import Invocation, find_command


@pytest.mark.asyncio
@pytest.mark.smoke
async def test_smoke_roll_basic(settings):
    load_all_commands()
    cmd = find_command("roll", None)
    assert cmd is not None
    class _Spy:
        def __init__(self):
            self.msgs = []
        async def send(self, content: str, *, ephemeral: bool = False):
            self.msgs.append((content, ephemeral))
    spy = _Spy()
    inv = Invocation(
        name="roll",
        subcommand=None,
        options={"stat": "STR", "surge": 2, "mode": "Disadvantage"},
        user_id="u1",
        responder=spy,
        settings=settings,
    )
    opts = cmd.option_model.model_validate(inv.options)
    await cmd.handler(inv, opts)
    assert spy.msgs and spy.msgs[0][1] is False
    assert len(inv.session.last_roll.dice) == 3


@pytest.mark.asyncio
@pytest.mark.smoke
async def test_smoke_evade_empty_pool(settings):
    load_all_commands()
    cmd = find_command("evade", None)
    assert cmd is not None
    class _Spy:
        def __init__(self):
            self.msgs = []
        async def send(self, content: str, *, ephemeral: bool = False):
            self.msgs.append((content, ephemeral))
    spy = _Spy()
    inv = Invocation(
        name="evade",
        subcommand=None,
        options={"dice": "   ", "aim": 12},
        user_id="u2",
        responder=spy,
        settings=settings,
    )
    opts = cmd.option_model.model_validate(inv.options)
    await cmd.handler(inv, opts)
    # Nothing staged: a single ephemeral notice and no verdict
    assert spy.msgs == [("🎲 Nothing staged to roll.", True)]
