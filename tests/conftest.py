# tests/conftest.py

from collections.abc import Callable, Iterable

import pytest

from Swordsaga.config import Settings
from Swordsaga.events.ledger import RollLedger
from Swordsaga.metrics import reset_counters
from Swordsaga.rules.dice import DIE_FACES, DieResult, DieType, coerce_die_type
from Swordsaga.rules.engine import SwordSagaRuleset
from Swordsaga.services.preset_service import PresetStore
from Swordsaga.session import RollSession


class ScriptedRandom:
    """Stand-in for random.Random that replays a fixed list of draws."""

    def __init__(self, values: Iterable[int]):
        self._values = list(values)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        assert self._values, "scripted RNG exhausted"
        v = self._values.pop(0)
        assert a <= v <= b, f"scripted value {v} outside [{a}, {b}]"
        return v

    @property
    def remaining(self) -> int:
        return len(self._values)


class SpyResponder:
    def __init__(self):
        self.messages: list[tuple[str, bool]] = []

    async def send(self, content: str, *, ephemeral: bool = False):  # noqa: ANN001
        self.messages.append((content, ephemeral))

    @property
    def texts(self) -> list[str]:
        return [m[0] for m in self.messages]


@pytest.fixture(autouse=True)
def _clean_metrics():
    reset_counters()
    yield
    reset_counters()


@pytest.fixture
def scripted() -> Callable[..., ScriptedRandom]:
    def _make(*values: int) -> ScriptedRandom:
        return ScriptedRandom(values)

    return _make


@pytest.fixture
def make_die() -> Callable[..., DieResult]:
    """Build a DieResult that satisfies the crit/multiplier invariants."""

    def _make(tag: DieType | str, value: int) -> DieResult:
        die = coerce_die_type(tag)
        faces = DIE_FACES[die]
        crit = value == faces
        return DieResult(
            id=f"{die.value}-{value}",
            type=die,
            faces=faces,
            value=value,
            is_crit=crit,
            multiplier=faces / 2 if crit else 1.0,
        )

    return _make


@pytest.fixture
def spy() -> SpyResponder:
    return SpyResponder()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        presets_path=str(tmp_path / "presets.json"),
        logging_file_path=str(tmp_path / "logs" / "swordsaga.jsonl"),
        logging_to_file=False,
        logging_file="NONE",
    )


@pytest.fixture
def session_factory(settings) -> Callable[..., RollSession]:
    def _make(*values: int) -> RollSession:
        rng = ScriptedRandom(values) if values else None
        return RollSession(
            ruleset=SwordSagaRuleset(seed=7, rng=rng),
            ledger=RollLedger(settings.ledger_capacity),
            presets=PresetStore(settings.presets_path),
        )

    return _make
