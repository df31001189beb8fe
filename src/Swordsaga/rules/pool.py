from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping

from Swordsaga.rules.dice import DIE_FACES, DieType, InvalidDieType, coerce_die_type

_TOKEN_RE = re.compile(r"^(?P<count>\d+)?(?P<die>d\d+)$")

# One dice spec may stage at most this many dice in total
MAX_POOL_DICE = 20


class TooManyDice(ValueError):
    def __init__(self, limit: int = MAX_POOL_DICE):
        super().__init__(f"Too many dice: at most {limit} can be staged at once")
        self.limit = limit


class DicePool:
    """Staged multiset of dice; counts never go below zero."""

    def __init__(self, counts: Mapping[DieType | str, int] | None = None):
        self._counts: dict[DieType, int] = {d: 0 for d in DIE_FACES}
        for tag, count in (counts or {}).items():
            self.adjust(tag, count)

    @classmethod
    def from_dice(cls, dice: Iterable[DieType | str]) -> DicePool:
        pool = cls()
        for tag in dice:
            pool.adjust(tag, 1)
        return pool

    def adjust(self, tag: DieType | str, delta: int) -> int:
        die = coerce_die_type(tag)
        self._counts[die] = max(0, self._counts[die] + int(delta))
        return self._counts[die]

    def add(self, tag: DieType | str, count: int = 1) -> int:
        return self.adjust(tag, count)

    def remove(self, tag: DieType | str, count: int = 1) -> int:
        return self.adjust(tag, -count)

    def count(self, tag: DieType | str) -> int:
        return self._counts[coerce_die_type(tag)]

    def clear(self) -> None:
        for die in self._counts:
            self._counts[die] = 0

    def expand(self) -> list[DieType]:
        """Ordered die list, smallest die first."""
        return [die for die in DIE_FACES for _ in range(self._counts[die])]

    def as_dict(self) -> dict[str, int]:
        return {die.value: n for die, n in self._counts.items()}

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    def __len__(self) -> int:
        return self.total

    def __iter__(self) -> Iterator[DieType]:
        return iter(self.expand())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DicePool):
            return NotImplemented
        return self._counts == other._counts

    def __repr__(self) -> str:
        staged = ", ".join(f"{d.value}={n}" for d, n in self._counts.items() if n)
        return f"DicePool({staged})"


def parse_dice_spec(text: str | None) -> DicePool:
    """Parse "2d6 d8" / "d6,d6,d8" into a pool.

    Raises InvalidDieType for tokens that are not a known die and TooManyDice
    when the text stages more than MAX_POOL_DICE dice.
    """
    pool = DicePool()
    for token in re.split(r"[\s,+]+", (text or "").strip().lower()):
        if not token:
            continue
        m = _TOKEN_RE.match(token)
        if not m:
            raise InvalidDieType(token)
        raw = m.group("count") or "1"
        # Length check first: huge digit strings are rejected before int() sees them
        if len(raw) > len(str(MAX_POOL_DICE)) or pool.total + int(raw) > MAX_POOL_DICE:
            raise TooManyDice()
        pool.adjust(m.group("die"), int(raw))
    return pool
