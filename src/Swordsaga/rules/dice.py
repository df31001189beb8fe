# rules/dice.py

from __future__ import annotations

import random
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import structlog

from Swordsaga.metrics import inc_counter
from Swordsaga.tools.ulid import generate_ulid


class DieType(str, Enum):
    D4 = "d4"
    D6 = "d6"
    D8 = "d8"
    D10 = "d10"
    D12 = "d12"
    D20 = "d20"


DIE_FACES: dict[DieType, int] = {
    DieType.D4: 4,
    DieType.D6: 6,
    DieType.D8: 8,
    DieType.D10: 10,
    DieType.D12: 12,
    DieType.D20: 20,
}


class RollMode(str, Enum):
    NORMAL = "Normal"
    ADVANTAGE = "Advantage"
    DISADVANTAGE = "Disadvantage"


class InvalidDieType(ValueError):
    """Raised when a die tag outside d4/d6/d8/d10/d12/d20 reaches the engine."""

    def __init__(self, tag: object):
        super().__init__(f"Unknown die type: {tag!r}")
        self.tag = tag


def coerce_die_type(tag: DieType | str) -> DieType:
    if isinstance(tag, DieType):
        return tag
    try:
        return DieType(str(tag).strip().lower())
    except ValueError:
        raise InvalidDieType(tag) from None


def face_count(tag: DieType | str) -> int:
    return DIE_FACES[coerce_die_type(tag)]


@dataclass(frozen=True)
class DieResult:
    id: str
    type: DieType
    faces: int
    value: int
    is_crit: bool
    multiplier: float
    rerolled: bool = False
    original_value: int | None = None


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


class DiceRNG:
    """Roll engine: one draw per die plus the advantage/disadvantage reroll."""

    def __init__(self, seed: int | None = None, *, rng: RandomSource | None = None):
        self._rng: RandomSource = rng if rng is not None else random.Random(seed)
        self._log = structlog.get_logger()

    def roll_single(self, faces: int) -> int:
        return self._rng.randint(1, faces)

    def roll_die(self, tag: DieType | str, mode: RollMode = RollMode.NORMAL) -> DieResult:
        die = coerce_die_type(tag)
        mode = RollMode(mode)
        faces = DIE_FACES[die]
        value = self.roll_single(faces)
        original: int | None = None
        rerolled = False

        # One reroll at most, even when the second draw lands on the same side of half.
        if mode is RollMode.ADVANTAGE and value < faces / 2:
            original, value, rerolled = value, self.roll_single(faces), True
        elif mode is RollMode.DISADVANTAGE and value > faces / 2:
            original, value, rerolled = value, self.roll_single(faces), True

        is_crit = value == faces
        return DieResult(
            id=generate_ulid(),
            type=die,
            faces=faces,
            value=value,
            is_crit=is_crit,
            multiplier=faces / 2 if is_crit else 1.0,
            rerolled=rerolled,
            original_value=original,
        )

    def roll_dice_set(
        self, die_types: Iterable[DieType | str], mode: RollMode = RollMode.NORMAL
    ) -> list[DieResult]:
        """Roll each requested die in order.

        Every tag is validated before the first draw so a bad request never
        consumes randomness.
        """
        dice = [coerce_die_type(t) for t in die_types]
        mode = RollMode(mode)
        self._log.debug("rules.dice.roll.start", dice=[d.value for d in dice], mode=mode.value)
        results = [self.roll_die(d, mode) for d in dice]
        if results:
            inc_counter("dice.rolled", len(results))
            inc_counter("dice.crit", sum(1 for r in results if r.is_crit))
            inc_counter("dice.rerolled", sum(1 for r in results if r.rerolled))
        self._log.debug(
            "rules.dice.roll.result",
            values=[r.value for r in results],
            crits=sum(1 for r in results if r.is_crit),
            rerolled=sum(1 for r in results if r.rerolled),
        )
        return results


def roll_dice_set(
    die_types: Iterable[DieType | str],
    mode: RollMode = RollMode.NORMAL,
    *,
    rng: DiceRNG | None = None,
) -> list[DieResult]:
    return (rng or DiceRNG()).roll_dice_set(die_types, mode)
