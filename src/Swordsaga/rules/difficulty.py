from __future__ import annotations

from enum import Enum

import structlog

from Swordsaga.rules.dice import DieType

log = structlog.get_logger()


class DifficultyLevel(str, Enum):
    TRIVIAL = "d8"
    EASY = "d12"
    NORMAL = "d20"
    CHALLENGE = "d20 + d4"
    HARD = "d20 + d4 + d6"
    VERY_HARD = "d20 + d4 + d6 + d8"
    EXCEPTIONALLY_HARD = "d20 + d4 + d6 + d8 + d10"
    ALMOST_IMPOSSIBLE = "d20 + d4 + d6 + d8 + d10 + d12"


# Hand-authored tiers; do not derive from a progression.
_D = DieType
DIFFICULTY_DICE: dict[DifficultyLevel, tuple[DieType, ...]] = {
    DifficultyLevel.TRIVIAL: (_D.D8,),
    DifficultyLevel.EASY: (_D.D12,),
    DifficultyLevel.NORMAL: (_D.D20,),
    DifficultyLevel.CHALLENGE: (_D.D20, _D.D4),
    DifficultyLevel.HARD: (_D.D20, _D.D4, _D.D6),
    DifficultyLevel.VERY_HARD: (_D.D20, _D.D4, _D.D6, _D.D8),
    DifficultyLevel.EXCEPTIONALLY_HARD: (_D.D20, _D.D4, _D.D6, _D.D8, _D.D10),
    DifficultyLevel.ALMOST_IMPOSSIBLE: (_D.D20, _D.D4, _D.D6, _D.D8, _D.D10, _D.D12),
}

FALLBACK_DICE: tuple[DieType, ...] = (DieType.D20,)


def parse_difficulty(level: DifficultyLevel | str) -> DifficultyLevel | None:
    """Accept the enum, its value ("d20 + d4") or its name ("challenge")."""
    if isinstance(level, DifficultyLevel):
        return level
    text = str(level).strip()
    try:
        return DifficultyLevel(text)
    except ValueError:
        pass
    key = text.upper().replace("-", "_").replace(" ", "_")
    return DifficultyLevel.__members__.get(key)


def get_difficulty_dice(level: DifficultyLevel | str) -> list[DieType]:
    parsed = parse_difficulty(level)
    if parsed is None:
        # Unknown tiers roll a plain d20 instead of failing.
        log.info("rules.difficulty.fallback", level=str(level))
        return list(FALLBACK_DICE)
    return list(DIFFICULTY_DICE[parsed])
