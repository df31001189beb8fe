import pytest

from Swordsaga.rules.dice import DieType
from Swordsaga.rules.difficulty import DifficultyLevel, get_difficulty_dice, parse_difficulty

D = DieType


@pytest.mark.parametrize(
    "level,expected",
    [
        (DifficultyLevel.TRIVIAL, [D.D8]),
        (DifficultyLevel.EASY, [D.D12]),
        (DifficultyLevel.NORMAL, [D.D20]),
        (DifficultyLevel.CHALLENGE, [D.D20, D.D4]),
        (DifficultyLevel.HARD, [D.D20, D.D4, D.D6]),
        (DifficultyLevel.VERY_HARD, [D.D20, D.D4, D.D6, D.D8]),
        (DifficultyLevel.EXCEPTIONALLY_HARD, [D.D20, D.D4, D.D6, D.D8, D.D10]),
        (DifficultyLevel.ALMOST_IMPOSSIBLE, [D.D20, D.D4, D.D6, D.D8, D.D10, D.D12]),
    ],
)
def test_literal_table(level, expected):
    assert get_difficulty_dice(level) == expected


def test_string_value_lookup_keeps_order():
    assert get_difficulty_dice("d20 + d4 + d6") == [D.D20, D.D4, D.D6]


def test_names_are_accepted():
    assert parse_difficulty("hard") is DifficultyLevel.HARD
    assert parse_difficulty("Almost Impossible") is DifficultyLevel.ALMOST_IMPOSSIBLE
    assert parse_difficulty("very-hard") is DifficultyLevel.VERY_HARD


@pytest.mark.parametrize("junk", ["", "d100", "legendary", "d20+d4"])
def test_unknown_tier_falls_back_to_d20(junk):
    assert get_difficulty_dice(junk) == [D.D20]


def test_results_are_fresh_lists():
    first = get_difficulty_dice(DifficultyLevel.HARD)
    first.append(D.D12)
    assert get_difficulty_dice(DifficultyLevel.HARD) == [D.D20, D.D4, D.D6]


def test_tiers_from_normal_upwards_only_add_dice():
    ordered = list(DifficultyLevel)[2:]
    for lower, higher in zip(ordered, ordered[1:]):
        lo, hi = get_difficulty_dice(lower), get_difficulty_dice(higher)
        assert hi[: len(lo)] == lo
        assert len(hi) == len(lo) + 1
