import pytest

from Swordsaga.rules.dice import DieType, InvalidDieType
from Swordsaga.rules.pool import MAX_POOL_DICE, DicePool, TooManyDice, parse_dice_spec


def test_new_pool_is_empty():
    pool = DicePool()
    assert pool.total == 0
    assert pool.expand() == []
    assert set(pool.as_dict()) == {"d4", "d6", "d8", "d10", "d12", "d20"}


def test_decrement_clamps_at_zero():
    pool = DicePool({"d6": 1})
    assert pool.remove("d6") == 0
    assert pool.remove("d6") == 0
    assert pool.adjust(DieType.D6, -5) == 0
    assert pool.count("d6") == 0


def test_expand_orders_smallest_first():
    pool = DicePool.from_dice(["d20", "d6", "d4", "d6"])
    assert pool.expand() == [DieType.D4, DieType.D6, DieType.D6, DieType.D20]
    assert len(pool) == 4


def test_pool_rejects_unknown_die():
    with pytest.raises(InvalidDieType):
        DicePool().add("d3")


def test_clear_and_equality():
    pool = DicePool({"d8": 2})
    assert pool == DicePool.from_dice(["d8", "d8"])
    pool.clear()
    assert pool == DicePool()
    assert repr(DicePool({"d4": 1})) == "DicePool(d4=1)"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("2d6 d8", {"d6": 2, "d8": 1}),
        ("d6,d6,d8", {"d6": 2, "d8": 1}),
        ("d20 + d4", {"d20": 1, "d4": 1}),
        ("  ", {}),
        (None, {}),
    ],
)
def test_parse_dice_spec(text, expected):
    got = {k: v for k, v in parse_dice_spec(text).as_dict().items() if v}
    assert got == expected


@pytest.mark.parametrize("bad", ["2d7", "d", "six", "3x6"])
def test_parse_dice_spec_rejects_garbage(bad):
    with pytest.raises(InvalidDieType):
        parse_dice_spec(bad)


def test_parse_dice_spec_allows_the_cap():
    assert parse_dice_spec(f"{MAX_POOL_DICE}d6").total == MAX_POOL_DICE
    assert parse_dice_spec("10d6 10d4").total == 20


@pytest.mark.parametrize("text", ["1000000000d20", "21d6", "10d6 11d4", "9" * 5000 + "d6"])
def test_parse_dice_spec_rejects_oversized_pools(text):
    with pytest.raises(TooManyDice):
        parse_dice_spec(text)
