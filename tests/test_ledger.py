import threading
from dataclasses import replace

import pytest

from Swordsaga.events import DEFAULT_LEDGER_CAPACITY, RollLedger
from Swordsaga.metrics import get_counter
from Swordsaga.rules.outcome import summarize


def _summaries(make_die, n):
    return [summarize([make_die("d6", (i % 5) + 1)], label=f"roll-{i}") for i in range(n)]


def test_default_capacity_is_thirty():
    assert DEFAULT_LEDGER_CAPACITY == 30
    assert RollLedger().capacity == 30


def test_most_recent_first(make_die):
    ledger = RollLedger()
    a, b, c = _summaries(make_die, 3)
    for s in (a, b, c):
        ledger.record(s)
    assert ledger.entries() == [c, b, a]
    assert ledger.latest() is c
    assert ledger[0] is c


def test_thirty_first_insert_evicts_oldest(make_die):
    ledger = RollLedger()
    rolls = _summaries(make_die, 31)
    evicted = None
    for s in rolls[:30]:
        assert ledger.record(s) is None
    assert len(ledger) == 30
    assert ledger[29] is rolls[0]

    evicted = ledger.record(rolls[30])
    assert evicted is rolls[0]
    assert len(ledger) == 30
    assert ledger[0] is rolls[30]
    assert ledger[29] is rolls[1]
    assert get_counter("ledger.evicted") == 1


def test_never_exceeds_capacity(make_die):
    ledger = RollLedger(capacity=5)
    for s in _summaries(make_die, 40):
        ledger.record(s)
        assert len(ledger) <= 5


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        RollLedger(capacity=0)


def test_replace_swaps_matching_entry(make_die):
    ledger = RollLedger()
    a, b = _summaries(make_die, 2)
    ledger.record(a)
    ledger.record(b)
    escalated = replace(a, final_total=a.final_total * 3)
    assert ledger.replace(escalated) is True
    assert ledger.get(a.id) is escalated
    assert ledger.entries() == [b, escalated]


def test_replace_unknown_entry_is_noop(make_die):
    ledger = RollLedger()
    (a,) = _summaries(make_die, 1)
    assert ledger.replace(a) is False
    assert len(ledger) == 0


def test_clear_and_get(make_die):
    ledger = RollLedger()
    (a,) = _summaries(make_die, 1)
    ledger.record(a)
    assert ledger.get("missing") is None
    ledger.clear()
    assert ledger.latest() is None
    assert list(ledger) == []


def test_concurrent_writers_respect_capacity(make_die):
    ledger = RollLedger(capacity=30)
    rolls = _summaries(make_die, 200)

    def _writer(chunk):
        for s in chunk:
            ledger.record(s)

    threads = [threading.Thread(target=_writer, args=(rolls[i::4],)) for i in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(ledger) == 30
    assert len({s.id for s in ledger}) == 30
