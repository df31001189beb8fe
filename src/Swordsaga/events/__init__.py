"""Roll history helpers."""  # noqa: N999

from .ledger import DEFAULT_LEDGER_CAPACITY, RollLedger

__all__ = [
    "DEFAULT_LEDGER_CAPACITY",
    "RollLedger",
]
