"""ULID generator (Crockford base32) used for roll and die identities.

A ULID is 48 bits of millisecond timestamp followed by 80 random bits, so ids
sort by creation time, which keeps ledger dumps readable.
"""

from __future__ import annotations

import os
import time
from typing import Final

_ALPHABET: Final[str] = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
ULID_LENGTH: Final[int] = 26


def _encode_base32(value: int, length: int) -> str:
    chars: list[str] = []
    for _ in range(length):
        value, rem = divmod(value, 32)
        chars.append(_ALPHABET[rem])
    return "".join(reversed(chars))


def generate_ulid(ts_ms: int | None = None) -> str:
    """Generate a 26-char ULID string.

    Identity randomness comes from os.urandom, never from the dice RNG, so a
    seeded session still produces reproducible rolls.
    """
    if ts_ms is None:
        ts_ms = time.time_ns() // 1_000_000
    ts = ts_ms & ((1 << 48) - 1)
    rnd = int.from_bytes(os.urandom(10), "big")
    return _encode_base32((ts << 80) | rnd, ULID_LENGTH)


def is_ulid(s: str) -> bool:
    return len(s) == ULID_LENGTH and s[0].isdigit() and all(ch in _ALPHABET for ch in s)
