"""In-process counters and histograms for roll diagnostics.

``get_counters`` flattens histograms into the counter namespace as
``histo.<name>.le_<bound>``, ``histo.<name>.gt_<last>``, ``.sum`` and ``.count``.
"""

from __future__ import annotations

import bisect
from collections import Counter
from dataclasses import dataclass, field
from threading import Lock

# Roll totals grow multiplicatively (crits, tension), so buckets are wide.
ROLL_TOTAL_BUCKETS = [5, 10, 20, 50, 100, 250, 500, 1000, 5000, 25000]


@dataclass
class _Histogram:
    bounds: tuple[int, ...]
    buckets: Counter[str] = field(default_factory=Counter)
    total: int = 0
    count: int = 0

    def observe(self, value: int) -> None:
        i = bisect.bisect_left(self.bounds, value)
        label = f"le_{self.bounds[i]}" if i < len(self.bounds) else f"gt_{self.bounds[-1]}"
        self.buckets[label] += 1
        self.total += int(value)
        self.count += 1

    def flatten(self, name: str) -> dict[str, int]:
        out = {f"histo.{name}.{label}": n for label, n in self.buckets.items()}
        out[f"histo.{name}.sum"] = self.total
        out[f"histo.{name}.count"] = self.count
        return out


_lock = Lock()
_counters: Counter[str] = Counter()
_histograms: dict[str, _Histogram] = {}


def inc_counter(name: str, value: int = 1) -> None:
    with _lock:
        _counters[name] += int(value)


def get_counter(name: str) -> int:
    return _counters[name]


def reset_counters() -> None:
    with _lock:
        _counters.clear()
        _histograms.clear()


def get_counters() -> dict[str, int]:
    """Snapshot of every counter plus flattened histograms."""
    with _lock:
        out = dict(_counters)
        for name, hist in _histograms.items():
            out.update(hist.flatten(name))
    return out


def observe_histogram(name: str, value: int, *, buckets: list[int] | None = None) -> None:
    """Count ``value`` in the first bucket whose upper bound is >= value.

    Bounds are fixed by the first observation of ``name``; values above the
    last bound land in ``gt_<last>``.
    """
    with _lock:
        hist = _histograms.get(name)
        if hist is None:
            bounds = tuple(sorted(buckets if buckets is not None else ROLL_TOTAL_BUCKETS))
            hist = _histograms[name] = _Histogram(bounds)
        hist.observe(value)
