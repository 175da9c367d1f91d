from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass
class Counter:
    name: str
    help: str
    values: Dict[Tuple, float] = field(default_factory=dict)

    def inc(self, value: float = 1.0, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        self.values[key] = self.values.get(key, 0.0) + value

    def get(self, **labels: Any) -> float:
        return self.values.get(tuple(sorted(labels.items())), 0.0)

    def reset(self) -> None:
        self.values.clear()


@dataclass
class Histogram:
    name: str
    help: str
    buckets: List[float]
    counts: Dict[Tuple, List[int]] = field(default_factory=dict)
    overflow: Dict[Tuple, int] = field(default_factory=dict)

    def observe(self, val: float, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        if key not in self.counts:
            self.counts[key] = [0 for _ in self.buckets]
        for i, b in enumerate(self.buckets):
            if val <= b:
                self.counts[key][i] += 1
                break
        else:
            self.overflow[key] = self.overflow.get(key, 0) + 1

    def total(self, **labels: Any) -> int:
        key = tuple(sorted(labels.items()))
        return sum(self.counts.get(key, [])) + self.overflow.get(key, 0)

    def reset(self) -> None:
        self.counts.clear()
        self.overflow.clear()


# Predefined metrics
price_cache_lookups_total = Counter("zakat_price_cache_lookups_total", "Metal price cache lookups by result")
price_fetch_total = Counter("zakat_price_fetch_total", "Upstream metal price fetches by currency and outcome")
price_fetch_latency_seconds = Histogram(
    "zakat_price_fetch_latency_seconds",
    "Upstream metal price fetch latency",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)


def reset_all() -> None:
    price_cache_lookups_total.reset()
    price_fetch_total.reset()
    price_fetch_latency_seconds.reset()
