from __future__ import annotations

import enum
import typing as t
from dataclasses import dataclass, field
from datetime import datetime, timezone

# Nisab thresholds by weight
NISAB_GOLD_GRAMS = 85.0
NISAB_SILVER_GRAMS = 595.0

DEFAULT_CURRENCY = "USD"


class MetalType(str, enum.Enum):
    GOLD = "gold"
    SILVER = "silver"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def round_currency(value: float) -> float:
    return round(value, 2)


@dataclass
class MetalPrice:
    metal: MetalType
    price_per_gram: float
    currency: str
    timestamp: datetime = field(default_factory=utcnow)
    source: str = "unknown"


@dataclass
class MetalPrices:
    gold: MetalPrice
    silver: MetalPrice

    @property
    def currency(self) -> str:
        return self.gold.currency


@dataclass
class NisabThresholds:
    gold_value: float
    silver_value: float
    currency: str
    gold_grams: float = NISAB_GOLD_GRAMS
    silver_grams: float = NISAB_SILVER_GRAMS
    # silver gives the lower threshold, so more people qualify to pay
    recommended_nisab: t.Literal["gold", "silver"] = "silver"
    timestamp: datetime = field(default_factory=utcnow)

    @classmethod
    def from_prices(cls, prices: MetalPrices) -> "NisabThresholds":
        return cls(
            gold_value=round_currency(NISAB_GOLD_GRAMS * prices.gold.price_per_gram),
            silver_value=round_currency(NISAB_SILVER_GRAMS * prices.silver.price_per_gram),
            currency=prices.currency,
        )
