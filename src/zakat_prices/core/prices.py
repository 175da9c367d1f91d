from __future__ import annotations

import math
import typing as t

from .errors import ZakatError, ZakatErrorCode
from .models import DEFAULT_CURRENCY, MetalPrice, MetalPrices, MetalType, utcnow

DEFAULT_GOLD_PRICE_USD = 62.0
DEFAULT_SILVER_PRICE_USD = 0.75

# Approximate rates from USD, for mock prices only.
MOCK_EXCHANGE_RATES: t.Dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "SAR": 3.75,
    "AED": 3.67,
    "MYR": 4.47,
    "IDR": 15800.0,
    "PKR": 278.0,
    "INR": 83.5,
    "BDT": 110.0,
    "EGP": 30.9,
    "TRY": 32.5,
    "CAD": 1.36,
    "AUD": 1.53,
    "SGD": 1.34,
    "QAR": 3.64,
    "KWD": 0.31,
    "BHD": 0.38,
    "OMR": 0.38,
}


def create_mock_metal_prices(
    currency: str = DEFAULT_CURRENCY,
    base_gold_usd: float = DEFAULT_GOLD_PRICE_USD,
    base_silver_usd: float = DEFAULT_SILVER_PRICE_USD,
) -> MetalPrices:
    """Offline prices converted from USD base prices.

    Unknown currencies are priced at the USD figures.
    """
    currency = currency.upper()
    rate = MOCK_EXCHANGE_RATES.get(currency, 1.0)
    timestamp = utcnow()
    return MetalPrices(
        gold=MetalPrice(
            metal=MetalType.GOLD,
            price_per_gram=base_gold_usd * rate,
            currency=currency,
            timestamp=timestamp,
            source="mock",
        ),
        silver=MetalPrice(
            metal=MetalType.SILVER,
            price_per_gram=base_silver_usd * rate,
            currency=currency,
            timestamp=timestamp,
            source="mock",
        ),
    )


def _is_positive(price: float) -> bool:
    return math.isfinite(price) and price > 0


def validate_metal_prices(prices: MetalPrices) -> MetalPrices:
    if prices.gold is None or prices.silver is None:
        raise ZakatError(ZakatErrorCode.PARSE_ERROR, "Metal prices must include both gold and silver")
    if not _is_positive(prices.gold.price_per_gram):
        raise ZakatError(ZakatErrorCode.INVALID_AMOUNT, "Gold price must be greater than 0")
    if not _is_positive(prices.silver.price_per_gram):
        raise ZakatError(ZakatErrorCode.INVALID_AMOUNT, "Silver price must be greater than 0")
    if prices.gold.price_per_gram < prices.silver.price_per_gram:
        raise ZakatError(
            ZakatErrorCode.PARSE_ERROR,
            "Invalid metal prices: gold price should be higher than silver",
        )
    return prices
