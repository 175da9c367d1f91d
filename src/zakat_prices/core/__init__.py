"""Metal price models, errors, and the upstream price client."""

from .errors import ZakatError, ZakatErrorCode
from .models import (
    DEFAULT_CURRENCY,
    NISAB_GOLD_GRAMS,
    NISAB_SILVER_GRAMS,
    MetalPrice,
    MetalPrices,
    MetalType,
    NisabThresholds,
)
from .price_client import (
    DEFAULT_METAL_PRICE_ENDPOINT,
    METAL_PRICE_ENDPOINTS,
    MetalPriceClient,
    normalize_currency,
)
from .prices import MOCK_EXCHANGE_RATES, create_mock_metal_prices, validate_metal_prices

__all__ = [
    # Errors
    "ZakatError",
    "ZakatErrorCode",
    # Models
    "MetalType",
    "MetalPrice",
    "MetalPrices",
    "NisabThresholds",
    "NISAB_GOLD_GRAMS",
    "NISAB_SILVER_GRAMS",
    "DEFAULT_CURRENCY",
    # Prices
    "MetalPriceClient",
    "METAL_PRICE_ENDPOINTS",
    "DEFAULT_METAL_PRICE_ENDPOINT",
    "MOCK_EXCHANGE_RATES",
    "normalize_currency",
    "create_mock_metal_prices",
    "validate_metal_prices",
]
