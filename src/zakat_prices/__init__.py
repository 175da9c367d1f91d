"""zakat_prices

Gold and silver prices for zakat applications, memoized in a bounded
LRU + TTL cache in front of a GoldAPI-compatible price service.
"""

from .cache import BoundedCache, CacheStats, generate_cache_key
from .core import (
    DEFAULT_CURRENCY,
    NISAB_GOLD_GRAMS,
    NISAB_SILVER_GRAMS,
    MetalPrice,
    MetalPriceClient,
    MetalPrices,
    MetalType,
    NisabThresholds,
    ZakatError,
    ZakatErrorCode,
    create_mock_metal_prices,
    validate_metal_prices,
)
from .core.price_service import MetalPriceService
from .utils import (
    CircuitBreaker,
    CircuitBreakerConfig,
    ZakatPricesConfig,
    with_retries,
)

__all__ = [
    "BoundedCache",
    "CacheStats",
    "generate_cache_key",
    "MetalPriceService",
    "MetalPriceClient",
    "MetalType",
    "MetalPrice",
    "MetalPrices",
    "NisabThresholds",
    "NISAB_GOLD_GRAMS",
    "NISAB_SILVER_GRAMS",
    "DEFAULT_CURRENCY",
    "ZakatError",
    "ZakatErrorCode",
    "create_mock_metal_prices",
    "validate_metal_prices",
    "ZakatPricesConfig",
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "with_retries",
]

__version__ = "0.1.0"
