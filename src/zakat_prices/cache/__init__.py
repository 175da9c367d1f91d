from .bounded_cache import (
    DEFAULT_MAX_ENTRIES,
    DEFAULT_TTL_SECONDS,
    METAL_PRICES_KEY_PREFIX,
    BoundedCache,
    CacheStats,
    generate_cache_key,
)

__all__ = [
    "BoundedCache",
    "CacheStats",
    "generate_cache_key",
    "DEFAULT_TTL_SECONDS",
    "DEFAULT_MAX_ENTRIES",
    "METAL_PRICES_KEY_PREFIX",
]
