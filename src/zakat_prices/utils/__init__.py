"""Resilience helpers and configuration."""

from .config import ApiConfig, CacheConfig, ResilienceConfig, ZakatPricesConfig
from .resilience import CircuitBreaker, CircuitBreakerConfig, CircuitState, with_retries

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitState",
    "with_retries",
    "ZakatPricesConfig",
    "CacheConfig",
    "ApiConfig",
    "ResilienceConfig",
]
