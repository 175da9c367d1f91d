from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from ..cache.bounded_cache import DEFAULT_MAX_ENTRIES, DEFAULT_TTL_SECONDS
from ..core.price_client import DEFAULT_METAL_PRICE_ENDPOINT, DEFAULT_TIMEOUT_SECONDS

ENV_PREFIX = "ZAKAT_"


@dataclass
class CacheConfig:
    enabled: bool = True
    ttl_seconds: float = DEFAULT_TTL_SECONDS
    max_entries: int = DEFAULT_MAX_ENTRIES


@dataclass
class ApiConfig:
    api_key: Optional[str] = None
    endpoint: str = DEFAULT_METAL_PRICE_ENDPOINT
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    fallback_to_mock: bool = True


@dataclass
class ResilienceConfig:
    circuit_breaker_enabled: bool = True
    failure_threshold: int = 5
    reset_timeout_seconds: float = 30.0
    retry_max_attempts: int = 3
    retry_backoff_ms: List[int] = dataclasses.field(default_factory=lambda: [100, 500, 2000])


@dataclass
class ZakatPricesConfig:
    cache: CacheConfig = dataclasses.field(default_factory=CacheConfig)
    api: ApiConfig = dataclasses.field(default_factory=ApiConfig)
    resilience: ResilienceConfig = dataclasses.field(default_factory=ResilienceConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ZakatPricesConfig":
        def build(dc_cls, key):
            values = data.get(key, {})
            return dc_cls(**values)

        return cls(
            cache=build(CacheConfig, "cache"),
            api=build(ApiConfig, "api"),
            resilience=build(ResilienceConfig, "resilience"),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ZakatPricesConfig":
        """Overlay ``ZAKAT_*`` environment variables on the defaults."""
        env = os.environ if environ is None else environ
        config = cls()

        def read(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            return value if value not in (None, "") else None

        api_key = read("METAL_PRICE_API_KEY")
        if api_key is not None:
            config.api.api_key = api_key
        endpoint = read("METAL_PRICE_ENDPOINT")
        if endpoint is not None:
            config.api.endpoint = endpoint
        timeout = read("METAL_PRICE_TIMEOUT_SECONDS")
        if timeout is not None:
            config.api.timeout_seconds = float(timeout)
        ttl = read("CACHE_TTL_SECONDS")
        if ttl is not None:
            config.cache.ttl_seconds = float(ttl)
        max_entries = read("CACHE_MAX_ENTRIES")
        if max_entries is not None:
            config.cache.max_entries = int(max_entries)
        attempts = read("RETRY_MAX_ATTEMPTS")
        if attempts is not None:
            config.resilience.retry_max_attempts = int(attempts)
        return config
