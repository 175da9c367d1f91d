from __future__ import annotations

import logging
import time
import typing as t

from zakat_prices.cache.bounded_cache import BoundedCache, CacheStats, generate_cache_key
from zakat_prices.monitoring import metrics
from zakat_prices.utils.config import ZakatPricesConfig
from zakat_prices.utils.resilience import CircuitBreaker, CircuitBreakerConfig, with_retries

from .errors import ZakatError, ZakatErrorCode
from .models import DEFAULT_CURRENCY, MetalPrices, NisabThresholds
from .price_client import MetalPriceClient, normalize_currency
from .prices import create_mock_metal_prices, validate_metal_prices

_logger = logging.getLogger(__name__)


class MetalPriceService:
    """Serves metal prices from a bounded cache, fetching upstream on a miss.

    Upstream calls go through a circuit breaker wrapping retries. Failed lookups
    are never cached. Without a client, mock prices are served when
    ``fallback_to_mock`` is set.
    """

    def __init__(
        self,
        client: t.Optional[MetalPriceClient] = None,
        use_local_cache: bool = True,
        local_cache: t.Optional[BoundedCache[str, MetalPrices]] = None,
        circuit_breaker: t.Optional[CircuitBreaker] = None,
        retry_attempts: int = 3,
        retry_backoff_ms: t.Optional[t.List[int]] = None,
        fallback_to_mock: bool = True,
    ) -> None:
        if retry_attempts < 1:
            raise ValueError(f"retry_attempts must be at least 1, got {retry_attempts}")
        self._client = client
        # Only use cache if explicitly enabled
        if use_local_cache:
            self._cache: t.Optional[BoundedCache[str, MetalPrices]] = local_cache or BoundedCache()
        else:
            self._cache = None
        self._breaker = circuit_breaker
        self._retry_attempts = retry_attempts
        self._retry_backoff_ms = retry_backoff_ms or [100, 500, 2000]
        self._fallback_to_mock = fallback_to_mock

    @classmethod
    def from_config(cls, config: t.Optional[ZakatPricesConfig] = None) -> "MetalPriceService":
        config = config or ZakatPricesConfig()
        client = None
        if config.api.api_key:
            client = MetalPriceClient(
                api_key=config.api.api_key,
                endpoint=config.api.endpoint,
                timeout_seconds=config.api.timeout_seconds,
            )
        breaker = None
        if config.resilience.circuit_breaker_enabled:
            breaker = CircuitBreaker(
                CircuitBreakerConfig(
                    failure_threshold=config.resilience.failure_threshold,
                    reset_timeout_seconds=config.resilience.reset_timeout_seconds,
                )
            )
        cache = None
        if config.cache.enabled:
            cache = BoundedCache(ttl_seconds=config.cache.ttl_seconds, max_entries=config.cache.max_entries)
        return cls(
            client=client,
            use_local_cache=config.cache.enabled,
            local_cache=cache,
            circuit_breaker=breaker,
            retry_attempts=config.resilience.retry_max_attempts,
            retry_backoff_ms=config.resilience.retry_backoff_ms,
            fallback_to_mock=config.api.fallback_to_mock,
        )

    async def __aenter__(self) -> "MetalPriceService":
        return self

    async def __aexit__(self, *exc_info: t.Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def get_metal_prices(self, currency: str = DEFAULT_CURRENCY, use_cache: bool = True) -> MetalPrices:
        code = normalize_currency(currency)
        cache_key = generate_cache_key(code)
        use_cache = use_cache and self._cache is not None

        # Check local cache first if enabled
        if use_cache:
            cached = self._cache.get(cache_key)  # type: ignore[union-attr]
            if cached is not None:
                metrics.price_cache_lookups_total.inc(result="hit")
                _logger.debug("Metal prices for %s served from cache", code)
                return cached
            metrics.price_cache_lookups_total.inc(result="miss")

        prices = validate_metal_prices(await self._load(code))
        if use_cache:
            self._cache.set(cache_key, prices)  # type: ignore[union-attr]
        return prices

    async def get_nisab(self, currency: str = DEFAULT_CURRENCY, use_cache: bool = True) -> NisabThresholds:
        prices = await self.get_metal_prices(currency, use_cache=use_cache)
        return NisabThresholds.from_prices(prices)

    def clear_cache(self) -> None:
        if self._cache is not None:
            self._cache.clear()

    @property
    def cache_stats(self) -> t.Optional[CacheStats]:
        return self._cache.stats if self._cache is not None else None

    async def _load(self, currency: str) -> MetalPrices:
        if self._client is None:
            if not self._fallback_to_mock:
                raise ZakatError(
                    ZakatErrorCode.API_ERROR,
                    "No metal price client configured and mock fallback is disabled",
                )
            _logger.warning("No metal price API key configured; using mock prices for %s", currency)
            return create_mock_metal_prices(currency)

        client = self._client

        async def _op() -> MetalPrices:
            return await client.fetch_metal_prices(currency)

        async def _with_retries() -> MetalPrices:
            return await with_retries(_op, self._retry_attempts, self._retry_backoff_ms)

        started = time.perf_counter()
        try:
            if self._breaker is not None:
                prices = await self._breaker.run(_with_retries)
            else:
                prices = await _with_retries()
        except ZakatError as exc:
            metrics.price_fetch_total.inc(currency=currency, outcome=exc.code.value)
            raise
        finally:
            metrics.price_fetch_latency_seconds.observe(time.perf_counter() - started)
        metrics.price_fetch_total.inc(currency=currency, outcome="success")
        return prices
