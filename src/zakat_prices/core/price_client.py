from __future__ import annotations

import asyncio
import logging
import math
import re
import typing as t

import httpx

from .errors import ZakatError, ZakatErrorCode
from .models import MetalPrice, MetalPrices, MetalType, utcnow

_logger = logging.getLogger(__name__)

METAL_PRICE_ENDPOINTS = {
    "goldapi": "https://www.goldapi.io/api",
    "metalsapi": "https://metals-api.com/api",
}
DEFAULT_METAL_PRICE_ENDPOINT = METAL_PRICE_ENDPOINTS["goldapi"]
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_RETRY_AFTER_SECONDS = 60

_CURRENCY_RE = re.compile(r"^[A-Za-z]{3}$")
_SYMBOLS = {MetalType.GOLD: "XAU", MetalType.SILVER: "XAG"}

JSON = t.Dict[str, t.Any]


def normalize_currency(currency: str) -> str:
    code = currency.strip() if isinstance(currency, str) else ""
    if not _CURRENCY_RE.match(code):
        raise ZakatError(ZakatErrorCode.INVALID_CURRENCY, f"Invalid currency code: {currency!r}")
    return code.upper()


class MetalPriceClient:
    """Async client for GoldAPI-compatible metal price endpoints.

    Gold (XAU) and silver (XAG) are requested concurrently and mapped to their
    24k per-gram price. Every failure is raised as a :class:`ZakatError`.

    Usage:
        async with MetalPriceClient(api_key="...") as client:
            prices = await client.fetch_metal_prices("EUR")
    """

    def __init__(
        self,
        api_key: t.Optional[str],
        endpoint: str = DEFAULT_METAL_PRICE_ENDPOINT,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        *,
        http_client: t.Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout_seconds
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def __aenter__(self) -> "MetalPriceClient":
        return self

    async def __aexit__(self, *exc_info: t.Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_metal_prices(self, currency: str) -> MetalPrices:
        if not self._api_key:
            raise ZakatError(
                ZakatErrorCode.API_ERROR,
                "API key is required for metal prices. Provide one in the client or service config.",
            )
        code = normalize_currency(currency)

        gold, silver = await asyncio.gather(
            self._fetch_single(MetalType.GOLD, code),
            self._fetch_single(MetalType.SILVER, code),
            return_exceptions=True,
        )
        # gold failure is reported first when both requests fail
        for result in (gold, silver):
            if isinstance(result, BaseException):
                raise result

        timestamp = utcnow()
        return MetalPrices(
            gold=MetalPrice(
                metal=MetalType.GOLD,
                price_per_gram=float(gold["price_gram_24k"]),  # type: ignore[index]
                currency=code,
                timestamp=timestamp,
                source="goldapi.io",
            ),
            silver=MetalPrice(
                metal=MetalType.SILVER,
                price_per_gram=float(silver["price_gram_24k"]),  # type: ignore[index]
                currency=code,
                timestamp=timestamp,
                source="goldapi.io",
            ),
        )

    async def _fetch_single(self, metal: MetalType, currency: str) -> JSON:
        url = f"{self._endpoint}/{_SYMBOLS[metal]}/{currency}"
        _logger.info("Fetching %s price in %s from %s", metal.value, currency, self._endpoint)
        try:
            response = await self._client.get(
                url,
                headers={"x-access-token": t.cast(str, self._api_key), "Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except httpx.TimeoutException as exc:
            raise ZakatError(ZakatErrorCode.TIMEOUT, f"Request timed out after {self._timeout}s") from exc
        except httpx.RequestError as exc:
            raise ZakatError(ZakatErrorCode.NETWORK_ERROR, str(exc) or "Network request failed") from exc

        if not response.is_success:
            raise _error_for_status(response)

        try:
            data = response.json()
        except ValueError as exc:
            raise ZakatError(
                ZakatErrorCode.PARSE_ERROR, "Failed to parse metal price API response as JSON"
            ) from exc

        price = data.get("price_gram_24k") if isinstance(data, dict) else None
        if isinstance(price, bool) or not isinstance(price, (int, float)) or not math.isfinite(price):
            raise ZakatError(ZakatErrorCode.PARSE_ERROR, "Invalid metal price API response: missing price data")
        return data


def _error_for_status(response: httpx.Response) -> ZakatError:
    status = response.status_code
    if status == 429:
        header = response.headers.get("Retry-After")
        retry_after = int(header) if header and header.isdigit() else DEFAULT_RETRY_AFTER_SECONDS
        return ZakatError(
            ZakatErrorCode.RATE_LIMITED,
            "Metal price API rate limit exceeded. Please try again later.",
            status_code=status,
            retry_after=retry_after,
        )
    if status in (401, 403):
        return ZakatError(
            ZakatErrorCode.API_ERROR, "Invalid or expired API key for metal prices API.", status_code=status
        )
    if status >= 500:
        return ZakatError(
            ZakatErrorCode.API_ERROR,
            f"Metal price API server error: {status} {response.reason_phrase}",
            status_code=status,
        )
    return ZakatError(
        ZakatErrorCode.API_ERROR, f"Metal price API error: {status} {response.reason_phrase}", status_code=status
    )
