"""Shared fixtures for unit tests."""

from __future__ import annotations

import typing as t

import httpx
import pytest

from zakat_prices.core.models import MetalPrice, MetalPrices, MetalType
from zakat_prices.monitoring import metrics

GOLD_RESPONSE = {
    "timestamp": 1704067200,
    "metal": "XAU",
    "currency": "USD",
    "exchange": "FOREXCOM",
    "symbol": "FOREXCOM:XAUUSD",
    "price": 2062.5,
    "price_gram_24k": 66.31,
    "price_gram_22k": 60.78,
    "price_gram_21k": 58.02,
    "price_gram_18k": 49.73,
    "ask": 2063.0,
    "bid": 2062.0,
}

SILVER_RESPONSE = {
    "timestamp": 1704067200,
    "metal": "XAG",
    "currency": "USD",
    "exchange": "FOREXCOM",
    "symbol": "FOREXCOM:XAGUSD",
    "price": 23.89,
    "price_gram_24k": 0.768,
    "price_gram_22k": 0.704,
    "price_gram_21k": 0.672,
    "price_gram_18k": 0.576,
    "ask": 23.90,
    "bid": 23.88,
}


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.reset_all()
    yield
    metrics.reset_all()


@pytest.fixture
def sample_prices():
    """Valid USD gold and silver prices."""
    return MetalPrices(
        gold=MetalPrice(metal=MetalType.GOLD, price_per_gram=66.31, currency="USD", source="test"),
        silver=MetalPrice(metal=MetalType.SILVER, price_per_gram=0.768, currency="USD", source="test"),
    )


@pytest.fixture
def goldapi_handler():
    """Route handler answering XAU/XAG requests with the sample responses.

    Records every request it sees on ``handler.requests``.
    """
    requests: t.List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path.endswith("/XAU/USD"):
            return httpx.Response(200, json=GOLD_RESPONSE)
        if request.url.path.endswith("/XAG/USD"):
            return httpx.Response(200, json=SILVER_RESPONSE)
        return httpx.Response(404, json={"error": "not found"})

    handler.requests = requests  # type: ignore[attr-defined]
    return handler


@pytest.fixture
def make_http_client():
    """Build an httpx client whose requests are answered by a handler function."""

    def factory(handler: t.Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory
