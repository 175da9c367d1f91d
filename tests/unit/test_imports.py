"""Smoke test for the public package surface."""

import zakat_prices


def test_public_api_exports():
    for name in zakat_prices.__all__:
        assert hasattr(zakat_prices, name), name


def test_lru_scenario_from_package_root():
    cache = zakat_prices.BoundedCache(max_entries=3)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("c", 3)
    cache.get("a")
    cache.set("d", 4)

    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3
    assert cache.get("d") == 4
