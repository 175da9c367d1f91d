#!/usr/bin/env python3
"""Print nisab thresholds for a few currencies, served through the price cache.

Set ZAKAT_METAL_PRICE_API_KEY to query GoldAPI; without it mock prices are used.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys

from zakat_prices import MetalPriceService, ZakatError, ZakatPricesConfig


async def main(currencies: list[str]) -> int:
    log_level = os.getenv("LOG_LEVEL", "INFO")
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = ZakatPricesConfig.from_env()
    async with MetalPriceService.from_config(config) as service:
        # Ask twice so the second round is served from the cache
        for _ in range(2):
            for currency in currencies:
                try:
                    nisab = await service.get_nisab(currency)
                except ZakatError as exc:
                    print(f"{currency}: {exc.code.value} {exc}")
                    continue
                print(
                    f"{nisab.currency}: gold {nisab.gold_value:,.2f} ({nisab.gold_grams:g} g), "
                    f"silver {nisab.silver_value:,.2f} ({nisab.silver_grams:g} g)"
                )
        stats = service.cache_stats
        if stats is not None:
            print(f"cache: size={stats.size} hits={stats.hits} misses={stats.misses}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:] or ["USD", "eur", "MYR"])))
