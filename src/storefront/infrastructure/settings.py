"""Store configuration, loaded from environment variables (and ``.env``).

Every value has a default so a fresh checkout runs without any setup.
Money settings are in cents.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from storefront.domain.service.pricing import ShippingRates


@dataclass(frozen=True)
class StoreSettings:
    store_name: str
    order_prefix: str
    currency_symbol: str
    shipping_flat_rate: int
    free_shipping_threshold: int
    processing_status_name: str
    data_dir: Path
    log_level: str

    @property
    def shipping_rates(self) -> ShippingRates:
        return ShippingRates(
            flat_rate=self.shipping_flat_rate,
            free_shipping_threshold=self.free_shipping_threshold,
        )


@lru_cache(maxsize=1)
def load_settings() -> StoreSettings:
    """Read settings once; call ``load_settings.cache_clear()`` to re-read."""
    load_dotenv()
    return StoreSettings(
        store_name=os.getenv("STORE_NAME", "My Store"),
        order_prefix=os.getenv("ORDER_PREFIX", "ORD"),
        currency_symbol=os.getenv("CURRENCY_SYMBOL", "$"),
        shipping_flat_rate=int(os.getenv("SHIPPING_FLAT_RATE", "500")),
        free_shipping_threshold=int(os.getenv("FREE_SHIPPING_THRESHOLD", "5000")),
        processing_status_name=os.getenv("PROCESSING_STATUS_NAME", "processing"),
        data_dir=Path(os.getenv("STOREFRONT_DATA_DIR", "data")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
