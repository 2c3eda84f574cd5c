"""
Market data: price sources and recorded price series.

Depends on grid_core for the error types; no dependency from grid_core back to data.
"""

from data.price_file import load_prices
from data.price_source import (
    BinancePriceSource,
    PriceSource,
    SequencePriceSource,
    StaticPriceSource,
)

__all__ = [
    "BinancePriceSource",
    "get_price_source",
    "load_prices",
    "PriceSource",
    "SequencePriceSource",
    "StaticPriceSource",
]


def get_price_source(cfg) -> PriceSource:
    """Build the price source named by ``cfg.price_source`` (an AppConfig)."""
    ps = cfg.price_source
    if ps.provider == "static":
        return StaticPriceSource(ps.static_price)
    return BinancePriceSource(ps.base_url, timeout=ps.timeout_seconds)
