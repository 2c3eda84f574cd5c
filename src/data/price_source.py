"""
Price sources: ``get_price(symbol) -> float``. Sync; one request per tick.

Every failure (transport, HTTP status, JSON, missing/invalid field) surfaces
as PriceFetchError so the scheduler can skip the tick.
"""

from __future__ import annotations

import http.client
import json
import logging
import math
import urllib.error
import urllib.parse
import urllib.request
from typing import Iterable, Iterator, Protocol

from grid_core.errors import PriceFetchError

logger = logging.getLogger("grid.data")


class PriceSource(Protocol):
    """Protocol for price sources. Symbol follows the exchange ticker convention (ETHUSDT)."""

    def get_price(self, symbol: str) -> float:
        ...


def _parse_price(value: object, symbol: str) -> float:
    try:
        price = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise PriceFetchError(f"Invalid price for {symbol}: {value!r}") from exc
    if not math.isfinite(price) or price <= 0:
        raise PriceFetchError(f"Invalid price for {symbol}: {value!r}")
    return price


class BinancePriceSource:
    """Spot ticker price from the Binance public REST API (no key required)."""

    TICKER_PATH = "/api/v3/ticker/price"

    def __init__(self, base_url: str = "https://api.binance.com", timeout: float = 10.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def url_for(self, symbol: str) -> str:
        query = urllib.parse.urlencode({"symbol": symbol})
        return f"{self._base_url}{self.TICKER_PATH}?{query}"

    def get_price(self, symbol: str) -> float:
        url = self.url_for(symbol)
        try:
            with urllib.request.urlopen(url, timeout=self._timeout) as resp:
                body = resp.read()
        except urllib.error.HTTPError as exc:
            raise PriceFetchError(f"HTTP {exc.code} from price API for {symbol}") from exc
        except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
            raise PriceFetchError(f"Price request failed for {symbol}: {exc}") from exc

        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise PriceFetchError(f"JSON parse error: {exc}") from exc
        if not isinstance(payload, dict) or "price" not in payload:
            raise PriceFetchError(f"Price missing from response for {symbol}: {payload!r}")

        price = _parse_price(payload["price"], symbol)
        logger.info("Current price fetched: %s %s", symbol, payload["price"])
        return price


class StaticPriceSource:
    """Always returns the same price; for one-shot ticks and tests."""

    def __init__(self, price: float) -> None:
        self._price = _parse_price(price, "static")

    def get_price(self, symbol: str) -> float:
        return self._price


class SequencePriceSource:
    """Returns prices from an iterable in order; raises PriceFetchError once exhausted."""

    def __init__(self, prices: Iterable[float]) -> None:
        self._prices: Iterator[float] = iter(prices)

    def get_price(self, symbol: str) -> float:
        try:
            value = next(self._prices)
        except StopIteration:
            raise PriceFetchError(f"No more prices for {symbol}") from None
        return _parse_price(value, symbol)
