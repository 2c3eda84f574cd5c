"""
Grid planner: current price + spacing + count -> symmetric ladder of levels.

Pure. Levels are identified by integer index relative to a fixed reference
price of 0, so ``price == index * spacing`` and two ladders computed on
different ticks agree exactly on shared levels.
"""

from __future__ import annotations

import math

from grid_core.contracts import GridLevel
from grid_core.errors import InvalidConfig, InvalidOrder


def validate_grid(spacing: float, count: int) -> None:
    """Raise InvalidConfig unless spacing > 0 (finite) and count >= 0."""
    if not isinstance(spacing, (int, float)) or not math.isfinite(spacing) or spacing <= 0:
        raise InvalidConfig(f"grid spacing must be a positive number, got {spacing!r}")
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise InvalidConfig(f"grid count must be a non-negative integer, got {count!r}")


def validate_price(price: float) -> None:
    """Raise InvalidOrder unless *price* is a finite positive number."""
    if isinstance(price, bool) or not isinstance(price, (int, float)) or not math.isfinite(price) or price <= 0:
        raise InvalidOrder(f"price must be a positive number, got {price!r}")


def base_index(current_price: float, spacing: float) -> int:
    """Index of the multiple of *spacing* nearest to *current_price* (round half to even)."""
    return int(round(current_price / spacing))


def level_at(index: int, spacing: float) -> GridLevel:
    return GridLevel(index=index, price=float(index * spacing))


def compute_grid(current_price: float, spacing: float, count: int) -> list[GridLevel]:
    """Return ``2*count + 1`` ascending levels centred on the base level."""
    validate_grid(spacing, count)
    validate_price(current_price)
    base = base_index(current_price, spacing)
    return [level_at(base + k, spacing) for k in range(-count, count + 1)]


def compute_levels(current_price: float, spacing: float, count: int) -> list[float]:
    """Prices of :func:`compute_grid`."""
    return [lvl.price for lvl in compute_grid(current_price, spacing, count)]
