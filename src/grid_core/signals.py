"""Crossing detection: price entering the tolerance band around a grid level."""

from __future__ import annotations

from typing import Sequence

from grid_core.contracts import GridLevel, GridSignal, Side

SIGNAL_TOLERANCE_RATIO = 0.1


def detect_crossing(
    price: float,
    levels: Sequence[GridLevel],
    spacing: float,
    tolerance_ratio: float = SIGNAL_TOLERANCE_RATIO,
) -> GridSignal | None:
    """Return at most one signal for *price* against ascending *levels*.

    The bracket is the first pair with ``lower < price <= upper``. Near the
    lower level -> buy there; otherwise near the upper level -> sell there.
    """
    tolerance = spacing * tolerance_ratio
    for lower, upper in zip(levels, levels[1:]):
        if not (lower.price < price <= upper.price):
            continue
        if abs(price - lower.price) < tolerance:
            return GridSignal(side=Side.BUY, level=lower)
        if abs(price - upper.price) < tolerance:
            return GridSignal(side=Side.SELL, level=upper)
        return None
    return None
