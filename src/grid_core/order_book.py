"""
Order book: grid level -> orders placed at that level (open and closed).

Invariant: at most one open order per (level, side). ``add_order`` does not
enforce it; callers check ``should_place`` first.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable

from grid_core.contracts import GridLevel, IdSequence, Order, Side
from grid_core.errors import InvalidOrder

logger = logging.getLogger("grid.book")


def _key(level: GridLevel | int) -> int:
    return level.index if isinstance(level, GridLevel) else int(level)


class OrderBook:
    """Orders indexed by integer grid level, each level in insertion order."""

    def __init__(self, id_prefix: str = "ORDER_") -> None:
        self._levels: dict[int, list[Order]] = {}
        self._ids = IdSequence(id_prefix)

    def __len__(self) -> int:
        return len(self._levels)

    def __contains__(self, level: GridLevel | int) -> bool:
        return _key(level) in self._levels

    @property
    def tracked_levels(self) -> list[int]:
        return sorted(self._levels)

    def orders_at(self, level: GridLevel | int) -> list[Order]:
        return list(self._levels.get(_key(level), []))

    def active_orders(self) -> list[Order]:
        """Open orders, ordered by level index then insertion."""
        return [
            order
            for index in sorted(self._levels)
            for order in self._levels[index]
            if order.is_open
        ]

    def should_place(self, level: GridLevel | int, side: Side) -> bool:
        orders = self._levels.get(_key(level))
        if orders is None:
            return True
        return not any(o.is_open and o.side == side for o in orders)

    def add_order(self, side: Side, price: float, level: GridLevel, quantity: float) -> Order:
        if not math.isfinite(quantity) or quantity <= 0:
            raise InvalidOrder(f"order quantity must be positive, got {quantity!r}")
        if not math.isfinite(price) or price <= 0:
            raise InvalidOrder(f"order price must be positive, got {price!r}")
        order = Order(
            id=self._ids.next(),
            side=Side(side),
            price=price,
            quantity=quantity,
            level=level,
        )
        self._levels.setdefault(level.index, []).append(order)
        return order

    def cancel(self, order: Order) -> None:
        """Withdraw an order that was never filled. Its id is not reused."""
        index = order.level.index
        remaining = [o for o in self._levels.get(index, []) if o.id != order.id]
        if remaining:
            self._levels[index] = remaining
        else:
            self._levels.pop(index, None)
        order.is_open = False

    def reconcile(self, new_levels: Iterable[GridLevel | int]) -> list[Order]:
        """Close open orders at levels missing from *new_levels* and drop those levels.

        Returns the orders closed by this call, in level order.
        """
        keep = {_key(lvl) for lvl in new_levels}
        closed: list[Order] = []
        for index in sorted(self._levels):
            if index in keep:
                continue
            for order in self._levels.pop(index):
                if order.close():
                    logger.info("Closing order %s at grid level %s", order.id, order.level.price)
                    closed.append(order)
        return closed
