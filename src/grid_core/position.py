"""
Position tracker: quantity, volume-weighted average price, realized PnL ledger.

Leaf component. Realized PnL is returned to the caller, which forwards it
to the risk manager.
"""

from __future__ import annotations

import math

from grid_core.contracts import IdSequence, PositionSnapshot
from grid_core.errors import InvalidOrder


class PositionTracker:
    """Single-asset position.

    Buys move the average price; sells realize
    ``(price - avg_price) * quantity`` and leave the average untouched.
    Quantity is allowed to go negative (sells are not capped by holdings).
    """

    def __init__(self, trade_id_prefix: str = "TRADE_") -> None:
        self.quantity: float = 0.0
        self.avg_price: float = 0.0
        self.total_cost: float = 0.0
        self._ledger: dict[str, float] = {}
        self._trade_ids = IdSequence(trade_id_prefix)

    @property
    def ledger(self) -> dict[str, float]:
        """Trade id -> realized PnL, in the order trades were realized."""
        return dict(self._ledger)

    @property
    def total_realized(self) -> float:
        return sum(self._ledger.values())

    def apply_fill(self, quantity: float, price: float, is_buy: bool) -> float:
        """Apply a fill and return the PnL it realized (0.0 for buys)."""
        if not math.isfinite(quantity) or quantity <= 0:
            raise InvalidOrder(f"fill quantity must be positive, got {quantity!r}")
        if not math.isfinite(price) or price <= 0:
            raise InvalidOrder(f"fill price must be positive, got {price!r}")

        if is_buy:
            new_qty = self.quantity + quantity
            if new_qty != 0:
                self.avg_price = (self.quantity * self.avg_price + quantity * price) / new_qty
            self.quantity = new_qty
            self.total_cost += quantity * price
            return 0.0

        realized = (price - self.avg_price) * quantity
        self._ledger[self._trade_ids.next()] = realized
        self.quantity -= quantity
        return realized

    def unrealized_pnl(self, current_price: float) -> float:
        return self.quantity * (current_price - self.avg_price)

    def snapshot(self, current_price: float) -> PositionSnapshot:
        return PositionSnapshot(
            quantity=self.quantity,
            avg_price=self.avg_price,
            total_cost=self.total_cost,
            unrealized_pnl=self.unrealized_pnl(current_price),
        )
