"""Fill models: given an order, return the fill it received."""

from __future__ import annotations

from typing import Protocol

from grid_core.contracts import Fill, Order


class FillModel(Protocol):
    """Pluggable execution backend. The engine applies whatever fill comes back."""

    def execute(self, order: Order) -> Fill:
        ...


class InstantFillModel:
    """Complete, synchronous fill at the order price. No slippage, no fees."""

    def execute(self, order: Order) -> Fill:
        return Fill(order_id=order.id, side=order.side, quantity=order.quantity, price=order.price)
