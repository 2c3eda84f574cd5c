"""
Paper executor: the fill model used by the CLI.

Nothing is sent to an exchange. ``place_order`` only logs; every order is
filled in full, instantly, at its own price. The engine applies the
returned Fill to position and equity.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from grid_core.contracts import Fill, Order, Side
from grid_core.fills import InstantFillModel

if TYPE_CHECKING:  # pragma: no cover
    from journal.writer import JournalWriter

logger = logging.getLogger("grid.execution")


def place_order(side: Side | str, quantity: float, price: float, symbol: str = "") -> None:
    """Observational stub: log the order that would be sent."""
    side_str = side.value if isinstance(side, Side) else str(side)
    logger.info("Placing %s order for %s %s at price %s", side_str, quantity, symbol, price)


class PaperExecutor:
    """FillModel that logs the order, fills it immediately and journals the fill."""

    def __init__(self, symbol: str, *, journal: "JournalWriter | None" = None) -> None:
        self._symbol = symbol
        self._journal = journal
        self._fills = InstantFillModel()
        self._history: list[Fill] = []

    @property
    def fills(self) -> list[Fill]:
        return list(self._history)

    def execute(self, order: Order) -> Fill:
        place_order(order.side, order.quantity, order.price, self._symbol)
        fill = self._fills.execute(order)
        if self._journal is not None:
            self._journal.fill(fill.order_id, self._symbol, fill.side.value, fill.quantity, fill.price)
        self._history.append(fill)
        return fill
