"""
Grid engine: one tick = plan levels, reconcile book, detect crossing,
gate through risk, fill, update position/equity, report.

Each engine instance owns its order book, position, risk state and id
sequences. Nothing is shared between instances.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from grid_core.contracts import Order, Side, TickReport
from grid_core.errors import InvalidConfig
from grid_core.fills import FillModel, InstantFillModel
from grid_core.order_book import OrderBook
from grid_core.planner import base_index, compute_grid, level_at, validate_grid, validate_price
from grid_core.position import PositionTracker
from grid_core.risk import RiskManager
from grid_core.signals import detect_crossing

if TYPE_CHECKING:  # pragma: no cover
    from data.price_source import PriceSource

logger = logging.getLogger("grid.engine")

EventCallback = Callable[[str, dict[str, Any]], None]


@dataclass(frozen=True)
class GridSettings:
    symbol: str
    spacing: float
    count: int
    order_quantity: float

    def __post_init__(self) -> None:
        validate_grid(self.spacing, self.count)
        if not math.isfinite(self.order_quantity) or self.order_quantity <= 0:
            raise InvalidConfig(f"order quantity must be positive, got {self.order_quantity!r}")


class GridEngine:
    """Orchestrates the grid components for one trading pair."""

    def __init__(
        self,
        settings: GridSettings,
        risk: RiskManager,
        *,
        price_source: "PriceSource | None" = None,
        fill_model: FillModel | None = None,
        on_event: EventCallback | None = None,
    ) -> None:
        self.settings = settings
        self.risk = risk
        self.book = OrderBook()
        self.position = PositionTracker()
        self._price_source = price_source
        self._fill_model = fill_model or InstantFillModel()
        self._on_event = on_event
        self.ticks = 0

    def _emit(self, event_type: str, **payload: Any) -> None:
        if self._on_event is not None:
            self._on_event(event_type, payload)

    def tick(self) -> TickReport:
        """Fetch the current price and process it. PriceFetchError propagates."""
        if self._price_source is None:
            raise InvalidConfig("engine has no price source; use process_price()")
        price = self._price_source.get_price(self.settings.symbol)
        return self.process_price(price)

    def _flush(self, pending: list[tuple[str, dict[str, Any]]]) -> None:
        for event_type, payload in pending:
            self._emit(event_type, **payload)

    def process_price(self, price: float) -> TickReport:
        """Run one tick at *price*.

        Book, position and equity are fully updated before any event is sent,
        so a failing event callback cannot leave them out of step.
        """
        validate_price(price)

        s = self.settings
        levels = compute_grid(price, s.spacing, s.count)

        closed = self.book.reconcile(levels)
        pending: list[tuple[str, dict[str, Any]]] = [
            ("order_closed", {"order": dataclasses.replace(order)}) for order in closed
        ]

        signal = detect_crossing(price, levels, s.spacing)
        placed: Order | None = None
        rejection: str | None = None
        breach = None

        if signal is not None and self.book.should_place(signal.level, signal.side):
            decision = self.risk.check(s.order_quantity, price)
            if not decision.allowed:
                rejection = decision.reason
                logger.info("Order rejected: %s", rejection)
                pending.append(("order_rejected", {"signal": signal, "price": price, "reason": rejection}))
            else:
                placed = self.book.add_order(signal.side, price, signal.level, s.order_quantity)
                try:
                    fill = self._fill_model.execute(placed)
                    realized = self.position.apply_fill(fill.quantity, fill.price, fill.side == Side.BUY)
                except Exception:
                    self.book.cancel(placed)
                    self._flush(pending)
                    raise
                if fill.side == Side.SELL:
                    breach = self.risk.apply_pnl(realized)
                logger.info(
                    "New %s order placed at grid level %s (Price: %s)",
                    placed.side.value, placed.level.price, placed.price,
                )
                pending.append(
                    ("order_placed", {"order": dataclasses.replace(placed), "fill": fill, "realized_pnl": realized})
                )
                if breach is not None:
                    pending.append(("drawdown_breach", {"breach": breach}))

        self.ticks += 1
        report = TickReport(
            symbol=s.symbol,
            price=price,
            base_level=level_at(base_index(price, s.spacing), s.spacing),
            levels=levels,
            position=self.position.snapshot(price),
            realized_pnl=self.position.total_realized,
            equity=self.risk.current_equity,
            active_orders=[dataclasses.replace(o) for o in self.book.active_orders()],
            closed=[dataclasses.replace(o) for o in closed],
            signal=signal,
            placed=dataclasses.replace(placed) if placed is not None else None,
            rejection=rejection,
            breach=breach,
        )
        self._flush(pending)
        self._emit("tick", report=report)
        return report
