"""
Replay: feed a recorded price series through a fresh grid engine, tick by tick.

Same engine, same fill model as live; only the price source differs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from grid_core.contracts import DrawdownBreach, Order, PositionSnapshot, Side, TickReport
from grid_core.engine import GridEngine, GridSettings
from grid_core.fills import FillModel
from grid_core.risk import RiskManager


@dataclass
class ReplayResult:
    """Result of a replay run."""

    symbol: str
    initial_equity: float
    final_equity: float
    realized_pnl: float
    final_position: PositionSnapshot
    ticks: int = 0
    orders: list[Order] = field(default_factory=list)
    closed: list[Order] = field(default_factory=list)
    rejections: list[str] = field(default_factory=list)
    breaches: list[DrawdownBreach] = field(default_factory=list)
    reports: list[TickReport] = field(default_factory=list)

    @property
    def trade_count(self) -> int:
        return len(self.orders)

    @property
    def buy_count(self) -> int:
        return sum(1 for o in self.orders if o.side == Side.BUY)

    @property
    def sell_count(self) -> int:
        return sum(1 for o in self.orders if o.side == Side.SELL)

    @property
    def total_return_pct(self) -> float:
        if self.initial_equity <= 0:
            return 0.0
        return (self.final_equity - self.initial_equity) / self.initial_equity * 100


def run_replay(
    prices: Iterable[float],
    settings: GridSettings,
    risk: RiskManager,
    *,
    fill_model: FillModel | None = None,
    event_callback: Callable[[str, dict[str, Any]], None] | None = None,
    keep_reports: bool = False,
) -> ReplayResult:
    """
    Run every price through ``GridEngine.process_price``.

    event_callback receives the engine events (order_placed, order_closed,
    order_rejected, drawdown_breach, tick) as they happen.
    """
    engine = GridEngine(settings, risk, fill_model=fill_model, on_event=event_callback)
    initial_equity = risk.current_equity

    orders: list[Order] = []
    closed: list[Order] = []
    rejections: list[str] = []
    breaches: list[DrawdownBreach] = []
    reports: list[TickReport] = []
    last: TickReport | None = None

    for price in prices:
        last = engine.process_price(price)
        if last.placed is not None:
            orders.append(last.placed)
        closed.extend(last.closed)
        if last.rejection:
            rejections.append(last.rejection)
        if last.breach is not None:
            breaches.append(last.breach)
        if keep_reports:
            reports.append(last)

    final_position = last.position if last is not None else PositionSnapshot(0.0, 0.0, 0.0, 0.0)
    return ReplayResult(
        symbol=settings.symbol,
        initial_equity=initial_equity,
        final_equity=risk.current_equity,
        realized_pnl=engine.position.total_realized,
        final_position=final_position,
        ticks=engine.ticks,
        orders=orders,
        closed=closed,
        rejections=rejections,
        breaches=breaches,
        reports=reports,
    )
