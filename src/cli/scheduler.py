"""
Polling loop: fetch price, run one engine tick, print state, sleep, repeat.

A failed tick (price fetch, invalid price) is logged and skipped; the loop
always proceeds to the next cycle. Ctrl+C stops it.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

import click

from cli.output import format_tick_report
from cli.structured_log import StructuredEventLogger
from config.loader import AppConfig
from grid_core.contracts import TickReport
from grid_core.engine import GridEngine, GridSettings
from grid_core.errors import GridEngineError
from grid_core.fills import FillModel
from grid_core.risk import RiskManager
from journal.writer import JournalWriter

logger = logging.getLogger("grid.scheduler")


def build_settings(cfg: AppConfig) -> GridSettings:
    return GridSettings(
        symbol=cfg.symbol,
        spacing=cfg.grid.spacing,
        count=cfg.grid.count,
        order_quantity=cfg.grid.min_order_quantity,
    )


def build_risk(cfg: AppConfig) -> RiskManager:
    return RiskManager(
        initial_equity=cfg.risk.initial_investment,
        max_position_size=cfg.risk.max_position_size,
        max_drawdown_percent=cfg.risk.max_drawdown_percent,
        max_loss_per_trade_percent=cfg.risk.max_loss_per_trade_percent,
    )


class EventRouter:
    """Fan engine events out to the structured logger and the journal."""

    def __init__(
        self,
        symbol: str,
        *,
        events: StructuredEventLogger | None = None,
        journal: JournalWriter | None = None,
    ) -> None:
        self._symbol = symbol
        self._events = events
        self._journal = journal

    def __call__(self, event_type: str, payload: dict[str, Any]) -> None:
        handler = getattr(self, f"_on_{event_type}", None)
        if handler is not None:
            handler(**payload)

    def _on_order_placed(self, order, fill, realized_pnl) -> None:
        if self._events:
            self._events.order_placed(order.id, order.side.value, order.level.price, order.price, order.quantity)
        if self._journal:
            self._journal.order_placed(
                order.id, self._symbol, order.side.value, order.level.price, order.price, order.quantity,
                realized_pnl=realized_pnl,
            )

    def _on_order_closed(self, order) -> None:
        if self._events:
            self._events.order_closed(order.id, order.level.price)
        if self._journal:
            self._journal.order_closed(order.id, self._symbol, order.level.price)

    def _on_order_rejected(self, signal, price, reason) -> None:
        if self._events:
            self._events.order_rejected(reason, signal.side.value, signal.level.price)
        if self._journal:
            self._journal.order_rejected(self._symbol, signal.side.value, signal.level.price, price, reason)

    def _on_drawdown_breach(self, breach) -> None:
        if self._events:
            self._events.drawdown_breach(breach.drawdown, breach.limit, breach.equity)
        if self._journal:
            self._journal.drawdown_breach(self._symbol, breach.drawdown, breach.limit, breach.equity)

    def _on_tick(self, report: TickReport) -> None:
        if self._events:
            self._events.tick_complete(
                report.price,
                report.base_level.price,
                len(report.active_orders),
                report.position.quantity,
                report.realized_pnl,
                report.equity,
            )
        if self._journal:
            self._journal.snapshot(
                self._symbol,
                report.price,
                report.position,
                report.realized_pnl,
                report.equity,
                report.active_orders,
            )


def build_engine(
    cfg: AppConfig,
    price_source,
    *,
    fill_model: FillModel | None = None,
    events: StructuredEventLogger | None = None,
    journal: JournalWriter | None = None,
) -> GridEngine:
    """Wire an engine from config. Raises InvalidConfig on bad grid/risk settings."""
    return GridEngine(
        build_settings(cfg),
        build_risk(cfg),
        price_source=price_source,
        fill_model=fill_model,
        on_event=EventRouter(cfg.symbol, events=events, journal=journal),
    )


def run_tick(engine: GridEngine, events: StructuredEventLogger | None = None) -> TickReport | None:
    """One tick. Per-tick errors are logged and swallowed; returns None on failure."""
    try:
        return engine.tick()
    except GridEngineError as exc:
        logger.error("Tick failed: %s", exc)
        if events:
            events.error(message=str(exc), detail=type(exc).__name__)
        return None
    except Exception as exc:
        # journal I/O and other unexpected failures; engine state is already settled
        logger.exception("Tick failed unexpectedly: %s", exc)
        if events:
            events.error(message=str(exc), detail=type(exc).__name__)
        return None


def run_loop(
    cfg: AppConfig,
    engine: GridEngine,
    *,
    events: StructuredEventLogger | None = None,
    max_ticks: int | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Main loop: tick, print, sleep ``update_interval_seconds``, repeat.
    Stops after *max_ticks* cycles when given. Returns the number of cycles run.
    """
    cycles = 0
    click.echo(f"Starting trading for {cfg.symbol}...")
    click.echo(f"Grid mode: {'Infinite' if cfg.grid.infinite else 'Limited'}")
    click.echo(f"Spacing {cfg.grid.spacing:g} x {cfg.grid.count} levels each side  |  Ctrl+C to stop\n")

    try:
        while max_ticks is None or cycles < max_ticks:
            report = run_tick(engine, events)
            cycles += 1
            if report is not None:
                click.echo(format_tick_report(report))
            if max_ticks is not None and cycles >= max_ticks:
                break
            if cfg.update_interval_seconds > 0:
                sleep(cfg.update_interval_seconds)
    except KeyboardInterrupt:
        click.echo(f"\n\nShutting down after {cycles} tick(s). Goodbye.")

    if events:
        events.shutdown(ticks=cycles)
    return cycles
