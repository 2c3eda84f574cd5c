"""
Human-readable tick output for the terminal.

Every CLI command uses these formatters. The journal receives the same data.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from grid_core.contracts import GridLevel, TickReport

if TYPE_CHECKING:
    from backtest.runner import ReplayResult


def _fmt(value: float) -> str:
    return f"{value:,.8f}".rstrip("0").rstrip(".") if value != int(value) else f"{value:,.2f}"


def format_levels(levels: list[GridLevel], base: GridLevel | None = None, price: float | None = None) -> str:
    """Ladder top-down; the base level and the bracket containing *price* are marked."""
    lines = []
    for lvl in reversed(levels):
        marker = "  <- base" if base is not None and lvl.index == base.index else ""
        lines.append(f"  [{lvl.index:>8d}] {_fmt(lvl.price):>16s}{marker}")
    if price is not None:
        lines.insert(0, f"Grid around {_fmt(price)} ({len(levels)} levels):")
    return "\n".join(lines)


def format_active_orders(report: TickReport) -> str:
    lines = ["", "Active Orders:"]
    if not report.active_orders:
        lines.append("  (none)")
    for order in report.active_orders:
        lines.append(
            f"  Grid {_fmt(order.level.price)}: {order.side.value} order at {_fmt(order.price)} "
            f"(Quantity: {order.quantity:g})  [{order.id}]"
        )
    return "\n".join(lines)


def format_trading_stats(report: TickReport) -> str:
    pos = report.position
    lines = [
        "",
        "=== Trading Statistics ===",
        "Current Position:",
        f"  Quantity          : {pos.quantity:g}",
        f"  Average Price     : {_fmt(pos.avg_price)}",
        f"  Unrealized P&L    : {pos.unrealized_pnl:,.2f}",
        f"Total Realized P&L  : {report.realized_pnl:,.2f}",
        f"Current Equity      : {report.equity:,.2f}",
    ]
    return "\n".join(lines)


def format_tick_report(report: TickReport) -> str:
    lines = [
        f"--- {report.symbol} @ {_fmt(report.price)} ---",
        f"Base grid    : {_fmt(report.base_level.price)}",
    ]
    for order in report.closed:
        lines.append(f"Closed       : {order.id} at grid level {_fmt(order.level.price)}")
    if report.signal is None:
        lines.append("Signal       : none")
    else:
        lines.append(f"Signal       : {report.signal.side.value} at {_fmt(report.signal.level.price)}")
    if report.placed is not None:
        o = report.placed
        lines.append(f"Placed       : {o.id} {o.side.value} {o.quantity:g} @ {_fmt(o.price)}")
    elif report.rejection:
        lines.append(f"Rejected     : {report.rejection}")
    if report.breach is not None:
        lines.append(
            f"WARNING      : maximum drawdown exceeded "
            f"({report.breach.drawdown:,.2f} > {report.breach.limit:,.2f})"
        )
    return "\n".join(lines) + format_active_orders(report) + "\n" + format_trading_stats(report)


def format_replay_summary(result: "ReplayResult") -> str:
    lines = [
        f"=== Replay: {result.symbol} ===",
        f"Prices processed : {result.ticks}",
        f"Orders placed    : {result.trade_count} ({result.buy_count} buy / {result.sell_count} sell)",
        f"Orders closed    : {len(result.closed)}",
        f"Rejections       : {len(result.rejections)}",
        f"Drawdown breaches: {len(result.breaches)}",
        f"Final position   : {result.final_position.quantity:g} @ {_fmt(result.final_position.avg_price)}",
        f"Realized P&L     : {result.realized_pnl:,.2f}",
        f"Unrealized P&L   : {result.final_position.unrealized_pnl:,.2f}",
        f"Equity           : {result.initial_equity:,.2f} -> {result.final_equity:,.2f}",
        f"Return           : {result.total_return_pct:.2f}%",
    ]
    return "\n".join(lines)
