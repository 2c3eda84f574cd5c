"""
Risk manager: equity state and limits.

Consulted before every order (``check`` / ``can_place``); updated after
every trade that realizes PnL (``apply_pnl``). The per-trade loss limit is
carried for reporting only and is never enforced.
"""

from __future__ import annotations

import logging
import math

from grid_core.contracts import DrawdownBreach, RiskDecision
from grid_core.errors import InvalidConfig

logger = logging.getLogger("grid.risk")


def _require_fraction(name: str, value: float) -> None:
    if not math.isfinite(value) or not 0.0 <= value <= 1.0:
        raise InvalidConfig(f"{name} must be between 0 and 1, got {value!r}")


class RiskManager:
    """Position-size and funds gate, drawdown monitor.

    Parameters
    ----------
    initial_equity:
        Starting capital. Current equity starts here.
    max_position_size:
        Largest quantity a single order may carry.
    max_drawdown_percent:
        Fraction of initial equity; the absolute drawdown limit is
        ``initial_equity * max_drawdown_percent``.
    max_loss_per_trade_percent:
        Fraction of initial equity. Stored, not enforced.
    """

    def __init__(
        self,
        initial_equity: float,
        max_position_size: float,
        max_drawdown_percent: float,
        max_loss_per_trade_percent: float = 0.0,
    ) -> None:
        if not math.isfinite(initial_equity) or initial_equity <= 0:
            raise InvalidConfig(f"initial equity must be positive, got {initial_equity!r}")
        if not math.isfinite(max_position_size) or max_position_size <= 0:
            raise InvalidConfig(f"max position size must be positive, got {max_position_size!r}")
        _require_fraction("max_drawdown_percent", max_drawdown_percent)
        _require_fraction("max_loss_per_trade_percent", max_loss_per_trade_percent)

        self._initial_equity = float(initial_equity)
        self._current_equity = float(initial_equity)
        self._max_position_size = float(max_position_size)
        self._max_drawdown = initial_equity * max_drawdown_percent
        self._max_loss_per_trade = initial_equity * max_loss_per_trade_percent

    @property
    def initial_equity(self) -> float:
        return self._initial_equity

    @property
    def current_equity(self) -> float:
        return self._current_equity

    @property
    def max_position_size(self) -> float:
        return self._max_position_size

    @property
    def max_drawdown(self) -> float:
        return self._max_drawdown

    @property
    def max_loss_per_trade(self) -> float:
        return self._max_loss_per_trade

    @property
    def drawdown(self) -> float:
        return self._initial_equity - self._current_equity

    def check(self, quantity: float, price: float) -> RiskDecision:
        if quantity > self._max_position_size:
            return RiskDecision(allowed=False, reason="Exceeds maximum position size")
        if quantity * price > self._current_equity:
            return RiskDecision(allowed=False, reason="Insufficient funds")
        return RiskDecision(allowed=True)

    def can_place(self, quantity: float, price: float) -> bool:
        decision = self.check(quantity, price)
        if not decision.allowed:
            logger.info("Order rejected: %s", decision.reason)
        return decision.allowed

    def apply_pnl(self, delta: float) -> DrawdownBreach | None:
        """Book realized PnL. Returns a breach record when drawdown exceeds the limit."""
        self._current_equity += delta
        drawdown = self.drawdown
        if drawdown > self._max_drawdown:
            logger.warning(
                "Maximum drawdown exceeded: %.2f > %.2f (equity %.2f)",
                drawdown, self._max_drawdown, self._current_equity,
            )
            return DrawdownBreach(
                drawdown=drawdown,
                limit=self._max_drawdown,
                equity=self._current_equity,
            )
        return None
