"""
Data contracts for grid-core: GridLevel, Order, Fill, signals and reports.

Plain dataclasses, no I/O. Orders are the only mutable records; everything
handed out in a TickReport is a copy.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum


class Side(str, Enum):
    """Order side."""

    BUY = "buy"
    SELL = "sell"

    @property
    def opposite(self) -> "Side":
        return Side.SELL if self is Side.BUY else Side.BUY


class IdSequence:
    """Monotonic id generator: PREFIX_1, PREFIX_2, ... Never reuses an id."""

    def __init__(self, prefix: str) -> None:
        self._prefix = prefix
        self._counter = itertools.count(1)
        self._last = 0

    @property
    def last(self) -> int:
        return self._last

    def next(self) -> str:
        self._last = next(self._counter)
        return f"{self._prefix}{self._last}"


@dataclass(frozen=True, order=True)
class GridLevel:
    """One rung of the ladder. ``index`` is the offset from reference price 0."""

    index: int
    price: float


@dataclass
class Order:
    id: str
    side: Side
    price: float
    quantity: float
    level: GridLevel
    is_open: bool = True

    def close(self) -> bool:
        """Flip the open flag. Returns False if the order was already closed."""
        if not self.is_open:
            return False
        self.is_open = False
        return True


@dataclass(frozen=True)
class Fill:
    order_id: str
    side: Side
    quantity: float
    price: float


@dataclass(frozen=True)
class GridSignal:
    """Crossing detected at a grid level."""

    side: Side
    level: GridLevel


@dataclass(frozen=True)
class RiskDecision:
    allowed: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.allowed


@dataclass(frozen=True)
class DrawdownBreach:
    """Warning record: equity dropped further below initial equity than allowed."""

    drawdown: float
    limit: float
    equity: float


@dataclass(frozen=True)
class PositionSnapshot:
    quantity: float
    avg_price: float
    total_cost: float
    unrealized_pnl: float


@dataclass
class TickReport:
    """Everything one tick did, plus the resulting state. Built after the fill is applied."""

    symbol: str
    price: float
    base_level: GridLevel
    levels: list[GridLevel]
    position: PositionSnapshot
    realized_pnl: float
    equity: float
    active_orders: list[Order] = field(default_factory=list)
    closed: list[Order] = field(default_factory=list)
    signal: GridSignal | None = None
    placed: Order | None = None
    rejection: str | None = None
    breach: DrawdownBreach | None = None
