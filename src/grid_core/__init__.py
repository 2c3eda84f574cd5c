"""
grid-core: grid order & risk management engine.

No network, no files. Consumes prices, produces orders, fills, PnL and
TickReports. Deterministic and unit-testable.
"""

from grid_core.contracts import (
    DrawdownBreach,
    Fill,
    GridLevel,
    GridSignal,
    Order,
    PositionSnapshot,
    RiskDecision,
    Side,
    TickReport,
)
from grid_core.engine import GridEngine, GridSettings
from grid_core.errors import GridEngineError, InvalidConfig, InvalidOrder, PriceFetchError
from grid_core.order_book import OrderBook
from grid_core.planner import compute_grid, compute_levels
from grid_core.position import PositionTracker
from grid_core.risk import RiskManager
from grid_core.signals import detect_crossing

__all__ = [
    "compute_grid",
    "compute_levels",
    "detect_crossing",
    "DrawdownBreach",
    "Fill",
    "GridEngine",
    "GridEngineError",
    "GridLevel",
    "GridSettings",
    "GridSignal",
    "InvalidConfig",
    "InvalidOrder",
    "Order",
    "OrderBook",
    "PositionSnapshot",
    "PositionTracker",
    "PriceFetchError",
    "RiskDecision",
    "RiskManager",
    "Side",
    "TickReport",
]
