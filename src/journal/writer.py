"""
Trade journal: append-only JSON lines. One record per order, fill, closure,
rejection, drawdown breach and tick snapshot.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any


def _serialize(obj: Any) -> Any:
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if hasattr(obj, "__dict__") and not isinstance(obj, type):
        return {k: _serialize(v) for k, v in vars(obj).items() if not k.startswith("_")}
    if isinstance(obj, dict):
        return {k: _serialize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_serialize(x) for x in obj]
    return obj


class JournalWriter:
    """Append-only journal. Each line is a JSON object with event type and payload."""

    def __init__(self, path: str | Path, *, echo_stdout: bool = False) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._echo = echo_stdout

    @property
    def path(self) -> Path:
        return self._path

    def _write(self, event_type: str, payload: dict) -> None:
        record = {"ts_utc": datetime.now(timezone.utc).isoformat(), "event": event_type, **payload}
        line = json.dumps(_serialize(record)) + "\n"
        with open(self._path, "a") as f:
            f.write(line)
        if self._echo:
            print(line.rstrip())

    def order_placed(self, order_id: str, symbol: str, side: str, level: float, price: float, qty: float, **extra: Any) -> None:
        self._write(
            "order_placed",
            {"order_id": order_id, "symbol": symbol, "side": side, "level": level, "price": price, "qty": qty, **extra},
        )

    def fill(self, order_id: str, symbol: str, side: str, qty: float, price: float, pnl: float | None = None, **extra: Any) -> None:
        self._write("fill", {"order_id": order_id, "symbol": symbol, "side": side, "qty": qty, "price": price, "pnl": pnl, **extra})

    def order_closed(self, order_id: str, symbol: str, level: float, reason: str = "level_removed", **extra: Any) -> None:
        self._write("order_closed", {"order_id": order_id, "symbol": symbol, "level": level, "reason": reason, **extra})

    def order_rejected(self, symbol: str, side: str, level: float, price: float, reason: str, **extra: Any) -> None:
        self._write(
            "order_rejected",
            {"symbol": symbol, "side": side, "level": level, "price": price, "reason": reason, **extra},
        )

    def drawdown_breach(self, symbol: str, drawdown: float, limit: float, equity: float, **extra: Any) -> None:
        self._write("drawdown_breach", {"symbol": symbol, "drawdown": drawdown, "limit": limit, "equity": equity, **extra})

    def snapshot(self, symbol: str, price: float, position: Any, realized_pnl: float, equity: float, active_orders: list, **extra: Any) -> None:
        self._write(
            "snapshot",
            {
                "symbol": symbol,
                "price": price,
                "position": position,
                "realized_pnl": realized_pnl,
                "equity": equity,
                "active_orders": active_orders,
                **extra,
            },
        )
