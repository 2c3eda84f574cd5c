"""
Grid events as JSON lines on stderr, one object per line.

Each record carries ``ts``, ``event`` and ``symbol`` plus event fields.
Order-level alerts (placed, rejected, drawdown breach, error) can also be
POSTed to a webhook; a webhook that is down only costs a warning.
"""

from __future__ import annotations

import http.client
import json
import logging
import sys
import urllib.error
import urllib.request
from datetime import datetime, timezone
from typing import Any, TextIO

logger = logging.getLogger("grid.events")

ALERT_EVENTS = frozenset({"order_placed", "order_rejected", "drawdown_breach", "error"})
WEBHOOK_TIMEOUT_SECONDS = 5


class StructuredEventLogger:
    """Grid event sink for log aggregators, with optional webhook alerts."""

    def __init__(
        self,
        symbol: str,
        *,
        enabled: bool = True,
        webhook_url: str = "",
        stream: TextIO | None = None,
    ) -> None:
        self.symbol = symbol
        self.enabled = enabled
        self.webhook_url = webhook_url.strip()
        self._out = stream if stream is not None else sys.stderr

    def _emit(self, event_type: str, **fields: Any) -> dict:
        record = {"ts": datetime.now(timezone.utc).isoformat(), "event": event_type, "symbol": self.symbol}
        record.update(fields)
        line = json.dumps(record)
        if self.enabled:
            print(line, file=self._out, flush=True)
        if self.webhook_url and event_type in ALERT_EVENTS:
            self._alert(line)
        return record

    def _alert(self, body: str) -> None:
        req = urllib.request.Request(
            self.webhook_url,
            data=body.encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=WEBHOOK_TIMEOUT_SECONDS):
                pass
        except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as exc:
            logger.warning("Webhook POST failed: %s", exc)

    def tick_complete(
        self,
        price: float,
        base_level: float,
        active_orders: int,
        position_qty: float,
        realized_pnl: float,
        equity: float,
    ) -> dict:
        return self._emit(
            "tick_complete",
            price=price,
            base_level=base_level,
            active_orders=active_orders,
            position_qty=position_qty,
            realized_pnl=realized_pnl,
            equity=equity,
        )

    def order_placed(
        self,
        order_id: str,
        side: str,
        level: float,
        price: float,
        qty: float,
    ) -> dict:
        return self._emit(
            "order_placed",
            order_id=order_id,
            side=side,
            level=level,
            price=price,
            qty=qty,
        )

    def order_rejected(self, reason: str, side: str = "", level: float | None = None) -> dict:
        return self._emit("order_rejected", reason=reason, side=side, level=level)

    def order_closed(self, order_id: str, level: float) -> dict:
        return self._emit("order_closed", order_id=order_id, level=level)

    def drawdown_breach(self, drawdown: float, limit: float, equity: float) -> dict:
        return self._emit(
            "drawdown_breach",
            drawdown=round(drawdown, 8),
            limit=limit,
            equity=equity,
        )

    def error(self, message: str, detail: str = "") -> dict:
        return self._emit("error", message=message, detail=detail)

    def shutdown(self, ticks: int) -> dict:
        return self._emit("shutdown", ticks=ticks)
