"""
Recorded price series for replay.

Accepted formats: one price per line, or CSV with a ``price`` column
(other columns ignored). Blank lines and ``#`` comments are skipped.
"""

from __future__ import annotations

import csv
import math
from pathlib import Path

from grid_core.errors import PriceFetchError


def load_prices(path: str | Path) -> list[float]:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Price file not found: {file_path}")

    with open(file_path, newline="") as f:
        lines = [ln for ln in f if ln.strip() and not ln.lstrip().startswith("#")]
    if not lines:
        return []

    header = [h.strip().lower() for h in next(csv.reader([lines[0]]))]
    if "price" in header:
        col = header.index("price")
        rows = [row for row in csv.reader(lines[1:])]
        raw = [(n + 2, row[col] if col < len(row) else "") for n, row in enumerate(rows)]
    else:
        raw = [(n + 1, ln.strip()) for n, ln in enumerate(lines)]

    prices: list[float] = []
    for line_no, value in raw:
        try:
            price = float(value)
        except ValueError:
            raise PriceFetchError(f"{file_path}:{line_no}: not a price: {value!r}") from None
        if not math.isfinite(price) or price <= 0:
            raise PriceFetchError(f"{file_path}:{line_no}: price must be positive: {value!r}")
        prices.append(price)
    return prices
