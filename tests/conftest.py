"""Pytest fixtures: grid settings, risk limits, engines and config files."""

from pathlib import Path

import pytest

from config.loader import AppConfig, GridConfig, RiskConfig
from grid_core.engine import GridEngine, GridSettings
from grid_core.risk import RiskManager


@pytest.fixture
def symbol() -> str:
    return "ETHUSDT"


@pytest.fixture
def settings(symbol: str) -> GridSettings:
    """Spacing 10, one level each side, 0.01 per order."""
    return GridSettings(symbol=symbol, spacing=10.0, count=1, order_quantity=0.01)


@pytest.fixture
def risk() -> RiskManager:
    return RiskManager(
        initial_equity=1000.0,
        max_position_size=0.1,
        max_drawdown_percent=0.1,
        max_loss_per_trade_percent=0.02,
    )


@pytest.fixture
def events() -> list[tuple[str, dict]]:
    return []


@pytest.fixture
def engine(settings: GridSettings, risk: RiskManager, events: list) -> GridEngine:
    return GridEngine(settings, risk, on_event=lambda kind, payload: events.append((kind, payload)))


@pytest.fixture
def app_config(symbol: str) -> AppConfig:
    return AppConfig(
        symbol=symbol,
        grid=GridConfig(spacing=10.0, count=1, min_order_quantity=0.01),
        risk=RiskConfig(
            initial_investment=1000.0,
            max_position_size=0.1,
            max_drawdown_percent=0.1,
            max_loss_per_trade_percent=0.02,
        ),
        update_interval_seconds=5,
    )


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Config with a static price source so nothing touches the network."""
    path = tmp_path / "config.yaml"
    path.write_text(
        f"""
trading_pair: ETHUSDT
grid_spacing: 10
grid_count: 1
min_order_quantity: 0.01
initial_investment: 1000
max_position_size: 0.1
max_drawdown_percent: 0.1
max_loss_per_trade_percent: 0.02
update_interval_seconds: 0
infinite_grid: false
price_source:
  provider: static
  static_price: 100.5
journal:
  path: "{tmp_path / 'journal.jsonl'}"
alerting:
  structured_logs: false
"""
    )
    return path
