"""Tests for config loader: YAML/JSON parsing, schema validation, defaults, env override."""

import json
from pathlib import Path

import pytest

from config import load_config
from grid_core.errors import InvalidConfig

BASE = {
    "trading_pair": "ETHUSDT",
    "grid_spacing": 10,
    "grid_count": 5,
    "min_order_quantity": 0.01,
    "initial_investment": 1000,
    "max_position_size": 0.1,
    "max_drawdown_percent": 0.1,
    "max_loss_per_trade_percent": 0.02,
}


def _write_json(tmp_path: Path, data: dict, name: str = "config.json") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(data))
    return path


def test_load_config_yaml(config_file: Path) -> None:
    cfg = load_config(config_file)
    assert cfg.symbol == "ETHUSDT"
    assert cfg.grid.spacing == 10.0
    assert cfg.grid.count == 1
    assert cfg.grid.min_order_quantity == 0.01
    assert cfg.risk.initial_investment == 1000.0
    assert cfg.risk.max_loss_per_trade_percent == 0.02
    assert cfg.update_interval_seconds == 0
    assert cfg.price_source.provider == "static"
    assert cfg.price_source.static_price == 100.5
    assert cfg.alerting.structured_logs is False


def test_load_flat_json_config(tmp_path: Path) -> None:
    """Flat config.json with extra unused keys (chart paths etc.) loads."""
    raw = {
        **BASE,
        "update_interval_seconds": 5,
        "infinite_grid": True,
        "log_file_path": str(tmp_path / "trading.log"),
        "data_file_path": "grid_data.txt",
        "chart_output_path": "grid_chart.png",
    }
    cfg = load_config(_write_json(tmp_path, raw))
    assert cfg.grid.infinite is True
    assert cfg.update_interval_seconds == 5
    assert cfg.journal.path == str(tmp_path / "trading.log")


def test_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BINANCE_API_URL", raising=False)
    cfg = load_config(_write_json(tmp_path, BASE))
    assert cfg.update_interval_seconds == 60
    assert cfg.grid.infinite is False
    assert cfg.price_source.provider == "binance"
    assert cfg.price_source.base_url == "https://api.binance.com"
    assert cfg.price_source.timeout_seconds == 10.0
    assert cfg.journal.path == "data/journal.jsonl"
    assert cfg.journal.echo_stdout is False
    assert cfg.alerting.structured_logs is True
    assert cfg.alerting.webhook_url == ""


def test_env_overrides_price_api_url(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BINANCE_API_URL", "https://api.binance.us")
    cfg = load_config(_write_json(tmp_path, BASE))
    assert cfg.price_source.base_url == "https://api.binance.us"


@pytest.mark.parametrize(
    "override",
    [
        {"grid_spacing": 0},
        {"grid_spacing": -5},
        {"grid_count": -1},
        {"grid_count": 1.5},
        {"min_order_quantity": 0},
        {"max_drawdown_percent": 1.2},
        {"trading_pair": ""},
        {"price_source": {"provider": "kraken"}},
    ],
)
def test_invalid_values(tmp_path: Path, override: dict) -> None:
    with pytest.raises(InvalidConfig):
        load_config(_write_json(tmp_path, {**BASE, **override}))


@pytest.mark.parametrize("missing", ["trading_pair", "grid_spacing", "max_loss_per_trade_percent"])
def test_missing_required_key(tmp_path: Path, missing: str) -> None:
    raw = {k: v for k, v in BASE.items() if k != missing}
    with pytest.raises(InvalidConfig, match=missing):
        load_config(_write_json(tmp_path, raw))


def test_static_provider_requires_price(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfig, match="static_price"):
        load_config(_write_json(tmp_path, {**BASE, "price_source": {"provider": "static"}}))


def test_not_a_mapping(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(InvalidConfig):
        load_config(path)


def test_load_config_missing_file() -> None:
    with pytest.raises(FileNotFoundError):
        load_config("/nonexistent/path.yaml")
