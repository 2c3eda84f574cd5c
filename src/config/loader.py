"""
Config loader: YAML file -> jsonschema validation -> frozen dataclass tree.

JSON is a subset of YAML, so a plain ``config.json`` loads as well.
The price API base URL can be overridden with the BINANCE_API_URL
environment variable (e.g. to point at a regional mirror).

Schema: docs/config/grid_config.schema.json
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml

from grid_core.errors import InvalidConfig

logger = logging.getLogger("grid.config")


def _find_project_root() -> Path:
    """Walk up from this file looking for pyproject.toml; fall back to CWD."""
    candidate = Path(__file__).resolve().parent
    for _ in range(10):
        if (candidate / "pyproject.toml").exists():
            return candidate
        parent = candidate.parent
        if parent == candidate:
            break
        candidate = parent
    return Path.cwd()


_PROJECT_ROOT = _find_project_root()

DEFAULT_SCHEMA_PATH = _PROJECT_ROOT / "docs" / "config" / "grid_config.schema.json"
DEFAULT_BINANCE_URL = "https://api.binance.com"


@dataclass(frozen=True)
class GridConfig:
    spacing: float
    count: int
    min_order_quantity: float
    infinite: bool = False  # descriptive only


@dataclass(frozen=True)
class RiskConfig:
    initial_investment: float
    max_position_size: float
    max_drawdown_percent: float
    max_loss_per_trade_percent: float


@dataclass(frozen=True)
class PriceSourceConfig:
    provider: str = "binance"  # "binance" | "static"
    base_url: str = DEFAULT_BINANCE_URL
    timeout_seconds: float = 10.0
    static_price: float | None = None


@dataclass(frozen=True)
class JournalConfig:
    path: str = "data/journal.jsonl"
    echo_stdout: bool = False


@dataclass(frozen=True)
class AlertingConfig:
    structured_logs: bool = True
    webhook_url: str = ""


@dataclass(frozen=True)
class AppConfig:
    symbol: str
    grid: GridConfig
    risk: RiskConfig
    update_interval_seconds: int = 60
    price_source: PriceSourceConfig = PriceSourceConfig()
    journal: JournalConfig = JournalConfig()
    alerting: AlertingConfig = AlertingConfig()


def _validate_schema(data: dict[str, Any], schema_path: Path) -> None:
    if not schema_path.exists():
        raise InvalidConfig(f"Schema file not found: {schema_path}")
    with open(schema_path) as f:
        schema = json.load(f)
    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as exc:
        where = ".".join(str(p) for p in exc.absolute_path) or "<root>"
        raise InvalidConfig(f"Config validation failed at {where}: {exc.message}") from exc


def _build_config(raw: dict[str, Any]) -> AppConfig:
    ps_raw = raw.get("price_source", {})
    static_price = ps_raw.get("static_price")
    ps_cfg = PriceSourceConfig(
        provider=ps_raw.get("provider", "binance"),
        base_url=os.environ.get("BINANCE_API_URL") or ps_raw.get("base_url", DEFAULT_BINANCE_URL),
        timeout_seconds=float(ps_raw.get("timeout_seconds", 10.0)),
        static_price=float(static_price) if static_price is not None else None,
    )
    if ps_cfg.provider == "static" and ps_cfg.static_price is None:
        raise InvalidConfig("price_source.static_price is required when provider is 'static'")

    j_raw = raw.get("journal", {})
    j_cfg = JournalConfig(
        path=j_raw.get("path", raw.get("log_file_path", "data/journal.jsonl")),
        echo_stdout=bool(j_raw.get("echo_stdout", False)),
    )

    a_raw = raw.get("alerting", {})
    a_cfg = AlertingConfig(
        structured_logs=bool(a_raw.get("structured_logs", True)),
        webhook_url=str(a_raw.get("webhook_url", "")),
    )

    return AppConfig(
        symbol=raw["trading_pair"],
        grid=GridConfig(
            spacing=float(raw["grid_spacing"]),
            count=int(raw["grid_count"]),
            min_order_quantity=float(raw["min_order_quantity"]),
            infinite=bool(raw.get("infinite_grid", False)),
        ),
        risk=RiskConfig(
            initial_investment=float(raw["initial_investment"]),
            max_position_size=float(raw["max_position_size"]),
            max_drawdown_percent=float(raw["max_drawdown_percent"]),
            max_loss_per_trade_percent=float(raw["max_loss_per_trade_percent"]),
        ),
        update_interval_seconds=int(raw.get("update_interval_seconds", 60)),
        price_source=ps_cfg,
        journal=j_cfg,
        alerting=a_cfg,
    )


def load_config(
    path: str | Path = "config.yaml",
    schema_path: str | Path | None = None,
) -> AppConfig:
    """
    Load and validate configuration.

    Raises FileNotFoundError if *path* does not exist, InvalidConfig if it
    is not a mapping or fails schema validation.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise InvalidConfig(f"Config file is not valid YAML/JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise InvalidConfig(f"Config file must be a mapping, got {type(raw).__name__}")

    _validate_schema(raw, Path(schema_path) if schema_path else DEFAULT_SCHEMA_PATH)
    cfg = _build_config(raw)
    logger.debug("Loaded config from %s (%s)", config_path, cfg.symbol)
    return cfg
