"""
Configuration loader.

Reads config.yaml (or a flat config.json), validates it against
JSON Schema, returns a frozen dataclass tree.
"""

from config.loader import (
    AlertingConfig,
    AppConfig,
    GridConfig,
    JournalConfig,
    PriceSourceConfig,
    RiskConfig,
    load_config,
)

__all__ = [
    "AlertingConfig",
    "AppConfig",
    "GridConfig",
    "JournalConfig",
    "PriceSourceConfig",
    "RiskConfig",
    "load_config",
]
