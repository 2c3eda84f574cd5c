"""Error taxonomy for the grid engine.

Risk rejections and drawdown breaches are not exceptions: see
RiskDecision and DrawdownBreach in grid_core.contracts.
"""


class GridEngineError(Exception):
    """Base class for every error raised by the grid engine and its collaborators."""


class InvalidConfig(GridEngineError, ValueError):
    """Bad grid spacing/count, bad risk limits, or a config file that fails validation."""


class InvalidOrder(GridEngineError, ValueError):
    """Zero/negative quantity or price. Rejected locally; no state is mutated."""


class PriceFetchError(GridEngineError):
    """Price source failed (transport, HTTP status, or parse error)."""
