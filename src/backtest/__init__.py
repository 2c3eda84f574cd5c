"""
Replay engine: recorded prices -> grid engine -> orders, PnL, equity.
"""

from backtest.runner import ReplayResult, run_replay

__all__ = ["ReplayResult", "run_replay"]
