"""
Paper execution: grid orders -> immediate, complete fills. No live capital.
"""

from execution.paper_executor import PaperExecutor, place_order

__all__ = ["PaperExecutor", "place_order"]
