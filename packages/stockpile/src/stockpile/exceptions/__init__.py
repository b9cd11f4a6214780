from .base import StockpileError

__all__ = ["StockpileError"]
