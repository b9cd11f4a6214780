from stockpile.exceptions.base import StockpileError


class SettingsError(StockpileError, ValueError):
    """Raised when layered settings fail validation."""
