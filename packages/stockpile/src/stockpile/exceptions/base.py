# stockpile/exceptions/base.py


class StockpileError(Exception):
    """Base class for every error raised by stockpile."""
