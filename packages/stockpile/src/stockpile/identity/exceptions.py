# stockpile/identity/exceptions.py
from stockpile.exceptions.base import StockpileError


class IdentityError(StockpileError): ...


class IdentityValidationError(IdentityError, ValueError):
    """Raised when a type name is malformed (empty, bad separators)."""
