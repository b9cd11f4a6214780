# stockpile/construction/exceptions.py
from stockpile.exceptions.base import StockpileError


class ConstructionError(StockpileError): ...


class TypeResolutionError(ConstructionError, ImportError):
    """Raised when a type name cannot be resolved to an importable class."""


class VisibilityError(StockpileError):
    """Raised when a reflected method exists but is not publicly invocable."""


class MethodNotFoundError(VisibilityError, AttributeError):
    """Raised when a reflected method does not exist on the type."""
