# stockpile/registry/exceptions.py
"""Registry exceptions"""
from stockpile.exceptions.base import StockpileError


# ----------------------------------------------------------------------------
# Registry errors
# ----------------------------------------------------------------------------
class RegistryError(StockpileError): ...


class NotFoundError(RegistryError, LookupError):
    """Raised when no instance is stored under the requested key."""


class KeySerializationError(RegistryError, TypeError):
    """Raised when construction arguments have no canonical JSON form."""
