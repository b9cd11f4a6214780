"""stockpile: a process-wide object registry with memoized instantiation."""

from ._state import (
    current_factory,
    get_current_factory,
    get_default_factory,
    push_current_factory,
    set_current_factory,
)
from .configure import configure
from .construction import (
    ConstructionError,
    ConstructorCapability,
    DefaultConstructor,
    MethodNotFoundError,
    TypeResolutionError,
    VisibilityError,
)
from .exceptions import StockpileError
from .factory import Factory
from .mixins import StockMixin
from .registry import InstanceStore, KeySerializationError, NotFoundError

__all__ = [
    "ConstructionError",
    "ConstructorCapability",
    "DefaultConstructor",
    "Factory",
    "InstanceStore",
    "KeySerializationError",
    "MethodNotFoundError",
    "NotFoundError",
    "StockMixin",
    "StockpileError",
    "TypeResolutionError",
    "VisibilityError",
    "configure",
    "current_factory",
    "get_current_factory",
    "get_default_factory",
    "push_current_factory",
    "set_current_factory",
]
