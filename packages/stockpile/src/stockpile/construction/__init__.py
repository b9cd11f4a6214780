"""Type resolution and instance construction."""

from .constructor import DefaultConstructor
from .exceptions import ConstructionError, MethodNotFoundError, TypeResolutionError, VisibilityError
from .protocols import ConstructorCapability
from .reflection import ReflectionCache, TypeDescriptor

__all__ = [
    "ConstructionError",
    "ConstructorCapability",
    "DefaultConstructor",
    "MethodNotFoundError",
    "ReflectionCache",
    "TypeDescriptor",
    "TypeResolutionError",
    "VisibilityError",
]
