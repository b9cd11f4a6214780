"""Cached constructor metadata.

Looking a class up by name and computing its constructor signature is the
expensive part of a cache miss, so descriptors are memoized per type id.
The cache only speeds up construction; registry correctness never depends on it.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable

from stockpile.identity import is_private_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    """Immutable view of a constructible type."""

    type_id: str
    cls: type[Any]
    signature: inspect.Signature | None
    abstract: bool

    @classmethod
    def for_class(cls, type_id: str, target: type[Any]) -> "TypeDescriptor":
        try:
            signature = inspect.signature(target)
        except (TypeError, ValueError):
            # some builtins and C types expose no signature
            signature = None
        return cls(
            type_id=type_id,
            cls=target,
            signature=signature,
            abstract=inspect.isabstract(target),
        )

    @property
    def public(self) -> bool:
        return not is_private_name(self.cls.__name__)


class ReflectionCache:
    """Thread-safe type id -> :class:`TypeDescriptor` map."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._descriptors: dict[str, TypeDescriptor] = {}

    def register(self, type_id: str, target: type[Any]) -> TypeDescriptor:
        """Record ``target`` under ``type_id``, reusing the cached descriptor when it matches."""
        with self._lock:
            existing = self._descriptors.get(type_id)
            if existing is not None and existing.cls is target:
                return existing
            if existing is not None:
                logger.warning("Type id %s rebound from %r to %r", type_id, existing.cls, target)
            descriptor = TypeDescriptor.for_class(type_id, target)
            self._descriptors[type_id] = descriptor
            return descriptor

    def get(self, type_id: str) -> TypeDescriptor | None:
        with self._lock:
            return self._descriptors.get(type_id)

    def get_or_load(self, type_id: str, loader: Callable[[str], type[Any]]) -> TypeDescriptor:
        """Return the cached descriptor, resolving the class with ``loader`` on a miss."""
        descriptor = self.get(type_id)
        if descriptor is not None:
            return descriptor
        target = loader(type_id)
        return self.register(type_id, target)

    def __contains__(self, type_id: object) -> bool:
        with self._lock:
            return type_id in self._descriptors

    def __len__(self) -> int:
        with self._lock:
            return len(self._descriptors)

    def clear(self) -> None:
        with self._lock:
            self._descriptors.clear()


__all__ = ["ReflectionCache", "TypeDescriptor"]
