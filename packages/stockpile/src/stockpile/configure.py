# stockpile/configure.py
"""Allow-listed field overwrite for existing instances."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _slot_names(cls: type) -> set[str]:
    names: set[str] = set()
    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.update(s for s in slots if s not in ("__dict__", "__weakref__"))
    return names


def declared_fields(instance: Any) -> set[str]:
    """
    Return the names of the mutable fields ``instance`` declares.

    - pydantic models: ``model_fields`` (none when the model is frozen)
    - dataclasses: ``fields()`` (none when the dataclass is frozen)
    - plain objects: instance ``__dict__`` keys plus any set ``__slots__``
    """
    if isinstance(instance, BaseModel):
        if instance.model_config.get("frozen"):
            return set()
        return set(type(instance).model_fields)

    if dataclasses.is_dataclass(instance) and not isinstance(instance, type):
        params = getattr(type(instance), "__dataclass_params__", None)
        if params is not None and params.frozen:
            return set()
        return {f.name for f in dataclasses.fields(instance)}

    names = set(getattr(instance, "__dict__", {}))
    names.update(n for n in _slot_names(type(instance)) if hasattr(instance, n))
    return names


def configure(instance: T, settings: Mapping[str, Any]) -> T:
    """
    Overwrite fields of ``instance`` from ``settings``.

    Only keys naming a field the instance already declares are applied;
    anything else is dropped, so a settings mapping can never add attributes.
    Returns ``instance`` for chaining.
    """
    allowed = declared_fields(instance)
    dropped: list[str] = []

    for key, value in settings.items():
        if key in allowed:
            setattr(instance, key, value)
        else:
            dropped.append(key)

    if dropped:
        logger.debug("configure(%s) ignored unknown fields: %s", type(instance).__name__, ", ".join(map(str, dropped)))
    return instance


__all__ = ["configure", "declared_fields"]
