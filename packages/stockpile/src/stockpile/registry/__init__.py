"""Keyed instance storage."""

from .exceptions import KeySerializationError, NotFoundError, RegistryError
from .keys import canonical_serialize, derive_alias_key, derive_construction_key
from .store import InstanceStore

__all__ = [
    "InstanceStore",
    "KeySerializationError",
    "NotFoundError",
    "RegistryError",
    "canonical_serialize",
    "derive_alias_key",
    "derive_construction_key",
]
