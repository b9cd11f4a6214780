# stockpile/registry/keys.py
"""
Registry key derivation.

Keys are hex digests of a canonical string:

- construction keys: ``"<kind>:<type_id>:<canonical args>"``
- alias keys:        ``"<type_id>:<alias>"``

Positional arguments serialize as a compact JSON array. Keyword arguments are
appended as ``":"`` plus a sorted JSON object only when present, so a
positional-only call always produces the same canonical string as a plain
argument list. A lone JSON array never continues past its closing bracket, so
the two shapes cannot collide.

JSON-native values (``None``, bools, numbers, strings, lists/tuples and
str-keyed dicts) are written as-is. Everything else is type-tagged::

    {"__type__": "<type id>", "value": <canonical value>}

so ``Color.RED`` and ``"red"``, ``{1: "a"}`` and ``{"1": "a"}``, or two model
classes with the same fields never render alike.
"""

from __future__ import annotations

import dataclasses
import enum
import hashlib
import json
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel
from pydantic_core import PydanticSerializationError, to_jsonable_python

from stockpile.identity import type_id_for

from .exceptions import KeySerializationError

__all__ = [
    "DEFAULT_DIGEST",
    "TYPE_TAG",
    "canonical_serialize",
    "derive_alias_key",
    "derive_construction_key",
]

DEFAULT_DIGEST = "sha256"
TYPE_TAG = "__type__"

_NATIVE_SCALARS = (str, int, float, bool, type(None))


def _tagged(value: Any, payload: Any) -> dict[str, Any]:
    return {TYPE_TAG: type_id_for(type(value)), "value": payload}


def _dumps(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _canonical(value: Any) -> Any:
    """Convert ``value`` to plain JSON data, tagging anything JSON would blur."""
    # exact types only: subclasses (IntEnum, namedtuple, OrderedDict) are tagged below
    if type(value) in _NATIVE_SCALARS:
        return value

    if type(value) in (list, tuple):
        return [_canonical(item) for item in value]

    if type(value) is dict and all(type(k) is str for k in value) and TYPE_TAG not in value:
        return {k: _canonical(v) for k, v in value.items()}

    if isinstance(value, enum.Enum):
        return _tagged(value, _canonical(value.value))

    if isinstance(value, (list, tuple)):
        return _tagged(value, [_canonical(item) for item in value])

    if isinstance(value, Mapping):
        pairs = [[_canonical(k), _canonical(v)] for k, v in value.items()]
        return _tagged(value, sorted(pairs, key=_dumps))

    if isinstance(value, (set, frozenset)):
        return _tagged(value, sorted((_canonical(item) for item in value), key=_dumps))

    if isinstance(value, str):
        return _tagged(value, str.__str__(value))

    if isinstance(value, (int, float)):
        return _tagged(value, float(value) if isinstance(value, float) else int(value))

    if isinstance(value, BaseModel):
        fields = {name: _canonical(getattr(value, name)) for name in type(value).model_fields}
        return _tagged(value, fields)

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        fields = {f.name: _canonical(getattr(value, f.name)) for f in dataclasses.fields(value)}
        return _tagged(value, fields)

    # datetimes, decimals, UUIDs, paths, ...
    jsonable = to_jsonable_python(value)
    if jsonable is value:
        raise TypeError(f"{type(value).__name__} has no JSON form")
    return _tagged(value, _canonical(jsonable))


def canonical_serialize(args: Sequence[Any], kwargs: Mapping[str, Any] | None = None) -> str:
    """Return a deterministic, type-aware JSON rendering of an argument list.

    Element-wise equal argument lists always render identically, whatever the
    container type (a tuple and a list of the same items are the same call).

    Raises:
        KeySerializationError: if an argument has no JSON form.
    """
    try:
        rendered = _dumps(_canonical(list(args)))
        if kwargs:
            rendered = f"{rendered}:{_dumps(_canonical(dict(kwargs)))}"
    except (TypeError, ValueError, RecursionError, PydanticSerializationError) as exc:
        raise KeySerializationError(f"Arguments cannot be serialized for a registry key: {exc}") from exc
    return rendered


def _digest(text: str, digest: str) -> str:
    return hashlib.new(digest, text.encode("utf-8")).hexdigest()


def derive_construction_key(
        kind: str,
        type_id: str,
        args: Sequence[Any] = (),
        kwargs: Mapping[str, Any] | None = None,
        *,
        digest: str = DEFAULT_DIGEST,
) -> str:
    """Key for a memoized construction of ``type_id`` with the given arguments."""
    return _digest(f"{kind}:{type_id}:{canonical_serialize(args, kwargs)}", digest)


def derive_alias_key(type_id: str, alias: str, *, digest: str = DEFAULT_DIGEST) -> str:
    """Key for an instance published under ``alias`` for ``type_id``."""
    return _digest(f"{type_id}:{alias}", digest)
