# stockpile/identity/utils.py
"""
Type identity helpers (framework-agnostic).

A *type id* is the canonical string used as the type component of every
registry key. It has the form ``"package.module:QualName"``:

- The module part is the dotted import path.
- The attribute part is the class ``__qualname__`` (nested classes keep their
  dots, e.g. ``"app.models:Outer.Inner"``).
- Classes that cannot be looked up by that name (local classes, classes from
  class factories, classes replaced by a reload) carry an ``"#<hex id>"``
  suffix. Such ids only resolve through the reflection cache.

Callers may spell class names more loosely; :func:`build_name` normalizes
slash-, backslash- and dot-separated paths into the canonical form.
"""

import logging
import re
import sys

from .exceptions import IdentityValidationError

__all__ = [
    "TYPE_ID_INSTANCE_MARK",
    "TYPE_ID_SEPARATOR",
    "build_name",
    "type_id_for",
    "resolves_by_name",
    "split_type_id",
    "is_private_name",
]

logger = logging.getLogger(__name__)

TYPE_ID_SEPARATOR = ":"
TYPE_ID_INSTANCE_MARK = "#"

_PATH_SEP_RE = re.compile(r"[\\/]+")
_SEGMENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def build_name(name: str) -> str:
    """Normalize a class path into a ``module:QualName`` type id.

    Accepted spellings::

        "app.models:Widget"      -> "app.models:Widget"
        "app.models.Widget"      -> "app.models:Widget"
        "app/models/Widget"      -> "app.models:Widget"
        "\\app\\models\\Widget"  -> "app.models:Widget"

    Without an explicit ``:`` the last segment is taken as the class name.

    Raises:
        IdentityValidationError: if the name is empty or a segment is not a
            valid Python identifier.
    """
    if not isinstance(name, str):
        raise IdentityValidationError(f"Type name must be a string, got {type(name).__name__}")

    raw = name.strip()
    if not raw:
        raise IdentityValidationError("Type name must be a non-empty string")

    module_part, sep, attr_part = raw.partition(TYPE_ID_SEPARATOR)
    if sep:
        module = _PATH_SEP_RE.sub(".", module_part).strip(".")
        attr = attr_part.strip(".")
    else:
        dotted = _PATH_SEP_RE.sub(".", raw).strip(".")
        module, _, attr = dotted.rpartition(".")

    if not module or not attr:
        raise IdentityValidationError(
            f"Invalid type name {name!r}: expected 'module:Class' or a dotted path with a module"
        )

    for segment in (*module.split("."), *attr.split(".")):
        if not _SEGMENT_RE.match(segment):
            raise IdentityValidationError(f"Invalid type name {name!r}: bad segment {segment!r}")

    return f"{module}{TYPE_ID_SEPARATOR}{attr}"


def resolves_by_name(cls: type) -> bool:
    """True when ``module:qualname`` looks up to this very class object.

    Classes defined inside functions, built by class factories or replaced by a
    module reload share a qualname with other class objects and cannot be
    found again by name. Only modules already imported are consulted.
    """
    if "<locals>" in cls.__qualname__:
        return False
    obj = sys.modules.get(cls.__module__)
    if obj is None:
        return False
    for part in cls.__qualname__.split("."):
        obj = getattr(obj, part, None)
        if obj is None:
            return False
    return obj is cls


def type_id_for(cls: type) -> str:
    """Return the canonical type id of a class object.

    Classes that do not resolve by name get an ``#<id>`` suffix, so two
    distinct classes never share a type id.
    """
    type_id = f"{cls.__module__}{TYPE_ID_SEPARATOR}{cls.__qualname__}"
    if resolves_by_name(cls):
        return type_id
    return f"{type_id}{TYPE_ID_INSTANCE_MARK}{id(cls):x}"


def split_type_id(type_id: str) -> tuple[str, str]:
    """Split a canonical type id into ``(module, qualname)``."""
    module, sep, qualname = type_id.partition(TYPE_ID_SEPARATOR)
    if not sep or not module or not qualname:
        raise IdentityValidationError(f"Not a canonical type id: {type_id!r}")
    return module, qualname


def is_private_name(name: str) -> bool:
    """True for ``_private`` names; dunder names (``__init__``) are public."""
    if name.startswith("__") and name.endswith("__"):
        return False
    return name.startswith("_")
