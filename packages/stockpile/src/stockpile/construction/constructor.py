# stockpile/construction/constructor.py

import importlib
import inspect
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from stockpile.identity import (
    TYPE_ID_INSTANCE_MARK,
    IdentityValidationError,
    build_name,
    is_private_name,
    split_type_id,
    type_id_for,
)

from .exceptions import ConstructionError, MethodNotFoundError, TypeResolutionError, VisibilityError
from .reflection import ReflectionCache, TypeDescriptor

logger = logging.getLogger(__name__)

_MISSING = object()


class DefaultConstructor:
    """
    Import-based constructor capability.

    - Class objects are registered in the reflection cache as they are resolved,
      so classes that are not importable by name (defined inside functions,
      created dynamically) still construct.
    - Class names are normalized with :func:`~stockpile.identity.build_name`
      and imported lazily on first construction.

    With ``strict_type_ids=True`` a class name is imported while resolving its
    type id, so a typo fails before any key is derived.
    """

    def __init__(self, *, strict_type_ids: bool = False, cache: ReflectionCache | None = None) -> None:
        self.strict_type_ids = strict_type_ids
        self.cache = cache if cache is not None else ReflectionCache()

    # --- type ids ---

    def resolve_type_id(self, target: type | str) -> str:
        if isinstance(target, type):
            type_id = type_id_for(target)
            self.cache.register(type_id, target)
            return type_id

        if isinstance(target, str):
            try:
                type_id = build_name(target)
            except IdentityValidationError as exc:
                raise TypeResolutionError(str(exc)) from exc
            if self.strict_type_ids:
                self.describe(type_id)
            return type_id

        raise TypeError(f"Expected a class or a class name, got {type(target).__name__}")

    def describe(self, type_id: str) -> TypeDescriptor:
        """Return the cached descriptor for ``type_id``, importing the class if needed."""
        return self.cache.get_or_load(type_id, self._load)

    @staticmethod
    def _load(type_id: str) -> type[Any]:
        try:
            module_name, qualname = split_type_id(type_id)
        except IdentityValidationError as exc:
            raise TypeResolutionError(str(exc)) from exc

        if TYPE_ID_INSTANCE_MARK in qualname:
            raise TypeResolutionError(f"{type_id} names a class that is not importable; pass the class object")

        try:
            obj: Any = importlib.import_module(module_name)
        except ImportError as exc:
            raise TypeResolutionError(f"Cannot import module {module_name!r} for {type_id}: {exc}") from exc

        for part in qualname.split("."):
            try:
                obj = getattr(obj, part)
            except AttributeError as exc:
                raise TypeResolutionError(f"Type {type_id} not found: {exc}") from exc

        if not isinstance(obj, type):
            raise TypeResolutionError(f"{type_id} resolves to {type(obj).__name__}, not a class")

        logger.debug("Resolved type %s -> %r", type_id, obj)
        return obj

    # --- construction ---

    def construct(self, type_id: str, args: Sequence[Any] = (), kwargs: Mapping[str, Any] | None = None) -> Any:
        """
        Instantiate ``type_id`` with ``args``/``kwargs``.

        :raises ConstructionError: when the class is abstract or private, the
            arguments don't match its signature, or its constructor raises
            ``TypeError``.
        """
        descriptor = self.describe(type_id)
        kwargs = dict(kwargs or {})

        if descriptor.abstract:
            raise ConstructionError(f"{type_id} is abstract and cannot be constructed")
        if not descriptor.public:
            raise ConstructionError(f"{type_id}: constructor NOT for public!")

        if descriptor.signature is not None:
            try:
                descriptor.signature.bind(*args, **kwargs)
            except TypeError as exc:
                raise ConstructionError(f"Bad arguments for {type_id}: {exc}") from exc

        try:
            return descriptor.cls(*args, **kwargs)
        except TypeError as exc:
            raise ConstructionError(f"Failed to construct {type_id}: {exc}") from exc

    # --- visibility ---

    def check_public_method(self, type_id: str, method_name: str) -> None:
        """
        Ensure ``method_name`` exists on ``type_id`` and may be called from outside.

        :raises MethodNotFoundError: if the attribute does not exist.
        :raises VisibilityError: if it is underscore-private or not callable.
        """
        cls = self.describe(type_id).cls
        attr = inspect.getattr_static(cls, method_name, _MISSING)
        if attr is _MISSING:
            raise MethodNotFoundError(f"{type_id}::{method_name} does not exist")
        if is_private_name(method_name):
            raise VisibilityError(f"{type_id}::{method_name}: NOT for public!")
        if not callable(getattr(cls, method_name)):
            raise VisibilityError(f"{type_id}::{method_name} is not callable")


__all__ = ["DefaultConstructor"]
