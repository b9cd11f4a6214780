# stockpile/factory.py
"""Memoizing object factory.

A :class:`Factory` hands out instances keyed by *(operation, type, arguments)*
or *(type, alias)*:

=============  ==========================================  ====================
operation      key                                         returns
=============  ==========================================  ====================
``obtain``     ``("obtain", type, args)``                  the shared instance
``new``        ``("new", type, args)``                     a copy of the shared
                                                           instance
``use``        ``(type, alias)``                           the published
                                                           instance, never
                                                           constructs
``as_``        ``(type, alias)``                           publishes an instance
``free``       every key bound to the instance             unregisters it
=============  ==========================================  ====================

``new`` and ``obtain`` keep separate caches: mutating an ``obtain`` result is
never visible through later ``new`` copies.
"""
from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any, TypeVar, overload

from asgiref.sync import sync_to_async

from .conf import Settings, StockpileSettings
from .construction import ConstructorCapability, DefaultConstructor
from .registry import InstanceStore, NotFoundError, derive_alias_key, derive_construction_key

logger = logging.getLogger(__name__)

T = TypeVar("T")

NEW = "new"
OBTAIN = "obtain"


class Factory:
    """Process-wide object registry with memoized instantiation.

    :param store: Shared instance store. Pass one store to several factories
        to share their instances; defaults to a fresh, private store.
    :param constructor: Constructor capability used on cache misses; defaults to
        :class:`~stockpile.construction.DefaultConstructor`.
    :param settings: Mapping of settings (see :mod:`stockpile.conf.defaults`).
    """

    def __init__(
            self,
            *,
            store: InstanceStore[Any] | None = None,
            constructor: ConstructorCapability | None = None,
            settings: Mapping[str, Any] | None = None,
    ) -> None:
        if isinstance(settings, Settings):
            conf = settings
        else:
            conf = Settings(settings or {})
        self.conf: StockpileSettings = conf.validated()

        self.store: InstanceStore[Any] = store if store is not None else InstanceStore()
        self.constructor: ConstructorCapability = (
            constructor
            if constructor is not None
            else DefaultConstructor(strict_type_ids=self.conf.STRICT_TYPE_IDS)
        )

    # --- keys ---

    def type_id(self, target: type | str) -> str:
        return self.constructor.resolve_type_id(target)

    def alias_key(self, target: type | str, alias: str) -> str:
        return derive_alias_key(self.type_id(target), alias, digest=self.conf.KEY_DIGEST)

    # --- core ---

    def _stock(self, kind: str, target: type | str, args: tuple, kwargs: Mapping[str, Any]) -> Any:
        type_id = self.type_id(target)
        key = derive_construction_key(kind, type_id, args, kwargs, digest=self.conf.KEY_DIGEST)
        return self.store.insert_if_absent(key, lambda: self.constructor.construct(type_id, args, kwargs))

    def _clone(self, instance: T) -> T:
        if self.conf.CLONE_MODE == "shallow":
            return copy.copy(instance)
        return copy.deepcopy(instance)

    # --- public API ---

    @overload
    def use(self, target: type[T], alias: str) -> T: ...
    @overload
    def use(self, target: str, alias: str) -> Any: ...

    def use(self, target, alias):
        """
        Return the instance published under ``alias`` for ``target``.

        :raises NotFoundError: if nothing was published under that alias.
        """
        key = self.alias_key(target, alias)
        try:
            return self.store.get(key)
        except NotFoundError as err:
            raise NotFoundError(f'Object "{self.type_id(target)}:{alias}" NOT found!') from err

    @overload
    def new(self, target: type[T], /, *args: Any, **kwargs: Any) -> T: ...
    @overload
    def new(self, target: str, /, *args: Any, **kwargs: Any) -> Any: ...

    def new(self, target, /, *args, **kwargs):
        """Return an independent copy of the canonical instance for these arguments."""
        return self._clone(self._stock(NEW, target, args, kwargs))

    @overload
    def obtain(self, target: type[T], /, *args: Any, **kwargs: Any) -> T: ...
    @overload
    def obtain(self, target: str, /, *args: Any, **kwargs: Any) -> Any: ...

    def obtain(self, target, /, *args, **kwargs):
        """Return the shared instance for these arguments, building it on first use."""
        return self._stock(OBTAIN, target, args, kwargs)

    def as_(self, instance: T, alias: str, target: type | str | None = None) -> T:
        """
        Publish ``instance`` under ``alias``.

        The alias is scoped to ``target`` (default: the instance's own class).
        An earlier binding of the same alias is replaced; other keys that point
        at either instance are untouched.
        """
        key = self.alias_key(target if target is not None else type(instance), alias)
        logger.debug("Publishing %r as %r", type(instance), alias)
        return self.store.store_overwrite(key, instance)

    def free(self, instance: Any) -> int:
        """Unregister ``instance`` from every key it is stored under."""
        return self.store.remove_all_keys_for(instance)

    # --- async wrappers ---

    async def ause(self, target: type | str, alias: str) -> Any:
        return await sync_to_async(self.use)(target, alias)

    async def anew(self, target: type | str, /, *args: Any, **kwargs: Any) -> Any:
        return await sync_to_async(self.new)(target, *args, **kwargs)

    async def aobtain(self, target: type | str, /, *args: Any, **kwargs: Any) -> Any:
        return await sync_to_async(self.obtain)(target, *args, **kwargs)

    async def aas_(self, instance: T, alias: str, target: type | str | None = None) -> T:
        return await sync_to_async(self.as_)(instance, alias, target)

    async def afree(self, instance: Any) -> int:
        return await sync_to_async(self.free)(instance)

    def __repr__(self) -> str:
        return f"Factory(store={self.store!r}, digest={self.conf.KEY_DIGEST!r})"


__all__ = ["Factory", "NEW", "OBTAIN"]
