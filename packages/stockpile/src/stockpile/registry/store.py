# stockpile/registry/store.py
"""Shared key -> instance store."""

import logging
from dataclasses import dataclass, field
from threading import Lock, RLock
from typing import Any, Callable, Generic, TypeVar

from asgiref.sync import sync_to_async

from .exceptions import NotFoundError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class _BuildSlot:
    """Per-key construction lock and the number of callers holding or awaiting it."""

    lock: Lock = field(default_factory=Lock)
    waiters: int = 0


class InstanceStore(Generic[T]):
    """Mapping of opaque registry keys to shared instances.

    The store owns a reference to every instance it holds; one instance may be
    bound under several keys at once (construction key plus aliases).

    Construction through :meth:`insert_if_absent` happens at most once per key.
    Each key gets its own construction lock, so a slow constructor only blocks
    callers waiting for that same key and the store lock is never held while
    user code runs.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._store: dict[str, T] = {}
        self._building: dict[str, _BuildSlot] = {}

    # --- retrieval ---

    def lookup(self, key: str) -> T | None:
        """Return the instance bound to ``key`` or None."""
        with self._lock:
            return self._store.get(key)

    async def alookup(self, key: str) -> T | None:
        return await sync_to_async(self.lookup)(key)

    def get(self, key: str) -> T:
        """
        Return the instance bound to ``key``.

        :raises NotFoundError: if nothing is stored under ``key``.
        """
        with self._lock:
            try:
                return self._store[key]
            except KeyError as err:
                raise NotFoundError(f"No instance stored under key {key!r}") from err

    async def aget(self, key: str) -> T:
        return await sync_to_async(self.get)(key)

    # --- mutation ---

    def insert_if_absent(self, key: str, factory: Callable[[], T]) -> T:
        """
        Return the instance under ``key``, building it with ``factory`` on a miss.

        ``factory`` runs at most once per key even with concurrent callers: the
        first caller builds while the others wait on the per-key lock and then
        observe the stored result. If ``factory`` raises, nothing is stored and
        the exception propagates to that caller; a waiting caller then retries
        the build itself. The per-key lock is dropped once no caller holds or
        awaits it, so keys that never build leave nothing behind.

        :param key: The registry key.
        :param factory: Zero-argument callable producing the instance.
        :return: The stored instance.
        """
        with self._lock:
            if key in self._store:
                logger.debug("Store hit: %s", key)
                return self._store[key]
            slot = self._building.get(key)
            if slot is None:
                slot = self._building[key] = _BuildSlot()
            slot.waiters += 1

        try:
            with slot.lock:
                with self._lock:
                    if key in self._store:
                        logger.debug("Store hit after wait: %s", key)
                        return self._store[key]

                instance = factory()

                with self._lock:
                    self._store[key] = instance
                logger.debug("Store miss, constructed %r under %s", type(instance), key)
                return instance
        finally:
            with self._lock:
                slot.waiters -= 1
                if not slot.waiters and self._building.get(key) is slot:
                    del self._building[key]

    async def ainsert_if_absent(self, key: str, factory: Callable[[], T]) -> T:
        return await sync_to_async(self.insert_if_absent)(key, factory)

    def store_overwrite(self, key: str, instance: T) -> T:
        """Bind ``key`` to ``instance`` unconditionally (last write wins)."""
        with self._lock:
            self._store[key] = instance
            return self._store[key]

    async def astore_overwrite(self, key: str, instance: T) -> T:
        return await sync_to_async(self.store_overwrite)(key, instance)

    def remove_all_keys_for(self, instance: Any) -> int:
        """
        Remove every key whose bound value *is* ``instance``.

        Matching is by identity, never equality: two equal but distinct objects
        are left alone. Returns the number of keys removed (0 is not an error).
        """
        with self._lock:
            matches = [key for key, value in self._store.items() if value is instance]
            for key in matches:
                del self._store[key]

        if matches:
            logger.debug("Freed %r from %d key(s)", type(instance), len(matches))
        return len(matches)

    async def aremove_all_keys_for(self, instance: Any) -> int:
        return await sync_to_async(self.remove_all_keys_for)(instance)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._store.clear()

    # --- introspection ---

    def keys(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._store.keys())

    def count(self) -> int:
        """Counts the number of stored keys."""
        with self._lock:
            return len(self._store)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store

    def __repr__(self) -> str:
        return f"InstanceStore(entries={self.count()})"


__all__ = ["InstanceStore"]
