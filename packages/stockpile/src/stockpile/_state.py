"""Current-factory tracking.

The registry is process-wide by default: the first call to
:func:`get_current_factory` builds one :class:`~stockpile.factory.Factory` and
every later caller shares it. A ``ContextVar`` lets tests and embedding
applications swap in an isolated factory via :func:`push_current_factory`.
"""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from threading import Lock
from typing import TYPE_CHECKING, Generator

from .utils.proxy import Proxy

if TYPE_CHECKING:
    from .factory import Factory

_current_factory: ContextVar["Factory | None"] = ContextVar("stockpile_current_factory", default=None)
_default_factory: "Factory | None" = None
_default_lock = Lock()


def _build_default_factory() -> "Factory":
    """Create the lazily constructed process-wide factory.

    Settings are read from ``STOCKPILE_CONFIG_MODULE`` when that env var is set.
    """
    from .conf import Settings
    from .factory import Factory

    settings = Settings()
    settings.update_from_envvar()
    return Factory(settings=settings)


def get_default_factory() -> "Factory":
    global _default_factory
    with _default_lock:
        if _default_factory is None:
            _default_factory = _build_default_factory()
        return _default_factory


def get_current_factory() -> "Factory":
    """Return the factory active in this context, falling back to the process default."""
    factory = _current_factory.get()
    if factory is None:
        factory = get_default_factory()
    return factory


def set_current_factory(factory: "Factory | None") -> None:
    _current_factory.set(factory)


@contextmanager
def push_current_factory(factory: "Factory") -> Generator["Factory", None, None]:
    token = _current_factory.set(factory)
    try:
        yield factory
    finally:
        _current_factory.reset(token)


current_factory: "Factory" = Proxy(get_current_factory)  # type: ignore[assignment]

__all__ = [
    "current_factory",
    "get_current_factory",
    "get_default_factory",
    "push_current_factory",
    "set_current_factory",
]
