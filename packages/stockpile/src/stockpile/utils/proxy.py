"""Lazy proxy to the current factory.

Modules can bind ``current_factory`` at import time while the factory it
refers to is still swapped per context (tests, nested ``push_current_factory``
blocks). Attribute access is forwarded to whatever the resolver returns at the
moment of use.
"""

from __future__ import annotations

from typing import Any, Callable


class Proxy:
    """Forward attribute access to ``resolver()``."""

    __slots__ = ("_resolver",)

    def __init__(self, resolver: Callable[[], Any]) -> None:
        self._resolver = resolver

    def __getattr__(self, name: str) -> Any:
        return getattr(self._resolver(), name)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Proxy of {self._resolver()!r}>"
