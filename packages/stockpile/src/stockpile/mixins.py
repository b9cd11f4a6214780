# stockpile/mixins.py
from collections.abc import Mapping
from typing import Any

from ._state import current_factory
from .configure import configure


class StockMixin:
    """
    Class-bound access to the current factory.

    The calling class is the type component of every key::

        class Mailer(StockMixin):
            def __init__(self, host: str, port: int = 25): ...

        shared = Mailer.obtain("smtp.local")        # same object every time
        private = Mailer.new("smtp.local")          # fresh copy every time
        shared.as_("primary")
        Mailer.use("primary") is shared             # True
        shared.free()                               # gone from every key
    """

    @classmethod
    def use(cls, alias: str):
        return current_factory.use(cls, alias)

    @classmethod
    def new(cls, *args: Any, **kwargs: Any):
        return current_factory.new(cls, *args, **kwargs)

    @classmethod
    def obtain(cls, *args: Any, **kwargs: Any):
        return current_factory.obtain(cls, *args, **kwargs)

    @classmethod
    async def ause(cls, alias: str):
        return await current_factory.ause(cls, alias)

    @classmethod
    async def anew(cls, *args: Any, **kwargs: Any):
        return await current_factory.anew(cls, *args, **kwargs)

    @classmethod
    async def aobtain(cls, *args: Any, **kwargs: Any):
        return await current_factory.aobtain(cls, *args, **kwargs)

    def as_(self, alias: str):
        return current_factory.as_(self, alias, type(self))

    def free(self) -> None:
        current_factory.free(self)

    def config(self, settings: Mapping[str, Any]):
        """Overwrite declared fields from ``settings``; unknown keys are ignored."""
        return configure(self, settings)


__all__ = ["StockMixin"]
