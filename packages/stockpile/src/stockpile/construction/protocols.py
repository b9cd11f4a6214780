# stockpile/construction/protocols.py
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ConstructorCapability(Protocol):
    """What the factory needs from whoever builds instances."""

    def resolve_type_id(self, target: type | str) -> str:
        """Return the canonical type id for a class object or class name."""
        ...

    def construct(self, type_id: str, args: Sequence[Any] = (), kwargs: Mapping[str, Any] | None = None) -> Any:
        """Build a new instance; raise ConstructionError when that is not possible."""
        ...

    def check_public_method(self, type_id: str, method_name: str) -> None:
        """Raise VisibilityError unless ``method_name`` is publicly invocable."""
        ...
