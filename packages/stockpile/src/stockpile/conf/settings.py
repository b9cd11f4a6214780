"""Layered, read-only settings view."""


import importlib
import os
from collections import ChainMap
from typing import Any, Iterator, Mapping

from pydantic import ValidationError

from .defaults import DEFAULTS
from .exceptions import SettingsError
from .models import StockpileSettings


class Settings(Mapping[str, Any]):
    """Settings layered over :data:`DEFAULTS`.

    Layers passed at construction are consulted in order; overlays applied
    later with the ``update_from_*`` helpers take precedence over all of them.
    Only UPPERCASE names are picked up from overlays.
    """

    def __init__(self, *layers: Mapping[str, Any]) -> None:
        self._storage = ChainMap({}, *(dict(layer) for layer in layers), dict(DEFAULTS))

    def __getitem__(self, key: str) -> Any:
        return self._storage[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._storage)

    def __len__(self) -> int:
        return len(self._storage)

    def update_from_mapping(self, mapping: Mapping[str, Any]) -> None:
        self._storage.maps[0].update({k: v for k, v in mapping.items() if k.isupper()})

    def update_from_object(self, module_name: str) -> None:
        self.update_from_mapping(vars(importlib.import_module(module_name)))

    def update_from_envvar(self, envvar: str = "STOCKPILE_CONFIG_MODULE") -> None:
        module_name = os.environ.get(envvar)
        if module_name:
            self.update_from_object(module_name)

    def validated(self) -> StockpileSettings:
        """Return the typed view of these settings, raising :class:`SettingsError` if invalid."""
        try:
            return StockpileSettings.model_validate(dict(self._storage))
        except ValidationError as exc:
            raise SettingsError(f"Invalid stockpile settings: {exc}") from exc
