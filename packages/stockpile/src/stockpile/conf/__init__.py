from .defaults import DEFAULTS
from .exceptions import SettingsError
from .models import StockpileSettings
from .settings import Settings

__all__ = ["DEFAULTS", "Settings", "SettingsError", "StockpileSettings"]
