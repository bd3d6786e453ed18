"""
pos_config -- store settings.

Runtime code receives a ``StoreSettings`` instance; the YAML file is read
once at startup through ``load_settings`` and written back by the settings
screen through ``save_settings``.
"""

from pos_config.loader import load_settings, save_settings, update_settings
from pos_config.schema import StoreSettings

__all__ = [
    "StoreSettings",
    "load_settings",
    "save_settings",
    "update_settings",
]
