"""Runtime settings for the power layer."""

from __future__ import annotations

from .loader import LayerSettings, load_settings, settings_from_dict
from .schema import DEFAULT_SETTINGS, SETTINGS_SCHEMA, merge_with_defaults

__all__ = [
    "DEFAULT_SETTINGS",
    "SETTINGS_SCHEMA",
    "LayerSettings",
    "load_settings",
    "merge_with_defaults",
    "settings_from_dict",
]
