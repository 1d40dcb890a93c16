"""Load layer settings from JSON files."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsonschema import ValidationError

from ..errors import SettingsLoadError, SettingsValidationError
from ..merge import MergeParameters
from ..utils.logging import get_logger
from .schema import DEFAULT_SETTINGS, merge_with_defaults

LOGGER = get_logger("settings")


@dataclass(frozen=True)
class LayerSettings:
    """Read-only settings shared by every worker classifying records."""

    languages: tuple[str, ...] = ()
    max_workers: int = DEFAULT_SETTINGS["max_workers"]
    merge: MergeParameters = field(default_factory=MergeParameters)


def settings_from_dict(data: dict[str, Any] | None) -> LayerSettings:
    """Build :class:`LayerSettings` from a partial settings mapping."""

    try:
        merged = merge_with_defaults(data)
    except ValidationError as exc:
        raise SettingsValidationError(exc.message) from exc
    return LayerSettings(
        languages=tuple(merged["languages"]),
        max_workers=int(merged["max_workers"]),
        merge=MergeParameters(**{key: float(value) for key, value in merged["merge"].items()}),
    )


def load_settings(path: Path | str | None) -> LayerSettings:
    """Read settings from *path*; defaults are returned when *path* is ``None``."""

    if path is None:
        return settings_from_dict(None)
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SettingsLoadError(f"Unable to load settings from '{path}': {exc}") from exc
    if not isinstance(payload, dict):
        raise SettingsValidationError(f"Settings file '{path}' must contain a JSON object")
    settings = settings_from_dict(payload)
    LOGGER.debug("Loaded settings from %s", path)
    return settings


__all__ = ["LayerSettings", "load_settings", "settings_from_dict"]
