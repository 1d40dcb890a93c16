"""Schema helpers for the layer settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from .. import config

_NON_NEGATIVE = {"type": "number", "minimum": 0}

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "gridtiles/settings.schema.json",
    "type": "object",
    "required": ["schema", "languages", "merge"],
    "properties": {
        "schema": {"const": "gridtiles/settings@1"},
        "languages": {
            "type": "array",
            "items": {"type": "string", "pattern": "^[A-Za-z_-]+$"},
            "uniqueItems": True,
        },
        "max_workers": {"type": "integer", "minimum": 1},
        "merge": {
            "type": "object",
            "properties": {
                "polygon_min_area": _NON_NEGATIVE,
                "polygon_min_hole_area": _NON_NEGATIVE,
                "polygon_min_dist": _NON_NEGATIVE,
                "polygon_buffer": _NON_NEGATIVE,
                "line_min_length": _NON_NEGATIVE,
                "line_tolerance": _NON_NEGATIVE,
                "line_buffer": _NON_NEGATIVE,
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "gridtiles/settings@1",
    "languages": [],
    "max_workers": config.DEFAULT_MAX_WORKERS,
    "merge": {
        "polygon_min_area": config.POLYGON_MERGE_MIN_AREA,
        "polygon_min_hole_area": config.POLYGON_MERGE_MIN_HOLE_AREA,
        "polygon_min_dist": config.POLYGON_MERGE_MIN_DIST,
        "polygon_buffer": config.POLYGON_MERGE_BUFFER,
        "line_min_length": config.LINE_MERGE_MIN_LENGTH,
        "line_tolerance": config.LINE_MERGE_TOLERANCE,
        "line_buffer": config.LINE_MERGE_BUFFER,
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key == "merge" and isinstance(value, dict):
                target = merged.setdefault("merge", {})
                for sub_key, sub_value in value.items():
                    target[sub_key] = sub_value
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults"]
