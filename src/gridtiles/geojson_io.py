"""Read GeoJSON feature collections into :class:`SourceRecord` values."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator, Mapping

import numpy as np
from shapely import get_coordinates
from shapely.errors import ShapelyError
from shapely.geometry import shape

from .errors import SourceDataError
from .models import SourceRecord
from .utils.logging import get_logger

LOGGER = get_logger("geojson")


def _tag_value(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (dict, list)):
        return None
    return str(value)


def _tags_from_properties(properties: Mapping[str, Any] | None) -> dict[str, str]:
    tags: dict[str, str] = {}
    for key, value in (properties or {}).items():
        text = _tag_value(value)
        if text is not None:
            tags[str(key)] = text
    return tags


def iter_records(payload: Mapping[str, Any]) -> Iterator[SourceRecord]:
    """Yield a record for every feature with a geometry in *payload*."""

    if payload.get("type") == "Feature":
        features = [payload]
    elif payload.get("type") == "FeatureCollection":
        features = payload.get("features") or []
    else:
        raise SourceDataError("Expected a GeoJSON Feature or FeatureCollection")

    for index, feature in enumerate(features):
        if not isinstance(feature, Mapping) or feature.get("geometry") is None:
            LOGGER.debug("Skipping feature %d without geometry", index)
            continue
        try:
            geometry = shape(feature["geometry"])
        except (ShapelyError, ValueError, TypeError, AttributeError, KeyError) as exc:
            raise SourceDataError(f"Feature {index} has an invalid geometry: {exc}") from exc
        if not np.isfinite(get_coordinates(geometry)).all():
            raise SourceDataError(f"Feature {index} has non-finite coordinates")
        properties = feature.get("properties") or {}
        record_id = feature.get("id", properties.get("@id"))
        yield SourceRecord(tags=_tags_from_properties(properties), geometry=geometry, id=record_id)


def load_records(path: Path | str) -> list[SourceRecord]:
    """Read every feature of the GeoJSON file at *path*."""

    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf8"))
    except OSError as exc:
        raise SourceDataError(f"Unable to read '{path}'") from exc
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SourceDataError(f"'{path}' is not valid UTF-8 JSON") from exc
    if not isinstance(payload, Mapping):
        raise SourceDataError(f"'{path}' does not contain a GeoJSON object")
    records = list(iter_records(payload))
    LOGGER.info("Loaded %d records from %s", len(records), path)
    return records


__all__ = ["iter_records", "load_records"]
