"""Drive the power layer over a batch of records and encode the result.

Records are classified independently, so :func:`classify_records` fans the
work out over a thread pool and only returns once every record is done.
Post-processing then runs once per tile on the complete feature list.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from itertools import chain
from typing import Iterable, Optional, Sequence

import mapbox_vector_tile
from shapely import clip_by_rect
from shapely.geometry import box

from . import config
from .collector import RecordCollector, materialise
from .errors import TileEncodingError
from .geometry import to_tile_pixels
from .interfaces import FeatureMerger
from .layer import PowerLayer
from .merge import ShapelyFeatureMerger
from .models import RenderedFeature, RenderingInstruction, ShapeKind, SourceRecord
from .utils.logging import get_logger

LOGGER = get_logger("tiling")


def classify_record(layer: PowerLayer, record: SourceRecord) -> tuple[RenderingInstruction, ...]:
    """Return the rendering instructions *layer* emits for *record*."""

    if not layer.filter(record):
        return ()
    collector = RecordCollector(record)
    layer.process_feature(record, collector)
    return collector.instructions()


def classify_records(
    layer: PowerLayer,
    records: Iterable[SourceRecord],
    max_workers: Optional[int] = None,
) -> list[RenderingInstruction]:
    """Classify *records* concurrently and return all instructions in input order."""

    workers = max_workers or layer.settings.max_workers
    with ThreadPoolExecutor(max_workers=workers) as executor:
        results = list(executor.map(lambda record: classify_record(layer, record), records))
    instructions = list(chain.from_iterable(results))
    LOGGER.debug("Classified %d records into %d instructions", len(results), len(instructions))
    return instructions


def features_for_tile(
    instructions: Iterable[RenderingInstruction],
    z: int,
    x: int,
    y: int,
) -> list[RenderedFeature]:
    """Materialise the features visible in tile ``z/x/y``, clipped to its buffer."""

    features: list[RenderedFeature] = []
    size = config.TILE_SIZE_PX
    for instruction in instructions:
        feature = materialise(instruction, z)
        if feature is None:
            continue
        geometry = to_tile_pixels(feature.geometry, x, y)
        pad = instruction.buffer_pixels
        if instruction.shape is ShapeKind.POINT:
            if not box(-pad, -pad, size + pad, size + pad).intersects(geometry):
                continue
        else:
            geometry = clip_by_rect(geometry, -pad, -pad, size + pad, size + pad)
        if geometry.is_empty:
            continue
        feature.geometry = geometry
        features.append(feature)
    return features


def render_tile(
    layer: PowerLayer,
    instructions: Sequence[RenderingInstruction],
    z: int,
    x: int,
    y: int,
    merger: Optional[FeatureMerger] = None,
) -> list[RenderedFeature]:
    """Return the generalised features of tile ``z/x/y``."""

    features = features_for_tile(instructions, z, x, y)
    merged = layer.post_process(z, features, merger or ShapelyFeatureMerger())
    LOGGER.debug("Tile %d/%d/%d: %d features, %d after merge", z, x, y, len(features), len(merged))
    return merged


def encode_tile(features: Sequence[RenderedFeature], layer_name: str = config.LAYER_NAME) -> bytes:
    """Encode *features* (tile pixel coordinates) as a Mapbox Vector Tile."""

    encoded_features = []
    for feature in features:
        encoded = {"geometry": feature.geometry, "properties": dict(feature.attrs)}
        if isinstance(feature.id, int) and feature.id >= 0:
            encoded["id"] = feature.id
        encoded_features.append(encoded)
    try:
        return mapbox_vector_tile.encode(
            [{"name": layer_name, "features": encoded_features}],
            default_options={
                "quantize_bounds": (0, 0, config.TILE_SIZE_PX, config.TILE_SIZE_PX),
                "y_coord_down": True,
                "extents": config.TILE_EXTENT,
            },
        )
    except Exception as exc:  # pragma: no cover - passthrough for third-party errors
        raise TileEncodingError(f"Failed to encode layer '{layer_name}'") from exc


__all__ = [
    "classify_record",
    "classify_records",
    "features_for_tile",
    "render_tile",
    "encode_tile",
]
