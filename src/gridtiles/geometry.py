"""Utility helpers for projecting and measuring source geometries."""

from __future__ import annotations

import math

import numpy as np
import shapely
from shapely import affinity
from shapely.geometry.base import BaseGeometry

from .config import MAX_ZOOM, MIN_ZOOM, TILE_SIZE_PX

MERCATOR_LAT_BOUND = 85.05112878


def lonlat_to_world(lon: float, lat: float) -> tuple[float, float]:
    """Project longitude/latitude into Web Mercator world units.

    World units span ``0..1`` on both axes with the origin in the top-left
    corner, so ``y`` grows towards the south like tile rows do.
    """

    lon = float(lon)
    lat = max(min(float(lat), MERCATOR_LAT_BOUND), -MERCATOR_LAT_BOUND)

    world_x = (lon + 180.0) / 360.0
    sin_lat = math.sin(math.radians(lat))
    world_y = 0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)
    return world_x, world_y


def _project_array(coords: np.ndarray) -> np.ndarray:
    lon = coords[:, 0]
    lat = np.clip(coords[:, 1], -MERCATOR_LAT_BOUND, MERCATOR_LAT_BOUND)
    world_x = (lon + 180.0) / 360.0
    sin_lat = np.sin(np.radians(lat))
    world_y = 0.5 - np.log((1 + sin_lat) / (1 - sin_lat)) / (4 * np.pi)
    return np.column_stack([world_x, world_y])


def project_to_world(geometry: BaseGeometry) -> BaseGeometry:
    """Return *geometry* re-projected from WGS84 into world units."""

    return shapely.transform(geometry, _project_array)


def world_size(geometry: BaseGeometry) -> float:
    """Return the linear size of a projected geometry in world units.

    Polygons report the square root of their area and lines their length;
    points have no size.
    """

    if geometry.is_empty:
        return 0.0
    if geometry.geom_type in {"Polygon", "MultiPolygon"}:
        return math.sqrt(abs(geometry.area))
    if geometry.geom_type in {"LineString", "MultiLineString", "LinearRing"}:
        return geometry.length
    return 0.0


def min_zoom_for_pixel_size(size: float, min_pixel_size: float) -> int:
    """Return the first zoom at which *size* renders at least *min_pixel_size* wide."""

    if not math.isfinite(size) or size <= 0:
        return MAX_ZOOM
    world_pixels = size * TILE_SIZE_PX
    zoom = math.ceil(math.log2(min_pixel_size / world_pixels))
    return max(MIN_ZOOM, min(MAX_ZOOM, zoom))


def world_to_zoom_pixels(geometry: BaseGeometry, zoom: int) -> BaseGeometry:
    """Scale a world-unit geometry into global pixel coordinates for *zoom*."""

    factor = TILE_SIZE_PX * (1 << zoom)
    return affinity.scale(geometry, xfact=factor, yfact=factor, origin=(0, 0))


def tile_origin_pixels(x: int, y: int) -> tuple[float, float]:
    """Return the global pixel offset of tile ``x``/``y``."""

    return x * TILE_SIZE_PX, y * TILE_SIZE_PX


def to_tile_pixels(geometry: BaseGeometry, x: int, y: int) -> BaseGeometry:
    """Translate global zoom pixels into coordinates relative to tile ``x``/``y``."""

    origin_x, origin_y = tile_origin_pixels(x, y)
    return affinity.translate(geometry, xoff=-origin_x, yoff=-origin_y)


__all__ = [
    "MERCATOR_LAT_BOUND",
    "lonlat_to_world",
    "project_to_world",
    "world_size",
    "min_zoom_for_pixel_size",
    "world_to_zoom_pixels",
    "tile_origin_pixels",
    "to_tile_pixels",
]
