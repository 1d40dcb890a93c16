"""Generalisation of the features emitted for one tile and zoom.

:class:`MergeParameters` holds the tolerances handed to the merge engine.
:class:`ShapelyFeatureMerger` is a small reference engine built on
``shapely``; all distances are expressed in tile pixels (256 per tile).
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from typing import Iterable

import numpy as np
from shapely import get_coordinates
from shapely.errors import GEOSException
from shapely.geometry import LineString, MultiLineString, MultiPoint, MultiPolygon, Point, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import linemerge, unary_union
from shapely.strtree import STRtree

from . import config
from .errors import GeometryProcessingError
from .models import RenderedFeature
from .utils.logging import get_logger

LOGGER = get_logger("merge")


@dataclass(frozen=True)
class MergeParameters:
    """Tolerances for the post-render merge step of the power layer."""

    polygon_min_area: float = config.POLYGON_MERGE_MIN_AREA
    polygon_min_hole_area: float = config.POLYGON_MERGE_MIN_HOLE_AREA
    polygon_min_dist: float = config.POLYGON_MERGE_MIN_DIST
    polygon_buffer: float = config.POLYGON_MERGE_BUFFER
    line_min_length: float = config.LINE_MERGE_MIN_LENGTH
    line_tolerance: float = config.LINE_MERGE_TOLERANCE
    line_buffer: float = config.LINE_MERGE_BUFFER


def _parts(geometry: BaseGeometry) -> list[BaseGeometry]:
    if geometry.is_empty:
        return []
    if hasattr(geometry, "geoms"):
        return [part for part in geometry.geoms if not part.is_empty]
    return [geometry]


def _check_finite(feature: RenderedFeature) -> None:
    if not np.isfinite(get_coordinates(feature.geometry)).all():
        raise GeometryProcessingError(
            f"Feature {feature.id!r} in layer '{feature.layer}' has non-finite coordinates"
        )


def _group(items: Iterable[RenderedFeature], geom_types: set[str]):
    """Split *items* into passthrough features and groups of mergeable ones."""

    passthrough: list[RenderedFeature] = []
    groups: "OrderedDict[tuple, list[RenderedFeature]]" = OrderedDict()
    for item in items:
        if item.geometry.geom_type not in geom_types:
            passthrough.append(item)
            continue
        if item.geometry.is_empty:
            continue
        _check_finite(item)
        groups.setdefault(item.group_key(), []).append(item)
    return passthrough, groups


def _collapse(parts: list[BaseGeometry], multi) -> BaseGeometry | None:
    if not parts:
        return None
    if len(parts) == 1:
        return parts[0]
    return multi(parts)


def _without_small_holes(polygon: Polygon, min_hole_area: float) -> Polygon:
    holes = [ring for ring in polygon.interiors if Polygon(ring).area >= min_hole_area]
    return Polygon(polygon.exterior, holes)


def _clusters(polygons: list[Polygon], min_dist: float) -> list[list[Polygon]]:
    """Group polygons that lie within *min_dist* of each other."""

    parent = list(range(len(polygons)))

    def find(index: int) -> int:
        while parent[index] != index:
            parent[index] = parent[parent[index]]
            index = parent[index]
        return index

    tree = STRtree(polygons)
    for index, polygon in enumerate(polygons):
        for other in tree.query(polygon.buffer(min_dist)):
            other = int(other)
            if other <= index:
                continue
            if polygon.distance(polygons[other]) <= min_dist:
                parent[find(other)] = find(index)

    clusters: "OrderedDict[int, list[Polygon]]" = OrderedDict()
    for index, polygon in enumerate(polygons):
        clusters.setdefault(find(index), []).append(polygon)
    return list(clusters.values())


class ShapelyFeatureMerger:
    """Reference implementation of :class:`~gridtiles.interfaces.FeatureMerger`."""

    def __init__(self, tile_size: float = config.TILE_SIZE_PX) -> None:
        self._tile_size = float(tile_size)

    # ------------------------------------------------------------------
    def merge_multi_point(self, items: list[RenderedFeature]) -> list[RenderedFeature]:
        """Combine points sharing a layer and attributes into multipoints."""

        passthrough, groups = _group(items, {"Point", "MultiPoint"})
        result = list(passthrough)
        for members in groups.values():
            points: list[Point] = []
            for member in members:
                points.extend(_parts(member.geometry))
            geometry = _collapse(points, MultiPoint)
            first = members[0]
            result.append(RenderedFeature(first.layer, geometry, dict(first.attrs), first.id))
        return result

    # ------------------------------------------------------------------
    def merge_nearby_polygons(
        self,
        items: list[RenderedFeature],
        min_area: float,
        min_hole_area: float,
        min_dist: float,
        buffer: float,
    ) -> list[RenderedFeature]:
        """Coalesce polygons closer than *min_dist* and drop tiny leftovers."""

        passthrough, groups = _group(items, {"Polygon", "MultiPolygon"})
        result = list(passthrough)
        for members in groups.values():
            polygons: list[Polygon] = []
            for member in members:
                polygons.extend(_parts(member.geometry))
            try:
                merged = self._coalesce(polygons, min_area, min_hole_area, min_dist, buffer)
            except GEOSException as exc:
                LOGGER.warning("Polygon merge failed for layer '%s': %s", members[0].layer, exc)
                raise GeometryProcessingError(f"Unable to merge polygons: {exc}") from exc
            geometry = _collapse(merged, MultiPolygon)
            if geometry is None:
                continue
            first = members[0]
            result.append(RenderedFeature(first.layer, geometry, dict(first.attrs), first.id))
        return result

    def _coalesce(
        self,
        polygons: list[Polygon],
        min_area: float,
        min_hole_area: float,
        min_dist: float,
        buffer: float,
    ) -> list[Polygon]:
        kept: list[Polygon] = []
        for cluster in _clusters(polygons, min_dist):
            if len(cluster) == 1:
                combined = cluster[0] if cluster[0].is_valid else cluster[0].buffer(0)
            else:
                combined = unary_union([polygon.buffer(buffer) for polygon in cluster]).buffer(-buffer)
            for part in _parts(combined):
                if not isinstance(part, Polygon) or part.area < min_area:
                    continue
                kept.append(_without_small_holes(part, min_hole_area))
        return kept

    # ------------------------------------------------------------------
    def merge_line_strings(
        self,
        items: list[RenderedFeature],
        min_length: float,
        tolerance: float,
        buffer: float,
    ) -> list[RenderedFeature]:
        """Join touching lines, simplify them and drop short fragments."""

        passthrough, groups = _group(items, {"LineString", "MultiLineString"})
        result = list(passthrough)
        for members in groups.values():
            lines: list[LineString] = []
            for member in members:
                lines.extend(_parts(member.geometry))
            try:
                merged = self._join_lines(lines, min_length, tolerance, buffer)
            except GEOSException as exc:
                LOGGER.warning("Line merge failed for layer '%s': %s", members[0].layer, exc)
                raise GeometryProcessingError(f"Unable to merge lines: {exc}") from exc
            geometry = _collapse(merged, MultiLineString)
            if geometry is None:
                continue
            first = members[0]
            result.append(RenderedFeature(first.layer, geometry, dict(first.attrs), first.id))
        return result

    def _join_lines(
        self,
        lines: list[LineString],
        min_length: float,
        tolerance: float,
        buffer: float,
    ) -> list[LineString]:
        joined = linemerge(MultiLineString(lines)) if len(lines) > 1 else lines[0]
        low, high = -buffer, self._tile_size + buffer
        kept: list[LineString] = []
        for line in _parts(joined):
            # Length is checked before clipping so a long line crossing the
            # tile edge keeps its short in-tile remainder.
            if line.length < min_length:
                continue
            clipped = line.intersection(Polygon([(low, low), (high, low), (high, high), (low, high)]))
            for part in _parts(clipped):
                if isinstance(part, LineString):
                    kept.append(part.simplify(tolerance, preserve_topology=False) if tolerance > 0 else part)
        return kept


__all__ = ["MergeParameters", "ShapelyFeatureMerger"]
