"""Value objects passed between the classifier and the geometry engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Any, Mapping, Optional

from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry

from .config import MAX_ZOOM, MIN_ZOOM
from .geometry import project_to_world, world_size

# ``power`` values that describe an area even when mapped as a closed way
# without an explicit ``area=yes``.
AREA_POWER_VALUES: frozenset[str] = frozenset({"plant", "substation", "generator"})


class GeometryKind(str, Enum):
    """Rendering branch chosen for a source record."""

    AREA = "area"
    LINE = "line"
    POINT = "point"
    NONE = "none"


class ShapeKind(str, Enum):
    """Kind of shape emitted into the tile."""

    POLYGON = "polygon"
    LINE = "line"
    POINT = "point"


@dataclass(frozen=True)
class SourceRecord:
    """Immutable tagged feature read from the source data.

    ``geometry`` is expressed in WGS84 longitude/latitude.  The record never
    changes once created so it can be shared across worker threads.
    """

    tags: Mapping[str, str]
    geometry: BaseGeometry
    id: Optional[Any] = None

    def get_string(self, key: str) -> Optional[str]:
        value = self.tags.get(key)
        if value is None:
            return None
        return str(value)

    def has_tag(self, key: str) -> bool:
        value = self.tags.get(key)
        return value is not None and str(value) != ""

    # ------------------------------------------------------------------
    def _is_closed_way(self) -> bool:
        geometry = self.geometry
        return geometry.geom_type == "LineString" and len(geometry.coords) >= 4 and geometry.is_closed

    def can_be_polygon(self) -> bool:
        """Return whether the record renders as an area.

        Unlike OSM ingestion, a closed way is an area only when tagged
        ``area=yes`` or with an area ``power`` value, not unless ``area=no``.
        """

        geom_type = self.geometry.geom_type
        if geom_type in {"Polygon", "MultiPolygon"}:
            return True
        if self._is_closed_way():
            if self.get_string("area") == "yes":
                return True
            return self.get_string("power") in AREA_POWER_VALUES
        return False

    def can_be_line(self) -> bool:
        return self.geometry.geom_type in {"LineString", "MultiLineString"}

    def is_point(self) -> bool:
        return self.geometry.geom_type in {"Point", "MultiPoint"}

    def kind(self) -> GeometryKind:
        """Return the rendering branch, checking polygon, line, then point."""

        if self.geometry.is_empty:
            return GeometryKind.NONE
        if self.can_be_polygon():
            return GeometryKind.AREA
        if self.can_be_line():
            return GeometryKind.LINE
        if self.is_point():
            return GeometryKind.POINT
        return GeometryKind.NONE

    # ------------------------------------------------------------------
    @cached_property
    def world_geometry(self) -> BaseGeometry:
        """Geometry projected into Web Mercator world units."""

        geometry = self.geometry
        if self.kind() is GeometryKind.AREA and geometry.geom_type == "LineString":
            geometry = Polygon(geometry.coords)
        return project_to_world(geometry)

    def size(self) -> float:
        """Linear size in world units (square root of area, or length)."""

        return world_size(self.world_geometry)


@dataclass(frozen=True)
class ZoomRange:
    """Inclusive range of zooms at which a shape is emitted."""

    min_zoom: int = MIN_ZOOM
    max_zoom: int = MAX_ZOOM

    def __post_init__(self) -> None:
        object.__setattr__(self, "min_zoom", max(MIN_ZOOM, min(MAX_ZOOM, int(self.min_zoom))))
        object.__setattr__(self, "max_zoom", max(self.min_zoom, min(MAX_ZOOM, int(self.max_zoom))))

    def __contains__(self, zoom: object) -> bool:
        return isinstance(zoom, int) and self.min_zoom <= zoom <= self.max_zoom


@dataclass(frozen=True)
class AttributeBinding:
    """A tag value attached to a shape from ``min_zoom`` onwards."""

    key: str
    value: str
    min_zoom: int


@dataclass(frozen=True)
class RenderingInstruction:
    """Everything the tiling engine needs to emit one shape."""

    layer: str
    shape: ShapeKind
    record_id: Optional[Any]
    geometry: BaseGeometry
    zoom_range: ZoomRange
    min_pixel_size: float
    buffer_pixels: float
    bindings: tuple[AttributeBinding, ...] = ()

    def attributes_at(self, zoom: int) -> dict[str, str]:
        """Return the attributes visible at *zoom*."""

        attrs: dict[str, str] = {}
        for binding in self.bindings:
            if binding.min_zoom <= zoom:
                attrs[binding.key] = binding.value
        return attrs

    def min_zoom_for(self, key: str) -> Optional[int]:
        """Return the zoom at which *key* first appears, or ``None``."""

        for binding in self.bindings:
            if binding.key == key:
                return binding.min_zoom
        return None


@dataclass
class RenderedFeature:
    """A shape materialised for one zoom level, in tile pixel coordinates."""

    layer: str
    geometry: BaseGeometry
    attrs: dict[str, str] = field(default_factory=dict)
    id: Optional[Any] = None

    def group_key(self) -> tuple:
        """Key under which compatible features may be merged."""

        return (self.layer, self.geometry.geom_type.replace("Multi", ""), tuple(sorted(self.attrs.items())))


__all__ = [
    "AREA_POWER_VALUES",
    "GeometryKind",
    "ShapeKind",
    "SourceRecord",
    "ZoomRange",
    "AttributeBinding",
    "RenderingInstruction",
    "RenderedFeature",
]
