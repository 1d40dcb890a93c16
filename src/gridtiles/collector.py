"""Reference geometry engine that records what the classifier emits.

:class:`RecordCollector` implements :class:`~gridtiles.interfaces.FeatureCollector`
for a single :class:`~gridtiles.models.SourceRecord`.  Each shape requested by
the layer becomes a :class:`ShapeBuilder`; once classification is finished the
builders are frozen into :class:`~gridtiles.models.RenderingInstruction` values
which :func:`materialise` turns into per-zoom features.
"""

from __future__ import annotations

from typing import Optional

from shapely.geometry.base import BaseGeometry

from . import config
from .geometry import min_zoom_for_pixel_size, world_size, world_to_zoom_pixels
from .models import AttributeBinding, RenderedFeature, RenderingInstruction, ShapeKind, SourceRecord, ZoomRange


class ShapeBuilder:
    """Mutable description of one shape while a record is being classified."""

    def __init__(self, layer: str, shape: ShapeKind, record: SourceRecord, geometry: BaseGeometry) -> None:
        self.layer = layer
        self.shape = shape
        self._record = record
        self._geometry = geometry
        self._min_zoom = config.MIN_ZOOM
        self._max_zoom = config.MAX_ZOOM
        self._min_pixel_size = 1.0
        self._buffer_pixels = config.DEFAULT_BUFFER_PIXELS
        # ``None`` means "visible whenever the shape is".
        self._attrs: dict[str, tuple[str, Optional[int]]] = {}

    # ------------------------------------------------------------------
    @property
    def min_zoom(self) -> int:
        return self._min_zoom

    @property
    def max_zoom(self) -> int:
        return self._max_zoom

    def set_zoom_range(self, min_zoom: int, max_zoom: int) -> "ShapeBuilder":
        zoom_range = ZoomRange(min_zoom, max_zoom)
        self._min_zoom = zoom_range.min_zoom
        self._max_zoom = zoom_range.max_zoom
        return self

    def set_min_zoom(self, min_zoom: int) -> "ShapeBuilder":
        return self.set_zoom_range(min_zoom, self._max_zoom)

    def set_min_pixel_size(self, pixels: float) -> "ShapeBuilder":
        self._min_pixel_size = float(pixels)
        return self

    def set_buffer_pixels(self, pixels: float) -> "ShapeBuilder":
        self._buffer_pixels = float(pixels)
        return self

    def get_min_zoom_for_pixel_size(self, pixels: float) -> int:
        """Return the first zoom at which the source shape is *pixels* wide."""

        return min_zoom_for_pixel_size(self._record.size(), pixels)

    # ------------------------------------------------------------------
    def set_attr(self, key: str, value: str) -> "ShapeBuilder":
        self._attrs[key] = (value, None)
        return self

    def set_attr_with_min_zoom(self, key: str, value: str, min_zoom: int) -> "ShapeBuilder":
        self._attrs[key] = (value, int(min_zoom))
        return self

    # ------------------------------------------------------------------
    def build(self) -> RenderingInstruction:
        zoom_range = ZoomRange(self._min_zoom, self._max_zoom)
        bindings = tuple(
            AttributeBinding(
                key,
                value,
                zoom_range.min_zoom if min_zoom is None else max(min_zoom, zoom_range.min_zoom),
            )
            for key, (value, min_zoom) in sorted(self._attrs.items())
        )
        return RenderingInstruction(
            layer=self.layer,
            shape=self.shape,
            record_id=self._record.id,
            geometry=self._geometry,
            zoom_range=zoom_range,
            min_pixel_size=self._min_pixel_size,
            buffer_pixels=self._buffer_pixels,
            bindings=bindings,
        )


class RecordCollector:
    """Collect the shapes emitted for one source record."""

    def __init__(self, record: SourceRecord) -> None:
        self._record = record
        self._builders: list[ShapeBuilder] = []

    def _add(self, layer: str, shape: ShapeKind, geometry: BaseGeometry) -> ShapeBuilder:
        builder = ShapeBuilder(layer, shape, self._record, geometry)
        self._builders.append(builder)
        return builder

    def polygon(self, layer: str) -> ShapeBuilder:
        return self._add(layer, ShapeKind.POLYGON, self._record.world_geometry)

    def line(self, layer: str) -> ShapeBuilder:
        return self._add(layer, ShapeKind.LINE, self._record.world_geometry)

    def point(self, layer: str) -> ShapeBuilder:
        return self._add(layer, ShapeKind.POINT, self._record.world_geometry)

    def point_on_surface(self, layer: str) -> ShapeBuilder:
        return self._add(layer, ShapeKind.POINT, self._record.world_geometry.representative_point())

    def instructions(self) -> tuple[RenderingInstruction, ...]:
        return tuple(builder.build() for builder in self._builders)


def _min_pixel_size_at(instruction: RenderingInstruction, zoom: int) -> float:
    if zoom >= config.MAX_ZOOM:
        return min(instruction.min_pixel_size, config.MIN_PIXEL_SIZE_AT_MAX_ZOOM)
    return instruction.min_pixel_size


def materialise(instruction: RenderingInstruction, zoom: int) -> Optional[RenderedFeature]:
    """Return the feature *instruction* contributes at *zoom*, if any.

    The geometry of the returned feature is expressed in global pixels for
    *zoom*.  Shapes outside their zoom range, and polygons or lines smaller
    than their minimum pixel size, produce ``None``.
    """

    if zoom not in instruction.zoom_range:
        return None
    if instruction.shape is not ShapeKind.POINT:
        size_px = world_size(instruction.geometry) * config.TILE_SIZE_PX * (1 << zoom)
        if size_px < _min_pixel_size_at(instruction, zoom):
            return None
    return RenderedFeature(
        layer=instruction.layer,
        geometry=world_to_zoom_pixels(instruction.geometry, zoom),
        attrs=instruction.attributes_at(zoom),
        id=instruction.record_id,
    )


__all__ = ["ShapeBuilder", "RecordCollector", "materialise"]
