"""Narrow seams to the geometry, attribute and merge engines.

The classifier in :mod:`gridtiles.layer` only talks to these protocols, so it
can be exercised with fakes and without any tiling infrastructure.
"""

from __future__ import annotations

from typing import Protocol

from .models import RenderedFeature


class FeatureBuilder(Protocol):
    """A shape being emitted for one source record."""

    @property
    def min_zoom(self) -> int: ...

    @property
    def max_zoom(self) -> int: ...

    def set_zoom_range(self, min_zoom: int, max_zoom: int) -> "FeatureBuilder": ...

    def set_min_zoom(self, min_zoom: int) -> "FeatureBuilder": ...

    def set_min_pixel_size(self, pixels: float) -> "FeatureBuilder": ...

    def set_buffer_pixels(self, pixels: float) -> "FeatureBuilder": ...

    def get_min_zoom_for_pixel_size(self, pixels: float) -> int: ...

    def set_attr(self, key: str, value: str) -> "FeatureBuilder": ...

    def set_attr_with_min_zoom(self, key: str, value: str, min_zoom: int) -> "FeatureBuilder": ...


class FeatureCollector(Protocol):
    """Factory for the shapes emitted from a single source record."""

    def polygon(self, layer: str) -> FeatureBuilder: ...

    def line(self, layer: str) -> FeatureBuilder: ...

    def point(self, layer: str) -> FeatureBuilder: ...

    def point_on_surface(self, layer: str) -> FeatureBuilder: ...


class FeatureMerger(Protocol):
    """Generalisation algorithms applied to all features of one tile and zoom.

    Implementations raise :class:`~gridtiles.errors.GeometryProcessingError`
    when the input geometry cannot be processed.
    """

    def merge_multi_point(self, items: list[RenderedFeature]) -> list[RenderedFeature]: ...

    def merge_nearby_polygons(
        self,
        items: list[RenderedFeature],
        min_area: float,
        min_hole_area: float,
        min_dist: float,
        buffer: float,
    ) -> list[RenderedFeature]: ...

    def merge_line_strings(
        self,
        items: list[RenderedFeature],
        min_length: float,
        tolerance: float,
        buffer: float,
    ) -> list[RenderedFeature]: ...


__all__ = ["FeatureBuilder", "FeatureCollector", "FeatureMerger"]
