"""The ``power`` layer: which power features to draw, and from which zoom."""

from __future__ import annotations

from typing import Callable, Mapping

from . import config
from .classifiers import label_min_zoom, line_min_zoom
from .errors import GeometryProcessingError
from .interfaces import FeatureCollector, FeatureMerger
from .merge import MergeParameters
from .models import GeometryKind, RenderedFeature, SourceRecord
from .settings import LayerSettings
from .tags import DETAIL_TAGS, PRIMARY_TAGS, set_attributes, set_attributes_with_minzoom
from .utils.logging import get_logger

LOGGER = get_logger("layer")


class PowerLayer:
    """Classify power infrastructure records into tile shapes.

    The layer is stateless apart from its read-only settings, so a single
    instance may be shared by any number of worker threads.
    """

    name = config.LAYER_NAME

    def __init__(self, settings: LayerSettings | None = None) -> None:
        self.settings = settings or LayerSettings()
        self._handlers: Mapping[GeometryKind, Callable[[SourceRecord, FeatureCollector], None]] = {
            GeometryKind.AREA: self._process_area,
            GeometryKind.LINE: self._process_line,
            GeometryKind.POINT: self._process_point,
            GeometryKind.NONE: self._process_nothing,
        }

    # ------------------------------------------------------------------
    def filter(self, record: SourceRecord) -> bool:
        """Return ``True`` for records this layer claims (those tagged ``power``)."""

        return record.has_tag("power")

    def process_feature(self, record: SourceRecord, collector: FeatureCollector) -> None:
        """Emit the shapes for *record* into *collector*."""

        self._handlers[record.kind()](record, collector)

    # ------------------------------------------------------------------
    def _process_area(self, record: SourceRecord, collector: FeatureCollector) -> None:
        polygon = collector.polygon(self.name)
        polygon.set_zoom_range(*config.AREA_ZOOM_RANGE)
        polygon.set_min_pixel_size(config.AREA_MIN_PIXEL_SIZE)

        set_attributes(record, polygon, PRIMARY_TAGS, self.settings)

        # The polygon must exist before its pixel-size zoom can be asked for.
        detail_min_zoom = min(
            label_min_zoom(record.tags),
            polygon.get_min_zoom_for_pixel_size(config.AREA_LABEL_PIXEL_WIDTH),
        )
        set_attributes_with_minzoom(record, polygon, DETAIL_TAGS, detail_min_zoom, self.settings)

        if record.has_tag("name") or record.has_tag("ref"):
            point = collector.point_on_surface(self.name)
            point.set_min_zoom(detail_min_zoom)
            point.set_buffer_pixels(config.LABEL_BUFFER_PIXELS)

            set_attributes(record, point, PRIMARY_TAGS, self.settings)
            set_attributes(record, point, DETAIL_TAGS, self.settings)

    def _process_line(self, record: SourceRecord, collector: FeatureCollector) -> None:
        min_zoom = line_min_zoom(record.tags)
        line = collector.line(self.name)
        line.set_zoom_range(min_zoom, config.MAX_ZOOM)
        line.set_min_pixel_size(config.LINE_MIN_PIXEL_SIZE)

        set_attributes(record, line, PRIMARY_TAGS, self.settings)

        detail_min_zoom = min(min_zoom + config.LINE_DETAIL_ZOOM_OFFSET, config.MAX_ZOOM)
        set_attributes_with_minzoom(record, line, DETAIL_TAGS, detail_min_zoom, self.settings)

    def _process_point(self, record: SourceRecord, collector: FeatureCollector) -> None:
        point = collector.point(self.name)
        point.set_min_zoom(label_min_zoom(record.tags))
        point.set_buffer_pixels(config.LABEL_BUFFER_PIXELS)

        set_attributes(record, point, PRIMARY_TAGS, self.settings)
        set_attributes(record, point, DETAIL_TAGS, self.settings)

    def _process_nothing(self, record: SourceRecord, collector: FeatureCollector) -> None:
        LOGGER.debug("Record %r has no renderable geometry", record.id)

    # ------------------------------------------------------------------
    def post_process(
        self,
        zoom: int,
        items: list[RenderedFeature],
        merger: FeatureMerger,
    ) -> list[RenderedFeature]:
        """Generalise every feature emitted for one tile at *zoom*.

        :class:`~gridtiles.errors.GeometryProcessingError` raised by *merger*
        propagates so the caller can skip or retry the tile.
        """

        params: MergeParameters = self.settings.merge
        try:
            items = merger.merge_multi_point(items)
            items = merger.merge_nearby_polygons(
                items,
                params.polygon_min_area,
                params.polygon_min_hole_area,
                params.polygon_min_dist,
                params.polygon_buffer,
            )
            items = merger.merge_line_strings(
                items,
                params.line_min_length,
                params.line_tolerance,
                params.line_buffer,
            )
        except GeometryProcessingError:
            LOGGER.warning("Post-processing failed for layer '%s' at zoom %d", self.name, zoom)
            raise
        return items


__all__ = ["PowerLayer"]
