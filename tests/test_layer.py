from unittest.mock import Mock

import pytest
from shapely.geometry import GeometryCollection

from gridtiles.errors import GeometryProcessingError
from gridtiles.layer import PowerLayer
from gridtiles.models import GeometryKind, RenderedFeature, SourceRecord
from gridtiles.settings import settings_from_dict
from gridtiles.tags import DETAIL_TAGS, PRIMARY_TAGS


def test_filter_claims_only_power_records(point_record) -> None:
    layer = PowerLayer()
    assert layer.filter(point_record({"power": "tower"}))
    assert not layer.filter(point_record({"highway": "street_lamp"}))
    assert not layer.filter(point_record({"power": ""}))


def test_every_geometry_kind_has_a_handler() -> None:
    layer = PowerLayer()
    assert set(layer._handlers) == set(GeometryKind)


def test_area_emits_polygon_and_label_point(area_record, fake_collector) -> None:
    collector = fake_collector(pixel_zoom=13)
    record = area_record({"power": "substation", "name": "Foo", "voltage": "110000", "operator": "Grid"})

    PowerLayer().process_feature(record, collector)

    polygon, point = collector.shapes
    assert polygon.kind == "polygon"
    assert (polygon.min_zoom, polygon.max_zoom) == (8, 15)
    assert polygon.min_pixel_size == 2.0
    assert polygon.pixel_size_queries == [32.0]
    assert polygon.attrs["power"] == ("substation", None)
    assert polygon.attrs["voltage"] == ("110000", None)
    # min(label zoom 12, pixel zoom 13)
    assert polygon.attrs["operator"] == ("Grid", 12)
    assert polygon.attrs["name"] == ("Foo", 12)

    assert point.kind == "point_on_surface"
    assert point.min_zoom == 12
    assert point.buffer_pixels == 32.0
    assert point.attrs == {
        "power": ("substation", None),
        "voltage": ("110000", None),
        "name": ("Foo", None),
        "operator": ("Grid", None),
    }


def test_area_detail_zoom_uses_pixel_size_when_smaller(area_record, fake_collector) -> None:
    collector = fake_collector(pixel_zoom=9)
    record = area_record({"power": "plant", "ref": "P1"})

    PowerLayer().process_feature(record, collector)

    polygon, point = collector.shapes
    assert polygon.attrs["ref"] == ("P1", 9)
    assert point.min_zoom == 9


def test_area_without_name_or_ref_has_no_label(area_record, fake_collector) -> None:
    collector = fake_collector()
    PowerLayer().process_feature(area_record({"power": "substation"}), collector)
    assert [shape.kind for shape in collector.shapes] == ["polygon"]


def test_line_zoom_range_and_detail_offset(line_record, fake_collector) -> None:
    collector = fake_collector()
    record = line_record({"power": "line", "voltage": "400000", "cables": "6", "circuits": "2"})

    PowerLayer().process_feature(record, collector)

    (line,) = collector.shapes
    assert line.kind == "line"
    assert (line.min_zoom, line.max_zoom) == (4, 15)
    assert line.min_pixel_size == 1.0
    assert line.attrs["power"] == ("line", None)
    assert line.attrs["cables"] == ("6", 7)
    assert line.attrs["circuits"] == ("2", 7)


def test_line_detail_zoom_is_capped(line_record, fake_collector) -> None:
    collector = fake_collector()
    PowerLayer().process_feature(line_record({"power": "minor_line", "operator": "X"}), collector)
    (line,) = collector.shapes
    assert line.min_zoom == 13
    assert line.attrs["operator"] == ("X", 15)


def test_point_carries_all_tags_unconditionally(point_record, fake_collector) -> None:
    collector = fake_collector()
    record = point_record({"power": "generator", "generator:source": "wind", "ref": "T7", "note": "x"})

    PowerLayer().process_feature(record, collector)

    (point,) = collector.shapes
    assert point.kind == "point"
    assert point.min_zoom == 13
    assert point.buffer_pixels == 32.0
    assert point.attrs == {
        "power": ("generator", None),
        "generator:source": ("wind", None),
        "ref": ("T7", None),
    }


def test_record_without_renderable_geometry_emits_nothing(fake_collector) -> None:
    collector = fake_collector()
    record = SourceRecord(tags={"power": "line"}, geometry=GeometryCollection())
    PowerLayer().process_feature(record, collector)
    assert collector.shapes == []


def test_localised_names_follow_settings(point_record, fake_collector) -> None:
    collector = fake_collector()
    layer = PowerLayer(settings_from_dict({"languages": ["en", "de"]}))
    record = point_record({"power": "tower", "name": "Mast", "name:de": "Mast", "name:fr": "Pylone"})

    layer.process_feature(record, collector)

    (point,) = collector.shapes
    assert "name:de" in point.attrs
    assert "name:en" not in point.attrs
    assert "name:fr" not in point.attrs


def test_tag_sets_are_fixed() -> None:
    assert PRIMARY_TAGS == {"power", "voltage"}
    assert {"operator", "frequency", "ref", "generator:output:electricity"} <= DETAIL_TAGS
    assert not PRIMARY_TAGS & DETAIL_TAGS


def test_post_process_passes_merge_parameters() -> None:
    merger = Mock()
    merger.merge_multi_point.side_effect = lambda items: items
    merger.merge_nearby_polygons.side_effect = lambda items, *args: items
    merger.merge_line_strings.side_effect = lambda items, *args: items
    items: list[RenderedFeature] = []

    result = PowerLayer().post_process(10, items, merger)

    assert result == []
    merger.merge_nearby_polygons.assert_called_once_with(items, 3.0, 3.0, 0.5, 0.5)
    merger.merge_line_strings.assert_called_once_with(items, 5.0, 0.25, 8.0)


def test_post_process_propagates_geometry_errors() -> None:
    merger = Mock()
    merger.merge_multi_point.side_effect = lambda items: items
    merger.merge_nearby_polygons.side_effect = GeometryProcessingError("degenerate")

    with pytest.raises(GeometryProcessingError):
        PowerLayer().post_process(12, [], merger)
    merger.merge_line_strings.assert_not_called()
