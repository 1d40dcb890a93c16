import mapbox_vector_tile
import pytest
from shapely.geometry import LineString, Point, box

from gridtiles.errors import GeometryProcessingError
from gridtiles.geometry import lonlat_to_world
from gridtiles.layer import PowerLayer
from gridtiles.models import SourceRecord
from gridtiles.tiling import classify_record, classify_records, encode_tile, features_for_tile, render_tile


def _tile_for(lon, lat, z):
    world_x, world_y = lonlat_to_world(lon, lat)
    return int(world_x * (1 << z)), int(world_y * (1 << z))


def _records():
    return [
        SourceRecord(tags={"power": "tower", "ref": "T1"}, geometry=Point(0.05, 0.05), id=1),
        SourceRecord(tags={"power": "line", "voltage": "380000"}, geometry=LineString([(0.0, 0.05), (0.1, 0.05)]), id=2),
        SourceRecord(tags={"power": "substation", "name": "Foo"}, geometry=box(0.04, 0.04, 0.06, 0.06), id=3),
        SourceRecord(tags={"highway": "residential"}, geometry=LineString([(0, 0), (1, 1)]), id=4),
    ]


def test_records_outside_the_layer_are_ignored() -> None:
    layer = PowerLayer()
    assert classify_record(layer, _records()[3]) == ()


def test_concurrent_classification_matches_sequential() -> None:
    layer = PowerLayer()
    records = _records() * 5

    concurrent = classify_records(layer, records, max_workers=4)
    sequential = [instruction for record in records for instruction in classify_record(layer, record)]

    assert concurrent == sequential
    assert len(concurrent) == 4 * 5


def test_features_for_tile_respects_zoom() -> None:
    instructions = classify_records(PowerLayer(), _records())
    x, y = _tile_for(0.05, 0.05, 6)

    features = features_for_tile(instructions, 6, x, y)

    # Only the 380kV line (minzoom 4) is visible at zoom 6.
    assert [feature.attrs["power"] for feature in features] == ["line"]


def test_features_for_tile_uses_tile_pixel_coordinates() -> None:
    instructions = classify_records(PowerLayer(), _records())
    x, y = _tile_for(0.05, 0.05, 14)

    features = features_for_tile(instructions, 14, x, y)

    tower = next(feature for feature in features if feature.attrs.get("power") == "tower")
    assert -32 <= tower.geometry.x <= 288
    assert -32 <= tower.geometry.y <= 288


def test_render_and_encode_tile_round_trip() -> None:
    layer = PowerLayer()
    instructions = classify_records(layer, _records())
    x, y = _tile_for(0.05, 0.05, 14)

    features = render_tile(layer, instructions, 14, x, y)
    decoded = mapbox_vector_tile.decode(encode_tile(features))

    assert "power" in decoded
    kinds = sorted(feature["properties"]["power"] for feature in decoded["power"]["features"])
    assert "tower" in kinds
    assert "line" in kinds


def test_render_tile_propagates_merge_failures() -> None:
    class BrokenMerger:
        def merge_multi_point(self, items):
            raise GeometryProcessingError("boom")

    layer = PowerLayer()
    instructions = classify_records(layer, _records())
    x, y = _tile_for(0.05, 0.05, 14)

    with pytest.raises(GeometryProcessingError):
        render_tile(layer, instructions, 14, x, y, merger=BrokenMerger())
