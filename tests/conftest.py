import sys
from pathlib import Path

import pytest
from shapely.geometry import LineString, Point, Polygon, box

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Allow running the suite from a checkout without installing the package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from gridtiles.models import SourceRecord  # noqa: E402


class FakeBuilder:
    """Records every call the layer makes on a shape."""

    def __init__(self, kind: str, pixel_zoom: int) -> None:
        self.kind = kind
        self.min_zoom = 0
        self.max_zoom = 15
        self.min_pixel_size = None
        self.buffer_pixels = None
        self.attrs: dict[str, tuple[str, int | None]] = {}
        self._pixel_zoom = pixel_zoom
        self.pixel_size_queries: list[float] = []

    def set_zoom_range(self, min_zoom, max_zoom):
        self.min_zoom, self.max_zoom = min_zoom, max_zoom
        return self

    def set_min_zoom(self, min_zoom):
        self.min_zoom = min_zoom
        return self

    def set_min_pixel_size(self, pixels):
        self.min_pixel_size = pixels
        return self

    def set_buffer_pixels(self, pixels):
        self.buffer_pixels = pixels
        return self

    def get_min_zoom_for_pixel_size(self, pixels):
        self.pixel_size_queries.append(pixels)
        return self._pixel_zoom

    def set_attr(self, key, value):
        self.attrs[key] = (value, None)
        return self

    def set_attr_with_min_zoom(self, key, value, min_zoom):
        self.attrs[key] = (value, min_zoom)
        return self


class FakeCollector:
    def __init__(self, pixel_zoom: int = 15) -> None:
        self.pixel_zoom = pixel_zoom
        self.shapes: list[FakeBuilder] = []

    def _add(self, kind):
        builder = FakeBuilder(kind, self.pixel_zoom)
        self.shapes.append(builder)
        return builder

    def polygon(self, layer):
        return self._add("polygon")

    def line(self, layer):
        return self._add("line")

    def point(self, layer):
        return self._add("point")

    def point_on_surface(self, layer):
        return self._add("point_on_surface")


@pytest.fixture
def fake_collector():
    return FakeCollector


def make_area(tags, size_deg: float = 0.001) -> SourceRecord:
    return SourceRecord(tags=dict(tags), geometry=box(0.0, 0.0, size_deg, size_deg), id=1)


def make_line(tags) -> SourceRecord:
    return SourceRecord(tags=dict(tags), geometry=LineString([(0.0, 0.0), (0.05, 0.02)]), id=2)


def make_point(tags) -> SourceRecord:
    return SourceRecord(tags=dict(tags), geometry=Point(0.05, 0.05), id=3)


@pytest.fixture
def area_record():
    return make_area


@pytest.fixture
def line_record():
    return make_line


@pytest.fixture
def point_record():
    return make_point


@pytest.fixture
def square():
    return lambda x, y, size: Polygon([(x, y), (x + size, y), (x + size, y + size), (x, y + size)])
