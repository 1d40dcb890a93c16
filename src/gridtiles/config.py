"""Default configuration values for the power layer."""

from __future__ import annotations

from typing import Final

LAYER_NAME: Final[str] = "power"

# The tile pyramid covered by this layer.  Every zoom threshold computed by the
# classifiers is clamped into this range.
MIN_ZOOM: Final[int] = 0
MAX_ZOOM: Final[int] = 15

TILE_SIZE_PX: Final[int] = 256
TILE_EXTENT: Final[int] = 4096

# Pixel size used for culling at the highest zoom so that tiny features are
# still emitted once the user has zoomed all the way in.
MIN_PIXEL_SIZE_AT_MAX_ZOOM: Final[float] = TILE_SIZE_PX / TILE_EXTENT

# ---------------------------------------------------------------------------
# Geometry dispatcher
# ---------------------------------------------------------------------------

AREA_ZOOM_RANGE: Final[tuple[int, int]] = (8, MAX_ZOOM)
AREA_MIN_PIXEL_SIZE: Final[float] = 2.0
AREA_LABEL_PIXEL_WIDTH: Final[float] = 32.0
LINE_MIN_PIXEL_SIZE: Final[float] = 1.0
LINE_DETAIL_ZOOM_OFFSET: Final[int] = 3
LABEL_BUFFER_PIXELS: Final[float] = 32.0
DEFAULT_BUFFER_PIXELS: Final[float] = 4.0

# ---------------------------------------------------------------------------
# Post-processing merge tolerances (tile pixel units)
# ---------------------------------------------------------------------------

POLYGON_MERGE_MIN_AREA: Final[float] = 3.0
POLYGON_MERGE_MIN_HOLE_AREA: Final[float] = 3.0
POLYGON_MERGE_MIN_DIST: Final[float] = 0.5
POLYGON_MERGE_BUFFER: Final[float] = 0.5
LINE_MERGE_MIN_LENGTH: Final[float] = 5.0
LINE_MERGE_TOLERANCE: Final[float] = 0.25
LINE_MERGE_BUFFER: Final[float] = 8.0

DEFAULT_MAX_WORKERS: Final[int] = 4
