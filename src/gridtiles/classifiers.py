"""Minimum-zoom classifiers for power lines, labels and plants.

Each classifier maps the tags of a :class:`~gridtiles.models.SourceRecord`
onto the first zoom at which the shape (or its label) should be visible.
Unknown or unparsable values always fall into the least prominent bucket so
that noisy data never shows up at low zoom.
"""

from __future__ import annotations

from typing import Final, Mapping, Optional

from .units import parse_max_voltage, parse_power_output

# (inclusive lower bound in volts, minzoom), highest voltage first.
VOLTAGE_ZOOM_BANDS: Final[tuple[tuple[int, int], ...]] = (
    (345_000, 4),
    (220_000, 5),
    (110_000, 6),
    (33_000, 7),
    (10_000, 8),
    (1_000, 9),
)
UNKNOWN_VOLTAGE_ZOOM: Final[int] = 10

# (inclusive lower bound in MW, minzoom), largest output first.
PLANT_OUTPUT_ZOOM_BANDS: Final[tuple[tuple[float, int], ...]] = (
    (1000.0, 6),
    (500.0, 7),
    (100.0, 8),
    (50.0, 9),
    (10.0, 10),
)
SMALL_PLANT_ZOOM: Final[int] = 11

VOLTAGE_LINE_TYPES: Final[frozenset[str]] = frozenset({"line", "cable"})
MINOR_LINE_ZOOM: Final[int] = 13

TOWER_SUBSTATION_ZOOM: Final[int] = 12
WIND_GENERATOR_ZOOM: Final[int] = 13
GENERATOR_ZOOM: Final[int] = 15
DEFAULT_LABEL_ZOOM: Final[int] = 14

# Fixed label zooms keyed on the ``power`` value.  ``plant`` and
# ``generator`` depend on further tags and are handled separately.
LABEL_ZOOMS: Final[Mapping[str, int]] = {
    "tower": TOWER_SUBSTATION_ZOOM,
    "substation": TOWER_SUBSTATION_ZOOM,
    "pole": DEFAULT_LABEL_ZOOM,
    "transformer": DEFAULT_LABEL_ZOOM,
}


def voltage_min_zoom(voltage: Optional[str]) -> int:
    """Bucket the highest voltage in *voltage* into a minimum zoom."""

    parsed = parse_max_voltage(voltage)
    for lower_bound, zoom in VOLTAGE_ZOOM_BANDS:
        if parsed >= lower_bound:
            return zoom
    return UNKNOWN_VOLTAGE_ZOOM


def plant_output_min_zoom(output: Optional[str]) -> int:
    """Bucket a ``plant:output:electricity`` value into a minimum zoom."""

    if output is None:
        return SMALL_PLANT_ZOOM
    megawatts = parse_power_output(output)
    for lower_bound, zoom in PLANT_OUTPUT_ZOOM_BANDS:
        if megawatts >= lower_bound:
            return zoom
    return SMALL_PLANT_ZOOM


def line_min_zoom(tags: Mapping[str, str]) -> int:
    """Return the minimum zoom for a linear power feature."""

    if tags.get("power") in VOLTAGE_LINE_TYPES:
        return voltage_min_zoom(tags.get("voltage"))
    return MINOR_LINE_ZOOM


def generator_min_zoom(tags: Mapping[str, str]) -> int:
    if tags.get("generator:source") == "wind":
        return WIND_GENERATOR_ZOOM
    return GENERATOR_ZOOM


def plant_min_zoom(tags: Mapping[str, str]) -> int:
    return plant_output_min_zoom(tags.get("plant:output:electricity"))


def label_min_zoom(tags: Mapping[str, str]) -> int:
    """Return the minimum zoom for a point feature or an area label."""

    power = tags.get("power")
    if power == "plant":
        return plant_min_zoom(tags)
    if power == "generator":
        return generator_min_zoom(tags)
    return LABEL_ZOOMS.get(power, DEFAULT_LABEL_ZOOM)


__all__ = [
    "VOLTAGE_ZOOM_BANDS",
    "PLANT_OUTPUT_ZOOM_BANDS",
    "UNKNOWN_VOLTAGE_ZOOM",
    "SMALL_PLANT_ZOOM",
    "MINOR_LINE_ZOOM",
    "DEFAULT_LABEL_ZOOM",
    "voltage_min_zoom",
    "plant_output_min_zoom",
    "line_min_zoom",
    "generator_min_zoom",
    "plant_min_zoom",
    "label_min_zoom",
]
