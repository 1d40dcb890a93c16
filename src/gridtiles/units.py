"""Parsers for the unit-bearing tag values found on power features."""

from __future__ import annotations

from typing import Optional

# Checked in order so that "MW" and "KW" are stripped before the bare "W".
POWER_UNIT_MULTIPLIERS: tuple[tuple[str, float], ...] = (
    ("GW", 1000.0),
    ("MW", 1.0),
    ("KW", 0.001),
    ("W", 0.000001),
)


def _parse_int(token: str) -> Optional[int]:
    text = token.strip()
    # ``int`` accepts digit separators ("1_000"), which are not valid tag values.
    if not text or "_" in text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def parse_max_voltage(value: Optional[str]) -> int:
    """Return the highest voltage listed in *value*.

    Lines shared by several circuits carry a semicolon separated list such
    as ``"20000;400"``.  Tokens that are not plain integers are skipped, and
    ``0`` is returned when nothing parses, which callers read as "unknown".
    """

    if value is None:
        return 0
    max_voltage = 0
    for token in str(value).split(";"):
        voltage = _parse_int(token)
        if voltage is not None:
            max_voltage = max(max_voltage, voltage)
    return max_voltage


def parse_power_output(value: Optional[str]) -> float:
    """Convert an output string such as ``"250 MW"`` or ``"1.2 GW"`` to megawatts.

    Values without a unit are taken to be megawatts.  A number that cannot be
    parsed after the unit has been stripped yields ``0.0``.
    """

    if value is None:
        return 0.0

    normalised = str(value).strip().upper()
    multiplier = 1.0
    for suffix, unit_multiplier in POWER_UNIT_MULTIPLIERS:
        if normalised.endswith(suffix):
            multiplier = unit_multiplier
            normalised = normalised[: -len(suffix)].strip()
            break

    if "_" in normalised:
        return 0.0
    try:
        number = float(normalised)
    except ValueError:
        return 0.0
    # ``float`` happily accepts "nan" and "inf", neither of which is an output.
    if number != number or number in (float("inf"), float("-inf")):
        return 0.0
    return number * multiplier


__all__ = ["POWER_UNIT_MULTIPLIERS", "parse_max_voltage", "parse_power_output"]
