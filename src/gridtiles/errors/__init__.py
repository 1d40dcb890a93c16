"""Custom exception hierarchy for gridtiles."""

from __future__ import annotations


class GridTilesError(Exception):
    """Base class for all custom errors raised by gridtiles."""


class DomainError(GridTilesError):
    """Base class for errors about the source data itself."""


class InfrastructureError(GridTilesError):
    """Base class for failures inside the geometry and tiling machinery."""


class SourceDataError(DomainError):
    """Raised when an input file cannot be read as a feature collection."""


class GeometryProcessingError(InfrastructureError):
    """Raised when a merge step cannot process the emitted geometries.

    The tiling pipeline is expected to skip or retry the affected tile and
    zoom rather than silently dropping data.
    """


class TileEncodingError(InfrastructureError):
    """Raised when ``mapbox_vector_tile`` fails to encode a tile."""


class SettingsError(GridTilesError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""


__all__ = [
    "GridTilesError",
    "DomainError",
    "InfrastructureError",
    "SourceDataError",
    "GeometryProcessingError",
    "TileEncodingError",
    "SettingsError",
    "SettingsLoadError",
    "SettingsValidationError",
]
