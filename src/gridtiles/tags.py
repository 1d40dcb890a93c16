"""Tag sets copied onto power shapes, and the helpers that copy them."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Iterable

from .config import MAX_ZOOM
from .interfaces import FeatureBuilder
from .models import SourceRecord

if TYPE_CHECKING:
    from .settings import LayerSettings

# Always copied, at the shape's own visibility range.
PRIMARY_TAGS: Final[frozenset[str]] = frozenset({"power", "voltage"})

# Detail tags shared by every layer.
COMMON_DETAIL_TAGS: Final[frozenset[str]] = frozenset({"name", "wikidata", "wikipedia"})

POWER_DETAIL_TAGS: Final[frozenset[str]] = frozenset({
    "operator",
    "frequency",
    "cables",
    "circuits",
    "material",
    "design",
    "structure",
    "location",
    "ref",
    "plant:source",
    "plant:method",
    "plant:output:electricity",
    "generator:source",
    "generator:method",
    "generator:type",
    "generator:output:electricity",
})

# Copied only from the feature's detail zoom onwards.
DETAIL_TAGS: Final[frozenset[str]] = COMMON_DETAIL_TAGS | POWER_DETAIL_TAGS


def _expand_keys(keys: Iterable[str], settings: "LayerSettings | None") -> list[str]:
    """Return *keys* in a stable order, adding localised names when configured."""

    expanded = sorted(set(keys))
    if settings is not None and "name" in expanded:
        expanded.extend(f"name:{language}" for language in settings.languages)
    return expanded


def _tag_values(record: SourceRecord, keys: Iterable[str], settings: "LayerSettings | None"):
    for key in _expand_keys(keys, settings):
        if record.has_tag(key):
            yield key, record.get_string(key)


def set_attributes(
    record: SourceRecord,
    feature: FeatureBuilder,
    keys: Iterable[str],
    settings: "LayerSettings | None" = None,
) -> None:
    """Copy every present tag in *keys* onto *feature* without zoom gating."""

    for key, value in _tag_values(record, keys, settings):
        feature.set_attr(key, value)


def set_attributes_with_minzoom(
    record: SourceRecord,
    feature: FeatureBuilder,
    keys: Iterable[str],
    min_zoom: int,
    settings: "LayerSettings | None" = None,
) -> None:
    """Copy every present tag in *keys* onto *feature* from *min_zoom* onwards."""

    min_zoom = min(max(min_zoom, feature.min_zoom), MAX_ZOOM)
    for key, value in _tag_values(record, keys, settings):
        feature.set_attr_with_min_zoom(key, value, min_zoom)


__all__ = [
    "PRIMARY_TAGS",
    "COMMON_DETAIL_TAGS",
    "POWER_DETAIL_TAGS",
    "DETAIL_TAGS",
    "set_attributes",
    "set_attributes_with_minzoom",
]
