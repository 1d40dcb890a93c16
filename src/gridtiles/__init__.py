"""Zoom-aware classification of power infrastructure for vector tiles."""

from __future__ import annotations

from .layer import PowerLayer
from .models import GeometryKind, RenderingInstruction, SourceRecord

__all__ = ["PowerLayer", "GeometryKind", "RenderingInstruction", "SourceRecord"]
