"""Data model: geometry primitives and icon records."""

from icontable.models.geometry import (
    Circle,
    ClosePath,
    CurveTo,
    FlatShape,
    IconGeometry,
    LineTo,
    MoveTo,
    PathCommands,
    Point,
    QuadTo,
)
from icontable.models.icon import IconKey, ResolvedIcon, SourceRecord

__all__ = [
    "Circle",
    "ClosePath",
    "CurveTo",
    "FlatShape",
    "IconGeometry",
    "IconKey",
    "LineTo",
    "MoveTo",
    "PathCommands",
    "Point",
    "QuadTo",
    "ResolvedIcon",
    "SourceRecord",
]
