"""Geometry model shared by the resolver, the emitter and generated tables.

Generated Python tables import these classes directly, so their constructor
signatures are part of the output format.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class MoveTo:
    p: Point

    @property
    def points(self) -> tuple[Point, ...]:
        return (self.p,)


@dataclass(frozen=True)
class LineTo:
    p: Point

    @property
    def points(self) -> tuple[Point, ...]:
        return (self.p,)


@dataclass(frozen=True)
class QuadTo:
    p1: Point
    p2: Point

    @property
    def points(self) -> tuple[Point, ...]:
        return (self.p1, self.p2)


@dataclass(frozen=True)
class CurveTo:
    p1: Point
    p2: Point
    p3: Point

    @property
    def points(self) -> tuple[Point, ...]:
        return (self.p1, self.p2, self.p3)


@dataclass(frozen=True)
class ClosePath:
    @property
    def points(self) -> tuple[Point, ...]:
        return ()


PathCommand = Union[MoveTo, LineTo, QuadTo, CurveTo, ClosePath]
PathCommands = tuple[PathCommand, ...]


def with_points(command: PathCommand, points: tuple[Point, ...]) -> PathCommand:
    """Rebuild ``command`` with replacement points, keeping its kind."""
    return type(command)(*points)


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float


@dataclass(frozen=True)
class FlatShape:
    """One filled region: path commands or a circle, plus an opacity multiplier."""

    geometry: Union[PathCommands, Circle]
    opacity: float = 1.0

    @property
    def is_circle(self) -> bool:
        return isinstance(self.geometry, Circle)


@dataclass(frozen=True)
class IconGeometry:
    """A table entry: draw ``shapes`` in order, scaled by target / nominal_size."""

    identifier: str
    nominal_size: float
    shapes: tuple[FlatShape, ...]

    def scale_for(self, target_size: float) -> float:
        return target_size / self.nominal_size
