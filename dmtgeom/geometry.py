"""
dmtgeom/geometry.py - Positional primitives v1.0

Points, vectors and axis-aligned bounding boxes with Length coordinates.
Points are hashable with exact float semantics so they can key a vertex
pool while a mesh is built.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, Tuple
import math
import logging

from .lengths import Length

logger = logging.getLogger("dmtgeom.geometry")


@dataclass(frozen=True)
class Vector:
    """Direction or offset with Length components."""
    i: Length = Length(0.0)
    j: Length = Length(0.0)
    k: Length = Length(0.0)

    def __post_init__(self):
        object.__setattr__(self, "i", Length(self.i))
        object.__setattr__(self, "j", Length(self.j))
        object.__setattr__(self, "k", Length(self.k))

    @property
    def magnitude(self) -> Length:
        return Length(math.sqrt(self.dot(self)))

    def dot(self, other: "Vector") -> float:
        return self.i * other.i + self.j * other.j + self.k * other.k

    def cross(self, other: "Vector") -> "Vector":
        return Vector(
            self.j * other.k - self.k * other.j,
            self.k * other.i - self.i * other.k,
            self.i * other.j - self.j * other.i,
        )

    def normalized(self) -> "Vector":
        """Unit vector; the zero vector is returned unchanged."""
        length = self.magnitude.value
        if length == 0.0:
            return self
        return Vector(self.i / length, self.j / length, self.k / length)

    def __add__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        return Vector(self.i + other.i, self.j + other.j, self.k + other.k)

    def __sub__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        return Vector(self.i - other.i, self.j - other.j, self.k - other.k)

    def __mul__(self, scalar: float) -> "Vector":
        return Vector(self.i * scalar, self.j * scalar, self.k * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector":
        return Vector(-self.i, -self.j, -self.k)

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.i.value, self.j.value, self.k.value)


@dataclass(frozen=True)
class Point:
    """Position in millimetres."""
    x: Length = Length(0.0)
    y: Length = Length(0.0)
    z: Length = Length(0.0)

    def __post_init__(self):
        object.__setattr__(self, "x", Length(self.x))
        object.__setattr__(self, "y", Length(self.y))
        object.__setattr__(self, "z", Length(self.z))

    def __sub__(self, other: Any):
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y, self.z - other.z)
        if isinstance(other, Vector):
            return Point(self.x - other.i, self.y - other.j, self.z - other.k)
        return NotImplemented

    def __add__(self, other: Any) -> "Point":
        if not isinstance(other, Vector):
            return NotImplemented
        return Point(self.x + other.i, self.y + other.j, self.z + other.k)

    def distance_to(self, other: "Point") -> Length:
        return (other - self).magnitude

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x.value, self.y.value, self.z.value)

    @classmethod
    def from_tuple(cls, values: Iterable[float]) -> "Point":
        x, y, z = values
        return cls(x, y, z)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box; containment is inclusive."""
    min_point: Point
    max_point: Point

    def __post_init__(self):
        lo, hi = self.min_point, self.max_point
        if lo.x > hi.x or lo.y > hi.y or lo.z > hi.z:
            raise ValueError(f"Bounding box minimum {lo} exceeds maximum {hi}")

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> "BoundingBox":
        """Smallest box enclosing the points."""
        points = list(points)
        if not points:
            raise ValueError("Cannot compute a bounding box of no points")
        xs = [p.x.value for p in points]
        ys = [p.y.value for p in points]
        zs = [p.z.value for p in points]
        return cls(
            Point(min(xs), min(ys), min(zs)),
            Point(max(xs), max(ys), max(zs)),
        )

    @property
    def center(self) -> Point:
        return Point(
            (self.min_point.x + self.max_point.x) / 2,
            (self.min_point.y + self.max_point.y) / 2,
            (self.min_point.z + self.max_point.z) / 2,
        )

    @property
    def size(self) -> Vector:
        return self.max_point - self.min_point

    @property
    def diagonal(self) -> Length:
        """Diagonal length of bounding box."""
        return self.size.magnitude

    def contains(self, point: Point) -> bool:
        lo, hi = self.min_point, self.max_point
        return (
            lo.x <= point.x <= hi.x
            and lo.y <= point.y <= hi.y
            and lo.z <= point.z <= hi.z
        )

    def union(self, other: "BoundingBox") -> "BoundingBox":
        return BoundingBox.from_points(
            [self.min_point, self.max_point, other.min_point, other.max_point]
        )
