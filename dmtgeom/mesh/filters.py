"""
dmtgeom/mesh/filters.py - Triangle admission filters v1.0

A mesh filter decides whether a candidate triangle is admitted while a
mesh is loaded. The loader calls can_add_triangle exactly once per
candidate, in source order, before it touches the mesh. Filters never
add or remove triangles themselves.

Filters are stateless unless documented otherwise. FilterByDuplicate
keeps a record of admitted triangles behind a lock.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Protocol, Set, Tuple, runtime_checkable
import threading
import logging

from ..geometry import BoundingBox, Point
from .model import DMTTriangle

logger = logging.getLogger("dmtgeom.mesh.filters")


@runtime_checkable
class TriangleAdmission(Protocol):
    """Anything with a can_add_triangle decision can act as a filter."""

    def can_add_triangle(self, vertex1: Point, vertex2: Point, vertex3: Point) -> bool:
        ...


class MeshFilter(ABC):
    """Base class for triangle admission policies."""

    @abstractmethod
    def can_add_triangle(self, vertex1: Point, vertex2: Point, vertex3: Point) -> bool:
        """Return True if the triangle should be admitted."""
        ...

    def __and__(self, other: "MeshFilter") -> "FilterChain":
        return FilterChain(self, other)


class FilterByNone(MeshFilter):
    """Admits every triangle, degenerate ones included."""

    def can_add_triangle(self, vertex1: Point, vertex2: Point, vertex3: Point) -> bool:
        return True


class BoundingBoxMode(Enum):
    """Which part of a triangle must lie inside the box."""
    ALL_VERTICES = "all_vertices"
    ANY_VERTEX = "any_vertex"
    CENTROID = "centroid"


class FilterByBoundingBox(MeshFilter):
    """Admits triangles inside an axis-aligned region (inclusive)."""

    def __init__(self, box: BoundingBox, mode: BoundingBoxMode = BoundingBoxMode.ALL_VERTICES):
        self.box = box
        self.mode = mode

    def can_add_triangle(self, vertex1: Point, vertex2: Point, vertex3: Point) -> bool:
        if self.mode == BoundingBoxMode.CENTROID:
            return self.box.contains(DMTTriangle.get_centroid(vertex1, vertex2, vertex3))
        inside = [self.box.contains(v) for v in (vertex1, vertex2, vertex3)]
        if self.mode == BoundingBoxMode.ANY_VERTEX:
            return any(inside)
        return all(inside)


class FilterByDegeneracy(MeshFilter):
    """
    Rejects flat triangles and triangles with area below min_area (square mm).

    A triangle of zero area (coincident or collinear vertices) is always
    rejected; a triangle whose area equals min_area is admitted.
    """

    def __init__(self, min_area: float = 0.0):
        if min_area < 0:
            raise ValueError(f"min_area must be non-negative, got {min_area}")
        self.min_area = float(min_area)

    def can_add_triangle(self, vertex1: Point, vertex2: Point, vertex3: Point) -> bool:
        area = DMTTriangle.get_area(vertex1, vertex2, vertex3)
        if area <= 0.0:
            return False
        return area >= self.min_area


class FilterByDuplicate(MeshFilter):
    """
    Rejects a triangle whose vertex set was already admitted.

    Winding is ignored: (a, b, c) and (c, b, a) are the same triangle.
    Repeated corners count, so (a, a, b) and (a, b, b) differ.
    Stateful; the record of admitted triangles is guarded by a lock so
    one instance may be shared between workers. Call reset() before
    reusing it for another load.
    """

    def __init__(self):
        self._seen: Set[Tuple[Tuple[float, float, float], ...]] = set()
        self._lock = threading.Lock()

    def can_add_triangle(self, vertex1: Point, vertex2: Point, vertex3: Point) -> bool:
        key = tuple(sorted(v.to_tuple() for v in (vertex1, vertex2, vertex3)))
        with self._lock:
            if key in self._seen:
                return False
            self._seen.add(key)
            return True

    @property
    def seen_count(self) -> int:
        with self._lock:
            return len(self._seen)

    def reset(self) -> None:
        with self._lock:
            self._seen.clear()


class FilterByPredicate(MeshFilter):
    """Adapts a plain callable of three points."""

    def __init__(self, predicate: Callable[[Point, Point, Point], bool]):
        self.predicate = predicate

    def can_add_triangle(self, vertex1: Point, vertex2: Point, vertex3: Point) -> bool:
        return bool(self.predicate(vertex1, vertex2, vertex3))


class FilterChain(MeshFilter):
    """Admits a triangle only if every member admits it, checked in order."""

    def __init__(self, *filters: TriangleAdmission):
        self.filters = list(filters)

    def can_add_triangle(self, vertex1: Point, vertex2: Point, vertex3: Point) -> bool:
        return all(f.can_add_triangle(vertex1, vertex2, vertex3) for f in self.filters)
