"""
dmtgeom/mesh/model.py - Triangulated mesh model v1.0

In-memory DMT representation: a model is an ordered list of triangle
blocks; each block owns a vertex list (optionally with per-vertex
normals) and one index triple per triangle.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple
import logging

from ..geometry import BoundingBox, Point, Vector

logger = logging.getLogger("dmtgeom.mesh.model")


@dataclass(frozen=True)
class DMTVertex:
    """Vertex position with an optional normal."""
    position: Point
    normal: Optional[Vector] = None


@dataclass(frozen=True)
class DMTTriangle:
    """Triangle as three indices into its block's vertex list."""
    vertex1: int
    vertex2: int
    vertex3: int

    @property
    def indices(self) -> Tuple[int, int, int]:
        return (self.vertex1, self.vertex2, self.vertex3)

    @staticmethod
    def get_normal(vertex1: Point, vertex2: Point, vertex3: Point) -> Vector:
        """Unit normal by the right-hand rule (zero vector when degenerate)."""
        return (vertex2 - vertex1).cross(vertex3 - vertex1).normalized()

    @staticmethod
    def get_centroid(vertex1: Point, vertex2: Point, vertex3: Point) -> Point:
        return Point(
            (vertex1.x + vertex2.x + vertex3.x) / 3.0,
            (vertex1.y + vertex2.y + vertex3.y) / 3.0,
            (vertex1.z + vertex2.z + vertex3.z) / 3.0,
        )

    @staticmethod
    def get_area(vertex1: Point, vertex2: Point, vertex3: Point) -> float:
        """Area in square millimetres."""
        return (vertex2 - vertex1).cross(vertex3 - vertex1).magnitude.value / 2.0


class DMTTriangleBlock:
    """
    Block of triangles sharing one vertex list.

    Usage:
        block = DMTTriangleBlock()
        v0 = block.add_vertex(Point(0, 0, 0))
        v1 = block.add_vertex(Point(1, 0, 0))
        v2 = block.add_vertex(Point(0, 1, 0))
        block.add_triangle(v0, v1, v2)
    """

    def __init__(self, vertices_have_normals: bool = False):
        self._vertices: List[Point] = []
        self._normals: List[Vector] = []
        self._first: List[int] = []
        self._second: List[int] = []
        self._third: List[int] = []
        self.vertices_have_normals = vertices_have_normals

    @property
    def no_of_vertices(self) -> int:
        return len(self._vertices)

    @property
    def no_of_triangles(self) -> int:
        return len(self._first)

    @property
    def flags(self) -> int:
        """Block flags as written to DMT files (bit 0: vertices carry normals)."""
        return 1 if self.vertices_have_normals else 0

    @property
    def vertex_normals(self) -> List[Vector]:
        return list(self._normals)

    def add_vertex(self, position: Point, normal: Optional[Vector] = None) -> int:
        """Add a vertex and return its index."""
        if self.vertices_have_normals:
            if normal is None:
                raise ValueError("Block vertices carry normals; a normal is required")
            self._normals.append(normal)
        self._vertices.append(position)
        return len(self._vertices) - 1

    def add_triangle(self, vertex1: int, vertex2: int, vertex3: int) -> None:
        """Add a triangle referencing existing vertex indices."""
        self._first.append(vertex1)
        self._second.append(vertex2)
        self._third.append(vertex3)

    def add_triangle_from_points(self, vertex1: Point, vertex2: Point, vertex3: Point) -> None:
        """Add three new vertices and the triangle joining them."""
        indices = [self.add_vertex(p) for p in (vertex1, vertex2, vertex3)]
        self.add_triangle(*indices)

    def get_vertex(self, index: int) -> Point:
        return self._vertices[index]

    def get_triangle(self, index: int) -> DMTTriangle:
        return DMTTriangle(self._first[index], self._second[index], self._third[index])

    def get_triangle_points(self, index: int) -> Tuple[Point, Point, Point]:
        triangle = self.get_triangle(index)
        return tuple(self._vertices[i] for i in triangle.indices)

    @property
    def vertices(self) -> Iterator[DMTVertex]:
        for index, position in enumerate(self._vertices):
            normal = self._normals[index] if self.vertices_have_normals else None
            yield DMTVertex(position, normal)

    @property
    def triangles(self) -> Iterator[DMTTriangle]:
        for index in range(self.no_of_triangles):
            yield self.get_triangle(index)

    def positions(self) -> List[Point]:
        return list(self._vertices)

    def get_normal(self, vertex: Point) -> Vector:
        """Face normal of the first triangle that uses vertex."""
        vertex_index = self._vertices.index(vertex)
        for index in range(self.no_of_triangles):
            if vertex_index in self.get_triangle(index).indices:
                return DMTTriangle.get_normal(*self.get_triangle_points(index))
        raise ValueError(f"No triangle uses vertex {vertex}")

    @property
    def bounding_box(self) -> Optional[BoundingBox]:
        if not self._vertices:
            return None
        return BoundingBox.from_points(self._vertices)

    def clone(self) -> "DMTTriangleBlock":
        block = DMTTriangleBlock(self.vertices_have_normals)
        block._vertices = list(self._vertices)
        block._normals = list(self._normals)
        block._first = list(self._first)
        block._second = list(self._second)
        block._third = list(self._third)
        return block


class DMTModel:
    """Triangulated model: an ordered list of triangle blocks."""

    def __init__(self, triangle_blocks: Optional[List[DMTTriangleBlock]] = None):
        self.triangle_blocks: List[DMTTriangleBlock] = list(triangle_blocks or [])

    def add_triangle_block(self, block: DMTTriangleBlock) -> None:
        self.triangle_blocks.append(block)

    def extend(self, other: "DMTModel") -> None:
        """Append every block of other (blocks are shared, not copied)."""
        self.triangle_blocks.extend(other.triangle_blocks)

    @property
    def total_no_of_vertices(self) -> int:
        return sum(block.no_of_vertices for block in self.triangle_blocks)

    @property
    def total_no_of_triangles(self) -> int:
        return sum(block.no_of_triangles for block in self.triangle_blocks)

    @property
    def is_empty(self) -> bool:
        return self.total_no_of_triangles == 0

    @property
    def bounding_box(self) -> Optional[BoundingBox]:
        points = [p for block in self.triangle_blocks for p in block.positions()]
        if not points:
            return None
        return BoundingBox.from_points(points)

    def iter_triangle_points(self) -> Iterator[Tuple[Point, Point, Point]]:
        for block in self.triangle_blocks:
            for index in range(block.no_of_triangles):
                yield block.get_triangle_points(index)

    def to_point_cloud(self) -> List[Point]:
        """All vertex positions, block by block."""
        return [p for block in self.triangle_blocks for p in block.positions()]

    def surface_area(self) -> float:
        """Total triangle area in square millimetres."""
        return sum(DMTTriangle.get_area(*points) for points in self.iter_triangle_points())

    def clone(self) -> "DMTModel":
        return DMTModel([block.clone() for block in self.triangle_blocks])

    def __repr__(self) -> str:
        return (
            f"DMTModel(blocks={len(self.triangle_blocks)}, "
            f"vertices={self.total_no_of_vertices}, "
            f"triangles={self.total_no_of_triangles})"
        )
