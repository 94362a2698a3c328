"""
dmtgeom/mesh/stl_codec.py - STL codec v1.0

Binary STL:
- header: 80 bytes, ignored on read, zero-filled on write
- triangle_count: uint32
- per triangle (50 bytes): normal (3 x float32), three vertices
  (9 x float32), attribute (uint16)

ASCII STL is recognised by a first line starting with "solid", unless the
size matches the binary layout for its facet count. Only "vertex x y z"
lines are used, grouped into triangles at "endloop".

STL has no blocks or version tags, so a file reads as a single
TriangleBlockRecord. Vertices are shared by exact position.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Tuple
import struct
import logging

import numpy as np

from ..errors import MeshFileError, MeshFileErrorKind
from ..geometry import Point
from .loader import TriangleBlockRecord
from .model import DMTModel, DMTTriangle

logger = logging.getLogger("dmtgeom.mesh.stl_codec")

STL_HEADER_SIZE = 80

STL_FACET_DTYPE = np.dtype([
    ("normal", "<f4", (3,)),
    ("vertices", "<f4", (3, 3)),
    ("attribute", "<u2"),
])


class _RecordBuilder:
    """Collects triangles, sharing vertices with identical positions."""

    def __init__(self):
        self._index: Dict[Point, int] = {}
        self.vertices: List[Point] = []
        self.triangles: List[Tuple[int, int, int]] = []

    def add_triangle(self, p1: Point, p2: Point, p3: Point) -> None:
        self.triangles.append(tuple(self._vertex(p) for p in (p1, p2, p3)))

    def _vertex(self, point: Point) -> int:
        index = self._index.get(point)
        if index is None:
            index = len(self.vertices)
            self._index[point] = index
            self.vertices.append(point)
        return index

    def build(self) -> List[TriangleBlockRecord]:
        if not self.triangles:
            raise MeshFileError(MeshFileErrorKind.NO_TRIANGLES)
        return [TriangleBlockRecord(vertices=self.vertices, triangles=self.triangles)]


def is_ascii_stl(data: bytes) -> bool:
    """
    True for ASCII STL content.

    Binary headers may also start with "solid"; content whose size
    matches its binary facet count is treated as binary.
    """
    if not data.startswith(b"solid"):
        return False
    if len(data) >= STL_HEADER_SIZE + 4:
        facet_count, = struct.unpack_from("<I", data, STL_HEADER_SIZE)
        if len(data) == STL_HEADER_SIZE + 4 + facet_count * STL_FACET_DTYPE.itemsize:
            return False
    return True


def read_stl_bytes(data: bytes) -> List[TriangleBlockRecord]:
    """Parse STL content, ASCII or binary."""
    if is_ascii_stl(data):
        return read_stl_lines(data.decode("utf-8", errors="replace").splitlines())
    return read_binary_stl_bytes(data)


def read_binary_stl_bytes(data: bytes) -> List[TriangleBlockRecord]:
    """
    Parse binary STL content.

    Raises:
        MeshFileError: NoTriangles for a zero facet count, UndefinedError
            when the data is shorter than the facet count requires.
    """
    if len(data) < STL_HEADER_SIZE + 4:
        raise MeshFileError(
            MeshFileErrorKind.UNDEFINED_ERROR,
            reason="data too short for an STL header",
            size=len(data),
        )

    facet_count, = struct.unpack_from("<I", data, STL_HEADER_SIZE)
    expected = STL_HEADER_SIZE + 4 + facet_count * STL_FACET_DTYPE.itemsize
    if len(data) < expected:
        raise MeshFileError(
            MeshFileErrorKind.UNDEFINED_ERROR,
            reason="unexpected end of data",
            size=len(data),
            expected_size=expected,
        )

    builder = _RecordBuilder()
    if facet_count:
        facets = np.frombuffer(data, dtype=STL_FACET_DTYPE, count=facet_count, offset=STL_HEADER_SIZE + 4)
        # Stored normals are discarded; they are recomputed on write
        for corners in facets["vertices"].astype(np.float64).tolist():
            builder.add_triangle(*(Point(x, y, z) for x, y, z in corners))

    logger.debug(f"Binary STL: {facet_count} facet(s)")
    return builder.build()


def read_stl_lines(lines: Iterable[str]) -> List[TriangleBlockRecord]:
    """
    Parse ASCII STL lines.

    Raises:
        MeshFileError: NoTriangles when no facet is found, UndefinedError
            for a malformed vertex line or a loop without three vertices.
    """
    builder = _RecordBuilder()
    loop: List[Point] = []

    for line_number, line in enumerate(lines, start=1):
        text = line.strip()
        if text.startswith("vertex "):
            try:
                x, y, z = (float(v) for v in text.split()[1:4])
            except ValueError as exc:
                raise MeshFileError(
                    MeshFileErrorKind.UNDEFINED_ERROR,
                    reason="malformed vertex line",
                    line_number=line_number,
                ) from exc
            loop.append(Point(x, y, z))
        elif text.startswith("endloop"):
            if len(loop) != 3:
                raise MeshFileError(
                    MeshFileErrorKind.UNDEFINED_ERROR,
                    reason=f"facet loop has {len(loop)} vertices",
                    line_number=line_number,
                )
            builder.add_triangle(*loop)
            loop = []

    return builder.build()


def write_stl_bytes(model: DMTModel) -> bytes:
    """
    Serialize a model to binary STL; facet normals are computed.

    Raises:
        MeshFileError: NoTriangles when the model has no triangles.
    """
    triangle_count = model.total_no_of_triangles
    if triangle_count == 0:
        raise MeshFileError(MeshFileErrorKind.NO_TRIANGLES)

    facets = np.zeros(triangle_count, dtype=STL_FACET_DTYPE)
    for index, corners in enumerate(model.iter_triangle_points()):
        facets["normal"][index] = DMTTriangle.get_normal(*corners).to_tuple()
        facets["vertices"][index] = [p.to_tuple() for p in corners]

    header = bytes(STL_HEADER_SIZE) + struct.pack("<I", triangle_count)
    return header + facets.tobytes()
