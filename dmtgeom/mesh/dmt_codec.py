"""
dmtgeom/mesh/dmt_codec.py - Binary DMT codec v1.0

Byte layout of DMT triangle files (all little-endian):

- Header (file):
  - text: NUL-terminated, at most 256 bytes including the NUL
  - version: uint16 (1000)
  - flags: uint32 (bit 0 = vertices are float32 else float64,
                   bit 1 = coordinates are millimetres)
  - block_count: uint32
  - vertex_count: uint32 (all blocks)
  - triangle_count: uint32 (all blocks)
- Per block:
  - flags: uint32 (bit 0 = vertices carry normals)
  - vertex_count: uint32
  - triangle_count: uint32
  - vertices: x,y,z[,i,j,k] per vertex, float32 or float64
  - triangles: 3 indices per triangle, uint16 unless the block has more
    than 65535 vertices, then int32
  - version: uint16, must equal the file version

Reading produces TriangleBlockRecords for MeshLoader; writing takes a
DMTModel.
"""

from __future__ import annotations
from datetime import date
from typing import List, Optional
import struct
import logging

import numpy as np

from .. import __version__
from ..config import MeshIOConfig, get_mesh_io_config
from ..errors import MeshFileError, MeshFileErrorKind
from ..geometry import Point, Vector
from .loader import TriangleBlockRecord
from .model import DMTModel

logger = logging.getLogger("dmtgeom.mesh.dmt_codec")

FILE_FLAG_FLOAT_VERTICES = 1
FILE_FLAG_MILLIMETRES = 2
BLOCK_FLAG_VERTEX_NORMALS = 1

# Largest vertex count addressable with 16-bit indices
MAX_16BIT_INDEX = 0xFFFF

HEADER_TEXT = f"DMT Triangles saved by dmtgeom v{__version__}"


class _ByteCursor:
    """Sequential reader over an in-memory buffer."""

    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    def take(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self.data):
            raise MeshFileError(
                MeshFileErrorKind.UNDEFINED_ERROR,
                reason="unexpected end of data",
                offset=self.offset,
                requested=size,
            )
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def unpack(self, fmt: str):
        values = struct.unpack(fmt, self.take(struct.calcsize(fmt)))
        return values[0] if len(values) == 1 else values

    def array(self, dtype: str, count: int) -> np.ndarray:
        item = np.dtype(dtype)
        if count == 0:
            return np.empty(0, dtype=item)
        return np.frombuffer(self.take(item.itemsize * count), dtype=item, count=count)


def read_dmt_header(cursor: _ByteCursor, max_length: int) -> str:
    """Consume the NUL-terminated header text."""
    end = cursor.data.find(b"\x00", cursor.offset, cursor.offset + max_length)
    if end == -1:
        raw = cursor.take(max_length)
    else:
        raw = cursor.take(end - cursor.offset + 1)[:-1]
    return raw.decode("latin-1")


def read_dmt_bytes(data: bytes, config: Optional[MeshIOConfig] = None) -> List[TriangleBlockRecord]:
    """
    Parse DMT file content into triangle-block records.

    Raises:
        MeshFileError: UnsupportedFileFormat for an unknown version,
            NoTriangleBlocks / NoVertices / NoTriangles for empty header
            totals, UndefinedError for truncated data.
    """
    config = config or get_mesh_io_config()
    cursor = _ByteCursor(data)

    header = read_dmt_header(cursor, config.header_max_length)
    version = cursor.unpack("<H")
    if version != config.dmt_version:
        raise MeshFileError(
            MeshFileErrorKind.UNSUPPORTED_FILE_FORMAT,
            version=version,
            expected_version=config.dmt_version,
        )

    file_flags = cursor.unpack("<I")
    block_count, vertex_total, triangle_total = cursor.unpack("<III")
    if block_count == 0:
        raise MeshFileError(MeshFileErrorKind.NO_TRIANGLE_BLOCKS)
    if vertex_total == 0:
        raise MeshFileError(MeshFileErrorKind.NO_VERTICES)
    if triangle_total == 0:
        raise MeshFileError(MeshFileErrorKind.NO_TRIANGLES)

    coordinate_type = "<f4" if file_flags & FILE_FLAG_FLOAT_VERTICES else "<f8"
    logger.debug(
        f"DMT header '{header}': version {version}, {block_count} block(s), "
        f"{vertex_total} vertices, {triangle_total} triangles"
    )

    records = []
    for _ in range(block_count):
        block_flags, vertex_count, triangle_count = cursor.unpack("<III")
        has_normals = bool(block_flags & BLOCK_FLAG_VERTEX_NORMALS)
        width = 6 if has_normals else 3

        raw_vertices = cursor.array(coordinate_type, vertex_count * width)
        raw_vertices = raw_vertices.reshape(vertex_count, width).astype(np.float64)

        index_type = "<i4" if vertex_count > MAX_16BIT_INDEX else "<u2"
        raw_triangles = cursor.array(index_type, triangle_count * 3).reshape(triangle_count, 3)

        block_version = cursor.unpack("<H")

        vertices = [Point(x, y, z) for x, y, z in raw_vertices[:, :3].tolist()]
        normals = None
        if has_normals:
            normals = [Vector(i, j, k) for i, j, k in raw_vertices[:, 3:].tolist()]

        records.append(TriangleBlockRecord(
            vertices=vertices,
            triangles=[tuple(t) for t in raw_triangles.tolist()],
            normals=normals,
            block_version=block_version,
            file_version=version,
        ))

    return records


def write_dmt_bytes(
    model: DMTModel,
    config: Optional[MeshIOConfig] = None,
    header: Optional[str] = None,
) -> bytes:
    """
    Serialize a model to DMT file content.

    Raises:
        MeshFileError: NoTriangleBlocks, NoVertices or NoTriangles when
            the model has nothing to write.
    """
    config = config or get_mesh_io_config()

    if not model.triangle_blocks:
        raise MeshFileError(MeshFileErrorKind.NO_TRIANGLE_BLOCKS)
    if model.total_no_of_vertices == 0:
        raise MeshFileError(MeshFileErrorKind.NO_VERTICES)
    if model.total_no_of_triangles == 0:
        raise MeshFileError(MeshFileErrorKind.NO_TRIANGLES)

    # Blocks emptied by filtering would not read back
    blocks = [b for b in model.triangle_blocks if b.no_of_triangles]

    if header is None:
        header = f"{HEADER_TEXT} in MM {date.today().isoformat()}"
    header_bytes = header.encode("latin-1", errors="replace")[: config.header_max_length - 1]

    file_flags = FILE_FLAG_MILLIMETRES
    coordinate_type = "<f8"
    if config.write_float_vertices:
        file_flags |= FILE_FLAG_FLOAT_VERTICES
        coordinate_type = "<f4"

    data = bytearray(header_bytes + b"\x00")
    data.extend(struct.pack(
        "<HIIII",
        config.dmt_version,
        file_flags,
        len(blocks),
        sum(b.no_of_vertices for b in blocks),
        sum(b.no_of_triangles for b in blocks),
    ))

    for block in blocks:
        data.extend(struct.pack("<III", block.flags, block.no_of_vertices, block.no_of_triangles))

        coordinates = [p.to_tuple() for p in block.positions()]
        if block.vertices_have_normals:
            coordinates = [
                position + normal.to_tuple()
                for position, normal in zip(coordinates, block.vertex_normals)
            ]
        data.extend(np.array(coordinates, dtype=coordinate_type).tobytes())

        index_type = "<i4" if block.no_of_vertices > MAX_16BIT_INDEX else "<u2"
        indices = [t.indices for t in block.triangles]
        data.extend(np.array(indices, dtype=index_type).tobytes())

        data.extend(struct.pack("<H", config.dmt_version))

    return bytes(data)
