"""
dmtgeom Test Configuration and Fixtures

Shared mesh records and DMT byte builders.
"""

import struct

import pytest


def build_dmt_bytes(
    blocks,
    version=1000,
    file_flags=2,
    header=b"test header",
    block_versions=None,
):
    """
    Hand-assemble DMT file content.

    Args:
        blocks: list of (vertices, triangles) with float64 xyz vertices
        block_versions: per-block version tags (defaults to version)
    """
    block_versions = block_versions or [version] * len(blocks)
    data = bytearray(header + b"\x00")
    data += struct.pack(
        "<HIIII",
        version,
        file_flags,
        len(blocks),
        sum(len(v) for v, _ in blocks),
        sum(len(t) for _, t in blocks),
    )
    for (vertices, triangles), block_version in zip(blocks, block_versions):
        data += struct.pack("<III", 0, len(vertices), len(triangles))
        for vertex in vertices:
            data += struct.pack("<ddd", *vertex)
        for triangle in triangles:
            data += struct.pack("<HHH", *triangle)
        data += struct.pack("<H", block_version)
    return bytes(data)


@pytest.fixture
def square_record():
    """Unit square in the XY plane as two triangles sharing an edge."""
    from dmtgeom.geometry import Point
    from dmtgeom.mesh.loader import TriangleBlockRecord

    return TriangleBlockRecord(
        vertices=[
            Point(0, 0, 0),
            Point(1, 0, 0),
            Point(1, 1, 0),
            Point(0, 1, 0),
        ],
        triangles=[(0, 1, 2), (0, 2, 3)],
    )


@pytest.fixture
def strip_record():
    """Three triangles marching along +X, the last one far away."""
    from dmtgeom.geometry import Point
    from dmtgeom.mesh.loader import TriangleBlockRecord

    return TriangleBlockRecord(
        vertices=[
            Point(0, 0, 0),
            Point(1, 0, 0),
            Point(0, 1, 0),
            Point(1, 1, 0),
            Point(100, 0, 0),
            Point(101, 0, 0),
            Point(100, 1, 0),
        ],
        triangles=[(0, 1, 2), (1, 3, 2), (4, 5, 6)],
    )


@pytest.fixture
def square_model(square_record):
    """DMTModel loaded from square_record."""
    from dmtgeom.mesh.loader import load_mesh

    return load_mesh([square_record])


@pytest.fixture
def square_dmt_bytes():
    """DMT content for a unit square, two triangles, one block."""
    return build_dmt_bytes([
        (
            [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)],
            [(0, 1, 2), (0, 2, 3)],
        )
    ])


@pytest.fixture
def dmt_builder():
    """The build_dmt_bytes helper, for tests that need custom layouts."""
    return build_dmt_bytes
