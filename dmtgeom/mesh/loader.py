"""
dmtgeom/mesh/loader.py - Filtered mesh construction v1.0

Turns parsed triangle-block records into DMT models, consulting a mesh
filter for every candidate triangle.

Each record is validated before any triangle is admitted. The first
structural failure raises MeshFileError and aborts the whole load; no
partial model is ever returned.

Vertex pools: the admitted and excluded models each keep their own pool
per block. A source vertex is copied into a pool the first time a
triangle routed to that pool references it, and reused by later
triangles routed to the same pool. Vertices of rejected triangles are
therefore never registered in the admitted model.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from ..config import MeshIOConfig, get_mesh_io_config
from ..errors import MeshFileError, MeshFileErrorKind
from ..geometry import Point, Vector
from .filters import FilterByNone, TriangleAdmission
from .model import DMTModel, DMTTriangleBlock

logger = logging.getLogger("dmtgeom.mesh.loader")


@dataclass
class TriangleBlockRecord:
    """
    One triangle block as parsed from a source.

    triangles index into vertices. normals, when present, has one entry
    per vertex. Versions are None for formats without version tags.
    """
    vertices: List[Point] = field(default_factory=list)
    triangles: List[Tuple[int, int, int]] = field(default_factory=list)
    normals: Optional[List[Vector]] = None
    block_version: Optional[int] = None
    file_version: Optional[int] = None

    @property
    def has_normals(self) -> bool:
        return self.normals is not None


@dataclass
class MeshLoadResult:
    """Admitted and excluded models produced by one load."""
    model: DMTModel
    excluded: DMTModel

    @property
    def admitted_count(self) -> int:
        return self.model.total_no_of_triangles

    @property
    def rejected_count(self) -> int:
        return self.excluded.total_no_of_triangles


def _check_triangle(
    triangle: Sequence[int],
    vertex_count: int,
    block_index: int,
    triangle_index: int,
) -> None:
    # Negative indices must not wrap around to the end of the vertex list
    if len(triangle) != 3 or any(not 0 <= i < vertex_count for i in triangle):
        raise MeshFileError(
            MeshFileErrorKind.UNDEFINED_ERROR,
            block_index=block_index,
            reason="triangle references a missing vertex",
            triangle_index=triangle_index,
            triangle=tuple(triangle),
        )


class _VertexPool:
    """Maps source vertex indices to indices in one target block."""

    def __init__(self, record: TriangleBlockRecord, block: DMTTriangleBlock):
        self._record = record
        self._block = block
        self._index_map: Dict[int, int] = {}

    def add_triangle(self, triangle: Sequence[int]) -> None:
        self._block.add_triangle(*(self._resolve(i) for i in triangle))

    def _resolve(self, source_index: int) -> int:
        target = self._index_map.get(source_index)
        if target is None:
            normal = self._record.normals[source_index] if self._record.has_normals else None
            target = self._block.add_vertex(self._record.vertices[source_index], normal)
            self._index_map[source_index] = target
        return target


class MeshLoader:
    """
    Builds DMT models from triangle-block records.

    Usage:
        loader = MeshLoader(FilterByBoundingBox(box))
        result = loader.load(records)
        result.model      # triangles the filter admitted
        result.excluded   # triangles the filter rejected
    """

    def __init__(
        self,
        mesh_filter: Optional[TriangleAdmission] = None,
        config: Optional[MeshIOConfig] = None,
    ):
        self.mesh_filter = mesh_filter if mesh_filter is not None else FilterByNone()
        self.config = config or get_mesh_io_config()

    def load(self, records: Iterable[TriangleBlockRecord]) -> MeshLoadResult:
        """Validate every record, then route each triangle through the filter."""
        records = list(records)
        if not records:
            raise MeshFileError(MeshFileErrorKind.NO_TRIANGLE_BLOCKS)

        for block_index, record in enumerate(records):
            self.validate_record(record, block_index)

        model = DMTModel()
        excluded = DMTModel()
        for block_index, record in enumerate(records):
            admitted_block, excluded_block = self._load_block(record, block_index)
            model.add_triangle_block(admitted_block)
            excluded.add_triangle_block(excluded_block)

        result = MeshLoadResult(model=model, excluded=excluded)
        logger.debug(
            f"Loaded {len(records)} block(s): {result.admitted_count} triangle(s) admitted, "
            f"{result.rejected_count} rejected"
        )
        if result.admitted_count == 0:
            logger.warning("Mesh filter rejected every triangle; admitted model is empty")
        return result

    def validate_record(self, record: TriangleBlockRecord, block_index: int = 0) -> None:
        """Raise MeshFileError if the record is structurally invalid."""
        if not record.vertices:
            raise MeshFileError(MeshFileErrorKind.NO_VERTICES, block_index=block_index)
        if not record.triangles:
            raise MeshFileError(MeshFileErrorKind.NO_TRIANGLES, block_index=block_index)
        if (
            record.block_version is not None
            and record.file_version is not None
            and record.block_version != record.file_version
        ):
            raise MeshFileError(
                MeshFileErrorKind.BLOCK_VERSION_DOES_NOT_MATCH_FILE_VERSION,
                block_index=block_index,
                block_version=record.block_version,
                file_version=record.file_version,
            )
        if record.has_normals and len(record.normals) != len(record.vertices):
            raise MeshFileError(
                MeshFileErrorKind.UNDEFINED_ERROR,
                block_index=block_index,
                reason="normal count does not match vertex count",
            )
        if self.config.validate_indices:
            vertex_count = len(record.vertices)
            for triangle_index, triangle in enumerate(record.triangles):
                _check_triangle(triangle, vertex_count, block_index, triangle_index)

    def _load_block(
        self,
        record: TriangleBlockRecord,
        block_index: int = 0,
    ) -> Tuple[DMTTriangleBlock, DMTTriangleBlock]:
        admitted_block = DMTTriangleBlock(record.has_normals)
        excluded_block = DMTTriangleBlock(record.has_normals)
        admitted_pool = _VertexPool(record, admitted_block)
        excluded_pool = _VertexPool(record, excluded_block)

        vertices = record.vertices
        for triangle_index, triangle in enumerate(record.triangles):
            # Checked here too when validate_indices is off
            _check_triangle(triangle, len(vertices), block_index, triangle_index)
            v1, v2, v3 = (vertices[i] for i in triangle)
            if self.mesh_filter.can_add_triangle(v1, v2, v3):
                admitted_pool.add_triangle(triangle)
            else:
                excluded_pool.add_triangle(triangle)

        return admitted_block, excluded_block


def load_mesh(
    records: Iterable[TriangleBlockRecord],
    mesh_filter: Optional[TriangleAdmission] = None,
    config: Optional[MeshIOConfig] = None,
) -> DMTModel:
    """Convenience wrapper returning only the admitted model."""
    return MeshLoader(mesh_filter, config).load(records).model
