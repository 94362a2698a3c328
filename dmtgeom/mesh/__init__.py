"""
mesh/__init__.py - Triangulated mesh (DMT) package v1.0

Mesh model, triangle admission filters, filtered loading and the DMT /
STL file codecs.
"""

from __future__ import annotations

from .model import (
    DMTVertex,
    DMTTriangle,
    DMTTriangleBlock,
    DMTModel,
)
from .filters import (
    TriangleAdmission,
    MeshFilter,
    FilterByNone,
    FilterByBoundingBox,
    BoundingBoxMode,
    FilterByDegeneracy,
    FilterByDuplicate,
    FilterByPredicate,
    FilterChain,
)
from .loader import (
    TriangleBlockRecord,
    MeshLoadResult,
    MeshLoader,
    load_mesh,
)
from .dmt_codec import read_dmt_bytes, write_dmt_bytes
from .stl_codec import read_stl_bytes, read_stl_lines, write_stl_bytes
from .io import (
    parse_file,
    read_file,
    read_file_with_excluded,
    append_file,
    write_file,
)

__all__ = [
    # Model
    "DMTVertex",
    "DMTTriangle",
    "DMTTriangleBlock",
    "DMTModel",
    # Filters
    "TriangleAdmission",
    "MeshFilter",
    "FilterByNone",
    "FilterByBoundingBox",
    "BoundingBoxMode",
    "FilterByDegeneracy",
    "FilterByDuplicate",
    "FilterByPredicate",
    "FilterChain",
    # Loading
    "TriangleBlockRecord",
    "MeshLoadResult",
    "MeshLoader",
    "load_mesh",
    # Codecs
    "read_dmt_bytes",
    "write_dmt_bytes",
    "read_stl_bytes",
    "read_stl_lines",
    "write_stl_bytes",
    # Files
    "parse_file",
    "read_file",
    "read_file_with_excluded",
    "append_file",
    "write_file",
]
