"""
dmtgeom - Geometric kernel v1.0

Unit-safe millimetre lengths, dense matrix algebra and a filtered
triangulated-mesh (DMT) construction pipeline.
"""

from __future__ import annotations

__version__ = "1.0.0"

from .lengths import Length, mm
from .matrix import Matrix
from .geometry import Point, Vector, BoundingBox
from .errors import (
    KernelError,
    MatrixError,
    InvalidArgument,
    DimensionMismatch,
    IndexOutOfRange,
    MeshFileError,
    MeshFileErrorKind,
)
from .config import MeshIOConfig, get_mesh_io_config, set_mesh_io_config

__all__ = [
    "__version__",
    "Length",
    "mm",
    "Matrix",
    "Point",
    "Vector",
    "BoundingBox",
    "KernelError",
    "MatrixError",
    "InvalidArgument",
    "DimensionMismatch",
    "IndexOutOfRange",
    "MeshFileError",
    "MeshFileErrorKind",
    "MeshIOConfig",
    "get_mesh_io_config",
    "set_mesh_io_config",
]
