"""
dmtgeom/errors.py - Kernel error taxonomy v1.0

Defines structured error types for matrix algebra and mesh file
handling. Every error carries a stable code for programmatic handling,
a fixed human-readable message and an optional context dictionary.

Matrix errors also subclass the matching builtin (ValueError /
IndexError) so callers that only know the builtin still catch them.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Tuple
from enum import Enum
import logging

logger = logging.getLogger("dmtgeom.errors")


# =============================================================================
# ERROR CATEGORIES
# =============================================================================

class KernelErrorCategory(Enum):
    """Categories of kernel errors."""
    ARGUMENT = "argument"     # Invalid constructor / operation argument
    DIMENSION = "dimension"   # Shape mismatch between operands
    INDEX = "index"           # Element access outside the matrix
    MESH_FILE = "mesh_file"   # Mesh file content or path failure


# =============================================================================
# BASE ERROR CLASS
# =============================================================================

class KernelError(Exception):
    """
    Base class for kernel errors.

    Provides structured error information with:
    - Error code for programmatic handling
    - Human-readable message
    - Detailed context for debugging
    """

    code: str = "KERN_000"
    category: KernelErrorCategory = KernelErrorCategory.ARGUMENT

    def __init__(
        self,
        message: str = "",
        *,
        details: Optional[Dict[str, Any]] = None,
        **kwargs,
    ):
        self.message = message or self.__class__.__doc__ or "Kernel error"
        self.details = dict(details or {})
        self.details.update(kwargs)

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for reporting."""
        return {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


# =============================================================================
# MATRIX ERRORS
# =============================================================================

class MatrixError(KernelError):
    """Matrix operation failed."""

    code = "MTX_000"


class InvalidArgument(MatrixError, ValueError):
    """Invalid matrix argument."""

    code = "MTX_001"
    category = KernelErrorCategory.ARGUMENT

    def __init__(self, argument: str, value: Any, reason: str, **kwargs):
        super().__init__(
            f"Invalid {argument} {value!r}: {reason}",
            argument=argument,
            value=value,
            reason=reason,
            **kwargs,
        )


class DimensionMismatch(MatrixError, ValueError):
    """Matrix shapes are incompatible for the operation."""

    code = "MTX_002"
    category = KernelErrorCategory.DIMENSION

    def __init__(
        self,
        operation: str,
        left_shape: Tuple[int, ...],
        right_shape: Tuple[int, ...],
        **kwargs,
    ):
        super().__init__(
            f"Unable to calculate {operation}: shape {left_shape} "
            f"is incompatible with shape {right_shape}",
            operation=operation,
            left_shape=left_shape,
            right_shape=right_shape,
            **kwargs,
        )


class IndexOutOfRange(MatrixError, IndexError):
    """Matrix element index outside the matrix bounds."""

    code = "MTX_003"
    category = KernelErrorCategory.INDEX

    def __init__(self, row: Any, col: Any, shape: Tuple[int, int], **kwargs):
        super().__init__(
            f"Index ({row}, {col}) is outside a {shape[0]}x{shape[1]} matrix",
            row=row,
            col=col,
            shape=shape,
            **kwargs,
        )


# =============================================================================
# MESH FILE ERRORS
# =============================================================================

class MeshFileErrorKind(Enum):
    """Closed set of mesh file failure kinds."""
    NO_TRIANGLE_BLOCKS = "NoTriangleBlocks"
    NO_VERTICES = "NoVertices"
    NO_TRIANGLES = "NoTriangles"
    UNSUPPORTED_FILE_FORMAT = "UnsupportedFileFormat"
    FILE_DOES_NOT_EXIST = "FileDoesNotExist"
    BLOCK_VERSION_DOES_NOT_MATCH_FILE_VERSION = "BlockVersionDoesNotMatchFileVersion"
    FILE_ALREADY_EXISTS = "FileAlreadyExists"
    UNDEFINED_ERROR = "UndefinedError"


MESH_FILE_ERROR_MESSAGES: Dict[MeshFileErrorKind, str] = {
    MeshFileErrorKind.NO_TRIANGLE_BLOCKS: "No Triangle Blocks are defined",
    MeshFileErrorKind.NO_VERTICES: "No Triangle Vertices are defined",
    MeshFileErrorKind.NO_TRIANGLES: "No Triangles are defined",
    MeshFileErrorKind.UNSUPPORTED_FILE_FORMAT: "Unsupported file format",
    MeshFileErrorKind.FILE_DOES_NOT_EXIST: "File does not exist",
    MeshFileErrorKind.BLOCK_VERSION_DOES_NOT_MATCH_FILE_VERSION: "Block Version does not match File Version",
    MeshFileErrorKind.FILE_ALREADY_EXISTS: "File already exists",
    MeshFileErrorKind.UNDEFINED_ERROR: "Undefined Error",
}

MESH_FILE_ERROR_CODES: Dict[MeshFileErrorKind, str] = {
    MeshFileErrorKind.NO_TRIANGLE_BLOCKS: "DMT_001",
    MeshFileErrorKind.NO_VERTICES: "DMT_002",
    MeshFileErrorKind.NO_TRIANGLES: "DMT_003",
    MeshFileErrorKind.UNSUPPORTED_FILE_FORMAT: "DMT_004",
    MeshFileErrorKind.FILE_DOES_NOT_EXIST: "DMT_005",
    MeshFileErrorKind.BLOCK_VERSION_DOES_NOT_MATCH_FILE_VERSION: "DMT_006",
    MeshFileErrorKind.FILE_ALREADY_EXISTS: "DMT_007",
    MeshFileErrorKind.UNDEFINED_ERROR: "DMT_000",
}


class MeshFileError(KernelError):
    """
    Mesh file parsing or validation failed.

    The message is always the fixed text of the kind. Where the failure
    happened (path, block index, offending values) is carried separately
    so that the message stays stable for callers matching on it.
    """

    category = KernelErrorCategory.MESH_FILE

    def __init__(
        self,
        kind: MeshFileErrorKind,
        *,
        path: Optional[str] = None,
        block_index: Optional[int] = None,
        **kwargs,
    ):
        self.kind = kind
        self.path = str(path) if path is not None else None
        self.block_index = block_index
        super().__init__(MESH_FILE_ERROR_MESSAGES[kind], **kwargs)

    @property
    def code(self) -> str:  # type: ignore[override]
        return MESH_FILE_ERROR_CODES[self.kind]

    def with_path(self, path: Any) -> "MeshFileError":
        """Return the same error annotated with the file it came from."""
        self.path = str(path)
        return self

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["kind"] = self.kind.value
        result["path"] = self.path
        result["block_index"] = self.block_index
        return result

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        context = []
        if self.path:
            context.append(f"path: {self.path}")
        if self.block_index is not None:
            context.append(f"block: {self.block_index}")
        if context:
            parts.append(f"({', '.join(context)})")
        return " ".join(parts)
