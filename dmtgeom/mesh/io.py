"""
dmtgeom/mesh/io.py - Mesh file reader and writer v1.0

Path-level entry points. The file extension selects the codec (.dmt or
.stl, case-insensitive). Reads run the parsed records through
MeshLoader with the caller's filter; writes encode the whole file in
memory before anything is written to disk.
"""

from __future__ import annotations
from pathlib import Path
from typing import List, Optional, Union
import logging

from ..config import MeshIOConfig, get_mesh_io_config
from ..errors import MeshFileError, MeshFileErrorKind
from .dmt_codec import read_dmt_bytes, write_dmt_bytes
from .filters import TriangleAdmission
from .loader import MeshLoader, MeshLoadResult, TriangleBlockRecord
from .model import DMTModel
from .stl_codec import read_stl_bytes, write_stl_bytes

logger = logging.getLogger("dmtgeom.mesh.io")

PathLike = Union[str, Path]

DMT_EXTENSION = ".DMT"
STL_EXTENSION = ".STL"
SUPPORTED_EXTENSIONS = (DMT_EXTENSION, STL_EXTENSION)


def _extension(path: Path) -> str:
    extension = path.suffix.upper()
    if extension not in SUPPORTED_EXTENSIONS:
        raise MeshFileError(
            MeshFileErrorKind.UNSUPPORTED_FILE_FORMAT,
            path=str(path),
            extension=path.suffix,
        )
    return extension


def parse_file(path: PathLike, config: Optional[MeshIOConfig] = None) -> List[TriangleBlockRecord]:
    """Read a mesh file into triangle-block records without filtering."""
    path = Path(path)
    config = config or get_mesh_io_config()
    extension = _extension(path)
    if not path.is_file():
        raise MeshFileError(MeshFileErrorKind.FILE_DOES_NOT_EXIST, path=str(path))

    data = path.read_bytes()
    try:
        if extension == DMT_EXTENSION:
            return read_dmt_bytes(data, config)
        return read_stl_bytes(data)
    except MeshFileError as exc:
        raise exc.with_path(path)


def read_file_with_excluded(
    path: PathLike,
    mesh_filter: Optional[TriangleAdmission] = None,
    config: Optional[MeshIOConfig] = None,
) -> MeshLoadResult:
    """Read a mesh file; returns admitted and excluded models."""
    config = config or get_mesh_io_config()
    records = parse_file(path, config)
    try:
        result = MeshLoader(mesh_filter, config).load(records)
    except MeshFileError as exc:
        raise exc.with_path(path)
    logger.info(
        f"Read {path}: {result.admitted_count} triangle(s) admitted, "
        f"{result.rejected_count} excluded"
    )
    return result


def read_file(
    path: PathLike,
    mesh_filter: Optional[TriangleAdmission] = None,
    config: Optional[MeshIOConfig] = None,
) -> DMTModel:
    """Read a mesh file; returns the admitted model."""
    return read_file_with_excluded(path, mesh_filter, config).model


def append_file(
    model: DMTModel,
    path: PathLike,
    mesh_filter: Optional[TriangleAdmission] = None,
    config: Optional[MeshIOConfig] = None,
) -> DMTModel:
    """
    Append the admitted blocks of a mesh file to model.

    model is left untouched if the read fails. Returns the excluded model.
    """
    result = read_file_with_excluded(path, mesh_filter, config)
    model.extend(result.model)
    return result.excluded


def write_file(
    model: DMTModel,
    path: PathLike,
    overwrite: Optional[bool] = None,
    config: Optional[MeshIOConfig] = None,
) -> None:
    """
    Write model as DMT or binary STL, chosen by extension.

    Raises:
        MeshFileError: FileAlreadyExists if path exists and overwriting
            is disabled, or any error raised while encoding the model.
    """
    path = Path(path)
    config = config or get_mesh_io_config()
    if overwrite is None:
        overwrite = config.overwrite_existing

    extension = _extension(path)
    if path.exists() and not overwrite:
        raise MeshFileError(MeshFileErrorKind.FILE_ALREADY_EXISTS, path=str(path))

    try:
        if extension == DMT_EXTENSION:
            data = write_dmt_bytes(model, config)
        else:
            data = write_stl_bytes(model)
    except MeshFileError as exc:
        raise exc.with_path(path)

    path.write_bytes(data)
    logger.info(f"Wrote {model.total_no_of_triangles} triangle(s) to {path}")
