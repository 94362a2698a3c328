"""
dmtgeom/config.py - Mesh I/O configuration v1.0

Provides settings for mesh loading and writing, with environment
variable overrides and a process-wide default.
"""

from __future__ import annotations
from dataclasses import dataclass
import os
import logging

logger = logging.getLogger("dmtgeom.config")

# Only DMT format version understood by the codec
DMT_FILE_VERSION = 1000

# Header is NUL-terminated and at most this many bytes
DMT_HEADER_MAX_LENGTH = 256


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class MeshIOConfig:
    """Configuration for reading and writing mesh files."""

    # Version written to and required from DMT files
    dmt_version: int = DMT_FILE_VERSION

    # Write DMT vertices as float32 instead of float64
    write_float_vertices: bool = False

    # Header limit including the terminating NUL
    header_max_length: int = DMT_HEADER_MAX_LENGTH

    # Replace an existing file on write instead of failing
    overwrite_existing: bool = False

    # Check every triangle index before any triangle reaches the filter.
    # When off, a bad index still raises, but only once the build reaches it.
    validate_indices: bool = True

    def __post_init__(self):
        """Validate configuration."""
        assert 0 < self.dmt_version <= 0xFFFF, "dmt_version must fit in 16 bits"
        assert self.header_max_length > 1, "header_max_length must leave room for text"

    @classmethod
    def from_env(cls) -> "MeshIOConfig":
        """Create configuration from environment variables."""
        return cls(
            dmt_version=int(os.getenv("DMTGEOM_DMT_VERSION", str(DMT_FILE_VERSION))),
            write_float_vertices=_env_flag("DMTGEOM_WRITE_FLOATS", "false"),
            overwrite_existing=_env_flag("DMTGEOM_OVERWRITE", "false"),
            validate_indices=_env_flag("DMTGEOM_VALIDATE_INDICES", "true"),
        )


# =============================================================================
# DEFAULT CONFIGURATION
# =============================================================================

DEFAULT_MESH_IO_CONFIG = MeshIOConfig.from_env()


def get_mesh_io_config() -> MeshIOConfig:
    """Get the default mesh I/O configuration."""
    return DEFAULT_MESH_IO_CONFIG


def set_mesh_io_config(config: MeshIOConfig) -> None:
    """Set the default mesh I/O configuration."""
    global DEFAULT_MESH_IO_CONFIG
    DEFAULT_MESH_IO_CONFIG = config
