"""
tests/integration/test_mesh_io.py - File-level mesh read/write pipeline v1.0

Exercises the path entry points against real files in tmp_path.
"""

import pytest

from dmtgeom.config import MeshIOConfig
from dmtgeom.errors import MeshFileError, MeshFileErrorKind
from dmtgeom.geometry import BoundingBox, Point
from dmtgeom.mesh.filters import FilterByBoundingBox, FilterByDuplicate
from dmtgeom.mesh.io import (
    append_file,
    parse_file,
    read_file,
    read_file_with_excluded,
    write_file,
)
from dmtgeom.mesh.model import DMTModel


class TestReadFile:
    """Reading DMT and STL files from disk."""

    def test_read_dmt(self, tmp_path, square_dmt_bytes):
        """Test a DMT file reads into a model."""
        path = tmp_path / "square.dmt"
        path.write_bytes(square_dmt_bytes)

        model = read_file(path)

        assert model.total_no_of_triangles == 2
        assert model.total_no_of_vertices == 4

    def test_extension_case_insensitive(self, tmp_path, square_dmt_bytes):
        """Test upper-case extensions."""
        path = tmp_path / "SQUARE.DMT"
        path.write_bytes(square_dmt_bytes)

        assert read_file(str(path)).total_no_of_triangles == 2

    def test_missing_file(self, tmp_path):
        """Test FileDoesNotExist carries the path."""
        path = tmp_path / "missing.dmt"

        with pytest.raises(MeshFileError) as exc_info:
            read_file(path)

        assert exc_info.value.kind == MeshFileErrorKind.FILE_DOES_NOT_EXIST
        assert exc_info.value.path == str(path)

    def test_unsupported_extension(self, tmp_path):
        """Test an unknown extension."""
        path = tmp_path / "model.obj"
        path.write_text("v 0 0 0")

        with pytest.raises(MeshFileError) as exc_info:
            read_file(path)

        assert exc_info.value.kind == MeshFileErrorKind.UNSUPPORTED_FILE_FORMAT

    def test_codec_error_carries_path(self, tmp_path, square_dmt_bytes):
        """Test errors raised while decoding are annotated with the path."""
        path = tmp_path / "broken.dmt"
        path.write_bytes(square_dmt_bytes[:-10])

        with pytest.raises(MeshFileError) as exc_info:
            read_file(path)

        assert exc_info.value.path == str(path)

    def test_block_version_mismatch(self, tmp_path, dmt_builder):
        """Test a file whose block tag disagrees with the file tag."""
        path = tmp_path / "mismatch.dmt"
        path.write_bytes(dmt_builder(
            [([(0, 0, 0), (1, 0, 0), (0, 1, 0)], [(0, 1, 2)])],
            block_versions=[999],
        ))

        with pytest.raises(MeshFileError) as exc_info:
            read_file(path)

        error = exc_info.value
        assert error.kind == MeshFileErrorKind.BLOCK_VERSION_DOES_NOT_MATCH_FILE_VERSION
        assert error.path == str(path)

    def test_parse_file_unfiltered(self, tmp_path, square_dmt_bytes):
        """Test parse_file returns raw records."""
        path = tmp_path / "square.dmt"
        path.write_bytes(square_dmt_bytes)

        records = parse_file(path)

        assert records[0].triangles == [(0, 1, 2), (0, 2, 3)]

    def test_filtered_read(self, tmp_path, dmt_builder):
        """Test a filter splits admitted and excluded triangles."""
        path = tmp_path / "two.dmt"
        path.write_bytes(dmt_builder([(
            [(0, 0, 0), (1, 0, 0), (0, 1, 0), (50, 0, 0), (51, 0, 0), (50, 1, 0)],
            [(0, 1, 2), (3, 4, 5)],
        )]))
        box = BoundingBox(Point(0, 0, 0), Point(5, 5, 5))

        result = read_file_with_excluded(path, FilterByBoundingBox(box))

        assert result.admitted_count == 1
        assert result.rejected_count == 1
        assert result.model.total_no_of_vertices == 3

    def test_read_ascii_stl(self, tmp_path):
        """Test ASCII STL from disk."""
        path = tmp_path / "tri.stl"
        path.write_text(
            "solid t\n"
            "facet normal 0 0 1\n outer loop\n"
            "  vertex 0 0 0\n  vertex 1 0 0\n  vertex 0 1 0\n"
            " endloop\nendfacet\n"
            "endsolid t\n"
        )

        model = read_file(path)

        assert model.total_no_of_triangles == 1


class TestWriteFile:
    """Writing files to disk."""

    def test_dmt_round_trip(self, tmp_path, square_model):
        """Test write then read preserves counts and positions."""
        path = tmp_path / "out.dmt"

        write_file(square_model, path)
        model = read_file(path)

        assert model.total_no_of_triangles == square_model.total_no_of_triangles
        assert model.to_point_cloud() == square_model.to_point_cloud()

    def test_stl_round_trip(self, tmp_path, square_model):
        """Test binary STL write then read."""
        path = tmp_path / "out.stl"

        write_file(square_model, path)
        model = read_file(path)

        assert model.total_no_of_triangles == 2
        assert set(model.to_point_cloud()) == set(square_model.to_point_cloud())

    def test_existing_file(self, tmp_path, square_model):
        """Test FileAlreadyExists without overwrite."""
        path = tmp_path / "out.dmt"
        path.write_bytes(b"keep")

        with pytest.raises(MeshFileError) as exc_info:
            write_file(square_model, path)

        assert exc_info.value.kind == MeshFileErrorKind.FILE_ALREADY_EXISTS
        assert path.read_bytes() == b"keep"

    def test_overwrite(self, tmp_path, square_model):
        """Test overwrite=True replaces the file."""
        path = tmp_path / "out.dmt"
        path.write_bytes(b"old")

        write_file(square_model, path, overwrite=True)

        assert read_file(path).total_no_of_triangles == 2

    def test_overwrite_from_config(self, tmp_path, square_model):
        """Test overwrite_existing in the config."""
        path = tmp_path / "out.stl"
        path.write_bytes(b"old")

        write_file(square_model, path, config=MeshIOConfig(overwrite_existing=True))

        assert path.stat().st_size == 80 + 4 + 2 * 50

    def test_empty_model_writes_nothing(self, tmp_path):
        """Test a failed encode leaves no file behind."""
        path = tmp_path / "empty.dmt"

        with pytest.raises(MeshFileError):
            write_file(DMTModel(), path)

        assert not path.exists()

    def test_unsupported_extension(self, tmp_path, square_model):
        """Test writing to an unknown extension."""
        with pytest.raises(MeshFileError) as exc_info:
            write_file(square_model, tmp_path / "out.ply")

        assert exc_info.value.kind == MeshFileErrorKind.UNSUPPORTED_FILE_FORMAT


class TestAppendFile:
    """Appending file contents to an existing model."""

    def test_append(self, tmp_path, square_dmt_bytes, square_model):
        """Test blocks are appended and the excluded model returned."""
        path = tmp_path / "square.dmt"
        path.write_bytes(square_dmt_bytes)

        excluded = append_file(square_model, path)

        assert len(square_model.triangle_blocks) == 2
        assert square_model.total_no_of_triangles == 4
        assert excluded.total_no_of_triangles == 0

    def test_append_with_duplicate_filter(self, tmp_path, square_dmt_bytes):
        """Test a duplicate filter shared across two appends."""
        path = tmp_path / "square.dmt"
        path.write_bytes(square_dmt_bytes)
        model = DMTModel()
        duplicates = FilterByDuplicate()

        append_file(model, path, duplicates)
        excluded = append_file(model, path, duplicates)

        assert model.total_no_of_triangles == 2
        assert excluded.total_no_of_triangles == 2

    def test_failed_append_leaves_model(self, tmp_path, square_model):
        """Test the target model is untouched when the read fails."""
        with pytest.raises(MeshFileError):
            append_file(square_model, tmp_path / "missing.dmt")

        assert len(square_model.triangle_blocks) == 1
