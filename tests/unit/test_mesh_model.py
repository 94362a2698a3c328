"""
tests/unit/test_mesh_model.py - Tests for the DMT mesh model v1.0
"""

import pytest

from dmtgeom.geometry import Point, Vector
from dmtgeom.mesh.model import DMTModel, DMTTriangle, DMTTriangleBlock


class TestDMTTriangle:
    """Tests for triangle helpers."""

    def test_normal_right_hand_rule(self):
        """Test counter-clockwise XY triangle points along +Z."""
        normal = DMTTriangle.get_normal(Point(0, 0, 0), Point(1, 0, 0), Point(0, 1, 0))

        assert normal == Vector(0, 0, 1)

    def test_degenerate_normal_is_zero(self):
        """Test collinear points give the zero vector."""
        normal = DMTTriangle.get_normal(Point(0, 0, 0), Point(1, 0, 0), Point(2, 0, 0))

        assert normal == Vector()

    def test_centroid(self):
        """Test centroid."""
        centroid = DMTTriangle.get_centroid(Point(0, 0, 0), Point(3, 0, 0), Point(0, 3, 0))

        assert centroid == Point(1, 1, 0)

    def test_area(self):
        """Test area of a right triangle."""
        assert DMTTriangle.get_area(Point(0, 0, 0), Point(2, 0, 0), Point(0, 2, 0)) == 2.0

    def test_indices(self):
        """Test indices tuple."""
        assert DMTTriangle(4, 5, 6).indices == (4, 5, 6)


class TestDMTTriangleBlock:
    """Tests for DMTTriangleBlock."""

    def test_add_vertices_and_triangle(self):
        """Test building a block by index."""
        block = DMTTriangleBlock()
        v0 = block.add_vertex(Point(0, 0, 0))
        v1 = block.add_vertex(Point(1, 0, 0))
        v2 = block.add_vertex(Point(0, 1, 0))
        block.add_triangle(v0, v1, v2)

        assert (v0, v1, v2) == (0, 1, 2)
        assert block.no_of_vertices == 3
        assert block.no_of_triangles == 1
        assert block.get_triangle(0) == DMTTriangle(0, 1, 2)
        assert block.get_triangle_points(0)[1] == Point(1, 0, 0)

    def test_add_triangle_from_points(self):
        """Test add_triangle_from_points adds fresh vertices."""
        block = DMTTriangleBlock()
        block.add_triangle_from_points(Point(0, 0, 0), Point(1, 0, 0), Point(0, 1, 0))
        block.add_triangle_from_points(Point(0, 0, 0), Point(1, 0, 0), Point(0, 1, 0))

        assert block.no_of_vertices == 6
        assert block.no_of_triangles == 2

    def test_normals_required(self):
        """Test a normal-carrying block refuses bare vertices."""
        block = DMTTriangleBlock(vertices_have_normals=True)

        with pytest.raises(ValueError):
            block.add_vertex(Point(0, 0, 0))

        block.add_vertex(Point(0, 0, 0), Vector(0, 0, 1))
        assert block.vertex_normals == [Vector(0, 0, 1)]
        assert block.flags == 1

    def test_vertices_iterator(self):
        """Test vertices yields DMTVertex records."""
        block = DMTTriangleBlock()
        block.add_vertex(Point(1, 2, 3))

        vertices = list(block.vertices)

        assert vertices[0].position == Point(1, 2, 3)
        assert vertices[0].normal is None

    def test_get_normal_of_vertex(self):
        """Test normal of the first triangle using a vertex."""
        block = DMTTriangleBlock()
        block.add_triangle_from_points(Point(0, 0, 0), Point(1, 0, 0), Point(0, 1, 0))

        assert block.get_normal(Point(1, 0, 0)) == Vector(0, 0, 1)

    def test_clone_is_independent(self):
        """Test clone() copies lists."""
        block = DMTTriangleBlock()
        block.add_triangle_from_points(Point(0, 0, 0), Point(1, 0, 0), Point(0, 1, 0))

        copy = block.clone()
        copy.add_triangle(0, 1, 2)

        assert block.no_of_triangles == 1
        assert copy.no_of_triangles == 2

    def test_bounding_box(self):
        """Test block bounding box."""
        block = DMTTriangleBlock()
        assert block.bounding_box is None

        block.add_triangle_from_points(Point(0, 0, 0), Point(2, 0, 0), Point(0, 3, 1))

        assert block.bounding_box.max_point == Point(2, 3, 1)


class TestDMTModel:
    """Tests for DMTModel."""

    def test_totals(self, square_model):
        """Test totals across blocks."""
        assert square_model.total_no_of_vertices == 4
        assert square_model.total_no_of_triangles == 2
        assert not square_model.is_empty

    def test_empty_model(self):
        """Test an empty model."""
        model = DMTModel()

        assert model.is_empty
        assert model.bounding_box is None
        assert model.surface_area() == 0

    def test_surface_area(self, square_model):
        """Test unit square area."""
        assert square_model.surface_area() == pytest.approx(1.0)

    def test_extend(self, square_model):
        """Test extend() appends blocks."""
        model = DMTModel()
        model.extend(square_model)
        model.extend(square_model)

        assert len(model.triangle_blocks) == 2
        assert model.total_no_of_triangles == 4

    def test_point_cloud(self, square_model):
        """Test to_point_cloud()."""
        assert Point(1, 1, 0) in square_model.to_point_cloud()

    def test_iter_triangle_points(self, square_model):
        """Test triangles are yielded in order."""
        triangles = list(square_model.iter_triangle_points())

        assert triangles[0] == (Point(0, 0, 0), Point(1, 0, 0), Point(1, 1, 0))
        assert len(triangles) == 2

    def test_repr(self, square_model):
        """Test repr summary."""
        assert "triangles=2" in repr(square_model)
