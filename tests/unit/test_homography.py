"""Tests for homographies and their application to shapes."""

import math
from collections.abc import Generator

import pytest

from homogeom import numeric
from homogeom.domain import (
    Circle,
    CPolyline,
    Ellipse,
    FRect,
    Homography,
    Line,
    OPolyline,
    Point,
    Segment,
)
from homogeom.exceptions import DegenerateInputError, SingularMatrixError

SQUARE = [Point(0, 0), Point(1, 0), Point(1, 1), Point(0, 1)]
QUAD = [Point(0, 0), Point(2, 0), Point(3, 3), Point(0, 1)]


@pytest.fixture(autouse=True)
def default_numeric_policy() -> Generator[None, None, None]:
    """Run each test with the default thresholds."""
    numeric.reset()
    yield
    numeric.reset()


class TestConstruction:
    """Tests for building homographies."""

    def test_default_is_identity(self) -> None:
        """Test the identity leaves points unchanged."""
        h = Homography()
        assert h == Homography.identity()
        assert h * Point(3, -2) == Point(3, -2)

    def test_wrong_shape_rejected(self) -> None:
        """Test 3x3 input is required."""
        with pytest.raises(ValueError):
            Homography([[1, 0], [0, 1]])

    def test_input_is_normalized(self) -> None:
        """Test the pivot entry is scaled to 1."""
        h = Homography([[2, 0, 0], [0, 2, 0], [0, 0, 2]])
        assert h.get_value(2, 2) == 1.0
        assert h == Homography()

    def test_normalize_falls_back_on_pivot(self) -> None:
        """Test normalization uses H[2][1] when H[2][2] is null."""
        h = Homography([[1, 0, 0], [0, 0, 1], [0, 4, 0]])
        assert h.get_value(2, 1) == 1.0
        assert h.get_value(0, 0) == 0.25

    def test_set_value_defers_normalization(self) -> None:
        """Test that equality normalizes copies only."""
        h = Homography().set_value(0, 0, 2.0).set_value(1, 1, 2.0).set_value(2, 2, 2.0)
        assert h.get_value(2, 2) == 2.0
        assert h == Homography()
        assert h.get_value(2, 2) == 2.0

    def test_to_list(self) -> None:
        """Test nested list export."""
        assert Homography.translation(1, 2).to_list() == [
            [1.0, 0.0, 1.0],
            [0.0, 1.0, 2.0],
            [0.0, 0.0, 1.0],
        ]


class TestComposition:
    """Tests for elementary transforms and their composition."""

    def test_rotation_then_translation(self) -> None:
        """Test add_* composes after the current content."""
        h = Homography().add_rotation(math.pi / 2).add_translation(4, 5)
        assert h * Point(1, 0) == Point(4, 6)

    def test_translation_then_scale(self) -> None:
        """Test that the scale applies to the translated point."""
        h = Homography.translation(1, 0).add_scale(2)
        assert h * Point(1, 0) == Point(4, 0)

    def test_anisotropic_scale(self) -> None:
        """Test different factors on each axis."""
        assert Homography.scaling(2, 3) * Point(1, 1) == Point(2, 3)

    def test_matrix_product(self) -> None:
        """Test H1 * H2 applies H2 first."""
        h = Homography.scaling(2) * Homography.translation(1, 0)
        assert h * Point(1, 0) == Point(4, 0)

    def test_set_replaces_content(self) -> None:
        """Test set_* discards the previous content."""
        h = Homography.scaling(5).set_translation(1, 1)
        assert h == Homography.translation(1, 1)
        assert Homography.scaling(5).clear() == Homography()


class TestAlgebra:
    """Tests for determinant, inverse and transpose."""

    def test_determinant(self) -> None:
        """Test determinant of a scale."""
        assert Homography.scaling(2, 3).determinant() == pytest.approx(6.0)
        assert Homography.rotation(0.7).determinant() == pytest.approx(1.0)

    def test_inverse(self) -> None:
        """Test H * H^-1 is the identity."""
        h = Homography().add_rotation(0.3).add_translation(2, -1).add_scale(3)
        assert h * h.inverse() == Homography()
        assert h.inverse() * (h * Point(5, 7)) == Point(5, 7)

    def test_singular_inverse_fails(self) -> None:
        """Test inversion of a singular matrix."""
        h = Homography([[1, 2, 3], [2, 4, 6], [0, 0, 1]])
        with pytest.raises(SingularMatrixError) as exc_info:
            h.inverse()
        assert exc_info.value.determinant == pytest.approx(0.0)

    def test_transpose(self) -> None:
        """Test transpose swaps entries."""
        h = Homography.translation(3, 4)
        t = h.transpose()
        assert t.get_value(2, 0) == 3.0
        assert t.get_value(2, 1) == 4.0
        assert t.transpose() == h


class TestApplication:
    """Tests for applying homographies to points, lines and shapes."""

    def test_line_is_translated(self) -> None:
        """Test lines use the inverse transpose."""
        h = Homography.translation(0, 3)
        assert h * Line.horizontal(0) == Line.horizontal(3)

    def test_line_cache_invalidated(self) -> None:
        """Test mutation drops the cached inverse transpose."""
        h = Homography.translation(0, 3)
        assert h * Line.horizontal(0) == Line.horizontal(3)
        h.set_translation(0, 5)
        assert h * Line.horizontal(0) == Line.horizontal(5)
        h.add_translation(0, 1)
        assert h * Line.horizontal(0) == Line.horizontal(6)

    def test_point_at_infinity_direction_kept(self) -> None:
        """Test that translations keep directions."""
        ideal = Point.from_homogeneous(1.0, 0.0, 0.0)
        image = Homography.translation(5, 5) * ideal
        assert image.is_at_infinity()
        assert image == ideal

    def test_finite_point_sent_to_infinity(self) -> None:
        """Test a projective transform mapping a point to infinity."""
        h = Homography([[1, 0, 0], [0, 1, 0], [1, 0, 1]])
        assert (h * Point(-1, 0)).is_at_infinity()

    def test_segment_rect_circle(self) -> None:
        """Test shape kinds under an affine transform."""
        h = Homography.translation(1, 1)
        assert h * Segment.from_coords(0, 0, 1, 0) == Segment.from_coords(1, 1, 2, 1)
        image = h * FRect(0, 0, 1, 1)
        assert isinstance(image, CPolyline)
        assert image == FRect(1, 1, 2, 2).to_polygon()
        ellipse = h * Circle(Point(0, 0), 1.0)
        assert isinstance(ellipse, Ellipse)
        assert ellipse == Ellipse(Point(1, 1), 1.0, 1.0)

    def test_circle_scaled_to_ellipse(self) -> None:
        """Test anisotropic scale of a circle."""
        ellipse = Homography.scaling(2, 1) * Circle(Point(0, 0), 1.0)
        assert ellipse.major == pytest.approx(2.0)
        assert ellipse.minor == pytest.approx(1.0)
        assert ellipse == Ellipse(Point(0, 0), 2.0, 1.0, 0.0)

    def test_ellipse_rotated(self) -> None:
        """Test rotation of an ellipse about the origin."""
        ellipse = Homography.rotation(math.pi / 2) * Ellipse(Point(1, 0), 2.0, 1.0)
        assert ellipse == Ellipse(Point(0, 1), 2.0, 1.0, math.pi / 2)

    def test_polyline_kind_kept(self) -> None:
        """Test open and closed polylines keep their kind."""
        h = Homography.scaling(2)
        opoly = h * OPolyline([Point(0, 0), Point(1, 0)])
        assert opoly == OPolyline([Point(0, 0), Point(2, 0)])
        assert isinstance(h * CPolyline(SQUARE), CPolyline)

    def test_unsupported_type(self) -> None:
        """Test applying a homography to a non-shape."""
        with pytest.raises(TypeError):
            _ = Homography() * "shape"

    def test_apply_to_preserves_order(self) -> None:
        """Test transformed copy of a container."""
        h = Homography.translation(1, 0)
        src = [Point(0, 0), Line.vertical(0)]
        out = h.apply_to(src)
        assert out == [Point(1, 0), Line.vertical(1)]
        assert src[0] == Point(0, 0)

    def test_apply_in_place(self) -> None:
        """Test in-place transform of a container."""
        items: list = [Point(0, 0), Point(1, 1)]
        Homography.translation(0, 1).apply_in_place(items)
        assert items == [Point(0, 1), Point(1, 2)]


class TestFromPoints:
    """Tests for the 4-point constructor."""

    def test_maps_square_to_quad(self) -> None:
        """Test every source point reaches its destination."""
        h = Homography.from_points(SQUARE, QUAD)
        for src, dst in zip(SQUARE, QUAD, strict=True):
            assert h * src == dst

    def test_recovers_scale(self) -> None:
        """Test a known affine transform is recovered."""
        dst = [Point(2 * p.x, 2 * p.y) for p in SQUARE]
        assert Homography.from_points(SQUARE, dst) == Homography.scaling(2)

    def test_lines_follow_points(self) -> None:
        """Test the image of a line holds the images of its points."""
        h = Homography.from_points(SQUARE, QUAD)
        p, q = Point(0.2, 0.3), Point(0.9, 0.1)
        assert h * (p * q) == (h * p) * (h * q)

    def test_collinear_rejected(self) -> None:
        """Test three collinear points."""
        with pytest.raises(DegenerateInputError):
            Homography.from_points(
                [Point(0, 0), Point(1, 1), Point(2, 2), Point(0, 1)],
                QUAD,
            )

    def test_wrong_count_rejected(self) -> None:
        """Test exactly four points are needed."""
        with pytest.raises(ValueError):
            Homography.from_points(SQUARE[:3], QUAD[:3])
