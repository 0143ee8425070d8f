"""Invariants that hold across shapes, transformations and numeric policies."""

import math
from collections.abc import Generator

import numpy as np
import pytest

from homogeom import (
    Circle,
    CPolyline,
    Ellipse,
    FRect,
    Homography,
    Line,
    NumericConfig,
    Point,
    ScalarType,
    Segment,
    convex_hull,
    intersects,
    numeric,
    split_by_line,
)

POINT_PAIRS = [
    (Point(0, 0), Point(1, 1)),
    (Point(-3, 2), Point(4, 2)),
    (Point(1, -5), Point(1, 7)),
    (Point(2.5, 0.1), Point(-1.2, 3.3)),
]

SCATTER = [(0, 0), (5, 1), (3, 3), (6, 6), (1, 5), (2, 2), (-1, 3), (4, -2)]

HOMOGRAPHIES = [
    Homography.rotation(0.3).add_translation(2, -1),
    Homography.scaling(2.0, 0.5).add_rotation(-1.1),
    Homography([[1.0, 0.2, 1.0], [0.1, 0.9, -2.0], [0.001, 0.002, 1.0]]),
]


@pytest.fixture(autouse=True)
def default_numeric_policy() -> Generator[None, None, None]:
    """Run each test with the default thresholds."""
    numeric.reset()
    yield
    numeric.reset()


class TestLineInvariants:
    """Normalization and duality of lines."""

    @pytest.mark.parametrize(("p1", "p2"), POINT_PAIRS)
    def test_normalized(self, p1: Point, p2: Point) -> None:
        """Test lines are stored with a unit normal."""
        line = Line.from_points(p1, p2)
        assert math.hypot(line.a, line.b) == pytest.approx(1.0)

    @pytest.mark.parametrize(("p1", "p2"), POINT_PAIRS)
    def test_normalization_idempotent(self, p1: Point, p2: Point) -> None:
        """Test normalizing twice changes nothing."""
        line = Line.from_points(p1, p2)
        assert line.normalize() == line
        assert line.normalize().values == pytest.approx(line.values)

    @pytest.mark.parametrize(("p1", "p2"), POINT_PAIRS)
    def test_order_independent(self, p1: Point, p2: Point) -> None:
        """Test the line through two points ignores their order."""
        assert Line.from_points(p1, p2) == Line.from_points(p2, p1)
        assert p1 * p2 == p2 * p1

    @pytest.mark.parametrize(("p1", "p2"), POINT_PAIRS)
    def test_points_on_their_line(self, p1: Point, p2: Point) -> None:
        """Test both defining points lie on the line."""
        line = p1 * p2
        assert line.dist_to(p1) == pytest.approx(0.0, abs=1e-12)
        assert line.dist_to(p2) == pytest.approx(0.0, abs=1e-12)


class TestHomographyInvariants:
    """Composition and application of homographies."""

    @pytest.mark.parametrize("h", HOMOGRAPHIES)
    def test_inverse_composes_to_identity(self, h: Homography) -> None:
        """Test H times its inverse is the identity."""
        assert h * h.inverse() == Homography()
        assert h.inverse() * h == Homography()

    @pytest.mark.parametrize("h", HOMOGRAPHIES)
    @pytest.mark.parametrize(("p1", "p2"), POINT_PAIRS)
    def test_incidence_preserved(self, h: Homography, p1: Point, p2: Point) -> None:
        """Test transformed points lie on the transformed line."""
        line = h * (p1 * p2)
        assert line.dist_to(h * p1) == pytest.approx(0.0, abs=1e-9)
        assert line.dist_to(h * p2) == pytest.approx(0.0, abs=1e-9)

    @pytest.mark.parametrize("h", HOMOGRAPHIES)
    def test_line_through_images(self, h: Homography) -> None:
        """Test mapping a line equals joining the mapped points."""
        p1, p2 = Point(0, 0), Point(3, 1)
        assert h * (p1 * p2) == (h * p1) * (h * p2)

    @pytest.mark.parametrize("h", HOMOGRAPHIES[:2])
    def test_intersection_commutes_with_affine_maps(self, h: Homography) -> None:
        """Test intersecting then mapping equals mapping then intersecting."""
        s1 = Segment(Point(0, 0), Point(2, 2))
        s2 = Segment(Point(0, 2), Point(2, 0))
        mapped = intersects(h * s1, h * s2).get()
        assert len(mapped) == 1
        assert mapped[0] == h * Point(1, 1)

    def test_affine_area_scaling(self) -> None:
        """Test areas scale by the determinant of an affine map."""
        h = Homography.scaling(2.0, 3.0).add_rotation(0.7)
        square = FRect(0, 0, 1, 1).to_polygon()
        assert (h * square).area() == pytest.approx(abs(h.determinant()))
        circle = Circle(Point(0, 0), 1.0)
        image = h * circle
        assert isinstance(image, Ellipse)
        assert image.area() == pytest.approx(math.pi * 6.0)

    def test_inverse_round_trip(self) -> None:
        """Test points come back after the inverse map."""
        h = HOMOGRAPHIES[2]
        for p in (Point(0, 0), Point(5, -3), Point(-2.5, 8)):
            assert h.inverse() * (h * p) == p

    def test_composition_order_matters(self) -> None:
        """Test translating then rotating differs from rotating then translating."""
        h1 = Homography().add_translation(4, 5).add_rotation(1)
        h2 = Homography().add_rotation(1).add_translation(4, 5)
        assert h1 != h2
        assert h2 * Point(0, 0) == Point(4, 5)
        c, s = math.cos(1), math.sin(1)
        assert h1 * Point(0, 0) == Point(4 * c - 5 * s, 4 * s + 5 * c)


class TestHullInvariants:
    """Convex hulls of point sets and curves."""

    @pytest.mark.parametrize(
        "source",
        [
            [Point(0, 0), Point(4, 0), Point(4, 3), Point(1, 1), Point(0, 3), Point(2, 5)],
            [Point(x, y) for x, y in SCATTER],
            Circle(Point(1, -1), 2.0),
            Ellipse(Point(0, 0), 3.0, 1.0, 0.4),
        ],
    )
    def test_hull_idempotent(self, source: list[Point] | Circle | Ellipse) -> None:
        """Test the hull of a hull is the same polygon."""
        hull = convex_hull(source)
        again = convex_hull(hull)
        assert again == hull
        assert again.size() == hull.size()
        assert hull.is_convex()


class TestSplitInvariants:
    """Areas before and after splitting convex polygons."""

    HEXAGON = CPolyline(
        [Point(math.cos(k * math.pi / 3), math.sin(k * math.pi / 3)) for k in range(6)]
    )

    @pytest.mark.parametrize(
        "line",
        [
            Line.horizontal(0.2),
            Line.vertical(-0.5),
            Line.from_points(Point(-1, -1), Point(1, 0.5)),
        ],
    )
    def test_parts_cover_polygon(self, line: Line) -> None:
        """Test a convex polygon splits into two parts of matching total area."""
        parts = split_by_line(self.HEXAGON, line)
        assert len(parts) == 2
        assert sum(p.area() for p in parts) == pytest.approx(self.HEXAGON.area())

    def test_parts_on_either_side(self) -> None:
        """Test each part lies on a single side of the line."""
        line = Line.horizontal(0.2)
        for part in split_by_line(self.HEXAGON, line):
            sides = {line.side(p) for p in part.points} - {0}
            assert len(sides) == 1


class TestFloat32Policy:
    """The same operations under single precision storage."""

    @pytest.fixture(autouse=True)
    def float32_policy(self) -> None:
        """Switch to float32 storage."""
        numeric.configure(NumericConfig(storage=ScalarType.FLOAT32))

    def test_storage_dtype(self) -> None:
        """Test new values are stored as float32."""
        assert Point(0.1, 0.2).dtype == np.float32
        assert Line.horizontal(1).dtype == np.float32
        assert Homography().as_array().dtype == np.float32

    def test_intersections_still_found(self) -> None:
        """Test reference intersections under the coarser thresholds."""
        res = intersects(Segment(Point(0, 0), Point(2, 2)), Segment(Point(0, 2), Point(2, 0)))
        assert res.get() == (Point(1, 1),)
        res = intersects(Circle(Point(0, 0), 1.0), Circle(Point(2, 0), 1.0))
        assert res.size == 1

    def test_coarser_equality(self) -> None:
        """Test points closer than the float32 threshold compare equal."""
        assert Point(1.0, 1.0) == Point(1.00005, 1.0)
        numeric.reset()
        assert Point(1.0, 1.0) != Point(1.00005, 1.0)


class TestLargeCoordinates:
    """Far away finite points under both storage types."""

    @pytest.fixture(params=[ScalarType.FLOAT64, ScalarType.FLOAT32])
    def storage(self, request: pytest.FixtureRequest) -> ScalarType:
        """Each storage type in turn."""
        numeric.configure(NumericConfig(storage=request.param))
        return request.param

    def test_points_are_finite(self, storage: ScalarType) -> None:
        """Test coordinates far above one stay finite and readable."""
        for x, y in [(2e10, 1.0), (-5e8, 7e9), (20000.0, 5.0)]:
            p = Point(x, y)
            assert not p.is_at_infinity()
            assert p.to_tuple() == pytest.approx((x, y), rel=1e-6)

    def test_far_segments_cross(self, storage: ScalarType) -> None:
        """Test two long segments still meet at a finite point."""
        if storage is ScalarType.FLOAT32:
            span, half = 20000.0, 10000.0
        else:
            span, half = 4e10, 2e10
        res = intersects(
            Segment(Point(0, 0), Point(span, 0)), Segment(Point(half, -1), Point(half, 1))
        )
        assert res.size == 1
        point = res.get()[0]
        assert not point.is_at_infinity()
        assert point.x == pytest.approx(half, rel=1e-6)
        assert point.y == pytest.approx(0.0, abs=1e-6)
