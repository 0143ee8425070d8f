"""Tests for pairwise intersections and rectangle area operations."""

import math
from collections.abc import Generator

import pytest

from homogeom import numeric
from homogeom.core.intersection import (
    IntersectionResult,
    intersect_area,
    intersects,
    iou,
    union_area,
)
from homogeom.domain import (
    Circle,
    CPolyline,
    Ellipse,
    FRect,
    Line,
    OPolyline,
    Point,
    Segment,
)
from homogeom.exceptions import NoIntersectionError


@pytest.fixture(autouse=True)
def default_numeric_policy() -> Generator[None, None, None]:
    """Run each test with the default thresholds."""
    numeric.reset()
    yield
    numeric.reset()


def coords(result: IntersectionResult) -> list[tuple[float, float]]:
    """Intersection points as plain tuples, rounded to absorb float noise."""
    return [(round(p.x, 9) + 0.0, round(p.y, 9) + 0.0) for p in result]


class TestIntersectionResult:
    """Tests for IntersectionResult."""

    def test_empty(self) -> None:
        """Test an empty result."""
        res = IntersectionResult()
        assert not res
        assert not res.exists
        assert res.size == 0
        with pytest.raises(NoIntersectionError):
            res.get()

    def test_points(self) -> None:
        """Test a non-empty result."""
        res = IntersectionResult((Point(1, 2),))
        assert res
        assert len(res) == 1
        assert res.get() == (Point(1, 2),)
        assert list(res) == [Point(1, 2)]

    def test_non_shape_rejected(self) -> None:
        """Test TypeError for objects outside the shape union."""
        with pytest.raises(TypeError):
            intersects(Point(), "point")
        with pytest.raises(TypeError):
            intersects(1, Circle())


class TestPoint:
    """Tests for point against every kind."""

    @pytest.mark.parametrize(
        "shape",
        [
            Point(1, 0),
            Line.vertical(1),
            Segment.from_coords(0, 0, 2, 0),
            FRect(1, -1, 2, 1),
            Circle(Point(0, 0), 1.0),
            Ellipse(Point(0, 0), 1.0, 0.5),
            OPolyline([Point(0, 0), Point(2, 0)]),
            CPolyline([Point(1, 0), Point(2, 1), Point(2, -1)]),
        ],
    )
    def test_point_on_boundary(self, shape: object) -> None:
        """Test the point itself is returned when on the boundary."""
        res = intersects(Point(1, 0), shape)
        assert res.get() == (Point(1, 0),)
        assert intersects(shape, Point(1, 0)).get() == (Point(1, 0),)

    def test_point_inside_is_not_on_boundary(self) -> None:
        """Test an interior point gives no intersection."""
        assert not intersects(Point(0, 0), Circle(Point(0, 0), 1.0))
        assert not intersects(Point(0.5, 0.5), FRect(0, 0, 1, 1))

    def test_point_at_infinity(self) -> None:
        """Test ideal points never intersect."""
        ideal = Point.from_homogeneous(1.0, 0.0, 0.0)
        assert not intersects(ideal, Line.horizontal(0))


class TestStraight:
    """Tests for lines and segments."""

    def test_line_line(self) -> None:
        """Test crossing lines."""
        assert intersects(Line.vertical(1), Line.horizontal(2)).get() == (Point(1, 2),)

    def test_parallel_lines(self) -> None:
        """Test parallel and identical lines."""
        assert not intersects(Line.vertical(1), Line.vertical(2))
        assert not intersects(Line.vertical(1), Line.vertical(1))

    def test_nearly_parallel_lines(self) -> None:
        """Test the angle threshold decides parallelism."""
        l1 = Line.horizontal(0)
        l2 = Line.from_direction(1.0, 1e-4)
        assert not intersects(l1, l2)
        with numeric.thresholds(angle=1e-5):
            assert intersects(l1, l2).get() == (Point(0, 0),)

    def test_line_segment(self) -> None:
        """Test a line crossing a segment, and missing it."""
        seg = Segment.from_coords(0, 0, 2, 2)
        assert intersects(Line.horizontal(1), seg).get() == (Point(1, 1),)
        assert intersects(seg, Line.horizontal(1)).get() == (Point(1, 1),)
        assert not intersects(Line.horizontal(3), seg)

    def test_segment_on_line(self) -> None:
        """Test an overlap along the line is not reported."""
        assert not intersects(Line.horizontal(0), Segment.from_coords(0, 0, 2, 0))

    def test_segments_crossing(self) -> None:
        """Test diagonals of a square."""
        res = intersects(Segment.from_coords(0, 0, 2, 2), Segment.from_coords(0, 2, 2, 0))
        assert res.get() == (Point(1, 1),)

    def test_segments_touching(self) -> None:
        """Test a T junction."""
        res = intersects(Segment.from_coords(0, 0, 2, 0), Segment.from_coords(1, 0, 1, 1))
        assert res.get() == (Point(1, 0),)

    def test_segments_missing(self) -> None:
        """Test segments whose lines cross outside both."""
        assert not intersects(Segment.from_coords(0, 0, 1, 0), Segment.from_coords(2, -1, 2, 1))
        assert not intersects(Segment.from_coords(0, 0, 1, 0), Segment.from_coords(0, 1, 1, 1))

    def test_collinear_segments(self) -> None:
        """Test collinear overlap, touch and gap."""
        base = Segment.from_coords(0, 0, 2, 0)
        assert not intersects(base, Segment.from_coords(1, 0, 3, 0))
        assert intersects(base, Segment.from_coords(2, 0, 3, 0)).get() == (Point(2, 0),)
        assert not intersects(base, Segment.from_coords(3, 0, 4, 0))
        assert not intersects(base, base)


class TestCircles:
    """Tests for circle intersections."""

    def test_line_circle_secant(self) -> None:
        """Test two points, lexicographically ordered."""
        res = intersects(Line.horizontal(0), Circle(Point(0, 0), 1.0))
        assert res.get() == (Point(-1, 0), Point(1, 0))

    def test_line_circle_tangent(self) -> None:
        """Test a tangent line gives one point."""
        res = intersects(Circle(Point(0, 0), 1.0), Line.horizontal(1))
        assert res.get() == (Point(0, 1),)

    def test_line_circle_miss(self) -> None:
        """Test a distant line."""
        assert not intersects(Line.horizontal(2), Circle(Point(0, 0), 1.0))

    def test_segment_circle(self) -> None:
        """Test only points on the segment are kept."""
        res = intersects(Segment.from_coords(0, 0, 2, 0), Circle(Point(0, 0), 1.0))
        assert res.get() == (Point(1, 0),)
        assert not intersects(Segment.from_coords(-0.5, 0, 0.5, 0), Circle(Point(0, 0), 1.0))

    def test_circles_secant(self) -> None:
        """Test two circles crossing at two points."""
        res = intersects(Circle(Point(0, 0), 1.0), Circle(Point(1, 0), 1.0))
        h = math.sqrt(0.75)
        assert coords(res) == [pytest.approx((0.5, -h)), pytest.approx((0.5, h))]

    def test_circles_tangent(self) -> None:
        """Test external and internal tangency."""
        outer = intersects(Circle(Point(0, 0), 1.0), Circle(Point(2, 0), 1.0))
        assert outer.get() == (Point(1, 0),)
        inner = intersects(Circle(Point(0, 0), 2.0), Circle(Point(1, 0), 1.0))
        assert inner.get() == (Point(2, 0),)

    def test_circles_disjoint(self) -> None:
        """Test separate, nested and concentric circles."""
        assert not intersects(Circle(Point(0, 0), 1.0), Circle(Point(5, 0), 1.0))
        assert not intersects(Circle(Point(0, 0), 3.0), Circle(Point(0.5, 0), 1.0))
        assert not intersects(Circle(Point(0, 0), 1.0), Circle(Point(0, 0), 2.0))
        assert not intersects(Circle(Point(0, 0), 1.0), Circle(Point(0, 0), 1.0))


class TestEllipses:
    """Tests for ellipse intersections."""

    def test_line_ellipse_secant(self) -> None:
        """Test a line through the center."""
        res = intersects(Line.horizontal(0), Ellipse(Point(0, 0), 2.0, 1.0))
        assert coords(res) == [pytest.approx((-2.0, 0.0)), pytest.approx((2.0, 0.0))]

    def test_line_ellipse_tangent(self) -> None:
        """Test tangents on both axes."""
        ellipse = Ellipse(Point(0, 0), 2.0, 1.0)
        assert intersects(Line.horizontal(1), ellipse).get() == (Point(0, 1),)
        assert intersects(Line.vertical(2), ellipse).get() == (Point(2, 0),)

    def test_line_ellipse_miss(self) -> None:
        """Test a line beyond the minor axis."""
        assert not intersects(Line.horizontal(1.5), Ellipse(Point(0, 0), 2.0, 1.0))

    def test_rotated_ellipse(self) -> None:
        """Test a line against a rotated ellipse."""
        ellipse = Ellipse(Point(0, 0), 2.0, 1.0, math.pi / 2)
        res = intersects(ellipse, Line.vertical(0))
        assert coords(res) == [pytest.approx((0.0, -2.0)), pytest.approx((0.0, 2.0))]

    def test_segment_ellipse(self) -> None:
        """Test only points on the segment are kept."""
        res = intersects(Segment.from_coords(0, 0, 3, 0), Ellipse(Point(0, 0), 2.0, 1.0))
        assert coords(res) == [pytest.approx((2.0, 0.0))]

    def test_crossed_ellipses(self) -> None:
        """Test four intersection points of perpendicular ellipses."""
        e1 = Ellipse(Point(0, 0), 2.0, 1.0)
        e2 = Ellipse(Point(0, 0), 2.0, 1.0, math.pi / 2)
        s = math.sqrt(0.8)
        assert sorted(coords(intersects(e1, e2))) == [
            pytest.approx((-s, -s)),
            pytest.approx((-s, s)),
            pytest.approx((s, -s)),
            pytest.approx((s, s)),
        ]

    def test_tangent_ellipses(self) -> None:
        """Test two ellipses touching at the end of their major axes."""
        e1 = Ellipse(Point(0, 0), 2.0, 1.0)
        e2 = Ellipse(Point(4, 0), 2.0, 1.0)
        res = intersects(e1, e2)
        assert res.size == 1
        assert res.points[0].to_tuple() == pytest.approx((2.0, 0.0), abs=1e-6)

    def test_disjoint_and_equal_ellipses(self) -> None:
        """Test no points for separate or identical ellipses."""
        e1 = Ellipse(Point(0, 0), 2.0, 1.0)
        assert not intersects(e1, Ellipse(Point(10, 0), 2.0, 1.0))
        assert not intersects(e1, Ellipse(Point(0, 0), 2.0, 1.0))

    def test_circle_ellipse(self) -> None:
        """Test a circle crossing an ellipse."""
        res = intersects(Circle(Point(0, 0), 1.5), Ellipse(Point(0, 0), 2.0, 1.0))
        x, y = math.sqrt(5.0 / 3.0), math.sqrt(2.25 - 5.0 / 3.0)
        assert sorted(coords(res)) == [
            pytest.approx((-x, -y)),
            pytest.approx((-x, y)),
            pytest.approx((x, -y)),
            pytest.approx((x, y)),
        ]
        assert coords(intersects(Ellipse(Point(0, 0), 2.0, 1.0), Circle(Point(0, 0), 1.5))) == (
            coords(res)
        )


class TestDecomposed:
    """Tests for rectangles and polylines, reduced to their segments."""

    def test_rect_rect(self) -> None:
        """Test two overlapping squares."""
        res = intersects(FRect(0, 0, 2, 2), FRect(1, 1, 3, 3))
        assert sorted(coords(res)) == [(1.0, 2.0), (2.0, 1.0)]

    def test_rects_sharing_a_corner(self) -> None:
        """Test a single shared corner is one point."""
        res = intersects(FRect(0, 0, 1, 1), FRect(1, 1, 2, 2))
        assert res.get() == (Point(1, 1),)

    def test_polygon_line(self) -> None:
        """Test a line across a square."""
        square = CPolyline([Point(0, 0), Point(2, 0), Point(2, 2), Point(0, 2)])
        res = intersects(square, Line.horizontal(1))
        assert sorted(coords(res)) == [(0.0, 1.0), (2.0, 1.0)]

    def test_vertex_hit_is_deduplicated(self) -> None:
        """Test a line through a vertex gives the vertex once."""
        triangle = CPolyline([Point(0, 0), Point(2, 0), Point(1, 2)])
        res = intersects(Line.vertical(1), triangle)
        assert sorted(coords(res)) == [(1.0, 0.0), (1.0, 2.0)]

    def test_open_polyline_is_not_closed(self) -> None:
        """Test the closing segment of an open polyline does not exist."""
        pts = [Point(0, 0), Point(2, 0), Point(2, 2), Point(0, 2)]
        assert intersects(OPolyline(pts), Line.vertical(0)).size == 2
        assert intersects(CPolyline(pts), Line.vertical(0)).size == 2
        assert intersects(OPolyline(pts), Segment.from_coords(-1, 1, 1, 1)).size == 0
        assert intersects(CPolyline(pts), Segment.from_coords(-1, 1, 1, 1)).size == 1

    def test_rect_circle(self) -> None:
        """Test a circle centered on a square corner."""
        res = intersects(FRect(0, 0, 2, 2), Circle(Point(0, 0), 1.0))
        assert sorted(coords(res)) == [pytest.approx((0.0, 1.0)), pytest.approx((1.0, 0.0))]

    def test_polyline_polyline(self) -> None:
        """Test two zigzags."""
        a = OPolyline([Point(0, 0), Point(2, 2), Point(4, 0)])
        b = OPolyline([Point(0, 1), Point(4, 1)])
        res = intersects(a, b)
        assert coords(res) == [(1.0, 1.0), (3.0, 1.0)]

    def test_symmetric(self) -> None:
        """Test intersects(a, b) and intersects(b, a) give the same set."""
        shapes = [
            FRect(0, 0, 2, 2),
            Circle(Point(1, 1), 1.2),
            Segment.from_coords(-1, 0.5, 3, 1.5),
            CPolyline([Point(-1, -1), Point(3, 0), Point(1, 3)]),
        ]
        for a in shapes:
            for b in shapes:
                ab = sorted(coords(intersects(a, b)))
                ba = sorted(coords(intersects(b, a)))
                assert ab == ba


class TestRectangleAreas:
    """Tests for intersect_area, union_area and iou."""

    def test_intersect_area(self) -> None:
        """Test the overlap rectangle."""
        assert intersect_area(FRect(0, 0, 2, 2), FRect(1, 1, 3, 3)) == FRect(1, 1, 2, 2)

    def test_intersect_area_none(self) -> None:
        """Test disjoint, edge-touching and corner-touching rectangles."""
        assert intersect_area(FRect(0, 0, 1, 1), FRect(2, 2, 3, 3)) is None
        assert intersect_area(FRect(0, 0, 1, 1), FRect(1, 0, 2, 1)) is None
        assert intersect_area(FRect(0, 0, 1, 1), FRect(1, 1, 2, 2)) is None

    def test_union_l_shape(self) -> None:
        """Test the outline of two overlapping squares."""
        union = union_area(FRect(0, 0, 2, 2), FRect(1, 1, 3, 3))
        assert union.size() == 8
        assert union.signed_area() == pytest.approx(7.0)
        assert union.points[0] == Point(0, 0)

    def test_union_touching_edges(self) -> None:
        """Test rectangles sharing an edge merge into one rectangle."""
        union = union_area(FRect(0, 0, 1, 1), FRect(1, 0, 2, 1))
        assert union == FRect(0, 0, 2, 1).to_polygon()

    def test_union_contained(self) -> None:
        """Test a rectangle inside the other."""
        union = union_area(FRect(0, 0, 4, 4), FRect(1, 1, 2, 2))
        assert union == FRect(0, 0, 4, 4).to_polygon()

    def test_union_cross(self) -> None:
        """Test two rectangles forming a plus sign."""
        union = union_area(FRect(0, 1, 3, 2), FRect(1, 0, 2, 3))
        assert union.size() == 12
        assert union.area() == pytest.approx(5.0)

    def test_union_empty(self) -> None:
        """Test disjoint and corner-touching rectangles."""
        assert union_area(FRect(0, 0, 1, 1), FRect(2, 2, 3, 3)).is_empty()
        assert union_area(FRect(0, 0, 1, 1), FRect(1, 1, 2, 2)).is_empty()

    def test_iou(self) -> None:
        """Test intersection over union values."""
        assert iou(FRect(0, 0, 2, 2), FRect(1, 1, 3, 3)) == pytest.approx(1.0 / 7.0)
        assert iou(FRect(0, 0, 2, 2), FRect(0, 0, 2, 2)) == pytest.approx(1.0)
        assert iou(FRect(0, 0, 4, 4), FRect(1, 1, 2, 2)) == pytest.approx(1.0 / 16.0)
        assert iou(FRect(0, 0, 1, 1), FRect(1, 0, 2, 1)) == 0.0
