"""Line segment between two points."""

import math
from typing import TYPE_CHECKING, Any

from homogeom import numeric
from homogeom.domain.homogeneous import Line, Point
from homogeom.exceptions import DegenerateInputError

if TYPE_CHECKING:
    from homogeom.domain.homography import Homography
    from homogeom.domain.rect import FRect


class Segment:
    """A segment, stored with its endpoints in lexicographic order.

    Canonical ordering makes ``Segment(p1, p2) == Segment(p2, p1)``.

    Attributes:
        p1: Lexicographically smaller endpoint
        p2: Lexicographically larger endpoint
    """

    __slots__ = ("p1", "p2")

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, p1: Point, p2: Point) -> None:
        """Build a segment.

        Raises:
            DegenerateInputError: If both points are identical
        """
        if p1 == p2:
            raise DegenerateInputError(f"Segment endpoints are identical: {p1}")
        if p2 < p1:
            p1, p2 = p2, p1
        self.p1 = p1
        self.p2 = p2

    @classmethod
    def from_coords(cls, x1: float, y1: float, x2: float, y2: float) -> "Segment":
        return cls(Point(x1, y1), Point(x2, y2))

    @property
    def points(self) -> tuple[Point, Point]:
        return (self.p1, self.p2)

    def length(self) -> float:
        return self.p1.dist_to(self.p2)

    def get_line(self) -> Line:
        """Supporting line of the segment."""
        return self.p1 * self.p2

    def get_vector(self) -> tuple[float, float]:
        return (self.p2.x - self.p1.x, self.p2.y - self.p1.y)

    def get_middle_point(self) -> Point:
        return Point((self.p1.x + self.p2.x) / 2.0, (self.p1.y + self.p2.y) / 2.0)

    def get_bisector(self) -> Line:
        """Perpendicular bisector of the segment."""
        return self.get_line().get_orthogonal_line(self.get_middle_point())

    def split(self) -> tuple["Segment", "Segment"]:
        """Split at the middle point."""
        mid = self.get_middle_point()
        return (Segment(self.p1, mid), Segment(mid, self.p2))

    def get_extended(self) -> "Segment":
        """Segment extended by its own length on both sides."""
        dx, dy = self.get_vector()
        return Segment(
            Point(self.p1.x - dx, self.p1.y - dy),
            Point(self.p2.x + dx, self.p2.y + dy),
        )

    def nearest_point(self, point: Point) -> tuple[Point, float]:
        """Closest point of the segment to ``point``, and its distance.

        Projects the point onto the supporting line, then clamps to the
        endpoints.
        """
        dx, dy = self.get_vector()
        length_sq = dx * dx + dy * dy
        t = ((point.x - self.p1.x) * dx + (point.y - self.p1.y) * dy) / length_sq
        t = max(0.0, min(1.0, t))
        nearest = Point(self.p1.x + t * dx, self.p1.y + t * dy)
        return nearest, math.hypot(point.x - nearest.x, point.y - nearest.y)

    def dist_to(self, point: Point) -> float:
        """Distance between a point and the segment."""
        return self.nearest_point(point)[1]

    def contains_point(self, point: Point) -> bool:
        """True if ``point`` lies on the segment (endpoints included)."""
        return self.dist_to(point) <= numeric.null_distance()

    def get_angle(self, other: Any) -> float:
        return self.get_line().get_angle(other)

    def is_parallel_to(self, other: Any) -> bool:
        return self.get_line().is_parallel_to(other)

    def get_bb(self) -> "FRect":
        """Bounding box.

        Raises:
            DegenerateInputError: For horizontal or vertical segments
        """
        from homogeom.domain.rect import FRect

        return FRect.from_points(self.p1, self.p2)

    def translated(self, dx: float, dy: float) -> "Segment":
        return Segment(self.p1.translated(dx, dy), self.p2.translated(dx, dy))

    def move_to(self, point: Point) -> "Segment":
        """Segment with the same vector, starting at ``point`` (``p1`` lands there)."""
        return self.translated(point.x - self.p1.x, point.y - self.p1.y)

    def transformed(self, h: "Homography") -> "Segment":
        return Segment(h * self.p1, h * self.p2)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return self.p1 == other.p1 and self.p2 == other.p2

    def __repr__(self) -> str:
        return f"Segment({self.p1!r}, {self.p2!r})"
