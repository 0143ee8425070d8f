"""Axis-aligned rectangle."""

import math
from typing import TYPE_CHECKING

from homogeom import numeric
from homogeom.domain.homogeneous import Point
from homogeom.domain.segment import Segment
from homogeom.exceptions import DegenerateInputError

if TYPE_CHECKING:
    from homogeom.domain.circle import Circle
    from homogeom.domain.homography import Homography
    from homogeom.domain.polyline import CPolyline


class FRect:
    """Axis-aligned rectangle defined by two opposite corners.

    Corners are canonicalized to (min x, min y) - (max x, max y).

    Examples:
        >>> r = FRect(0, 0, 1, 1)
        >>> r.area(), r.length()
        (1.0, 4.0)
    """

    __slots__ = ("p1", "p2")

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, x1: float = 0.0, y1: float = 0.0, x2: float = 1.0, y2: float = 1.0) -> None:
        """Build a rectangle from two opposite corners.

        Raises:
            DegenerateInputError: If width or height is not above ``null_distance``
        """
        xmin, xmax = sorted((x1, x2))
        ymin, ymax = sorted((y1, y2))
        thr = numeric.null_distance()
        if xmax - xmin <= thr or ymax - ymin <= thr:
            raise DegenerateInputError(
                f"Rectangle ({x1}, {y1})-({x2}, {y2}) has null width or height"
            )
        self.p1 = Point(xmin, ymin)
        self.p2 = Point(xmax, ymax)

    @classmethod
    def from_points(cls, p1: Point, p2: Point) -> "FRect":
        return cls(p1.x, p1.y, p2.x, p2.y)

    @classmethod
    def from_center(cls, center: Point, width: float, height: float) -> "FRect":
        return cls(
            center.x - width / 2.0,
            center.y - height / 2.0,
            center.x + width / 2.0,
            center.y + height / 2.0,
        )

    @property
    def width(self) -> float:
        return self.p2.x - self.p1.x

    @property
    def height(self) -> float:
        return self.p2.y - self.p1.y

    def area(self) -> float:
        return self.width * self.height

    def length(self) -> float:
        """Perimeter."""
        return 2.0 * (self.width + self.height)

    def get_center(self) -> Point:
        return Point((self.p1.x + self.p2.x) / 2.0, (self.p1.y + self.p2.y) / 2.0)

    def get_pts(self) -> tuple[Point, Point, Point, Point]:
        """The four corners, counter-clockwise from the min corner."""
        x1, y1 = self.p1.to_tuple()
        x2, y2 = self.p2.to_tuple()
        return (Point(x1, y1), Point(x2, y1), Point(x2, y2), Point(x1, y2))

    def get_segs(self) -> tuple[Segment, Segment, Segment, Segment]:
        """Boundary segments: bottom, right, top, left."""
        pts = self.get_pts()
        return (
            Segment(pts[0], pts[1]),
            Segment(pts[1], pts[2]),
            Segment(pts[2], pts[3]),
            Segment(pts[3], pts[0]),
        )

    def get_diagonals(self) -> tuple[Segment, Segment]:
        pts = self.get_pts()
        return (Segment(pts[0], pts[2]), Segment(pts[1], pts[3]))

    def get_bounding_circle(self) -> "Circle":
        """Smallest circle containing the rectangle."""
        from homogeom.domain.circle import Circle

        return Circle(self.get_center(), math.hypot(self.width, self.height) / 2.0)

    def get_inscribed_circle(self) -> "Circle":
        """Largest circle centered on the rectangle and contained in it."""
        from homogeom.domain.circle import Circle

        return Circle(self.get_center(), min(self.width, self.height) / 2.0)

    def get_extended(self) -> "FRect":
        """Rectangle grown by its own width and height on each side."""
        w, h = self.width, self.height
        return FRect(self.p1.x - w, self.p1.y - h, self.p2.x + w, self.p2.y + h)

    def get_bb(self) -> "FRect":
        return self

    def to_polygon(self) -> "CPolyline":
        from homogeom.domain.polyline import CPolyline

        return CPolyline(self.get_pts())

    def translated(self, dx: float, dy: float) -> "FRect":
        return FRect(self.p1.x + dx, self.p1.y + dy, self.p2.x + dx, self.p2.y + dy)

    def move_to(self, point: Point) -> "FRect":
        """Same size rectangle with its min corner at ``point``."""
        return self.translated(point.x - self.p1.x, point.y - self.p1.y)

    def transformed(self, h: "Homography") -> "CPolyline":
        """A projective transform of a rectangle is a general quadrilateral."""
        return self.to_polygon().transformed(h)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FRect):
            return NotImplemented
        return self.p1 == other.p1 and self.p2 == other.p2

    def __repr__(self) -> str:
        return f"FRect({self.p1.x:g}, {self.p1.y:g}, {self.p2.x:g}, {self.p2.y:g})"
