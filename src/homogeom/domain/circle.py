"""Circle."""

import math
from typing import TYPE_CHECKING

from homogeom import numeric
from homogeom.domain.homogeneous import Point
from homogeom.exceptions import DegenerateInputError, NoIntersectionError

if TYPE_CHECKING:
    from homogeom.domain.ellipse import Ellipse
    from homogeom.domain.homography import Homography
    from homogeom.domain.rect import FRect


class Circle:
    """A circle given by its center and a positive radius.

    Attributes:
        center: Center point
        radius: Radius, strictly above ``null_distance``
    """

    __slots__ = ("center", "_radius")

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, center: Point | None = None, radius: float = 1.0) -> None:
        """Build a circle.

        Raises:
            DegenerateInputError: If radius is not above ``null_distance``
        """
        if radius <= numeric.null_distance():
            raise DegenerateInputError(f"Circle radius must be positive, got {radius}")
        self.center = Point() if center is None else center
        self._radius = numeric.to_storage(radius)

    @classmethod
    def from_coords(cls, x: float, y: float, radius: float) -> "Circle":
        return cls(Point(x, y), radius)

    @classmethod
    def from_2_points(cls, p1: Point, p2: Point) -> "Circle":
        """Circle having ``p1``-``p2`` as diameter."""
        if p1 == p2:
            raise DegenerateInputError("Cannot build a circle from two identical points")
        center = Point((p1.x + p2.x) / 2.0, (p1.y + p2.y) / 2.0)
        return cls(center, p1.dist_to(p2) / 2.0)

    @classmethod
    def from_3_points(cls, p1: Point, p2: Point, p3: Point) -> "Circle":
        """Circle passing through three points (circumscribed circle).

        Raises:
            DegenerateInputError: If the points are collinear or not distinct
        """
        if p1 == p2 or p2 == p3 or p1 == p3:
            raise DegenerateInputError("Circle needs three distinct points")
        b1 = (p1 * p2).get_orthogonal_line(
            Point((p1.x + p2.x) / 2.0, (p1.y + p2.y) / 2.0)
        )
        b2 = (p2 * p3).get_orthogonal_line(
            Point((p2.x + p3.x) / 2.0, (p2.y + p3.y) / 2.0)
        )
        try:
            center = b1 * b2
        except NoIntersectionError as e:
            raise DegenerateInputError("Circle cannot pass through three collinear points") from e
        return cls(center, center.dist_to(p1))

    @property
    def radius(self) -> float:
        return float(self._radius)

    def area(self) -> float:
        return math.pi * self.radius * self.radius

    def length(self) -> float:
        """Circumference."""
        return 2.0 * math.pi * self.radius

    def get_center(self) -> Point:
        return self.center

    def get_bb(self) -> "FRect":
        from homogeom.domain.rect import FRect

        r = self.radius
        cx, cy = self.center.to_tuple()
        return FRect(cx - r, cy - r, cx + r, cy + r)

    def point_at(self, angle: float) -> Point:
        """Point of the circle at polar ``angle`` (radians) from the center."""
        r = self.radius
        return Point(self.center.x + r * math.cos(angle), self.center.y + r * math.sin(angle))

    def translated(self, dx: float, dy: float) -> "Circle":
        return Circle(self.center.translated(dx, dy), self.radius)

    def move_to(self, point: Point) -> "Circle":
        return Circle(Point(point.x, point.y), self.radius)

    def transformed(self, h: "Homography") -> "Ellipse":
        """A homography maps a circle onto an ellipse."""
        from homogeom.domain.ellipse import Ellipse

        return Ellipse.from_circle(self).transformed(h)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Circle):
            return NotImplemented
        return (
            self.center == other.center
            and abs(self.radius - other.radius) <= numeric.null_distance()
        )

    def __repr__(self) -> str:
        return f"Circle({self.center!r}, {self.radius:g})"
