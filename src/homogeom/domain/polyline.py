"""Open and closed polylines.

``OPolyline`` and ``CPolyline`` share one implementation and differ only in
whether the last vertex connects back to the first.
"""

import math
from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, TypeVar

from homogeom import numeric
from homogeom.domain.homogeneous import Point
from homogeom.domain.segment import Segment
from homogeom.exceptions import DegenerateInputError, DegenerateShapeError, EmptyInputError

if TYPE_CHECKING:
    from homogeom.domain.homography import Homography
    from homogeom.domain.rect import FRect

P = TypeVar("P", bound="_Polyline")


class CardDir(Enum):
    """Cardinal direction used to pick an extreme point."""

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


def shoelace(points: list[Point]) -> float:
    """Signed area of a closed vertex sequence (shoelace formula).

    Sums are accumulated in the accumulator type.
    Positive for counter-clockwise winding, negative for clockwise.
    """
    n = len(points)
    if n < 3:
        return 0.0
    acc = numeric.accumulator_type()
    area = acc(0)
    for i in range(n):
        j = (i + 1) % n
        area += acc(points[i].x) * acc(points[j].y)
        area -= acc(points[j].x) * acc(points[i].y)
    return float(area / 2)


class _Polyline:
    """Ordered vertex sequence shared by open and closed polylines.

    Invariants: size 0 or at least 2, no two consecutive equal points
    (for closed polylines, the last point also differs from the first).
    """

    __slots__ = ("_points",)

    __hash__ = None  # type: ignore[assignment]

    closed: ClassVar[bool] = False

    def __init__(self, points: Iterable[Point] = ()) -> None:
        """Build a polyline.

        Raises:
            DegenerateInputError: On a single point or repeated consecutive points
        """
        pts = tuple(points)
        if len(pts) == 1:
            raise DegenerateInputError("A polyline cannot hold a single point")
        for i in range(len(pts) - 1):
            if pts[i] == pts[i + 1]:
                raise DegenerateInputError(
                    f"Consecutive points {i} and {i + 1} are identical: {pts[i]}"
                )
        if self.closed and len(pts) > 2 and pts[0] == pts[-1]:
            raise DegenerateInputError("Last point of a closed polyline repeats the first one")
        self._points = pts

    @property
    def points(self) -> tuple[Point, ...]:
        return self._points

    def get_pts(self) -> tuple[Point, ...]:
        return self._points

    def size(self) -> int:
        """Number of vertices."""
        return len(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def is_empty(self) -> bool:
        return not self._points

    def nb_segs(self) -> int:
        n = len(self._points)
        if n < 2:
            return 0
        if not self.closed or n == 2:
            return n - 1
        return n

    def get_segs(self) -> list[Segment]:
        """Consecutive segments, including the closing one for closed polylines."""
        pts = self._points
        n = len(pts)
        return [Segment(pts[i], pts[(i + 1) % n]) for i in range(self.nb_segs())]

    def length(self) -> float:
        return sum(seg.length() for seg in self.get_segs())

    def signed_area(self) -> float:
        """Signed area; 0 for open polylines."""
        if not self.closed:
            return 0.0
        return shoelace(list(self._points))

    def area(self) -> float:
        return abs(self.signed_area())

    def centroid(self) -> Point:
        """Centroid of the enclosed area.

        Raises:
            DegenerateShapeError: For open polylines or a null area
        """
        if not self.closed:
            raise DegenerateShapeError("centroid", "open polyline has no area")
        signed = self.signed_area()
        if abs(signed) <= numeric.null_distance():
            raise DegenerateShapeError("centroid", "polygon area is null")
        acc = numeric.accumulator_type()
        cx = acc(0)
        cy = acc(0)
        pts = self._points
        n = len(pts)
        for i in range(n):
            x0, y0 = acc(pts[i].x), acc(pts[i].y)
            x1, y1 = acc(pts[(i + 1) % n].x), acc(pts[(i + 1) % n].y)
            cross = x0 * y1 - x1 * y0
            cx += (x0 + x1) * cross
            cy += (y0 + y1) * cross
        factor = acc(6) * acc(signed)
        return Point(float(cx / factor), float(cy / factor))

    def is_convex(self) -> bool:
        """True for a closed polyline of 3+ vertices turning always the same way."""
        if not self.closed or len(self._points) < 3:
            return False
        pts = self._points
        n = len(pts)
        sign = 0
        for i in range(n):
            a, b, c = pts[i], pts[(i + 1) % n], pts[(i + 2) % n]
            cross = numeric.cross_2d(a.x, a.y, b.x, b.y, c.x, c.y)
            if abs(cross) <= numeric.null_distance():
                continue
            current = 1 if cross > 0 else -1
            if sign == 0:
                sign = current
            elif current != sign:
                return False
        return sign != 0

    def get_bb(self) -> "FRect":
        """Bounding box.

        Raises:
            EmptyInputError: For an empty polyline
            DegenerateInputError: If all points are aligned on an axis
        """
        from homogeom.domain.rect import FRect

        if not self._points:
            raise EmptyInputError("bounding box", "empty polyline")
        xs = [p.x for p in self._points]
        ys = [p.y for p in self._points]
        return FRect(min(xs), min(ys), max(xs), max(ys))

    def get_extreme_point(self, direction: CardDir) -> Point:
        """Vertex furthest in a cardinal direction (ties broken on the other axis)."""
        if not self._points:
            raise EmptyInputError("extreme point", "empty polyline")
        match direction:
            case CardDir.TOP:
                return max(self._points, key=lambda p: (p.y, -p.x))
            case CardDir.BOTTOM:
                return min(self._points, key=lambda p: (p.y, p.x))
            case CardDir.LEFT:
                return min(self._points, key=lambda p: (p.x, p.y))
            case CardDir.RIGHT:
                return max(self._points, key=lambda p: (p.x, -p.y))

    def transformed(self: P, h: "Homography") -> P:
        return type(self)(h * p for p in self._points)

    def translated(self: P, dx: float, dy: float) -> P:
        return type(self)(p.translated(dx, dy) for p in self._points)

    def move_to(self: P, point: Point) -> P:
        """Polyline translated so that its first vertex lands on ``point``.

        Raises:
            EmptyInputError: If the polyline has no vertex
        """
        if not self._points:
            raise EmptyInputError("move", "empty polyline")
        first = self._points[0]
        return self.translated(point.x - first.x, point.y - first.y)

    def _canonical(self) -> tuple[Point, ...]:
        pts = self._points
        n = len(pts)
        if n < 2:
            return pts
        if not self.closed:
            return tuple(reversed(pts)) if pts[-1] < pts[0] else pts
        start = min(range(n), key=lambda i: pts[i].lexico_key())
        rotated = pts[start:] + pts[:start]
        if rotated[-1] < rotated[1]:
            rotated = (rotated[0],) + tuple(reversed(rotated[1:]))
        return rotated

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Polyline):
            return NotImplemented
        if type(self) is not type(other) or len(self) != len(other):
            return False
        return all(p == q for p, q in zip(self._canonical(), other._canonical(), strict=True))

    def __repr__(self) -> str:
        inner = ", ".join(f"({p.x:g}, {p.y:g})" for p in self._points)
        return f"{type(self).__name__}([{inner}])"


class OPolyline(_Polyline):
    """Open polyline."""

    __slots__ = ()

    closed = False


class CPolyline(_Polyline):
    """Closed polyline (polygon): the last vertex connects to the first."""

    __slots__ = ()

    closed = True

    @classmethod
    def regular(
        cls, n: int, radius: float, center: Point | None = None, angle: float = 0.0
    ) -> "CPolyline":
        """Regular polygon of ``n`` vertices on the circle of ``radius`` around ``center``.

        The first vertex sits at ``angle`` radians; the others follow
        counter-clockwise.

        Raises:
            DegenerateInputError: If n < 3 or radius is not positive
        """
        if n < 3:
            raise DegenerateInputError(f"A regular polygon needs at least 3 vertices, got {n}")
        if radius <= 0:
            raise DegenerateInputError(f"Radius must be positive, got {radius}")
        cx, cy = (0.0, 0.0) if center is None else (center.x, center.y)
        angles = [angle + 2.0 * math.pi * k / n for k in range(n)]
        return cls(Point(cx + radius * math.cos(a), cy + radius * math.sin(a)) for a in angles)

    @classmethod
    def regular_from_side(
        cls, n: int, side: float, center: Point | None = None
    ) -> tuple["CPolyline", float]:
        """Regular polygon of ``n`` vertices with sides of length ``side``.

        Returns:
            The polygon and the radius of its circumscribed circle
        """
        if n < 3:
            raise DegenerateInputError(f"A regular polygon needs at least 3 vertices, got {n}")
        if side <= 0:
            raise DegenerateInputError(f"Side length must be positive, got {side}")
        radius = side / (2.0 * math.sin(math.pi / n))
        return cls.regular(n, radius, center), radius

    def perimeter(self) -> float:
        return self.length()
