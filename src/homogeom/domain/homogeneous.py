"""Homogeneous points and lines.

A 2D point ``(x, y)`` and a 2D line ``ax + by + c = 0`` are both stored as a
3-vector. The cross product of two points is the line joining them, the cross
product of two lines is their intersection point (projective duality).

- Points keep their raw homogeneous vector; division by the third component
  happens only when ``x``/``y`` are read, so points at infinity (third
  component zero) remain representable.
- Lines are normalized eagerly: ``a**2 + b**2 == 1`` and ``a >= 0``.
"""

import math
from enum import Enum
from typing import Any

import numpy as np

from homogeom import numeric
from homogeom.config.settings import ScalarType
from homogeom.exceptions import DegenerateInputError, NoIntersectionError


class GivenCoord(Enum):
    """Coordinate supplied to a line query."""

    X = "x"
    Y = "y"


class LineOffset(Enum):
    """Direction of an offset added to a line."""

    VERT = "vert"
    HORIZ = "horiz"


def _cross(u: np.ndarray, v: np.ndarray) -> np.ndarray:
    acc = numeric.accumulator_type()
    return np.cross(u.astype(acc), v.astype(acc))


class _Homogeneous:
    """Shared 3-vector body of points and lines."""

    __slots__ = ("_v",)

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, v0: float, v1: float, v2: float) -> None:
        self._v = numeric.storage_array((v0, v1, v2))

    @classmethod
    def _from_array(cls, values: np.ndarray) -> Any:
        obj = cls.__new__(cls)
        _Homogeneous.__init__(obj, *values)
        return obj

    @property
    def values(self) -> tuple[float, float, float]:
        """Raw homogeneous components."""
        return (float(self._v[0]), float(self._v[1]), float(self._v[2]))

    @property
    def dtype(self) -> np.dtype:
        return self._v.dtype

    def as_array(self) -> np.ndarray:
        """Copy of the homogeneous vector."""
        return self._v.copy()

    def astype(self, scalar: ScalarType) -> Any:
        """Explicit, possibly lossy, conversion to another scalar type."""
        obj = type(self).__new__(type(self))
        obj._v = self._v.astype(scalar.numpy_type)
        return obj


class Point(_Homogeneous):
    """A 2D point in homogeneous coordinates.

    Equality is tolerance based (``null_distance``), so points are not
    hashable.

    Examples:
        >>> Point(0, 2) * Point(2, 0) == Line.from_points(Point(2, 0), Point(0, 2))
        True
    """

    __slots__ = ()

    def __init__(self, x: float = 0.0, y: float = 0.0) -> None:
        super().__init__(x, y, 1.0)

    @classmethod
    def from_homogeneous(cls, v0: float, v1: float, v2: float) -> "Point":
        """Build a point from raw components; ``v2 == 0`` is a point at infinity.

        Raises:
            DegenerateInputError: If all three components are zero
        """
        if v0 == 0 and v1 == 0 and v2 == 0:
            raise DegenerateInputError("Null vector does not define a point")
        return cls._from_array(np.array((v0, v1, v2)))

    def is_at_infinity(self) -> bool:
        """True if the point is an ideal point (a direction)."""
        return abs(float(self._v[2])) <= numeric.null_distance()

    @property
    def x(self) -> float:
        return self._coord(0)

    @property
    def y(self) -> float:
        return self._coord(1)

    def _coord(self, index: int) -> float:
        if self.is_at_infinity():
            raise DegenerateInputError("Point at infinity has no finite coordinates")
        acc = numeric.accumulator_type()
        return float(acc(self._v[index]) / acc(self._v[2]))

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def translated(self, dx: float, dy: float) -> "Point":
        """Point moved by (dx, dy); points at infinity are directions and do not move."""
        if self.is_at_infinity():
            return Point._from_array(self._v)
        return Point(self.x + dx, self.y + dy)

    def move_to(self, point: "Point") -> "Point":
        return Point(point.x, point.y)

    def dist_to(self, other: Any) -> float:
        """Distance to another point, or to any object providing ``dist_to(point)``."""
        if isinstance(other, Point):
            return math.hypot(self.x - other.x, self.y - other.y)
        return other.dist_to(self)

    def __mul__(self, other: object) -> "Line":
        if not isinstance(other, Point):
            return NotImplemented
        if self == other:
            raise DegenerateInputError("Cannot build a line from two identical points")
        return Line._from_array(_cross(self._v, other._v))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        inf_self = self.is_at_infinity()
        inf_other = other.is_at_infinity()
        if inf_self != inf_other:
            return False
        if inf_self:
            # same direction up to scale
            v0, v1 = float(self._v[0]), float(self._v[1])
            w0, w1 = float(other._v[0]), float(other._v[1])
            det = (v0 * w1 - v1 * w0) / (math.hypot(v0, v1) * math.hypot(w0, w1))
            return abs(det) <= numeric.null_angle_value()
        return math.hypot(self.x - other.x, self.y - other.y) <= numeric.null_distance()

    def __lt__(self, other: "Point") -> bool:
        """Lexicographic order on (x, y), used for canonical orderings."""
        if not isinstance(other, Point):
            return NotImplemented
        return self.lexico_key() < other.lexico_key()

    def lexico_key(self) -> tuple[float, float]:
        return (self.x, self.y)

    def __repr__(self) -> str:
        if self.is_at_infinity():
            v0, v1, v2 = self.values
            return f"Point.from_homogeneous({v0:g}, {v1:g}, {v2:g})"
        return f"Point({self.x:g}, {self.y:g})"


class Line(_Homogeneous):
    """A 2D line ``ax + by + c = 0``, kept normalized.

    The default line is the vertical line ``x = 0``.
    """

    __slots__ = ()

    def __init__(self, a: float = 1.0, b: float = 0.0, c: float = 0.0) -> None:
        super().__init__(a, b, c)
        self._normalize_in_place()

    @classmethod
    def _from_array(cls, values: np.ndarray) -> "Line":
        obj = cls.__new__(cls)
        _Homogeneous.__init__(obj, *values)
        obj._normalize_in_place()
        return obj

    @classmethod
    def from_points(cls, p1: Point, p2: Point) -> "Line":
        """Line through two points.

        Raises:
            DegenerateInputError: If the points are identical
        """
        return p1 * p2

    @classmethod
    def from_direction(cls, dx: float, dy: float, through: Point | None = None) -> "Line":
        """Line with direction vector (dx, dy), through the origin by default."""
        if dx == 0 and dy == 0:
            raise DegenerateInputError("Null direction vector does not define a line")
        px, py = (0.0, 0.0) if through is None else through.to_tuple()
        return cls(dy, -dx, dx * py - dy * px)

    @classmethod
    def through_origin(cls, point: Point) -> "Line":
        """Line joining the origin and ``point``."""
        return cls.from_direction(point.x, point.y)

    @classmethod
    def vertical(cls, x: float) -> "Line":
        return cls(1.0, 0.0, -x)

    @classmethod
    def horizontal(cls, y: float) -> "Line":
        return cls(0.0, 1.0, -y)

    def _normalize_in_place(self) -> None:
        acc = numeric.accumulator_type()
        v = self._v.astype(acc)
        norm = np.hypot(v[0], v[1])
        if not norm > 0:
            raise DegenerateInputError("Coefficients a and b cannot both be zero")
        v = v / norm
        if v[0] < 0 or (v[0] == 0 and v[1] < 0):
            v = -v
        self._v = v.astype(numeric.storage_type())

    def normalize(self) -> "Line":
        """Return the normalized line (lines are always stored normalized)."""
        return Line._from_array(self._v)

    @property
    def a(self) -> float:
        return float(self._v[0])

    @property
    def b(self) -> float:
        return float(self._v[1])

    @property
    def c(self) -> float:
        return float(self._v[2])

    def signed_dist(self, point: Point) -> float:
        """Signed distance ``a*x + b*y + c`` of a point to the line."""
        acc = numeric.accumulator_type()
        a, b, c = self._v.astype(acc)
        return float(a * acc(point.x) + b * acc(point.y) + c)

    def dist_to(self, point: Point) -> float:
        """Distance between the line and a point."""
        return abs(self.signed_dist(point))

    def side(self, point: Point) -> int:
        """Side of the line the point lies on: -1, 0 (on the line) or 1."""
        d = self.signed_dist(point)
        if abs(d) <= numeric.null_distance():
            return 0
        return 1 if d > 0 else -1

    def get_direction(self) -> tuple[float, float]:
        """Unit direction vector of the line."""
        return (-self.b, self.a)

    def get_coord(self, given: GivenCoord, value: float) -> float:
        """Return the missing coordinate of the point of the line at ``value``.

        Raises:
            DegenerateInputError: If the line is parallel to the given axis
        """
        if given is GivenCoord.X:
            if numeric.is_null_distance(self.b):
                raise DegenerateInputError(f"Vertical line has no unique y for x={value}")
            return -(self.a * value + self.c) / self.b
        if numeric.is_null_distance(self.a):
            raise DegenerateInputError(f"Horizontal line has no unique x for y={value}")
        return -(self.b * value + self.c) / self.a

    def get_point(self, given: GivenCoord, value: float) -> Point:
        """Point of the line with the given coordinate."""
        other = self.get_coord(given, value)
        if given is GivenCoord.X:
            return Point(value, other)
        return Point(other, value)

    def get_points(self, given: GivenCoord, value: float, distance: float) -> tuple[Point, Point]:
        """The two points of the line at ``distance`` from ``get_point(given, value)``.

        Returned in lexicographic order.
        """
        center = self.get_point(given, value)
        dx, dy = self.get_direction()
        p1 = Point(center.x - dx * distance, center.y - dy * distance)
        p2 = Point(center.x + dx * distance, center.y + dy * distance)
        return (p1, p2) if not p2 < p1 else (p2, p1)

    def get_orthogonal_line(self, point: Point) -> "Line":
        """Line orthogonal to this one, through ``point``."""
        a, b = self.a, self.b
        return Line(-b, a, b * point.x - a * point.y)

    def get_orthogonal_line_at(self, given: GivenCoord, value: float) -> "Line":
        """Orthogonal line through the point of this line at ``value``."""
        return self.get_orthogonal_line(self.get_point(given, value))

    def get_parallel_line(self, point: Point) -> "Line":
        """Line parallel to this one, through ``point``."""
        return Line(self.a, self.b, -(self.a * point.x + self.b * point.y))

    def translated(self, dx: float, dy: float) -> "Line":
        """Line moved by (dx, dy)."""
        return Line(self.a, self.b, self.c - self.a * dx - self.b * dy)

    def move_to(self, point: Point) -> "Line":
        """Parallel line through ``point``."""
        return self.get_parallel_line(point)

    def get_parallel_lines(self, distance: float) -> tuple["Line", "Line"]:
        """The two lines parallel to this one at ``distance``."""
        d = abs(distance)
        return (
            Line(self.a, self.b, self.c - d),
            Line(self.a, self.b, self.c + d),
        )

    def add_offset(self, direction: LineOffset, value: float) -> "Line":
        """Return the line shifted vertically or horizontally by ``value``."""
        if direction is LineOffset.VERT:
            return Line(self.a, self.b, self.c - value * self.b)
        return Line(self.a, self.b, self.c - value * self.a)

    def get_angle(self, other: Any) -> float:
        """Angle with another line (or segment), in [0, pi/2]."""
        if not isinstance(other, Line):
            other = other.get_line()
        dot = abs(self.a * other.a + self.b * other.b)
        return math.acos(min(dot, 1.0))

    def is_parallel_to(self, other: Any) -> bool:
        """True if the angle with ``other`` is below ``null_angle_value``."""
        return self.get_angle(other) <= numeric.null_angle_value()

    def __mul__(self, other: object) -> Point:
        if not isinstance(other, Line):
            return NotImplemented
        res = _cross(self._v, other._v)
        magnitude = float(np.sqrt(np.sum(res * res)))
        if abs(float(res[2])) <= numeric.null_distance() * magnitude or magnitude == 0:
            raise NoIntersectionError("Parallel lines have no intersection point")
        return Point._from_array(res)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        thr = numeric.null_distance()
        diff = np.max(np.abs(self._v.astype(float) - other._v.astype(float)))
        if diff <= thr:
            return True
        return bool(np.max(np.abs(self._v.astype(float) + other._v.astype(float))) <= thr)

    def __repr__(self) -> str:
        return f"Line(a={self.a:g}, b={self.b:g}, c={self.c:g})"
