"""Ellipse, with conversion to and from its 3x3 conic matrix."""

import math
from typing import TYPE_CHECKING

import numpy as np

from homogeom import numeric
from homogeom.domain.homogeneous import Line, Point
from homogeom.exceptions import DegenerateInputError

if TYPE_CHECKING:
    from homogeom.domain.circle import Circle
    from homogeom.domain.homography import Homography
    from homogeom.domain.polyline import CPolyline
    from homogeom.domain.rect import FRect


class Ellipse:
    """An ellipse given by center, semi-axis lengths and rotation angle.

    The stored major axis is always the longer one: if the minor value
    given is larger, the two are swapped and the angle rotated by 90 degrees.
    The angle is kept in [0, pi).

    Attributes:
        center: Center point
        major: Semi-major axis length
        minor: Semi-minor axis length
        angle: Angle of the major axis with the x axis, in radians
    """

    __slots__ = ("center", "_major", "_minor", "_angle")

    __hash__ = None  # type: ignore[assignment]

    def __init__(
        self,
        center: Point | None = None,
        major: float = 2.0,
        minor: float = 1.0,
        angle: float = 0.0,
    ) -> None:
        """Build an ellipse.

        Raises:
            DegenerateInputError: If an axis length is not above ``null_distance``
        """
        thr = numeric.null_distance()
        if major <= thr or minor <= thr:
            raise DegenerateInputError(
                f"Ellipse axis lengths must be positive, got {major} and {minor}"
            )
        if major < minor:
            major, minor = minor, major
            angle += math.pi / 2.0
        self.center = Point() if center is None else center
        self._major = numeric.to_storage(major)
        self._minor = numeric.to_storage(minor)
        self._angle = numeric.to_storage(math.fmod(angle, math.pi) % math.pi)

    @classmethod
    def from_circle(cls, circle: "Circle") -> "Ellipse":
        return cls(circle.center, circle.radius, circle.radius, 0.0)

    @classmethod
    def from_conic(cls, matrix: np.ndarray) -> "Ellipse":
        """Build from a symmetric 3x3 conic matrix ``C`` (``p.T @ C @ p == 0``).

        Raises:
            DegenerateInputError: If the conic is not a real ellipse
        """
        m = np.asarray(matrix, dtype=numeric.accumulator_type())
        m = (m + m.T) / 2
        quad = m[:2, :2]
        if np.linalg.det(quad.astype(np.float64)) <= 0:
            raise DegenerateInputError("Conic is not an ellipse")
        if quad[0, 0] < 0:
            m = -m
            quad = m[:2, :2]
        center = np.linalg.solve(quad.astype(np.float64), -m[:2, 2].astype(np.float64))
        value_at_center = float(m[2, 2] + m[0, 2] * center[0] + m[1, 2] * center[1])
        if value_at_center >= 0:
            raise DegenerateInputError("Conic has no real points")
        eigvals, eigvecs = np.linalg.eigh(quad.astype(np.float64))
        major = math.sqrt(-value_at_center / eigvals[0])
        minor = math.sqrt(-value_at_center / eigvals[1])
        angle = math.atan2(eigvecs[1, 0], eigvecs[0, 0])
        return cls(Point(center[0], center[1]), major, minor, angle)

    @property
    def major(self) -> float:
        return float(self._major)

    @property
    def minor(self) -> float:
        return float(self._minor)

    @property
    def angle(self) -> float:
        return float(self._angle)

    def get_center(self) -> Point:
        return self.center

    def get_major_minor(self) -> tuple[float, float]:
        return (self.major, self.minor)

    def is_circle(self) -> bool:
        return abs(self.major - self.minor) <= numeric.null_distance()

    def area(self) -> float:
        return math.pi * self.major * self.minor

    def length(self) -> float:
        """Perimeter (Ramanujan's approximation)."""
        a, b = self.major, self.minor
        return math.pi * (3.0 * (a + b) - math.sqrt((3.0 * a + b) * (a + 3.0 * b)))

    def _axes(self) -> tuple[tuple[float, float], tuple[float, float]]:
        c, s = math.cos(self.angle), math.sin(self.angle)
        return (c, s), (-s, c)

    def to_canonical(self, point: Point) -> tuple[float, float]:
        """Coordinates of ``point`` in the ellipse frame (axis aligned, centered)."""
        (ux, uy), (vx, vy) = self._axes()
        dx = point.x - self.center.x
        dy = point.y - self.center.y
        return (dx * ux + dy * uy, dx * vx + dy * vy)

    def from_canonical(self, u: float, v: float) -> Point:
        (ux, uy), (vx, vy) = self._axes()
        return Point(self.center.x + u * ux + v * vx, self.center.y + u * uy + v * vy)

    def canonical_value(self, point: Point) -> float:
        """Quadratic form ``x'^2/a^2 + y'^2/b^2``; below 1 inside, 1 on the ellipse."""
        u, v = self.to_canonical(point)
        return (u / self.major) ** 2 + (v / self.minor) ** 2

    def radial_distance(self, point: Point) -> float:
        """Distance from ``point`` to the ellipse along the ray from the center.

        Signed: negative inside, positive outside.
        """
        u, v = self.to_canonical(point)
        dist_center = math.hypot(u, v)
        if dist_center == 0:
            return -self.minor
        scale = math.sqrt(self.canonical_value(point))
        return dist_center - dist_center / scale

    def point_at(self, t: float) -> Point:
        """Point of the ellipse at parameter ``t`` (eccentric anomaly)."""
        return self.from_canonical(self.major * math.cos(t), self.minor * math.sin(t))

    def get_axis_lines(self) -> tuple[Line, Line]:
        """Supporting lines of the major and minor axes."""
        (ux, uy), (vx, vy) = self._axes()
        return (
            Line.from_direction(ux, uy, through=self.center),
            Line.from_direction(vx, vy, through=self.center),
        )

    def get_bb(self) -> "FRect":
        """Axis-aligned bounding box."""
        from homogeom.domain.rect import FRect

        c, s = math.cos(self.angle), math.sin(self.angle)
        a, b = self.major, self.minor
        half_w = math.sqrt((a * c) ** 2 + (b * s) ** 2)
        half_h = math.sqrt((a * s) ** 2 + (b * c) ** 2)
        cx, cy = self.center.to_tuple()
        return FRect(cx - half_w, cy - half_h, cx + half_w, cy + half_h)

    def get_obb(self) -> "CPolyline":
        """Oriented bounding box, as a closed polyline."""
        from homogeom.domain.polyline import CPolyline

        a, b = self.major, self.minor
        return CPolyline(
            [
                self.from_canonical(-a, -b),
                self.from_canonical(a, -b),
                self.from_canonical(a, b),
                self.from_canonical(-a, b),
            ]
        )

    def get_conic(self) -> np.ndarray:
        """Symmetric 3x3 conic matrix of the ellipse, in the accumulator type."""
        acc = numeric.accumulator_type()
        c, s = math.cos(self.angle), math.sin(self.angle)
        to_world = np.array(
            [[c, -s, self.center.x], [s, c, self.center.y], [0.0, 0.0, 1.0]], dtype=acc
        )
        to_canonical = np.linalg.inv(to_world.astype(np.float64)).astype(acc)
        canonical = np.diag(
            np.array([1.0 / self.major**2, 1.0 / self.minor**2, -1.0], dtype=acc)
        )
        return to_canonical.T @ canonical @ to_canonical

    def translated(self, dx: float, dy: float) -> "Ellipse":
        return Ellipse(self.center.translated(dx, dy), self.major, self.minor, self.angle)

    def move_to(self, point: Point) -> "Ellipse":
        return Ellipse(Point(point.x, point.y), self.major, self.minor, self.angle)

    def transformed(self, h: "Homography") -> "Ellipse":
        """Image of the ellipse under ``h`` (``C' = H^-T C H^-1``).

        Raises:
            DegenerateInputError: If the image is not an ellipse
        """
        inv = h.inverse().as_array().astype(numeric.accumulator_type())
        return Ellipse.from_conic(inv.T @ self.get_conic() @ inv)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ellipse):
            return NotImplemented
        thr = numeric.null_distance()
        if not (
            self.center == other.center
            and abs(self.major - other.major) <= thr
            and abs(self.minor - other.minor) <= thr
        ):
            return False
        if self.is_circle():
            return True
        diff = abs(self.angle - other.angle)
        return min(diff, math.pi - diff) <= numeric.null_angle_value()

    def __repr__(self) -> str:
        return (
            f"Ellipse({self.center!r}, major={self.major:g}, "
            f"minor={self.minor:g}, angle={self.angle:g})"
        )
