"""Pairwise intersection of shapes.

This module provides:
- ``intersects(a, b)`` for every pair of shape kinds, returning an
  ``IntersectionResult`` (ordered, deduplicated points)
- Rectangle area operations: ``intersect_area``, ``union_area``, ``iou``

Each unordered pair of kinds has one implementation, registered for one
ordering and reused for the other. Rectangles and polylines are reduced to
their boundary segments. "No intersection" is a normal empty result;
only objects outside the shape union raise (``TypeError``).
"""

import logging
import math
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

import numpy as np

from homogeom import numeric
from homogeom.domain.circle import Circle
from homogeom.domain.ellipse import Ellipse
from homogeom.domain.homogeneous import Line, Point
from homogeom.domain.polyline import CPolyline, OPolyline
from homogeom.domain.rect import FRect
from homogeom.domain.segment import Segment
from homogeom.domain.shape import SHAPE_TYPES
from homogeom.exceptions import NoIntersectionError

logger = logging.getLogger(__name__)

PairFunc = Callable[[Any, Any], list[Point]]

_REGISTRY: dict[tuple[type, type], PairFunc] = {}


@dataclass(frozen=True)
class IntersectionResult:
    """Outcome of an intersection query.

    Attributes:
        points: Intersection points, ordered and without duplicates
    """

    points: tuple[Point, ...] = ()

    @property
    def exists(self) -> bool:
        return bool(self.points)

    @property
    def size(self) -> int:
        return len(self.points)

    def get(self) -> tuple[Point, ...]:
        """Return the intersection points.

        Raises:
            NoIntersectionError: If there is no intersection
        """
        if not self.points:
            raise NoIntersectionError("Shapes do not intersect")
        return self.points

    def __bool__(self) -> bool:
        return self.exists

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)


def _register(*pairs: tuple[type, type]) -> Callable[[PairFunc], PairFunc]:
    def decorator(func: PairFunc) -> PairFunc:
        for pair in pairs:
            _REGISTRY[pair] = func
        return func

    return decorator


def intersects(a: Any, b: Any) -> IntersectionResult:
    """Intersect two shapes.

    Args:
        a: First shape
        b: Second shape

    Returns:
        IntersectionResult; empty when the shapes do not meet (or overlap
        along a continuum, e.g. collinear segments or identical circles)

    Raises:
        TypeError: If an argument is not a shape

    Examples:
        >>> res = intersects(Segment.from_coords(0, 0, 2, 2), Segment.from_coords(0, 2, 2, 0))
        >>> res.get()
        (Point(1, 1),)
    """
    func = _REGISTRY.get((type(a), type(b)))
    if func is not None:
        return IntersectionResult(tuple(func(a, b)))
    func = _REGISTRY.get((type(b), type(a)))
    if func is not None:
        return IntersectionResult(tuple(func(b, a)))
    bad = a if not isinstance(a, SHAPE_TYPES) else b
    raise TypeError(f"Cannot intersect object of type {type(bad).__name__}")


def _append_unique(points: list[Point], point: Point, tolerance: float | None = None) -> None:
    tol = numeric.null_distance() if tolerance is None else tolerance
    if all(point.dist_to(p) > tol for p in points):
        points.append(point)


def _sorted(points: list[Point]) -> list[Point]:
    return sorted(points, key=Point.lexico_key)


def _conic_tolerance() -> float:
    return math.sqrt(numeric.null_distance())


# Point vs anything: the point itself when it lies on the boundary


@_register(*((Point, kind) for kind in SHAPE_TYPES))
def _point_any(point: Point, shape: Any) -> list[Point]:
    if point.is_at_infinity():
        return []
    thr = numeric.null_distance()
    match shape:
        case Point():
            on = point == shape
        case Line():
            on = shape.dist_to(point) <= thr
        case Segment():
            on = shape.contains_point(point)
        case FRect() | OPolyline() | CPolyline():
            on = any(seg.contains_point(point) for seg in shape.get_segs())
        case Circle():
            on = abs(point.dist_to(shape.center) - shape.radius) <= thr
        case Ellipse():
            on = abs(shape.radial_distance(point)) <= thr
        case _:
            raise TypeError(f"Cannot intersect object of type {type(shape).__name__}")
    return [point] if on else []


# Straight primitives


@_register((Line, Line))
def _line_line(l1: Line, l2: Line) -> list[Point]:
    if l1.is_parallel_to(l2):
        return []
    try:
        pt = l1 * l2
    except NoIntersectionError:
        return []
    return [] if pt.is_at_infinity() else [pt]


def _on_line(line: Line, seg: Segment) -> bool:
    thr = numeric.null_distance()
    return line.dist_to(seg.p1) <= thr and line.dist_to(seg.p2) <= thr


def _crossing(l1: Line, l2: Line) -> Point | None:
    try:
        pt = l1 * l2
    except NoIntersectionError:
        return None
    return None if pt.is_at_infinity() else pt


@_register((Line, Segment))
def _line_segment(line: Line, seg: Segment) -> list[Point]:
    if _on_line(line, seg):
        logger.debug("Segment lies on the line, overlap is not reported")
        return []
    pt = _crossing(line, seg.get_line())
    if pt is None or not seg.contains_point(pt):
        return []
    return [pt]


def _collinear_touch(s1: Segment, s2: Segment) -> list[Point]:
    """Single shared endpoint of two collinear segments, if that is all they share."""
    dx, dy = s1.get_vector()
    norm = math.hypot(dx, dy)
    dx, dy = dx / norm, dy / norm

    def proj(p: Point) -> float:
        return (p.x - s1.p1.x) * dx + (p.y - s1.p1.y) * dy

    a0, a1 = sorted((proj(s1.p1), proj(s1.p2)))
    b0, b1 = sorted((proj(s2.p1), proj(s2.p2)))
    overlap = min(a1, b1) - max(a0, b0)
    if abs(overlap) > numeric.null_distance():
        if overlap > 0:
            logger.debug(
                "Collinear segments overlap over %.6g, no single intersection point", overlap
            )
        return []
    for p in s1.points:
        for q in s2.points:
            if p == q:
                return [p]
    return []


@_register((Segment, Segment))
def _segment_segment(s1: Segment, s2: Segment) -> list[Point]:
    l1 = s1.get_line()
    if _on_line(l1, s2):
        return _collinear_touch(s1, s2)
    pt = _crossing(l1, s2.get_line())
    if pt is None or not (s1.contains_point(pt) and s2.contains_point(pt)):
        return []
    return [pt]


# Circles


@_register((Line, Circle))
def _line_circle(line: Line, circle: Circle) -> list[Point]:
    center = circle.center
    r = circle.radius
    d = line.signed_dist(center)
    thr = numeric.null_distance()
    if abs(d) > r + thr:
        return []
    foot = Point(center.x - d * line.a, center.y - d * line.b)
    if abs(abs(d) - r) <= thr:
        logger.debug("Line tangent to circle at (%.6g, %.6g)", foot.x, foot.y)
        return [foot]
    h = math.sqrt(r * r - d * d)
    dx, dy = line.get_direction()
    return _sorted(
        [
            Point(foot.x - h * dx, foot.y - h * dy),
            Point(foot.x + h * dx, foot.y + h * dy),
        ]
    )


@_register((Segment, Circle))
def _segment_circle(seg: Segment, circle: Circle) -> list[Point]:
    return [p for p in _line_circle(seg.get_line(), circle) if seg.contains_point(p)]


@_register((Circle, Circle))
def _circle_circle(c1: Circle, c2: Circle) -> list[Point]:
    thr = numeric.null_distance()
    r1, r2 = c1.radius, c2.radius
    ux, uy = c2.center.x - c1.center.x, c2.center.y - c1.center.y
    d = math.hypot(ux, uy)
    if d <= thr:
        return []
    if d > r1 + r2 + thr or d < abs(r1 - r2) - thr:
        return []
    ux, uy = ux / d, uy / d
    a = (d * d + r1 * r1 - r2 * r2) / (2.0 * d)
    base = Point(c1.center.x + a * ux, c1.center.y + a * uy)
    if abs(d - (r1 + r2)) <= thr or abs(d - abs(r1 - r2)) <= thr:
        return [base]
    h = math.sqrt(max(r1 * r1 - a * a, 0.0))
    return _sorted(
        [
            Point(base.x - h * uy, base.y + h * ux),
            Point(base.x + h * uy, base.y - h * ux),
        ]
    )


# Ellipses


@_register((Line, Ellipse))
def _line_ellipse(line: Line, ellipse: Ellipse) -> list[Point]:
    """Solve the line equation in the ellipse frame.

    The line is parametrized by arc length from the foot of the
    perpendicular through the ellipse center.
    """
    center = ellipse.center
    d = line.signed_dist(center)
    p0 = Point(center.x - d * line.a, center.y - d * line.b)
    dx, dy = line.get_direction()
    u0, v0 = ellipse.to_canonical(p0)
    u1, v1 = ellipse.to_canonical(Point(p0.x + dx, p0.y + dy))
    du, dv = u1 - u0, v1 - v0
    a2, b2 = ellipse.major**2, ellipse.minor**2

    qa = du * du / a2 + dv * dv / b2
    qb = 2.0 * (u0 * du / a2 + v0 * dv / b2)
    qc = u0 * u0 / a2 + v0 * v0 / b2 - 1.0

    t_mid = -qb / (2.0 * qa)
    mid = Point(p0.x + t_mid * dx, p0.y + t_mid * dy)
    if abs(ellipse.radial_distance(mid)) <= numeric.null_distance():
        return [mid]
    disc = qb * qb - 4.0 * qa * qc
    if disc < 0:
        return []
    sq = math.sqrt(disc)
    pts = [
        Point(p0.x + t * dx, p0.y + t * dy)
        for t in ((-qb - sq) / (2.0 * qa), (-qb + sq) / (2.0 * qa))
    ]
    return _sorted(pts)


@_register((Segment, Ellipse))
def _segment_ellipse(seg: Segment, ellipse: Ellipse) -> list[Point]:
    return [p for p in _line_ellipse(seg.get_line(), ellipse) if seg.contains_point(p)]


@_register((Ellipse, Ellipse))
def _ellipse_ellipse(e1: Ellipse, e2: Ellipse) -> list[Point]:
    """Intersect two conics.

    ``e1`` is parametrized with ``t = tan(theta / 2)`` and substituted into
    the conic matrix of ``e2``, giving a quartic in ``t`` solved with
    ``numpy.roots``. The point at ``theta = pi`` (``t`` infinite) is tested
    separately. Candidates are validated against ``e2``.
    """
    if e1 == e2:
        return []
    conic = e2.get_conic().astype(np.float64)
    conic = conic / np.max(np.abs(conic))

    a, b = e1.major, e1.minor
    cx, cy = e1.center.to_tuple()
    ux, uy = math.cos(e1.angle), math.sin(e1.angle)
    vx, vy = -uy, ux
    a0 = np.array([cx + a * ux, cy + a * uy, 1.0])
    a1 = np.array([2.0 * b * vx, 2.0 * b * vy, 0.0])
    a2 = np.array([cx - a * ux, cy - a * uy, 1.0])

    def form(p: np.ndarray, q: np.ndarray) -> float:
        return float(p @ conic @ q)

    coeffs = [
        form(a2, a2),
        2.0 * form(a1, a2),
        2.0 * form(a0, a2) + form(a1, a1),
        2.0 * form(a0, a1),
        form(a0, a0),
    ]
    tol = _conic_tolerance()
    candidates = [e1.point_at(math.pi)]
    scale = max(abs(c) for c in coeffs)
    if scale > 0:
        for root in np.roots([c / scale for c in coeffs]):
            if abs(root.imag) <= tol * (1.0 + abs(root.real)):
                candidates.append(e1.point_at(2.0 * math.atan(root.real)))

    points: list[Point] = []
    for pt in candidates:
        if abs(e2.radial_distance(pt)) <= tol * max(1.0, e2.major):
            _append_unique(points, pt, tol)
    return _sorted(points)


@_register((Circle, Ellipse))
def _circle_ellipse(circle: Circle, ellipse: Ellipse) -> list[Point]:
    return _ellipse_ellipse(Ellipse.from_circle(circle), ellipse)


# Decomposed shapes


def _via_segments(container: FRect | OPolyline | CPolyline, other: Any) -> list[Point]:
    """Union of the intersections of each boundary segment, in segment order."""
    points: list[Point] = []
    for seg in container.get_segs():
        for pt in intersects(seg, other):
            _append_unique(points, pt)
    return points


def _register_decompositions() -> None:
    containers = (FRect, OPolyline, CPolyline)
    for container in containers:
        for other in (Line, Segment, Circle, Ellipse, *containers):
            if (other, container) not in _REGISTRY:
                _REGISTRY[(container, other)] = _via_segments


_register_decompositions()


# Rectangle areas


def intersect_area(r1: FRect, r2: FRect) -> FRect | None:
    """Overlap rectangle of two rectangles.

    Returns None unless the overlap has both a width and a height above
    ``null_distance`` (rectangles touching along an edge or at a corner
    have no overlap area, even though ``intersects`` reports points).
    """
    x1, y1 = max(r1.p1.x, r2.p1.x), max(r1.p1.y, r2.p1.y)
    x2, y2 = min(r1.p2.x, r2.p2.x), min(r1.p2.y, r2.p2.y)
    thr = numeric.null_distance()
    if x2 - x1 <= thr or y2 - y1 <= thr:
        return None
    return FRect(x1, y1, x2, y2)


def _grid_values(values: list[float]) -> list[float]:
    out: list[float] = []
    for v in sorted(values):
        if not out or v - out[-1] > numeric.null_distance():
            out.append(v)
    return out


def union_area(r1: FRect, r2: FRect) -> CPolyline:
    """Outline of the union of two rectangles, counter-clockwise.

    The union is built on the grid of the rectangles' coordinates: filled
    cells are those covered by a rectangle, boundary edges between filled
    and empty cells are chained into one loop, and collinear vertices are
    dropped.

    Returns:
        The outline, or an empty CPolyline when the rectangles are disjoint
        or only share a corner
    """
    thr = numeric.null_distance()
    overlap_x = min(r1.p2.x, r2.p2.x) - max(r1.p1.x, r2.p1.x)
    overlap_y = min(r1.p2.y, r2.p2.y) - max(r1.p1.y, r2.p1.y)
    if overlap_x < -thr or overlap_y < -thr:
        return CPolyline()
    if abs(overlap_x) <= thr and abs(overlap_y) <= thr:
        logger.debug("Rectangles only share a corner, union is not a single polygon")
        return CPolyline()

    xs = _grid_values([r1.p1.x, r1.p2.x, r2.p1.x, r2.p2.x])
    ys = _grid_values([r1.p1.y, r1.p2.y, r2.p1.y, r2.p2.y])

    def covered(r: FRect, mx: float, my: float) -> bool:
        return r.p1.x < mx < r.p2.x and r.p1.y < my < r.p2.y

    filled = {
        (i, j)
        for i in range(len(xs) - 1)
        for j in range(len(ys) - 1)
        if any(
            covered(r, (xs[i] + xs[i + 1]) / 2.0, (ys[j] + ys[j + 1]) / 2.0) for r in (r1, r2)
        )
    }

    edges: dict[tuple[int, int], tuple[int, int]] = {}
    for i, j in filled:
        candidates = (
            ((i, j - 1), (i, j), (i + 1, j)),
            ((i + 1, j), (i + 1, j), (i + 1, j + 1)),
            ((i, j + 1), (i + 1, j + 1), (i, j + 1)),
            ((i - 1, j), (i, j + 1), (i, j)),
        )
        for neighbour, start, end in candidates:
            if neighbour in filled:
                continue
            if start in edges:
                logger.debug("Union outline is pinched at a vertex")
                return CPolyline()
            edges[start] = end

    start = min(edges, key=lambda v: (v[1], v[0]))
    loop = [start]
    current = edges[start]
    while current != start:
        loop.append(current)
        current = edges[current]
    if len(loop) != len(edges):
        logger.debug("Union outline has several loops")
        return CPolyline()

    n = len(loop)
    corners = []
    for k in range(n):
        prev, cur, nxt = loop[k - 1], loop[k], loop[(k + 1) % n]
        d_in = (_sign(cur[0] - prev[0]), _sign(cur[1] - prev[1]))
        d_out = (_sign(nxt[0] - cur[0]), _sign(nxt[1] - cur[1]))
        if d_in != d_out:
            corners.append(Point(xs[cur[0]], ys[cur[1]]))
    return CPolyline(corners)


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


def iou(r1: FRect, r2: FRect) -> float:
    """Intersection over union of two rectangles; 0 when they do not overlap."""
    inter = intersect_area(r1, r2)
    if inter is None:
        return 0.0
    union = union_area(r1, r2)
    if union.is_empty():
        return 0.0
    return inter.area() / union.area()
