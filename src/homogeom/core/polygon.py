"""Polygon and polyline algorithms.

This module provides:
- Convex hull (Graham scan)
- Vertex minimization under a selectable metric
- Splitting by a line
- Offsetting
- Simplicity test

Area, perimeter and centroid are methods of the polyline types; ``iou`` is
re-exported from the intersection module.
"""

import logging
import math
from collections.abc import Iterable
from typing import Any, TypeVar

from homogeom import numeric
from homogeom.config.settings import MinimizeMetric, PolygonConfig
from homogeom.core.intersection import intersects, iou
from homogeom.domain.circle import Circle
from homogeom.domain.ellipse import Ellipse
from homogeom.domain.homogeneous import Line, Point
from homogeom.domain.polyline import CPolyline, OPolyline, _Polyline
from homogeom.domain.shape import curve_points, get_points, is_shape
from homogeom.exceptions import DegenerateInputError, DegenerateShapeError, NoIntersectionError

logger = logging.getLogger(__name__)

P = TypeVar("P", OPolyline, CPolyline)

__all__ = ["convex_hull", "iou", "is_simple", "minimize", "offset", "split_by_line"]


def _dist_from_ray(o: Point, a: Point, b: Point) -> float:
    """Signed distance of ``b`` from the line ``o -> a``; positive on the left."""
    return numeric.cross_2d(o.x, o.y, a.x, a.y, b.x, b.y) / o.dist_to(a)


def _hull_input(source: Any) -> list[Point]:
    if is_shape(source):
        if isinstance(source, Line):
            raise DegenerateInputError("A line has no convex hull")
        if isinstance(source, (Circle, Ellipse)):
            nb = PolygonConfig().circle_segments
            return curve_points(source, nb)
        return list(get_points(source))
    return list(source)


def convex_hull(source: Iterable[Point] | Any) -> CPolyline:
    """Convex hull of a point set or of a shape's points (Graham scan).

    The pivot is the lowest point (lowest x on ties). Points sharing a
    polar angle around the pivot keep only the farthest one, and the sweep
    pops every vertex that does not make a strict left turn.

    Args:
        source: Points, or a shape (curves are approximated by a polygon)

    Returns:
        Counter-clockwise CPolyline starting at the pivot. A closed polyline
        with fewer than 3 vertices is returned unchanged.

    Raises:
        DegenerateInputError: If fewer than 3 distinct, non-collinear points
    """
    if isinstance(source, CPolyline) and source.size() < 3:
        return source

    points: list[Point] = []
    for p in _hull_input(source):
        if all(p != q for q in points):
            points.append(p)
    if len(points) < 3:
        raise DegenerateInputError(
            f"Convex hull needs at least 3 distinct points, got {len(points)}"
        )

    pivot = min(points, key=lambda p: (p.y, p.x))
    others = [p for p in points if p is not pivot]
    others.sort(key=lambda p: (math.atan2(p.y - pivot.y, p.x - pivot.x), pivot.dist_to(p)))

    thr = numeric.null_distance()
    candidates: list[Point] = []
    for p in others:
        if candidates and abs(_dist_from_ray(pivot, p, candidates[-1])) <= thr:
            logger.debug("Dropping the nearer of %r and %r (aligned)", p, candidates[-1])
            if pivot.dist_to(p) > pivot.dist_to(candidates[-1]):
                candidates[-1] = p
        else:
            candidates.append(p)

    stack = [pivot]
    for p in candidates:
        while len(stack) >= 2 and _dist_from_ray(stack[-2], stack[-1], p) <= thr:
            stack.pop()
        stack.append(p)

    if len(stack) < 3:
        raise DegenerateInputError("Convex hull of collinear points has no area")
    return CPolyline(stack)


def _significance(prev: Point, cur: Point, nxt: Point, metric: MinimizeMetric) -> float:
    chord = prev.dist_to(nxt)
    if chord <= numeric.null_distance():
        # tip of a spike: removing it would merge its two neighbours
        return math.inf
    if metric is MinimizeMetric.TRI_AREA:
        return abs(numeric.cross_2d(prev.x, prev.y, cur.x, cur.y, nxt.x, nxt.y)) / 2.0
    if metric is MinimizeMetric.ANGLE:
        a1 = math.atan2(cur.y - prev.y, cur.x - prev.x)
        a2 = math.atan2(nxt.y - cur.y, nxt.x - cur.x)
        turn = abs(a2 - a1) % (2.0 * math.pi)
        return min(turn, 2.0 * math.pi - turn)
    dist = abs(_dist_from_ray(prev, nxt, cur))
    if metric is MinimizeMetric.ABS_DIST:
        return dist
    return dist / chord


def minimize(
    poly: P,
    metric: MinimizeMetric | None = None,
    tolerance: float | None = None,
) -> P:
    """Remove insignificant vertices of a polyline.

    Each pass removes the least significant vertex (judged on the triangle
    it forms with its two neighbours) while its significance is below
    ``tolerance``. Closed polylines wrap around; open polylines keep their
    endpoints. Closed results keep at least 3 vertices, open ones at least 2.

    Args:
        poly: Open or closed polyline
        metric: Significance metric (default from ``PolygonConfig``)
        tolerance: Removal threshold (default from ``PolygonConfig``)

    Returns:
        New polyline of the same kind
    """
    defaults = PolygonConfig()
    metric = defaults.minimize_metric if metric is None else metric
    tolerance = defaults.minimize_tolerance if tolerance is None else tolerance

    pts = list(poly.points)
    floor = 3 if poly.closed else 2
    removed = 0
    while len(pts) > floor:
        n = len(pts)
        indices = range(n) if poly.closed else range(1, n - 1)
        best_index = -1
        best = math.inf
        for i in indices:
            score = _significance(pts[i - 1], pts[i], pts[(i + 1) % n], metric)
            if score < best:
                best, best_index = score, i
        if best_index < 0 or best >= tolerance:
            break
        del pts[best_index]
        removed += 1

    logger.debug("Minimization removed %d of %d vertices", removed, poly.size())
    return type(poly)(pts)


def _labelled_sequence(poly: _Polyline, line: Line) -> list[tuple[Point, int]]:
    """Vertices with their side labels, crossing points inserted (label 0)."""
    pts = poly.points
    n = len(pts)
    seq: list[tuple[Point, int]] = []
    for i in range(n):
        a = pts[i]
        side_a = line.side(a)
        seq.append((a, side_a))
        if not poly.closed and i == n - 1:
            break
        b = pts[(i + 1) % n]
        side_b = line.side(b)
        if side_a * side_b < 0:
            da, db = line.signed_dist(a), line.signed_dist(b)
            t = da / (da - db)
            seq.append((Point(a.x + t * (b.x - a.x), a.y + t * (b.y - a.y)), 0))
    return seq


def _runs(seq: list[tuple[Point, int]]) -> list[list[Point]]:
    """Partition into maximal one-sided runs; points on the line are shared."""
    runs: list[list[Point]] = []
    current: list[tuple[Point, int]] = []
    side = 0
    for point, label in seq:
        if label != 0 and side != 0 and label != side:
            k = len(current)
            while k > 0 and current[k - 1][1] == 0:
                k -= 1
            runs.append([p for p, _ in current])
            current = current[k:]
            side = label
        elif label != 0:
            side = label
        if not current or current[-1][0] != point:
            current.append((point, label))
    runs.append([p for p, _ in current])
    return [run for run in runs if len(run) >= 2]


def split_by_line(poly: P, line: Line) -> list[P]:
    """Split a polyline into its parts on each side of a line.

    Crossing points are inserted, then the vertices are partitioned into
    maximal runs lying on one side; vertices on the line belong to both
    adjacent runs. Closed inputs give closed parts (closed along the line).

    Args:
        poly: Open or closed polyline
        line: Cutting line

    Returns:
        The parts, in traversal order; ``[poly]`` if the line does not cross it
    """
    if poly.size() < 2:
        return [poly]
    seq = _labelled_sequence(poly, line)
    labels = {label for _, label in seq}
    if not (1 in labels and -1 in labels):
        return [poly]

    if not poly.closed:
        return [type(poly)(run) for run in _runs(seq)]

    # start on the line, just before a change of side
    n = len(seq)
    first = next(i for i, (_, label) in enumerate(seq) if label != 0)
    last_side = seq[first][1]
    start = -1
    for step in range(1, n + 1):
        i = (first + step) % n
        label = seq[i][1]
        if label != 0 and label != last_side:
            start = (i - 1) % n
            break
        if label != 0:
            last_side = label
    rotated = seq[start:] + seq[:start]
    rotated.append(rotated[0])

    parts = []
    for run in _runs(rotated):
        if len(run) > 2 and run[0] == run[-1]:
            run = run[:-1]
        parts.append(type(poly)(run))
    logger.debug("Split closed polyline of %d vertices into %d parts", poly.size(), len(parts))
    return parts


def _left_normal(a: Point, b: Point) -> tuple[float, float]:
    length = a.dist_to(b)
    return (-(b.y - a.y) / length, (b.x - a.x) / length)


def _shift(p: Point, normal: tuple[float, float], amount: float) -> Point:
    return Point(p.x + normal[0] * amount, p.y + normal[1] * amount)


def _offset_corner(prev: Point, cur: Point, nxt: Point, side: int, dist: float) -> Point:
    """Offset vertex between edges ``prev -> cur`` and ``cur -> nxt``.

    Each edge has two parallel lines at ``dist``; of the four crossings,
    keep the one lying on ``side`` of both directed edges.
    """
    l1, l2 = (prev * cur), (cur * nxt)
    if l1.is_parallel_to(l2):
        return _shift(cur, _left_normal(prev, cur), side * dist)
    for p1 in l1.get_parallel_lines(dist):
        for p2 in l2.get_parallel_lines(dist):
            try:
                candidate = p1 * p2
            except NoIntersectionError:
                continue
            if candidate.is_at_infinity():
                continue
            if (
                _dist_from_ray(prev, cur, candidate) * side > 0
                and _dist_from_ray(cur, nxt, candidate) * side > 0
            ):
                return candidate
    logger.debug("No offset corner on the requested side at %r, shifting the vertex", cur)
    return _shift(cur, _left_normal(prev, cur), side * dist)


def offset(poly: P, distance: float) -> P:
    """Offset a polyline by ``distance``.

    For closed polylines a positive distance grows the polygon (outward)
    and a negative one shrinks it, whatever the winding. For open polylines
    a positive distance moves to the left of the travel direction.

    Raises:
        DegenerateShapeError: For a closed polyline with a null area, or if
            the offset collapses the polyline
    """
    pts = poly.points
    n = len(pts)
    if n < 2 or numeric.is_null_distance(distance):
        return poly
    if poly.closed:
        signed = poly.signed_area()
        if numeric.is_null_distance(signed):
            raise DegenerateShapeError("offset", "polygon area is null")
        orientation = 1 if signed > 0 else -1
        side = -orientation if distance > 0 else orientation
    else:
        side = 1 if distance > 0 else -1
    dist = abs(distance)

    out: list[Point] = []
    for i in range(n):
        if not poly.closed and i == 0:
            new = _shift(pts[0], _left_normal(pts[0], pts[1]), side * dist)
        elif not poly.closed and i == n - 1:
            new = _shift(pts[-1], _left_normal(pts[-2], pts[-1]), side * dist)
        else:
            new = _offset_corner(pts[i - 1], pts[i], pts[(i + 1) % n], side, dist)
        if not out or out[-1] != new:
            out.append(new)
    if poly.closed and len(out) > 1 and out[0] == out[-1]:
        out.pop()
    if len(out) < 2:
        raise DegenerateShapeError("offset", "offset collapses the polyline")
    return type(poly)(out)


def is_simple(poly: _Polyline) -> bool:
    """True if no two edges of the polyline meet outside their shared vertex."""
    n = poly.size()
    if n < 3:
        return not (poly.closed and n == 2)
    pts = poly.points
    edges = [(pts[i], pts[(i + 1) % n]) for i in range(poly.nb_segs())]
    segs = poly.get_segs()
    count = len(segs)
    for i in range(count):
        for j in range(i + 1, count):
            adjacent = j == i + 1 or (poly.closed and i == 0 and j == count - 1)
            if adjacent:
                # shared vertex; fold back if the far end lies on the other edge
                a_start, a_end = edges[i]
                b_start, b_end = edges[j]
                far_a = a_start if j == i + 1 else a_end
                far_b = b_end if j == i + 1 else b_start
                if segs[j].contains_point(far_a) or segs[i].contains_point(far_b):
                    return False
                continue
            if intersects(segs[i], segs[j]).exists:
                return False
            if any(segs[j].contains_point(p) for p in segs[i].points) or any(
                segs[i].contains_point(p) for p in segs[j].points
            ):
                return False
    return True
