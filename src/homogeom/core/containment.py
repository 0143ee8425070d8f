"""Containment ("is inside") predicates.

Containment is open: a point on the boundary of a shape is not inside it.
Only shapes with an area (FRect, Circle, Ellipse, CPolyline) can contain
anything.
"""

import logging
import math
from typing import Any

from homogeom import numeric
from homogeom.core.intersection import intersects
from homogeom.domain.circle import Circle
from homogeom.domain.ellipse import Ellipse
from homogeom.domain.homogeneous import Line, Point
from homogeom.domain.polyline import CPolyline, OPolyline
from homogeom.domain.rect import FRect
from homogeom.domain.segment import Segment
from homogeom.domain.shape import SHAPE_TYPES, Shape

logger = logging.getLogger(__name__)


def point_in_polygon(point: Point, polygon: CPolyline) -> bool:
    """Crossing-number test of a point against a closed polyline.

    Casts a horizontal ray from the point to the right and counts edge
    crossings. Points on an edge are reported outside.

    Args:
        point: The point to test
        polygon: Closed polyline

    Returns:
        True if the point is strictly inside

    Examples:
        >>> square = CPolyline([Point(0, 0), Point(2, 0), Point(2, 2), Point(0, 2)])
        >>> point_in_polygon(Point(1, 1), square)
        True
        >>> point_in_polygon(Point(2, 1), square)  # On an edge
        False
    """
    pts = polygon.points
    n = len(pts)
    if n < 3:
        return False
    if any(seg.contains_point(point) for seg in polygon.get_segs()):
        return False

    inside = False
    x, y = point.x, point.y
    j = n - 1
    for i in range(n):
        xi, yi = pts[i].x, pts[i].y
        xj, yj = pts[j].x, pts[j].y
        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside
        j = i
    return inside


def _point_inside(point: Point, container: Shape) -> bool:
    thr = numeric.null_distance()
    match container:
        case Circle():
            return point.dist_to(container.center) < container.radius - thr
        case FRect():
            return (
                container.p1.x + thr < point.x < container.p2.x - thr
                and container.p1.y + thr < point.y < container.p2.y - thr
            )
        case Ellipse():
            return container.radial_distance(point) < -thr
        case CPolyline():
            return point_in_polygon(point, container)
        case Point() | Line() | Segment() | OPolyline():
            return False
        case _:
            raise TypeError(f"Cannot test containment in {type(container).__name__}")


def _defining_points(shape: Shape) -> tuple[Point, ...]:
    """Points that must all be inside a container for ``shape`` to be inside it.

    Curved shapes use their four axis extremities.
    """
    match shape:
        case Point():
            return (shape,)
        case Segment():
            return shape.points
        case FRect():
            return shape.get_pts()
        case OPolyline() | CPolyline():
            return shape.points
        case Circle() | Ellipse():
            return tuple(shape.point_at(k * math.pi / 2.0) for k in range(4))
        case _:
            return ()


def is_inside(shape: Any, container: Any) -> bool:
    """Test whether ``shape`` lies strictly inside ``container``.

    A shape is inside when all its defining points are inside the container
    and the two boundaries do not intersect. A Line is never inside
    anything.

    Args:
        shape: Point or shape to test
        container: Shape that may contain it

    Returns:
        True if ``shape`` is inside ``container``

    Raises:
        TypeError: If an argument is not a shape
    """
    for obj in (shape, container):
        if not isinstance(obj, SHAPE_TYPES):
            raise TypeError(f"Cannot test containment of {type(obj).__name__}")

    if isinstance(shape, Point):
        if shape.is_at_infinity():
            return False
        return _point_inside(shape, container)
    if isinstance(shape, Line):
        return False
    if not isinstance(container, (FRect, Circle, Ellipse, CPolyline)):
        return False

    points = _defining_points(shape)
    if not points:
        logger.debug("Empty %s has no point to test", type(shape).__name__)
        return False
    if not all(_point_inside(p, container) for p in points):
        return False
    return not intersects(shape, container).exists
