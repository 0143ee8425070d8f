"""Bounding boxes of shapes and shape collections."""

from collections.abc import Iterable
from typing import Any

from homogeom.domain.circle import Circle
from homogeom.domain.ellipse import Ellipse
from homogeom.domain.homogeneous import Line, Point
from homogeom.domain.polyline import CPolyline, OPolyline
from homogeom.domain.rect import FRect
from homogeom.domain.segment import Segment
from homogeom.domain.shape import SHAPE_TYPES, Shape
from homogeom.exceptions import DegenerateInputError, EmptyInputError

Extent = tuple[float, float, float, float]


def _extent(shape: Shape) -> Extent | None:
    match shape:
        case Point():
            return (shape.x, shape.y, shape.x, shape.y)
        case Line():
            raise DegenerateInputError("A line has no bounding box")
        case Segment() | OPolyline() | CPolyline():
            pts = shape.points
            if not pts:
                return None
            xs = [p.x for p in pts]
            ys = [p.y for p in pts]
            return (min(xs), min(ys), max(xs), max(ys))
        case FRect():
            return (shape.p1.x, shape.p1.y, shape.p2.x, shape.p2.y)
        case Circle() | Ellipse():
            bb = shape.get_bb()
            return (bb.p1.x, bb.p1.y, bb.p2.x, bb.p2.y)
        case _:
            raise TypeError(f"Cannot compute bounding box of {type(shape).__name__}")


def get_bb(*shapes: Any) -> FRect:
    """Bounding box of one or several shapes.

    Accepts either shapes as positional arguments or a single iterable of
    shapes.

    Args:
        *shapes: Shapes, or one iterable of shapes

    Returns:
        Smallest axis-aligned rectangle containing all the shapes

    Raises:
        EmptyInputError: If there is no shape (or only empty polylines), or
            if the union box has a null width or height
        DegenerateInputError: If a Line is given

    Examples:
        >>> get_bb(Point(0, 0), Point(2, 1))
        FRect(0, 0, 2, 1)
    """
    items: Iterable[Any] = shapes
    if len(shapes) == 1 and not isinstance(shapes[0], SHAPE_TYPES):
        items = shapes[0]

    box: Extent | None = None
    for shape in items:
        ext = _extent(shape)
        if ext is None:
            continue
        if box is None:
            box = ext
        else:
            box = (
                min(box[0], ext[0]),
                min(box[1], ext[1]),
                max(box[2], ext[2]),
                max(box[3], ext[3]),
            )
    if box is None:
        raise EmptyInputError("bounding box")
    try:
        return FRect(*box)
    except DegenerateInputError as e:
        raise EmptyInputError("bounding box", "union box has a null width or height") from e
