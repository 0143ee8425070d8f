"""Closed union of shape kinds and exhaustive dispatch over it.

Heterogeneous collections of shapes are typed as ``Shape``; the functions
below dispatch with ``match`` over the fixed set of kinds, so adding a kind
means extending every function here (type checkers flag missing cases
through ``assert_never``).
"""

import math
from enum import Enum
from typing import TYPE_CHECKING, Protocol, TypeAlias, assert_never

from homogeom.domain.circle import Circle
from homogeom.domain.ellipse import Ellipse
from homogeom.domain.homogeneous import Line, Point
from homogeom.domain.polyline import CPolyline, OPolyline
from homogeom.domain.rect import FRect
from homogeom.domain.segment import Segment

if TYPE_CHECKING:
    from homogeom.domain.homography import Homography

Shape: TypeAlias = Point | Line | Segment | FRect | Circle | Ellipse | OPolyline | CPolyline

SHAPE_TYPES: tuple[type, ...] = (
    Point,
    Line,
    Segment,
    FRect,
    Circle,
    Ellipse,
    OPolyline,
    CPolyline,
)

DEFAULT_CURVE_SEGMENTS = 32


class ShapeKind(Enum):
    """Tag of each member of the shape union."""

    POINT = "point"
    LINE = "line"
    SEGMENT = "segment"
    FRECT = "frect"
    CIRCLE = "circle"
    ELLIPSE = "ellipse"
    OPOLYLINE = "opolyline"
    CPOLYLINE = "cpolyline"


class Painter(Protocol):
    """Drawing backend interface used by ``draw``.

    No backend ships with the library; renderers implement this protocol.
    """

    def draw_point(self, point: Point) -> None: ...

    def draw_line(self, line: Line) -> None: ...

    def draw_segment(self, segment: Segment) -> None: ...

    def draw_circle(self, center: Point, radius: float) -> None: ...

    def draw_ellipse(self, center: Point, major: float, minor: float, angle: float) -> None: ...

    def draw_polyline(self, points: tuple[Point, ...], closed: bool) -> None: ...


def is_shape(obj: object) -> bool:
    return isinstance(obj, SHAPE_TYPES)


def kind(shape: Shape) -> ShapeKind:
    match shape:
        case Point():
            return ShapeKind.POINT
        case Line():
            return ShapeKind.LINE
        case Segment():
            return ShapeKind.SEGMENT
        case FRect():
            return ShapeKind.FRECT
        case Circle():
            return ShapeKind.CIRCLE
        case Ellipse():
            return ShapeKind.ELLIPSE
        case OPolyline():
            return ShapeKind.OPOLYLINE
        case CPolyline():
            return ShapeKind.CPOLYLINE
        case _:
            assert_never(shape)


def area(shape: Shape) -> float:
    """Enclosed area; 0 for points, lines, segments and open polylines."""
    match shape:
        case Point() | Line() | Segment() | OPolyline():
            return 0.0
        case FRect() | Circle() | Ellipse() | CPolyline():
            return shape.area()
        case _:
            assert_never(shape)


def length(shape: Shape) -> float:
    """Length or perimeter; infinite for lines."""
    match shape:
        case Point():
            return 0.0
        case Line():
            return math.inf
        case Segment() | FRect() | Circle() | Ellipse() | OPolyline() | CPolyline():
            return shape.length()
        case _:
            assert_never(shape)


def transform(h: "Homography", shape: Shape) -> Shape:
    """Image of a shape under a homography (always a new value).

    Rectangles become closed polylines, circles become ellipses.
    """
    match shape:
        case Point() | Line():
            return h * shape
        case Segment() | FRect() | Circle() | Ellipse() | OPolyline() | CPolyline():
            return shape.transformed(h)
        case _:
            raise TypeError(f"Cannot transform object of type {type(shape).__name__}")


def translate(shape: Shape, dx: float, dy: float) -> Shape:
    """Shape moved by (dx, dy), keeping its kind."""
    match shape:
        case Point() | Line() | Segment() | FRect() | Circle() | Ellipse():
            return shape.translated(dx, dy)
        case OPolyline() | CPolyline():
            return shape.translated(dx, dy)
        case _:
            assert_never(shape)


def move_to(shape: Shape, point: Point) -> Shape:
    """Shape translated so that its reference point lands on ``point``.

    The reference point is the center of circles and ellipses, the min corner
    of rectangles, ``p1`` of segments and the first vertex of polylines. A line
    is replaced by its parallel through ``point``.
    """
    match shape:
        case Point() | Line() | Segment() | FRect() | Circle() | Ellipse():
            return shape.move_to(point)
        case OPolyline() | CPolyline():
            return shape.move_to(point)
        case _:
            assert_never(shape)


def rotate(shape: Shape, theta: float, center: Point | None = None) -> Shape:
    """Shape rotated by ``theta`` radians around ``center`` (the origin if None).

    Circles stay circles; rectangles become closed polylines.
    """
    from homogeom.domain.homography import Homography

    cx, cy = (0.0, 0.0) if center is None else (center.x, center.y)
    h = Homography.translation(-cx, -cy).add_rotation(theta).add_translation(cx, cy)
    match shape:
        case Circle():
            return Circle(h * shape.center, shape.radius)
        case Point() | Line() | Segment() | FRect() | Ellipse() | OPolyline() | CPolyline():
            return transform(h, shape)
        case _:
            assert_never(shape)


def curve_points(shape: Circle | Ellipse, nb_segments: int) -> list[Point]:
    """Points of the curve at ``nb_segments`` equal steps of its angular parameter."""
    step = 2.0 * math.pi / nb_segments
    return [shape.point_at(i * step) for i in range(nb_segments)]


def get_points(shape: Shape) -> tuple[Point, ...]:
    """Defining points of a shape (center for circles and ellipses)."""
    match shape:
        case Point():
            return (shape,)
        case Line():
            return ()
        case Segment():
            return shape.points
        case FRect():
            return shape.get_pts()
        case Circle() | Ellipse():
            return (shape.center,)
        case OPolyline() | CPolyline():
            return shape.points
        case _:
            assert_never(shape)


def get_segments(shape: Shape, nb_segments: int = DEFAULT_CURVE_SEGMENTS) -> tuple[Segment, ...]:
    """Boundary segments; curves are approximated with ``nb_segments`` chords."""
    match shape:
        case Point() | Line():
            return ()
        case Segment():
            return (shape,)
        case FRect() | OPolyline() | CPolyline():
            return tuple(shape.get_segs())
        case Circle() | Ellipse():
            return tuple(CPolyline(curve_points(shape, nb_segments)).get_segs())
        case _:
            assert_never(shape)


def draw(shape: Shape, painter: Painter) -> None:
    """Forward a shape to the matching painter primitive."""
    match shape:
        case Point():
            painter.draw_point(shape)
        case Line():
            painter.draw_line(shape)
        case Segment():
            painter.draw_segment(shape)
        case FRect():
            painter.draw_polyline(shape.get_pts(), True)
        case Circle():
            painter.draw_circle(shape.center, shape.radius)
        case Ellipse():
            painter.draw_ellipse(shape.center, shape.major, shape.minor, shape.angle)
        case OPolyline():
            painter.draw_polyline(shape.points, False)
        case CPolyline():
            painter.draw_polyline(shape.points, True)
        case _:
            assert_never(shape)
