"""homogeom - 2D computational geometry in homogeneous coordinates.

homogeom represents points and lines as dual homogeneous 3-vectors, applies
projective transformations (homographies) to every shape kind, and provides
intersection, containment, area and polygon algorithms across a fixed set of
shapes: point, line, segment, axis-aligned rectangle, circle, ellipse, open
polyline and closed polygon.

Example:
    >>> from homogeom import Point, Segment, intersects
    >>> intersects(Segment(Point(0, 0), Point(2, 2)), Segment(Point(0, 2), Point(2, 0))).size
    1
"""

from homogeom import numeric
from homogeom.config import HomogeomSettings, MinimizeMetric, NumericConfig, ScalarType
from homogeom.core import (
    BatchIntersector,
    IntersectionResult,
    convex_hull,
    get_bb,
    intersect_area,
    intersects,
    iou,
    is_inside,
    is_simple,
    minimize,
    offset,
    split_by_line,
    union_area,
)
from homogeom.domain import (
    CardDir,
    Circle,
    CPolyline,
    Ellipse,
    FRect,
    GivenCoord,
    Homography,
    Line,
    LineOffset,
    OPolyline,
    Point,
    Segment,
    Shape,
    ShapeKind,
)
from homogeom.exceptions import (
    DegenerateInputError,
    DegenerateShapeError,
    EmptyInputError,
    GeometryError,
    HomogeomError,
    NoIntersectionError,
    SingularMatrixError,
)

__version__ = "0.1.0"

__all__ = [
    "BatchIntersector",
    "CPolyline",
    "CardDir",
    "Circle",
    "DegenerateInputError",
    "DegenerateShapeError",
    "Ellipse",
    "EmptyInputError",
    "FRect",
    "GeometryError",
    "GivenCoord",
    "HomogeomError",
    "HomogeomSettings",
    "Homography",
    "IntersectionResult",
    "Line",
    "LineOffset",
    "MinimizeMetric",
    "NoIntersectionError",
    "NumericConfig",
    "OPolyline",
    "Point",
    "ScalarType",
    "Segment",
    "Shape",
    "ShapeKind",
    "SingularMatrixError",
    "__version__",
    "convex_hull",
    "get_bb",
    "intersect_area",
    "intersects",
    "iou",
    "is_inside",
    "is_simple",
    "minimize",
    "numeric",
    "offset",
    "split_by_line",
    "union_area",
]
