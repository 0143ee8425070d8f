"""Domain value types for homogeom.

This module contains the geometric primitives and shapes. All shapes are:

- Immutable value objects (transforms always return a new value)
- Compared with tolerance (``null_distance``), hence unhashable
- Members of the closed ``Shape`` union dispatched in ``shape``

Key classes:
- Point, Line: Dual homogeneous 3-vectors
- Homography: Mutable, chainable 3x3 projective transform
- Segment, FRect, Circle, Ellipse: Elementary shapes
- OPolyline, CPolyline: Open and closed polylines
"""

from homogeom.domain.circle import Circle
from homogeom.domain.ellipse import Ellipse
from homogeom.domain.homogeneous import GivenCoord, Line, LineOffset, Point
from homogeom.domain.homography import Homography
from homogeom.domain.polyline import CardDir, CPolyline, OPolyline
from homogeom.domain.rect import FRect
from homogeom.domain.segment import Segment
from homogeom.domain.shape import Painter, Shape, ShapeKind

__all__: list[str] = [
    # Enums
    "CardDir",
    "GivenCoord",
    "LineOffset",
    "ShapeKind",
    # Primitives
    "Point",
    "Line",
    "Homography",
    # Shapes
    "Segment",
    "FRect",
    "Circle",
    "Ellipse",
    "OPolyline",
    "CPolyline",
    "Shape",
    "Painter",
]
