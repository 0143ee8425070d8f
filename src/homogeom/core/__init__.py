"""Core geometric algorithms for homogeom.

This module contains the algorithms operating on domain shapes:

- Pairwise intersection of every shape kind, rectangle area operations
- Containment predicates
- Bounding boxes of shapes and collections
- Polygon algorithms (convex hull, minimization, splitting, offsetting)
- Parallel batch intersection of shape collections

All functions are pure over immutable shapes and read the process-wide
numeric thresholds only, so they are safe to call from worker threads.

Key functions:
- intersects: Intersection points of two shapes
- intersect_area / union_area / iou: Rectangle overlap operations
- is_inside: Open containment of a point or shape in another shape
- get_bb: Bounding box of one or several shapes
- convex_hull, minimize, split_by_line, offset, is_simple: Polygon algorithms

Key classes:
- IntersectionResult: Ordered, deduplicated intersection points
- BatchIntersector: Runs all pairwise intersections in a thread pool
"""

from homogeom.core.batch import BatchIntersector, BatchResult, intersect_pair
from homogeom.core.bounding import get_bb
from homogeom.core.containment import is_inside, point_in_polygon
from homogeom.core.intersection import (
    IntersectionResult,
    intersect_area,
    intersects,
    iou,
    union_area,
)
from homogeom.core.polygon import convex_hull, is_simple, minimize, offset, split_by_line

__all__ = [
    # Batch
    "BatchIntersector",
    "BatchResult",
    # Intersection
    "IntersectionResult",
    # Polygon algorithms
    "convex_hull",
    # Bounding boxes
    "get_bb",
    "intersect_area",
    "intersect_pair",
    "intersects",
    "iou",
    # Containment
    "is_inside",
    "is_simple",
    "minimize",
    "offset",
    "point_in_polygon",
    "split_by_line",
    "union_area",
]
