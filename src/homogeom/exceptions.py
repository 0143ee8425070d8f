"""Exception hierarchy for homogeom."""


class HomogeomError(Exception):
    """Base exception for all homogeom errors."""

    pass


class GeometryError(HomogeomError):
    """Errors in geometric construction or computation."""

    pass


class DegenerateInputError(GeometryError):
    """Construction from coincident or insufficient input.

    Raised for two identical points used to build a line or a segment,
    non-positive radius, zero-area rectangle, repeated consecutive polyline
    points, and similar invariant violations.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


class DegenerateShapeError(GeometryError):
    """Area-dependent operation requested on a zero-area shape."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Cannot compute {operation}: {reason}")


class NoIntersectionError(GeometryError):
    """Explicit intersection requested where none exists."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class SingularMatrixError(GeometryError):
    """Matrix cannot be inverted."""

    def __init__(self, determinant: float) -> None:
        self.determinant = determinant
        super().__init__(f"Matrix is singular (determinant={determinant:g})")


class EmptyInputError(GeometryError):
    """Operation on an empty container, or one yielding a degenerate result."""

    def __init__(self, operation: str, reason: str = "empty input") -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed: {reason}")
