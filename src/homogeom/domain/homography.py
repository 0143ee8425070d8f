"""Planar homography (3x3 projective transformation).

A ``Homography`` is the one mutable value type of the library: the chainable
``set_*``/``add_*`` mutators update the matrix in place and return ``self``.
Applying the matrix to a line needs the transpose of its inverse; this is
computed on first use and cached until the next mutation. Every mutator goes
through ``_touch()``, which drops the cache.
"""

import logging
import math
from collections.abc import Iterable, MutableSequence, Sequence
from typing import Any

import numpy as np

from homogeom import numeric
from homogeom.config.settings import ScalarType
from homogeom.domain.homogeneous import Line, Point
from homogeom.exceptions import DegenerateInputError, SingularMatrixError

logger = logging.getLogger(__name__)


def _identity() -> np.ndarray:
    return np.eye(3, dtype=numeric.storage_type())


class Homography:
    """A 3x3 homography matrix.

    "Add" operations compose the new elementary transform *after* the
    current content: ``H_new = Elementary * H_old``.

    Example:
        H = Homography().add_rotation(math.pi / 2).add_translation(4, 5)
        pt = H * Point(1, 0)  # rotated, then translated: (4, 6)
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, data: Sequence[Sequence[float]] | np.ndarray | None = None) -> None:
        """Build the identity, or a matrix from 3x3 nested values (normalized).

        Raises:
            ValueError: If data is not 3x3
        """
        self._inv_t: np.ndarray | None = None
        if data is None:
            self._data = _identity()
            self._is_normalized = True
            return
        arr = numeric.storage_array(data)
        if arr.shape != (3, 3):
            raise ValueError(f"Homography needs a 3x3 matrix, got shape {arr.shape}")
        self._data = arr.copy()
        self._is_normalized = False
        self.normalize()

    # -- factories ---------------------------------------------------------

    @classmethod
    def identity(cls) -> "Homography":
        return cls()

    @classmethod
    def rotation(cls, theta: float) -> "Homography":
        """Rotation of ``theta`` radians around the origin."""
        return cls().set_rotation(theta)

    @classmethod
    def translation(cls, tx: float, ty: float) -> "Homography":
        return cls().set_translation(tx, ty)

    @classmethod
    def scaling(cls, kx: float, ky: float | None = None) -> "Homography":
        return cls().set_scale(kx, ky)

    @classmethod
    def from_points(cls, src: Sequence[Point], dst: Sequence[Point]) -> "Homography":
        """Homography mapping four source points onto four destination points.

        Solved with the direct linear transform (null space via SVD).

        Raises:
            ValueError: If the inputs do not hold exactly 4 points each
            DegenerateInputError: If three points are collinear, which leaves
                the system without a unique solution
        """
        if len(src) != 4 or len(dst) != 4:
            raise ValueError(
                f"Expected 4 source and 4 destination points, got {len(src)}/{len(dst)}"
            )
        for pts in (src, dst):
            for i in range(4):
                a, b, c = (pts[(i + k) % 4] for k in range(3))
                if abs(numeric.cross_2d(a.x, a.y, b.x, b.y, c.x, c.y)) <= numeric.null_distance():
                    raise DegenerateInputError("Three of the four points are collinear")

        rows = []
        for p, q in zip(src, dst, strict=True):
            x, y = p.x, p.y
            u, v = q.x, q.y
            rows.append([-x, -y, -1.0, 0.0, 0.0, 0.0, u * x, u * y, u])
            rows.append([0.0, 0.0, 0.0, -x, -y, -1.0, v * x, v * y, v])
        system = np.array(rows, dtype=np.float64)
        _, _, vt = np.linalg.svd(system)
        return cls(vt[-1].reshape(3, 3))

    # -- mutators ----------------------------------------------------------

    def _touch(self, normalized: bool) -> "Homography":
        self._inv_t = None
        self._is_normalized = normalized
        return self

    def clear(self) -> "Homography":
        """Reset to identity."""
        self._data = _identity()
        return self._touch(True)

    def set_value(self, row: int, col: int, value: float) -> "Homography":
        """Set one entry; normalization is deferred to the next comparison."""
        self._data[row, col] = value
        return self._touch(False)

    def set_rotation(self, theta: float) -> "Homography":
        self.clear()
        c, s = math.cos(theta), math.sin(theta)
        self._data[0, 0] = self._data[1, 1] = c
        self._data[1, 0] = s
        self._data[0, 1] = -s
        return self._touch(True)

    def set_translation(self, tx: float, ty: float) -> "Homography":
        self.clear()
        self._data[0, 2] = tx
        self._data[1, 2] = ty
        return self._touch(True)

    def set_scale(self, kx: float, ky: float | None = None) -> "Homography":
        self.clear()
        self._data[0, 0] = kx
        self._data[1, 1] = kx if ky is None else ky
        return self._touch(True)

    def _compose(self, elementary: "Homography") -> "Homography":
        self._data = _matmul(elementary._data, self._data)
        self._touch(False)
        return self.normalize()

    def add_rotation(self, theta: float) -> "Homography":
        return self._compose(Homography().set_rotation(theta))

    def add_translation(self, tx: float, ty: float) -> "Homography":
        return self._compose(Homography().set_translation(tx, ty))

    def add_scale(self, kx: float, ky: float | None = None) -> "Homography":
        return self._compose(Homography().set_scale(kx, ky))

    def normalize(self) -> "Homography":
        """Scale the matrix so that its pivot entry is 1.

        The pivot is ``H[2][2]``, falling back to ``H[2][1]`` then ``H[2][0]``
        when the previous one is within ``null_distance`` of zero.
        Idempotent.
        """
        if self._is_normalized:
            return self
        thr = numeric.null_distance()
        for col in (2, 1, 0):
            pivot = self._data[2, col]
            if abs(float(pivot)) > thr:
                acc = numeric.accumulator_type()
                self._data = (self._data.astype(acc) / acc(pivot)).astype(numeric.storage_type())
                break
        else:
            logger.debug("Homography has a null last row, left unnormalized")
        self._is_normalized = True
        self._inv_t = None
        return self

    # -- algebra -----------------------------------------------------------

    def determinant(self) -> float:
        """Determinant by cofactor expansion along the first row."""
        m = self._data.astype(numeric.accumulator_type())
        det = (
            m[0, 0] * (m[1, 1] * m[2, 2] - m[1, 2] * m[2, 1])
            - m[0, 1] * (m[1, 0] * m[2, 2] - m[1, 2] * m[2, 0])
            + m[0, 2] * (m[1, 0] * m[2, 1] - m[1, 1] * m[2, 0])
        )
        return float(det)

    def _adjugate(self) -> np.ndarray:
        m = self._data.astype(numeric.accumulator_type())
        adj = np.empty_like(m)
        for i in range(3):
            for j in range(3):
                minor = np.delete(np.delete(m, j, axis=0), i, axis=1)
                cofactor = minor[0, 0] * minor[1, 1] - minor[0, 1] * minor[1, 0]
                adj[i, j] = cofactor if (i + j) % 2 == 0 else -cofactor
        return adj

    def inverse(self) -> "Homography":
        """Inverse matrix (adjugate divided by determinant).

        Raises:
            SingularMatrixError: If ``|det| <= null_distance``
        """
        det = self.determinant()
        if abs(det) <= numeric.null_distance():
            raise SingularMatrixError(det)
        acc = numeric.accumulator_type()
        return Homography(self._adjugate() / acc(det))

    def transpose(self) -> "Homography":
        out = Homography()
        out._data = self._data.T.copy()
        return out._touch(False)

    def _inverse_transpose(self) -> np.ndarray:
        if self._inv_t is None:
            self._inv_t = self.inverse()._data.T.copy()
        return self._inv_t

    # -- application -------------------------------------------------------

    def __mul__(self, other: Any) -> Any:
        if isinstance(other, Homography):
            out = Homography()
            out._data = _matmul(self._data, other._data)
            return out._touch(False)
        if isinstance(other, Point):
            return Point._from_array(_matvec(self._data, other._v))
        if isinstance(other, Line):
            return Line._from_array(_matvec(self._inverse_transpose(), other._v))
        from homogeom.domain.shape import transform

        return transform(self, other)

    def apply_to(self, items: Iterable[Any]) -> list[Any]:
        """Return a new list holding every element transformed, order preserved."""
        return [self * item for item in items]

    def apply_in_place(self, items: MutableSequence[Any]) -> None:
        """Replace every element of ``items`` by its transformed value.

        The caller must hold exclusive access to ``items`` for the call.
        """
        for i, item in enumerate(items):
            items[i] = self * item

    # -- accessors ---------------------------------------------------------

    def get_value(self, row: int, col: int) -> float:
        return float(self._data[row, col])

    def as_array(self) -> np.ndarray:
        return self._data.copy()

    def to_list(self) -> list[list[float]]:
        return [[float(v) for v in row] for row in self._data]

    def copy(self) -> "Homography":
        out = Homography()
        out._data = self._data.copy()
        return out._touch(self._is_normalized)

    def astype(self, scalar: ScalarType) -> "Homography":
        """Explicit, possibly lossy, conversion to another scalar type."""
        out = self.copy()
        out._data = out._data.astype(scalar.numpy_type)
        return out

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Homography):
            return NotImplemented
        lhs = self.copy().normalize()._data.astype(float)
        rhs = other.copy().normalize()._data.astype(float)
        return bool(np.max(np.abs(lhs - rhs)) <= numeric.null_distance())

    def __repr__(self) -> str:
        rows = ", ".join("[" + ", ".join(f"{v:g}" for v in row) + "]" for row in self.to_list())
        return f"Homography([{rows}])"


def _matmul(lhs: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    acc = numeric.accumulator_type()
    return (lhs.astype(acc) @ rhs.astype(acc)).astype(numeric.storage_type())


def _matvec(matrix: np.ndarray, vector: np.ndarray) -> np.ndarray:
    acc = numeric.accumulator_type()
    return matrix.astype(acc) @ vector.astype(acc)
