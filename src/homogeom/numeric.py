"""Numeric policy: scalar types and process-wide comparison thresholds.

Coordinates and matrix entries are stored as numpy scalars of the *storage*
type; intermediate products (cross products, determinants, shoelace sums)
are computed in the *accumulator* type, which may be more precise.

Every "is zero", "is equal" and "is parallel" decision in the library goes
through ``null_distance()`` or ``null_angle_value()``. Both are process-wide
and meant to be set once at start-up or per test; reading them from several
threads is safe, changing them concurrently is not.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import numpy as np

from homogeom.config.settings import NumericConfig, ScalarType

logger = logging.getLogger(__name__)

# (null distance, null angle in radians) per storage type
DEFAULT_THRESHOLDS: dict[ScalarType, tuple[float, float]] = {
    ScalarType.FLOAT32: (1e-4, 1e-3),
    ScalarType.FLOAT64: (1e-10, 1e-3),
    ScalarType.LONGDOUBLE: (1e-12, 1e-3),
}


@dataclass
class _NumericState:
    storage: ScalarType = ScalarType.FLOAT64
    accumulator: ScalarType = ScalarType.LONGDOUBLE
    null_distance: float = DEFAULT_THRESHOLDS[ScalarType.FLOAT64][0]
    null_angle: float = DEFAULT_THRESHOLDS[ScalarType.FLOAT64][1]


_state = _NumericState()


def storage_type() -> type[np.floating]:
    """Numpy scalar type used to store values."""
    return _state.storage.numpy_type


def accumulator_type() -> type[np.floating]:
    """Numpy scalar type used for intermediate computations."""
    return _state.accumulator.numpy_type


def storage_scalar() -> ScalarType:
    return _state.storage


def accumulator_scalar() -> ScalarType:
    return _state.accumulator


def null_distance() -> float:
    """Minimum distinguishable distance."""
    return _state.null_distance


def null_angle_value() -> float:
    """Minimum distinguishable angle, in radians."""
    return _state.null_angle


def set_null_distance(value: float) -> None:
    """Override the distance threshold.

    Raises:
        ValueError: If value is not strictly positive
    """
    if not value > 0:
        raise ValueError(f"null distance must be positive, got {value}")
    _state.null_distance = float(value)


def set_null_angle_value(value: float) -> None:
    """Override the angle threshold (radians).

    Raises:
        ValueError: If value is not in (0, pi/2)
    """
    if not 0 < value < np.pi / 2:
        raise ValueError(f"null angle must be in (0, pi/2), got {value}")
    _state.null_angle = float(value)


def configure(config: NumericConfig) -> None:
    """Apply a numeric configuration.

    Thresholds that the config leaves unset take the defaults of the
    configured storage type.
    """
    default_dist, default_angle = DEFAULT_THRESHOLDS[config.storage]
    _state.storage = config.storage
    _state.accumulator = config.accumulator
    _state.null_distance = config.null_distance or default_dist
    _state.null_angle = config.null_angle or default_angle
    logger.debug(
        "Numeric policy configured: storage=%s accumulator=%s dist=%g angle=%g",
        _state.storage.value,
        _state.accumulator.value,
        _state.null_distance,
        _state.null_angle,
    )


def reset() -> None:
    """Restore the default policy (float64 storage, longdouble accumulator)."""
    configure(NumericConfig())


def current_config() -> NumericConfig:
    """Snapshot of the active policy."""
    return NumericConfig(
        storage=storage_scalar(),
        accumulator=accumulator_scalar(),
        null_distance=_state.null_distance,
        null_angle=_state.null_angle,
    )


@contextmanager
def thresholds(
    distance: float | None = None,
    angle: float | None = None,
) -> Iterator[None]:
    """Temporarily override thresholds, restoring the previous values on exit.

    Example:
        with thresholds(distance=1e-6):
            assert Point(0, 0) == Point(1e-7, 0)
    """
    saved = (_state.null_distance, _state.null_angle)
    try:
        if distance is not None:
            set_null_distance(distance)
        if angle is not None:
            set_null_angle_value(angle)
        yield
    finally:
        _state.null_distance, _state.null_angle = saved


def to_storage(value: float) -> np.floating:
    """Convert a value to the storage type."""
    return _state.storage.numpy_type(value)


def to_accumulator(value: float) -> np.floating:
    """Convert a value to the accumulator type."""
    return _state.accumulator.numpy_type(value)


def storage_array(values) -> np.ndarray:
    return np.asarray(values, dtype=_state.storage.numpy_type)


def accumulator_array(values) -> np.ndarray:
    return np.asarray(values, dtype=_state.accumulator.numpy_type)


def is_null_distance(value: float) -> bool:
    return abs(value) <= _state.null_distance


def is_null_angle(value: float) -> bool:
    return abs(value) <= _state.null_angle


def cross_2d(ox: float, oy: float, ax: float, ay: float, bx: float, by: float) -> float:
    """Z component of (a - o) x (b - o), computed in the accumulator type.

    Positive when o -> a -> b turns left (counter-clockwise).
    """
    acc = _state.accumulator.numpy_type
    o_x, o_y = acc(ox), acc(oy)
    value = (acc(ax) - o_x) * (acc(by) - o_y) - (acc(ay) - o_y) * (acc(bx) - o_x)
    return float(value)
