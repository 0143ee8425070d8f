"""Configuration settings for homogeom."""

import math
from enum import Enum
from pathlib import Path

import numpy as np
from pydantic import BaseModel, Field, model_validator


class ScalarType(str, Enum):
    """Floating point type used for storage or accumulation."""

    FLOAT32 = "float32"
    FLOAT64 = "float64"
    LONGDOUBLE = "longdouble"

    @property
    def numpy_type(self) -> type[np.floating]:
        """Numpy scalar type backing this value."""
        return _NUMPY_TYPES[self]

    @property
    def precision(self) -> int:
        """Number of significant mantissa bits."""
        return int(np.finfo(self.numpy_type).nmant)


_NUMPY_TYPES: dict[ScalarType, type[np.floating]] = {
    ScalarType.FLOAT32: np.float32,
    ScalarType.FLOAT64: np.float64,
    ScalarType.LONGDOUBLE: np.longdouble,
}


class MinimizeMetric(str, Enum):
    """Metric used to decide that a polyline vertex is insignificant."""

    ABS_DIST = "abs_dist"
    REL_DIST = "rel_dist"
    ANGLE = "angle"
    TRI_AREA = "tri_area"


class NumericConfig(BaseModel):
    """Numeric policy: scalar types and comparison thresholds.

    Thresholds left to None take the per-type defaults from
    ``homogeom.numeric.DEFAULT_THRESHOLDS``.
    """

    storage: ScalarType = Field(
        default=ScalarType.FLOAT64,
        description="Type used to store coordinates and matrix entries",
    )
    accumulator: ScalarType = Field(
        default=ScalarType.LONGDOUBLE,
        description="Type used for intermediate products and sums",
    )
    null_distance: float | None = Field(
        default=None,
        gt=0.0,
        description="Minimum distinguishable distance",
    )
    null_angle: float | None = Field(
        default=None,
        gt=0.0,
        lt=math.pi / 2,
        description="Minimum distinguishable angle (radians)",
    )

    @model_validator(mode="after")
    def _check_accumulator(self) -> "NumericConfig":
        if self.accumulator.precision < self.storage.precision:
            raise ValueError(
                f"accumulator type {self.accumulator.value} is less precise "
                f"than storage type {self.storage.value}"
            )
        return self


class PolygonConfig(BaseModel):
    """Defaults for polygon algorithms."""

    minimize_metric: MinimizeMetric = Field(
        default=MinimizeMetric.REL_DIST,
        description="Default vertex minimization metric",
    )
    minimize_tolerance: float = Field(
        default=0.01,
        gt=0.0,
        description="Default vertex minimization tolerance",
    )
    circle_segments: int = Field(
        default=32,
        ge=3,
        le=4096,
        description="Segments used to approximate circles and ellipses as polylines",
    )


class BatchConfig(BaseModel):
    """Configuration for batch pairwise processing."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker threads (None = auto)",
    )
    skip_empty: bool = Field(
        default=True,
        description="Drop pairs without intersection from the results",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class HomogeomSettings(BaseModel):
    """Main library settings."""

    numeric: NumericConfig = Field(default_factory=NumericConfig)
    polygon: PolygonConfig = Field(default_factory=PolygonConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> HomogeomSettings:
    """Get default library settings."""
    return HomogeomSettings()
