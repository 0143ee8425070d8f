"""Configuration management for homogeom.

This module provides configuration management using Pydantic models.

Key classes:
- NumericConfig: Scalar types and comparison thresholds
- PolygonConfig: Polygon algorithm defaults
- BatchConfig: Batch pairwise processing settings
- LoggingConfig: Logging settings
- HomogeomSettings: Main library settings
"""

from homogeom.config.settings import (
    BatchConfig,
    HomogeomSettings,
    LoggingConfig,
    MinimizeMetric,
    NumericConfig,
    PolygonConfig,
    ScalarType,
    get_default_settings,
)

__all__ = [
    "BatchConfig",
    "HomogeomSettings",
    "LoggingConfig",
    "MinimizeMetric",
    "NumericConfig",
    "PolygonConfig",
    "ScalarType",
    "get_default_settings",
]
