"""Utility functions for homogeom.

This module provides utility functions including:

- Logging setup and configuration
- Batch run statistics and progress logging
"""

from homogeom.utils.logging import (
    BatchLogger,
    BatchStats,
    configure_logging,
    configure_logging_from_settings,
    pair_name,
)

__all__ = [
    "BatchLogger",
    "BatchStats",
    "configure_logging",
    "configure_logging_from_settings",
    "pair_name",
]
