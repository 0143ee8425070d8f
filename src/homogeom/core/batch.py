"""Parallel pairwise intersection of shape collections.

The intersection kernel has no hidden state, so pairs are dispatched to a
ThreadPoolExecutor as independent jobs.

Key components:
- intersect_pair: Top-level per-pair job function
- BatchIntersector: Orchestrator running all pairs of a collection
"""

import time
import traceback
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from itertools import combinations
from typing import Any

import structlog

from homogeom import numeric
from homogeom.config import HomogeomSettings, get_default_settings
from homogeom.core.intersection import IntersectionResult, intersects
from homogeom.utils import BatchLogger, BatchStats


def intersect_pair(pair: tuple[int, int], a: Any, b: Any) -> dict[str, Any]:
    """Intersect one pair of shapes.

    Errors are captured in the returned dictionary instead of being raised,
    so one bad pair does not abort a batch.

    Args:
        pair: Indices of the two shapes in the batch
        a: First shape
        b: Second shape

    Returns:
        Dictionary containing either:
        - Success: {"pair": pair, "result": IntersectionResult, "duration_ms": float}
        - Error: {"pair": pair, "error": str, "error_type": str, "traceback": str,
          "duration_ms": float}
    """
    start_time = time.perf_counter()
    try:
        result = intersects(a, b)
        return {
            "pair": pair,
            "result": result,
            "duration_ms": (time.perf_counter() - start_time) * 1000,
        }
    except Exception as e:
        return {
            "pair": pair,
            "error": str(e),
            "error_type": type(e).__name__,
            "traceback": traceback.format_exc(),
            "duration_ms": (time.perf_counter() - start_time) * 1000,
        }


@dataclass
class BatchResult:
    """Outcome of a batch run.

    Attributes:
        intersections: Results keyed by shape index pair ``(i, j)``, ``i < j``
        stats: Counters and timings of the run
    """

    intersections: dict[tuple[int, int], IntersectionResult] = field(default_factory=dict)
    stats: BatchStats = field(default_factory=BatchStats)

    def pairs(self) -> list[tuple[int, int]]:
        """Pairs with a result, in index order."""
        return sorted(self.intersections)


class BatchIntersector:
    """Computes all pairwise intersections of a shape collection.

    Example:
        settings = HomogeomSettings()
        intersector = BatchIntersector(settings)
        result = intersector.run(shapes, max_workers=4)
        for (i, j), res in result.intersections.items():
            ...
    """

    def __init__(
        self,
        settings: HomogeomSettings | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the intersector.

        Args:
            settings: Library settings (defaults if None)
            logger: Bound logger to use; if None, the ``homogeom`` logger.
                Handlers are left to the caller, see ``configure_logging``.
        """
        self.settings = settings if settings is not None else get_default_settings()
        if logger is None:
            logger = structlog.get_logger("homogeom")
        self.logger = logger

    def run(
        self,
        shapes: Sequence[Any],
        max_workers: int | None = None,
        progress_callback: Callable[[int, int, tuple[int, int], bool], None] | None = None,
    ) -> BatchResult:
        """Intersect every pair of shapes.

        The numeric settings are applied process-wide before the run.

        Args:
            shapes: Shapes to intersect
            max_workers: Maximum worker threads (None = ``settings.batch.max_workers``)
            progress_callback: Optional callback(completed, total, pair, success)

        Returns:
            BatchResult with the per-pair results and statistics

        Raises:
            KeyboardInterrupt: If the run is cancelled by the user
        """
        numeric.configure(self.settings.numeric)
        if max_workers is None:
            max_workers = self.settings.batch.max_workers

        batch_logger = BatchLogger(self.logger)
        stats = batch_logger.stats
        stats.start_time = time.time()

        pairs = list(combinations(range(len(shapes)), 2))
        batch_logger.log_batch_start(len(shapes), len(pairs), max_workers)

        result = BatchResult(stats=stats)
        if pairs:
            self._run_pairs(shapes, pairs, max_workers, batch_logger, result, progress_callback)
        else:
            self.logger.info("No pairs to process")

        stats.end_time = time.time()
        batch_logger.log_batch_complete()
        return result

    def _run_pairs(
        self,
        shapes: Sequence[Any],
        pairs: list[tuple[int, int]],
        max_workers: int | None,
        batch_logger: BatchLogger,
        result: BatchResult,
        progress_callback: Callable[[int, int, tuple[int, int], bool], None] | None,
    ) -> None:
        stats = batch_logger.stats
        skip_empty = self.settings.batch.skip_empty
        total = len(pairs)
        completed = 0
        pending_futures: dict[Future, tuple[int, int]] = {}

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            for i, j in pairs:
                future = executor.submit(intersect_pair, (i, j), shapes[i], shapes[j])
                pending_futures[future] = (i, j)

            try:
                for future in as_completed(list(pending_futures)):
                    pair = pending_futures.pop(future)
                    success = False
                    try:
                        outcome = future.result()
                        if "error" in outcome:
                            batch_logger.log_pair_error(
                                pair=pair,
                                error=Exception(outcome["error"]),
                                traceback=outcome.get("traceback"),
                            )
                        else:
                            success = True
                            res: IntersectionResult = outcome["result"]
                            duration_ms = outcome.get("duration_ms", 0.0)
                            if res.exists:
                                batch_logger.log_pair_complete(pair, res.size, duration_ms)
                            else:
                                batch_logger.log_pair_empty(pair, duration_ms)
                            if res.exists or not skip_empty:
                                result.intersections[pair] = res
                    except Exception as e:
                        batch_logger.log_pair_error(
                            pair=pair,
                            error=e,
                            traceback=traceback.format_exc(),
                        )

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, pair, success)

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                stats.was_cancelled = True
                stats.cancelled_count = len(pending_futures)
                executor.shutdown(wait=True, cancel_futures=True)
                raise
