"""
Background execution of the adjustment pipeline.

Whole pipeline runs are handed to a single worker thread so interactive
callers are not blocked on large images. A newer submission supersedes older
ones: only the latest result is delivered to the callback.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, Future
from typing import Callable, Optional

from .models import RasterImage, AdjustmentParams
from .adjustment_pipeline import AdjustmentPipeline

logger = logging.getLogger(__name__)

ResultCallback = Callable[[RasterImage], None]
ErrorCallback = Callable[[BaseException], None]


class AdjustmentWorker:
    """
    Runs AdjustmentPipeline.adjust on one background thread.

    Each submission gets a generation number. Callbacks fire only when the
    finished run is still the latest generation, so stale results never
    reach the caller.
    """

    def __init__(self, pipeline: Optional[AdjustmentPipeline] = None):
        self.pipeline = pipeline or AdjustmentPipeline()
        self.executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="RetouchKit-Adjust"
        )
        self._lock = threading.Lock()
        self._generation = 0
        self._shutdown = False

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def submit(self, raster: RasterImage, params: AdjustmentParams,
               on_result: Optional[ResultCallback] = None,
               on_error: Optional[ErrorCallback] = None) -> Future:
        """
        Queue an adjustment run.

        Args:
            raster: Source raster; it is not modified
            params: Slider values
            on_result: Called with the adjusted raster if this run is still the latest
            on_error: Called with the exception if this run fails and is still the latest

        Returns:
            Future resolving to the adjusted raster
        """
        with self._lock:
            if self._shutdown:
                raise RuntimeError("AdjustmentWorker is shut down")
            self._generation += 1
            generation = self._generation

        future = self.executor.submit(self.pipeline.adjust, raster, params)
        future.add_done_callback(
            lambda done: self._deliver(done, generation, on_result, on_error)
        )
        logger.debug(f"Submitted adjustment generation {generation}")
        return future

    def _deliver(self, future: Future, generation: int,
                 on_result: Optional[ResultCallback],
                 on_error: Optional[ErrorCallback]) -> None:
        if future.cancelled():
            return
        with self._lock:
            is_latest = generation == self._generation
        if not is_latest:
            logger.debug(f"Dropping superseded adjustment generation {generation}")
            return

        error = future.exception()
        if error is not None:
            logger.error(f"Adjustment generation {generation} failed: {error}")
            if on_error is not None:
                on_error(error)
            return

        if on_result is not None:
            on_result(future.result())

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            self._shutdown = True
        self.executor.shutdown(wait=wait)

    def __enter__(self) -> 'AdjustmentWorker':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
