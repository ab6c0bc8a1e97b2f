"""
Tests for the background adjustment worker.
"""

import threading

import pytest
import numpy as np

from retouchkit.exceptions import AllocationError
from retouchkit.processing import (
    RasterImage, AdjustmentParams, AdjustmentPipeline, AdjustmentWorker, apply_adjustments,
)

TIMEOUT = 10


@pytest.fixture
def raster():
    pixels = np.zeros((4, 4, 4), dtype=np.uint8)
    pixels[:, :, 3] = 255
    return RasterImage(pixels)


class GatedPipeline(AdjustmentPipeline):
    """Pipeline whose first run blocks until released."""

    def __init__(self):
        super().__init__()
        self.release = threading.Event()
        self.started = threading.Event()
        self.calls = 0

    def adjust(self, raster, params):
        self.calls += 1
        if self.calls == 1:
            self.started.set()
            self.release.wait(TIMEOUT)
        return super().adjust(raster, params)


class FailingPipeline(AdjustmentPipeline):
    def adjust(self, raster, params):
        raise AllocationError("no room")


class TestAdjustmentWorker:
    """Test background submission and supersession."""

    def test_future_result(self, raster):
        """Test that the future resolves to the result."""
        params = AdjustmentParams(brightness=120)
        with AdjustmentWorker() as worker:
            result = worker.submit(raster, params).result(TIMEOUT)
        assert result == apply_adjustments(raster, params)

    def test_callback_receives_result(self, raster):
        """Test callback receives result."""
        delivered = []
        done = threading.Event()

        def on_result(result):
            delivered.append(result)
            done.set()

        with AdjustmentWorker() as worker:
            worker.submit(raster, AdjustmentParams(brightness=120), on_result=on_result)
            assert done.wait(TIMEOUT)

        assert (delivered[0].pixels[:, :, :3] == 20).all()

    def test_only_latest_is_delivered(self, raster):
        """Test only latest is delivered."""
        pipeline = GatedPipeline()
        delivered = []
        done = threading.Event()

        def on_result(result):
            delivered.append(result)
            done.set()

        with AdjustmentWorker(pipeline) as worker:
            first = worker.submit(raster, AdjustmentParams(brightness=110), on_result=on_result)
            assert pipeline.started.wait(TIMEOUT)
            worker.submit(raster, AdjustmentParams(brightness=130), on_result=on_result)
            pipeline.release.set()

            assert done.wait(TIMEOUT)
            # The superseded run still completes, it is just not delivered
            assert (first.result(TIMEOUT).pixels[:, :, :3] == 10).all()

        assert len(delivered) == 1
        assert (delivered[0].pixels[:, :, :3] == 30).all()
        assert worker.generation == 2

    def test_error_callback(self, raster):
        """Test that failures reach the error callback."""
        errors = []
        done = threading.Event()

        def on_error(error):
            errors.append(error)
            done.set()

        with AdjustmentWorker(FailingPipeline()) as worker:
            future = worker.submit(raster, AdjustmentParams(brightness=120), on_error=on_error)
            assert done.wait(TIMEOUT)
            with pytest.raises(AllocationError):
                future.result(TIMEOUT)

        assert isinstance(errors[0], AllocationError)

    def test_submit_after_shutdown(self, raster):
        """Test submitting after shutdown."""
        worker = AdjustmentWorker()
        worker.shutdown()
        with pytest.raises(RuntimeError):
            worker.submit(raster, AdjustmentParams(brightness=120))
