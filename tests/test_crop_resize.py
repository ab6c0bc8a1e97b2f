"""
Tests for scale-corrected cropping and resizing.
"""

import pytest
import numpy as np

from retouchkit.config import get_default_config, update_config_value
from retouchkit.exceptions import AllocationError, ValidationError
from retouchkit.processing.models import RasterImage, Rect, ScaleFactors
from retouchkit.processing.geometry import (
    CropExtractor, crop_raster, Resizer, RESIZE_PRESETS, resize_raster,
    resize_to_preset, validate_dimensions,
)


@pytest.fixture
def gradient_raster():
    """10x10 raster whose red channel encodes x and green channel encodes y."""
    ys, xs = np.mgrid[0:10, 0:10]
    pixels = np.zeros((10, 10, 4), dtype=np.uint8)
    pixels[:, :, 0] = xs * 20
    pixels[:, :, 1] = ys * 20
    pixels[:, :, 3] = 255
    return RasterImage(pixels)


class TestCropExtractor:
    """Test display-space crops."""

    def test_full_crop_is_identity(self, gradient_raster):
        """Test full crop is identity."""
        result = crop_raster(gradient_raster, Rect(0, 0, 10, 10))
        assert result == gradient_raster
        assert result.pixels is not gradient_raster.pixels

    def test_sub_rectangle(self, gradient_raster):
        """Test cropping a sub-rectangle."""
        result = crop_raster(gradient_raster, Rect(2, 3, 4, 5))
        assert result.size == (4, 5)
        assert np.array_equal(result.pixels, gradient_raster.pixels[3:8, 2:6])

    def test_scale_factors_convert_display_rect(self, gradient_raster):
        """A 5x5 display of the 10x10 image has scale 2."""
        scale = ScaleFactors.from_dimensions(10, 10, 5, 5)
        result = crop_raster(gradient_raster, Rect(1, 1, 2, 2), scale)
        assert result.size == (4, 4)
        assert np.array_equal(result.pixels, gradient_raster.pixels[2:6, 2:6])

    def test_fractional_size_is_truncated(self, gradient_raster):
        """Test fractional size is truncated."""
        result = CropExtractor().crop(gradient_raster, Rect(0, 0, 3.9, 2.5))
        assert result.size == (3, 2)

    def test_partially_outside_is_clamped(self, gradient_raster):
        """Test partially outside is clamped."""
        result = crop_raster(gradient_raster, Rect(7, 7, 6, 6))
        assert result.size == (3, 3)
        assert np.array_equal(result.pixels, gradient_raster.pixels[7:10, 7:10])

    def test_zero_area(self, gradient_raster):
        """Test that a zero-area crop is rejected."""
        with pytest.raises(ValidationError):
            crop_raster(gradient_raster, Rect(2, 2, 0, 5))

    def test_outside_image(self, gradient_raster):
        """Test that a crop fully outside the image is rejected."""
        with pytest.raises(ValidationError):
            crop_raster(gradient_raster, Rect(20, 20, 5, 5))

    def test_input_not_modified(self, gradient_raster):
        """Test input not modified."""
        before = gradient_raster.copy()
        result = crop_raster(gradient_raster, Rect(2, 2, 3, 3))
        result.pixels[:] = 0
        assert gradient_raster == before


class TestResizer:
    """Test arbitrary and preset resizes."""

    def test_target_dimensions(self, gradient_raster):
        """Test resizing to target dimensions."""
        result = resize_raster(gradient_raster, 20, 7)
        assert result.size == (20, 7)

    def test_same_size_is_copy(self, gradient_raster):
        """Test same size is copy."""
        result = resize_raster(gradient_raster, 10, 10)
        assert result == gradient_raster
        assert result.pixels is not gradient_raster.pixels

    def test_uniform_shrink_stays_uniform(self):
        """Test uniform shrink stays uniform."""
        pixels = np.full((40, 60, 4), 90, dtype=np.uint8)
        result = resize_raster(RasterImage(pixels), 15, 10)
        assert (result.pixels == 90).all()

    @pytest.mark.parametrize("width,height", [
        (0, 10),
        (10, -1),
        (1.5, 10),
        (True, 10),
        ("10", 10),
    ])
    def test_invalid_dimensions(self, gradient_raster, width, height):
        """Test rejecting invalid resize dimensions."""
        with pytest.raises(ValidationError):
            resize_raster(gradient_raster, width, height)

    def test_validate_dimensions_accepts_numpy_ints(self):
        """Test validate dimensions accepts numpy ints."""
        assert validate_dimensions(np.int64(4), 5) == (4, 5)

    def test_canvas_limit(self, gradient_raster):
        """Test the canvas area limit."""
        with pytest.raises(AllocationError):
            Resizer(max_canvas_area=100).resize(gradient_raster, 20, 20)

    def test_preset(self, gradient_raster):
        """Test resizing to a built-in preset."""
        result = resize_to_preset(gradient_raster, 'Facebook Post')
        assert result.size == RESIZE_PRESETS['Facebook Post'] == (1200, 630)

    def test_unknown_preset(self, gradient_raster):
        """Test rejecting an unknown preset name."""
        with pytest.raises(ValidationError, match="Unknown resize preset"):
            resize_to_preset(gradient_raster, 'Billboard')

    def test_presets_from_config(self, gradient_raster):
        """Test presets from config."""
        config = get_default_config()
        update_config_value(config, 'resize.presets', {'Thumb': [16, 12]})
        resizer = Resizer.from_config(config)

        assert resizer.preset_size('Thumb') == (16, 12)
        assert resizer.resize_to_preset(gradient_raster, 'Thumb').size == (16, 12)
        with pytest.raises(ValidationError):
            resizer.preset_size('IG Square')
