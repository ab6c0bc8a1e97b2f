"""
Tests for the raster and parameter data models.
"""

import pytest
import numpy as np

from retouchkit.exceptions import AllocationError, ValidationError
from retouchkit.processing.models import (
    RasterImage, AdjustmentParams, NEUTRAL_PARAMS, Rect, ScaleFactors,
    allocate_pixels,
)


class TestRasterImage:
    """Test RasterImage validation and helpers."""

    def test_blank_is_transparent(self):
        """Test blank is transparent."""
        raster = RasterImage.blank(5, 3)
        assert raster.size == (5, 3)
        assert raster.pixels.shape == (3, 5, 4)
        assert not raster.pixels.any()

    def test_rejects_wrong_dtype(self):
        """Test rejects wrong dtype."""
        with pytest.raises(ValidationError):
            RasterImage(np.zeros((2, 2, 4), dtype=np.float32))

    def test_rejects_wrong_channel_count(self):
        """Test rejects wrong channel count."""
        with pytest.raises(ValidationError):
            RasterImage(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_rejects_empty_dimensions(self):
        """Test rejects empty dimensions."""
        with pytest.raises(ValidationError):
            RasterImage(np.zeros((0, 2, 4), dtype=np.uint8))

    def test_from_array_adds_opaque_alpha(self):
        """RGB input gets alpha 255 and is copied."""
        rgb = np.full((2, 3, 3), 7, dtype=np.uint8)
        raster = RasterImage.from_array(rgb)

        assert raster.size == (3, 2)
        assert (raster.pixels[:, :, 3] == 255).all()
        assert (raster.pixels[:, :, :3] == 7).all()

    def test_from_array_copies_input(self):
        """Test from array copies input."""
        rgba = np.zeros((2, 2, 4), dtype=np.uint8)
        raster = RasterImage.from_array(rgba)
        rgba[0, 0] = 255
        assert not raster.pixels.any()

    def test_equality_is_pixelwise(self):
        """Test equality is pixelwise."""
        a = RasterImage.blank(2, 2)
        b = RasterImage.blank(2, 2)
        assert a == b
        b.pixels[1, 1, 0] = 1
        assert a != b
        assert a != RasterImage.blank(2, 3)

    def test_to_bytes_length(self):
        """Test raw byte export length."""
        raster = RasterImage.blank(4, 3)
        assert len(raster.to_bytes()) == 4 * 3 * 4


class TestAllocation:
    """Test canvas allocation limits."""

    def test_non_positive_dimensions(self):
        """Test rejecting non-positive canvas dimensions."""
        with pytest.raises(AllocationError):
            allocate_pixels(0, 10)

    def test_area_limit(self):
        """Test rejecting canvases over the area limit."""
        with pytest.raises(AllocationError):
            allocate_pixels(100, 100, max_area=9999)

    def test_no_limit(self):
        """Test allocation with the area limit disabled."""
        assert allocate_pixels(100, 100, max_area=None).shape == (100, 100, 4)


class TestAdjustmentParams:
    """Test slider parameter validation."""

    def test_defaults_are_neutral(self):
        """Test that default params are neutral."""
        assert AdjustmentParams().is_neutral
        assert NEUTRAL_PARAMS.is_neutral

    def test_non_neutral(self):
        """Test detection of non-neutral params."""
        assert not AdjustmentParams(sharpness=1).is_neutral
        assert not AdjustmentParams(angle=-90).is_neutral

    @pytest.mark.parametrize("key,value", [
        ('brightness', 201),
        ('contrast', -1),
        ('gamma', 5),
        ('sharpness', 301),
        ('angle', 181),
    ])
    def test_out_of_range(self, key, value):
        """Test rejecting out-of-range slider values."""
        with pytest.raises(ValidationError):
            AdjustmentParams(**{key: value})

    def test_rejects_non_numbers(self):
        """Test rejects non numbers."""
        with pytest.raises(ValidationError):
            AdjustmentParams(brightness="150")
        with pytest.raises(ValidationError):
            AdjustmentParams(sharpness=True)

    def test_validation_error_is_value_error(self):
        """Test validation error is value error."""
        with pytest.raises(ValueError):
            AdjustmentParams(gamma=0)

    def test_from_dict(self):
        """Test building params from a dict."""
        params = AdjustmentParams.from_dict({'brightness': 150, 'angle': 45})
        assert params.brightness == 150
        assert params.angle == 45
        assert params.contrast == 100

    def test_from_dict_unknown_key(self):
        """Test rejecting unknown parameter names."""
        with pytest.raises(ValidationError, match="saturation"):
            AdjustmentParams.from_dict({'saturation': 10})

    def test_to_dict(self):
        """Test converting params to a dict."""
        assert AdjustmentParams(gamma=150).to_dict() == {
            'brightness': 100, 'contrast': 100, 'gamma': 150, 'sharpness': 0, 'angle': 0,
        }


class TestRectAndScale:
    """Test rectangle and scale factor helpers."""

    def test_scaled(self):
        """Test scaling a rectangle."""
        assert Rect(1, 2, 3, 4).scaled(2, 0.5) == Rect(2, 1, 6, 2)

    def test_clamped_inside_is_unchanged(self):
        """Test clamped inside is unchanged."""
        rect = Rect(1, 1, 5, 5)
        assert rect.clamped(10, 10) == rect

    def test_clamped_partially_outside(self):
        """Test clamped partially outside."""
        assert Rect(-2, 8, 5, 5).clamped(10, 10) == Rect(0, 8, 3, 2)

    def test_clamped_fully_outside_has_no_area(self):
        """Test clamped fully outside has no area."""
        assert Rect(20, 20, 5, 5).clamped(10, 10).area == 0

    def test_scale_factors_from_dimensions(self):
        """Test scale factors from dimensions."""
        scale = ScaleFactors.from_dimensions(800, 600, 400, 200)
        assert scale.scale_x == 2.0
        assert scale.scale_y == 3.0

    def test_scale_factors_reject_zero_display(self):
        """Test scale factors reject zero display."""
        with pytest.raises(ValidationError):
            ScaleFactors.from_dimensions(800, 600, 0, 200)
