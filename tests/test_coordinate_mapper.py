"""
Tests for pointer-to-image coordinate mapping and zoom limits.
"""

import pytest

from retouchkit.config import get_default_config
from retouchkit.masking import (
    BoundingBox, PointerEvent, PointerPhase, RenderGeometry, CoordinateMapper,
    ZoomSettings, map_pointer_to_image_space, clamp_zoom, zoom_in, zoom_out, reset_zoom,
)


class TestMapPointer:
    """Test contain-fit letterbox mapping."""

    def test_center_of_wide_image(self):
        """Test center of wide image."""
        box = BoundingBox(0, 0, 400, 400)
        assert map_pointer_to_image_space(200, 200, box, 200, 100) == (100, 50)

    def test_box_offset_on_page(self):
        """Test box offset on page."""
        box = BoundingBox(50, 20, 400, 400)
        assert map_pointer_to_image_space(250, 220, box, 200, 100) == (100, 50)

    def test_letterbox_band_is_outside(self):
        """A wide image leaves 100px bands above and below."""
        box = BoundingBox(0, 0, 400, 400)
        assert map_pointer_to_image_space(200, 50, box, 200, 100) is None
        assert map_pointer_to_image_space(200, 350, box, 200, 100) is None

    def test_outside_box(self):
        """Test outside box."""
        box = BoundingBox(0, 0, 400, 400)
        assert map_pointer_to_image_space(-1, 200, box, 200, 100) is None

    def test_edges_are_inclusive(self):
        """Test edges are inclusive."""
        box = BoundingBox(0, 0, 400, 400)
        assert map_pointer_to_image_space(0, 100, box, 200, 100) == (0, 0)
        assert map_pointer_to_image_space(400, 300, box, 200, 100) == (200, 100)

    def test_tall_image_pillarbox(self):
        """Test tall image pillarbox."""
        box = BoundingBox(0, 0, 400, 400)
        assert map_pointer_to_image_space(100, 0, box, 100, 200) == (0, 0)
        assert map_pointer_to_image_space(50, 200, box, 100, 200) is None

    def test_zero_dimensions(self):
        """Test zero dimensions."""
        assert map_pointer_to_image_space(1, 1, BoundingBox(0, 0, 400, 400), 0, 100) is None
        assert map_pointer_to_image_space(1, 1, BoundingBox(0, 0, 0, 0), 100, 100) is None


class TestRenderGeometry:
    """Test rendered rectangle computation."""

    def test_fit(self):
        """Test contain-fit rendered rectangle."""
        geometry = RenderGeometry.compute(200, 100, 400, 400)
        assert geometry.rendered_width == 400
        assert geometry.rendered_height == 200
        assert geometry.offset_x == 0
        assert geometry.offset_y == 100

    def test_zoom_about_center(self):
        """Test zoom about center."""
        geometry = RenderGeometry.compute(200, 100, 400, 400, zoom=2.0)
        assert geometry.rendered_width == 800
        assert geometry.rendered_height == 400
        assert geometry.offset_x == -200
        assert geometry.offset_y == 0

    def test_scale_factors(self):
        """Test display-to-natural scale factors under zoom."""
        scale = RenderGeometry.compute(200, 100, 400, 400, zoom=2.0).scale_factors
        assert scale.scale_x == pytest.approx(0.25)
        assert scale.scale_y == pytest.approx(0.25)


class TestCoordinateMapper:
    """Test the stateful mapper."""

    def test_map_event(self):
        """Test mapping a pointer event to image space."""
        mapper = CoordinateMapper(200, 100, BoundingBox(0, 0, 400, 400))
        event = PointerEvent(200, 200, PointerPhase.MOVE)
        assert mapper.map_event(event) == (100, 50)

    def test_brush_scale(self):
        """Test brush scale for a letterboxed image."""
        mapper = CoordinateMapper(200, 100, BoundingBox(0, 0, 400, 400))
        assert mapper.brush_scale() == pytest.approx(0.5)

    def test_update_box(self):
        """A larger measured box (container zoom) shrinks the brush scale."""
        mapper = CoordinateMapper(200, 100, BoundingBox(0, 0, 400, 400))
        mapper.update_box(BoundingBox(-200, -200, 800, 800))
        assert mapper.brush_scale() == pytest.approx(0.25)
        assert mapper.map(200, 200) == (100, 50)


class TestZoom:
    """Test viewer zoom stepping."""

    def test_step_in_and_out(self):
        """Test step in and out."""
        assert zoom_in(1.0) == 1.1
        assert zoom_in(zoom_in(1.0)) == 1.2
        assert zoom_out(1.0) == 0.9

    def test_limits(self):
        """Test zoom clamping at the configured limits."""
        assert zoom_in(3.0) == 3.0
        assert zoom_out(0.2) == 0.2
        assert clamp_zoom(5) == 3.0
        assert clamp_zoom(0.01) == 0.2

    def test_reset(self):
        """Test resetting zoom to 1.0."""
        assert reset_zoom() == 1.0

    def test_from_config(self):
        """Test settings read from config."""
        config = get_default_config()
        config['viewer']['zoom']['max'] = 2.0
        settings = ZoomSettings.from_config(config)
        assert settings.zoom_in(1.95) == 2.0
        assert settings.minimum == 0.2
