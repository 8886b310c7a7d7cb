"""
Tests for the stateless pixel algorithms.

Covers:
- Hard dab geometry and soft falloff
- Stroke interpolation spacing
- Eraser alpha removal
- Flood fill: uniform layers, barriers, tolerance, no-op seed
- Local blur and clone sampling bounds
- Shapes, text and colour sampling
"""
import numpy as np
import pytest
from PyQt6.QtGui import QColor

from conftest import P, px
from retouch_studio.enums import ShapeType
from retouch_studio.logic.drawing_engine import (blur_area, clone_block, dab_alpha, draw_shape,
                                                 draw_stroke, draw_text, flood_fill,
                                                 sample_color, stroke_points)
from retouch_studio.logic.raster import pixels, read_pixels
from retouch_studio.logic.settings import BrushSettings, ShapeSettings, TextSettings


# ══════════════════════════════════════════════════════════════════════════
# Brush
# ══════════════════════════════════════════════════════════════════════════

class TestBrush:

    def test_hard_dab_is_exact_disc(self, blank_image):
        image = blank_image(200, 200)
        brush = BrushSettings(size=20, hardness=100, opacity=100, color="#ff0000")
        assert draw_stroke(image, P(100, 100), P(100, 100), brush)

        arr = read_pixels(image)
        ys, xs = np.mgrid[0:200, 0:200]
        inside = (xs + 0.5 - 100) ** 2 + (ys + 0.5 - 100) ** 2 <= 10 ** 2

        assert np.all(arr[..., 3][inside] == 255)
        assert np.all(arr[..., 3][~inside] == 0)
        assert np.all(arr[..., 0][inside] == 255)
        assert np.all(arr[..., 1][inside] == 0)

    def test_soft_dab_falls_off(self):
        _, _, alpha = dab_alpha(10, 10, 10, 0, 40, 40)
        row = alpha[10]
        assert row[10] > row[15] > row[18]
        assert alpha[0, 0] == 0

    def test_opacity_scales_alpha(self, blank_image):
        image = blank_image(50, 50)
        brush = BrushSettings(size=10, hardness=100, opacity=50, color="#000000")
        draw_stroke(image, P(25, 25), P(25, 25), brush)
        # two coincident dabs at 50%: 1 - 0.5 * 0.5
        assert abs(px(image, 25, 25)[3] - 191) <= 1

    def test_stroke_spacing(self):
        points = stroke_points(P(0, 0), P(100, 0), 20)
        assert len(points) == 21
        assert points[0] == P(0, 0) and points[-1] == P(100, 0)

    def test_zero_length_segment_has_two_samples(self):
        assert len(stroke_points(P(5, 5), P(5, 5), 20)) == 2

    def test_dab_outside_image(self, blank_image):
        image = blank_image(20, 20)
        assert not draw_stroke(image, P(-50, -50), P(-50, -50), BrushSettings(size=10))

    def test_eraser_clears_alpha(self, solid_image):
        image = solid_image(60, 60, "#00ff00")
        brush = BrushSettings(size=10, hardness=100)
        draw_stroke(image, P(30, 30), P(30, 30), brush, erase=True)
        assert px(image, 30, 30)[3] == 0
        assert px(image, 2, 2) == (0, 255, 0, 255)


# ══════════════════════════════════════════════════════════════════════════
# Flood fill
# ══════════════════════════════════════════════════════════════════════════

class TestFloodFill:

    def test_uniform_layer_fully_filled(self, solid_image):
        image = solid_image(120, 90, "#123456")
        assert flood_fill(image, 10, 10, "#ff8800")
        arr = read_pixels(image)
        assert np.all(arr == np.array([255, 0x88, 0, 255], dtype=np.uint8))

    def test_same_colour_is_noop(self, solid_image):
        image = solid_image(40, 40, "#ff8800")
        assert not flood_fill(image, 5, 5, "#ff8800")

    def test_barrier_stops_fill(self, solid_image):
        image = solid_image(50, 50, "#ffffff")
        pixels(image)[:, 25] = (0, 0, 0, 255)
        flood_fill(image, 5, 5, "#0000ff")
        assert px(image, 10, 40) == (0, 0, 255, 255)
        assert px(image, 25, 10) == (0, 0, 0, 255)
        assert px(image, 40, 10) == (255, 255, 255, 255)

    def test_tolerance_per_channel(self, solid_image):
        image = solid_image(30, 10, "#646464")
        arr = pixels(image)
        arr[:, 10] = (130, 100, 100, 255)   # +30 on red: inside tolerance
        arr[:, 20] = (140, 100, 100, 255)   # +40 on red: a wall
        flood_fill(image, 0, 0, "#000000", tolerance=32)
        assert px(image, 10, 5) == (0, 0, 0, 255)
        assert px(image, 20, 5) == (140, 100, 100, 255)
        assert px(image, 25, 5) == (100, 100, 100, 255)

    def test_transparent_region_filled_opaque(self, blank_image):
        image = blank_image(20, 20)
        flood_fill(image, 3, 3, "#ff0000")
        assert px(image, 19, 19) == (255, 0, 0, 255)

    def test_outside_click(self, solid_image):
        assert not flood_fill(solid_image(10, 10), 50, 50, "#000000")


# ══════════════════════════════════════════════════════════════════════════
# Retouch brushes
# ══════════════════════════════════════════════════════════════════════════

class TestRetouch:

    def test_blur_softens_edge_keeps_alpha(self, solid_image):
        image = solid_image(40, 40, "#000000")
        pixels(image)[:, 20:] = (255, 255, 255, 200)
        assert blur_area(image, 20, 20, 10, passes=1)
        r, _, _, a = px(image, 20, 20)
        assert 0 < r < 255
        assert a == 200
        assert px(image, 2, 2) == (0, 0, 0, 255)

    def test_clone_copies_from_offset(self, patterned_image):
        image = patterned_image(200, 100)
        original = read_pixels(image)
        assert clone_block(image, P(120, 50), P(100, 10), 6)
        arr = read_pixels(image)
        assert np.array_equal(arr[47:53, 117:123], original[37:43, 17:23])

    def test_clone_out_of_bounds_skipped(self, patterned_image):
        image = patterned_image(200, 100)
        original = read_pixels(image)
        assert not clone_block(image, P(20, 20), P(30, 0), 10)
        assert np.array_equal(read_pixels(image), original)


# ══════════════════════════════════════════════════════════════════════════
# Shapes, text, sampling
# ══════════════════════════════════════════════════════════════════════════

class TestStamps:

    def test_rectangle_outline(self, blank_image):
        image = blank_image(80, 80)
        settings = ShapeSettings(kind=ShapeType.RECTANGLE, stroke_color="#ff0000", stroke_width=3)
        draw_shape(image, P(10, 10), P(60, 60), settings)
        assert px(image, 10, 35)[3] > 0
        assert px(image, 35, 35)[3] == 0

    def test_filled_circle(self, blank_image):
        image = blank_image(80, 80)
        settings = ShapeSettings(kind=ShapeType.CIRCLE, fill_color="#00ff00", filled=True)
        draw_shape(image, P(10, 10), P(70, 70), settings)
        assert px(image, 40, 40) == (0, 255, 0, 255)
        assert px(image, 11, 11)[3] == 0

    def test_arrow_head(self, blank_image):
        image = blank_image(100, 60)
        settings = ShapeSettings(kind=ShapeType.ARROW, stroke_width=2)
        draw_shape(image, P(10, 30), P(90, 30), settings)
        # head spans max(2*4, 12) px back from the tip at +-30 degrees
        assert px(image, 84, 31)[3] > 0
        assert px(image, 40, 36)[3] == 0

    def test_text_needs_content(self, blank_image):
        image = blank_image(100, 60)
        assert not draw_text(image, P(5, 5), TextSettings(content=""))
        assert draw_text(image, P(5, 5), TextSettings(content="Hi\nthere"))

    def test_sample_color(self, solid_image):
        image = solid_image(10, 10, "#abcdef")
        assert sample_color(image, 3.7, 2.2) == "#abcdef"
        assert sample_color(image, -1, 2) is None
        assert sample_color(image, 10, 0) is None


def test_invalid_brush_colour_raises(blank_image):
    with pytest.raises(ValueError):
        draw_stroke(blank_image(10, 10), P(5, 5), P(5, 5), BrushSettings(color="not-a-colour"))


def test_fill_colour_accepts_qcolor(solid_image):
    image = solid_image(10, 10, "#ffffff")
    assert flood_fill(image, 1, 1, QColor(1, 2, 3))
    assert px(image, 9, 9) == (1, 2, 3, 255)
