"""
Tests for compositing and the transparency backdrop.

Covers:
- Invisible layers are skipped
- Opacity and the four blend rules
- Checkerboard squares and colours
"""
import pytest
from PyQt6.QtGui import QColor

from conftest import px
from retouch_studio.enums import BlendMode
from retouch_studio.logic.compositor import composite, make_checkerboard
from retouch_studio.logic.layer import Layer
from retouch_studio.logic.raster import new_image


def solid_layer(color, w=16, h=16, **attrs):
    layer = Layer("L", w, h, new_image(w, h, color))
    for key, value in attrs.items():
        setattr(layer, key, value)
    return layer


def close(actual, expected, tol=2):
    return all(abs(a - e) <= tol for a, e in zip(actual, expected))


class TestComposite:

    def test_invisible_layer_skipped(self, qapp):
        bottom = solid_layer("#336699")
        top = solid_layer("#ff0000", visible=False)
        assert px(composite([bottom, top], 16, 16), 3, 3) == (0x33, 0x66, 0x99, 255)

    def test_empty_stack_is_transparent(self, qapp):
        assert px(composite([], 8, 8), 0, 0)[3] == 0

    def test_normal_opacity(self, qapp):
        result = composite([solid_layer("#ffffff"), solid_layer("#000000", opacity=0.5)], 16, 16)
        assert close(px(result, 0, 0), (128, 128, 128, 255))

    def test_multiply(self, qapp):
        layers = [solid_layer(QColor(200, 100, 50)),
                  solid_layer(QColor(128, 128, 128), blend_mode=BlendMode.MULTIPLY)]
        assert close(px(composite(layers, 16, 16), 5, 5), (100, 50, 25, 255))

    def test_screen(self, qapp):
        layers = [solid_layer(QColor(200, 200, 200)),
                  solid_layer(QColor(128, 128, 128), blend_mode=BlendMode.SCREEN)]
        assert close(px(composite(layers, 16, 16), 5, 5), (228, 228, 228, 255))

    def test_overlay_darkens_dark_and_lightens_light(self, qapp):
        dark = composite([solid_layer(QColor(60, 60, 60)),
                          solid_layer(QColor(100, 100, 100), blend_mode=BlendMode.OVERLAY)], 16, 16)
        light = composite([solid_layer(QColor(200, 200, 200)),
                           solid_layer(QColor(200, 200, 200), blend_mode=BlendMode.OVERLAY)], 16, 16)
        assert px(dark, 0, 0)[0] < 60
        assert px(light, 0, 0)[0] > 200


class TestCheckerboard:

    def test_squares(self, qapp):
        board = make_checkerboard(32, 24)
        assert (board.width(), board.height()) == (32, 24)
        light = (0x2a, 0x2a, 0x2a, 255)
        dark = (0x1a, 0x1a, 0x1a, 255)
        assert px(board, 0, 0) == light
        assert px(board, 7, 7) == light
        assert px(board, 8, 0) == dark
        assert px(board, 0, 8) == dark
        assert px(board, 8, 8) == light

    @pytest.mark.parametrize("size", [4, 16])
    def test_square_size(self, qapp, size):
        board = make_checkerboard(40, 40, size)
        assert px(board, size - 1, 0) != px(board, size, 0)
