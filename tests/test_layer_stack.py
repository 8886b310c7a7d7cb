"""
Tests for Layer and LayerStack.

Covers:
- Background layer created from the source image
- Add / delete / duplicate and the active handle
- Never-empty invariant
- Reorder boundaries and swap round trips
- Merge down at opacity
- Attribute setters and handle lookup errors
"""
import numpy as np
import pytest
from PyQt6.QtGui import QColor

from conftest import px
from retouch_studio.enums import BlendMode
from retouch_studio.logic.layer_stack import LayerStack
from retouch_studio.logic.raster import begin_painter, read_pixels


@pytest.fixture
def stack(solid_image):
    return LayerStack.from_image(solid_image(64, 48, "#ffffff"))


# ══════════════════════════════════════════════════════════════════════════
# Structure
# ══════════════════════════════════════════════════════════════════════════

class TestStructure:

    def test_background_layer(self, stack):
        assert len(stack) == 1
        base = stack.active_layer
        assert base.name == "Background"
        assert (stack.width, stack.height) == (64, 48)
        assert px(base.image, 0, 0) == (255, 255, 255, 255)

    def test_add_appends_on_top_and_activates(self, stack):
        layer = stack.add()
        assert stack.order[-1] == layer.id
        assert stack.active_id == layer.id
        assert layer.name == "Layer 1"
        assert px(layer.image, 5, 5)[3] == 0
        assert stack.add().name == "Layer 2"

    def test_delete_last_layer_refused(self, stack):
        only = stack.active_id
        assert stack.delete() is False
        assert stack.order == [only]
        assert stack.active_id == only

    def test_delete_active_makes_top_active(self, stack):
        base = stack.active_id
        a = stack.add()
        b = stack.add()
        stack.set_active(a.id)
        assert stack.delete(a.id)
        assert stack.order == [base, b.id]
        assert stack.active_id == b.id

    def test_delete_inactive_keeps_active(self, stack):
        a = stack.add()
        stack.add()
        top = stack.active_id
        assert stack.delete(a.id)
        assert stack.active_id == top

    def test_duplicate_is_pixel_identical_and_above(self, stack):
        base = stack.active_layer
        stack.add()
        copy = stack.duplicate(base.id)
        assert stack.index_of(copy.id) == stack.index_of(base.id) + 1
        assert stack.active_id == copy.id
        assert copy.id != base.id
        assert copy.name == "Background copy"
        assert np.array_equal(read_pixels(copy.image), read_pixels(base.image))

    def test_unknown_handle_raises(self, stack):
        with pytest.raises(KeyError):
            stack.delete("nope")
        assert stack.set_active("nope") is False


# ══════════════════════════════════════════════════════════════════════════
# Reordering
# ══════════════════════════════════════════════════════════════════════════

class TestReorder:

    def test_boundaries_are_noops(self, stack):
        base = stack.active_id
        top = stack.add().id
        assert stack.move_up(top) is False
        assert stack.move_down(base) is False
        assert stack.order == [base, top]

    def test_swap_changes_composite_and_swap_back_restores(self, stack):
        base = stack.active_layer
        top = stack.add()
        top.image.fill(QColor("#ff0000"))
        stack.set_opacity(top.id, 0.5)

        before = read_pixels(stack.composite())
        assert stack.move_down(top.id)
        swapped = read_pixels(stack.composite())
        assert not np.array_equal(before, swapped)

        assert stack.move_up(top.id)
        assert np.array_equal(read_pixels(stack.composite()), before)
        assert stack.order == [base.id, top.id]

    def test_swap_layers_differing_only_in_blend_mode(self, stack):
        base = stack.active_layer
        base.image.fill(QColor(200, 100, 50))
        top = stack.add()
        top.image.fill(QColor(128, 128, 128))
        stack.set_blend_mode(top.id, "multiply")

        before = px(stack.composite(), 4, 4)
        assert abs(before[0] - 100) <= 2 and abs(before[1] - 50) <= 2

        # multiply on the bottom has nothing beneath it, so the opaque colour wins
        assert stack.move_down(top.id)
        assert px(stack.composite(), 4, 4) == (200, 100, 50, 255)

        assert stack.move_up(top.id)
        assert px(stack.composite(), 4, 4) == before


# ══════════════════════════════════════════════════════════════════════════
# Merge
# ══════════════════════════════════════════════════════════════════════════

class TestMerge:

    def test_merge_bottom_is_noop(self, stack):
        assert stack.merge_down() is False
        assert len(stack) == 1

    def test_merge_down_at_opacity(self, stack):
        base = stack.active_layer
        top = stack.add()
        painter = begin_painter(top.image)
        painter.fillRect(0, 0, 64, 48, QColor("#ff0000"))
        painter.end()
        stack.set_opacity(top.id, 0.5)

        assert stack.merge_down(top.id)
        assert len(stack) == 1
        assert stack.active_id == base.id
        r, g, b, a = px(base.image, 10, 10)
        assert r == 255
        assert abs(g - 128) <= 2 and abs(b - 128) <= 2
        assert a == 255


# ══════════════════════════════════════════════════════════════════════════
# Attributes
# ══════════════════════════════════════════════════════════════════════════

class TestAttributes:

    def test_setters(self, stack):
        layer_id = stack.active_id
        stack.set_visibility(layer_id, False)
        stack.set_opacity(layer_id, 3.0)
        stack.set_blend_mode(layer_id, "multiply")
        stack.set_locked(layer_id, True)
        stack.rename(layer_id, "Photo")

        layer = stack.get(layer_id)
        assert layer.visible is False
        assert layer.opacity == 1.0
        assert layer.blend_mode is BlendMode.MULTIPLY
        assert layer.locked and not layer.editable
        assert layer.name == "Photo"

    def test_unknown_blend_mode_rejected(self, stack):
        with pytest.raises(ValueError):
            stack.set_blend_mode(None, "dissolve")

    def test_memory_size(self, stack):
        assert stack.get_memory_size() == pytest.approx(64 * 48 * 4 / (1024 * 1024))
