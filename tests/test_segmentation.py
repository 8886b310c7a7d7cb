"""
Tests for the bundled background segmenter.

Covers:
- Centred saturated subject kept, bright uniform surround removed
- Progress reporting
- Majority refinement
"""
import asyncio

import numpy as np
from PyQt6.QtGui import QColor

from retouch_studio.logic.raster import begin_painter, new_image, read_pixels
from retouch_studio.logic.segmentation import HeuristicSegmenter


def subject_on_white(size=60, lo=20, hi=40):
    image = new_image(size, size, "#ffffff")
    painter = begin_painter(image)
    painter.fillRect(lo, lo, hi - lo, hi - lo, QColor("#cc2020"))
    painter.end()
    return image


class TestHeuristicSegmenter:

    def test_subject_kept_background_cleared(self, qapp):
        image = subject_on_white()
        result = asyncio.run(HeuristicSegmenter().segment(image))

        assert result.mask.shape == (60, 60)
        assert result.mask[30, 30] == 255
        assert result.mask[0, 0] == 0
        assert result.mask[5, 50] == 0

        fg = read_pixels(result.foreground)
        assert tuple(fg[30, 30]) == (0xcc, 0x20, 0x20, 255)
        assert fg[0, 0, 3] == 0
        # colour is kept even where alpha is cleared
        assert tuple(fg[0, 0, :3]) == (255, 255, 255)

    def test_progress_reported_in_order(self, qapp):
        progress = []
        asyncio.run(HeuristicSegmenter().segment(subject_on_white(), progress.append))
        assert progress == sorted(progress)
        assert progress[-1] == 1.0

    def test_edges_zero_on_flat_image(self):
        rgb = np.full((10, 10, 3), 77, dtype=np.uint8)
        assert not HeuristicSegmenter.edge_strength(rgb).any()


class TestRefine:

    def test_isolated_pixel_removed(self):
        mask = np.zeros((5, 5), dtype=np.uint8)
        mask[2, 2] = 255
        assert not HeuristicSegmenter.refine(mask).any()

    def test_solid_block_survives(self):
        mask = np.zeros((9, 9), dtype=np.uint8)
        mask[2:7, 2:7] = 255
        out = HeuristicSegmenter.refine(mask)
        assert out[4, 4] == 255
        assert out[2, 2] == 0   # corner sees only 4 of 9
