"""
Background removal collaborators.

The editor only depends on the ``Segmenter`` protocol: an awaitable
``segment(image, on_progress)`` returning a foreground image of the same
size. ``HeuristicSegmenter`` is the bundled default; it scores each pixel
by distance from the centre, saturation and Sobel edge strength, then
cleans the mask with two 3x3 majority passes.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

import numpy as np
from PyQt6.QtGui import QImage

from .raster import image_from_array, read_pixels

logger = logging.getLogger(__name__)

ProgressCallback = Optional[Callable[[float], None]]


@dataclass
class SegmentationResult:
    foreground: QImage      # source pixels with background alpha cleared
    mask: np.ndarray        # (h, w) uint8, 255 = foreground


class Segmenter(Protocol):
    async def segment(self, image: QImage, on_progress: ProgressCallback = None) -> SegmentationResult:
        ...


class HeuristicSegmenter:
    """Centre/edge/saturation heuristic, computed in a worker thread"""

    SCORE_THRESHOLD = 0.25
    REFINE_PASSES = 2

    async def segment(self, image: QImage, on_progress: ProgressCallback = None) -> SegmentationResult:
        def report(value):
            if on_progress:
                on_progress(value)

        report(0.1)
        rgba = read_pixels(image)
        # erased pixels keep their old colour; score them as empty
        scored = rgba.copy()
        scored[rgba[..., 3] == 0] = 0
        report(0.3)
        mask = await asyncio.to_thread(self.compute_mask, scored)
        report(0.8)

        out = rgba.copy()
        out[..., 3] = np.minimum(rgba[..., 3], mask)
        result = SegmentationResult(image_from_array(out), mask)
        report(1.0)
        return result

    # === Pure numpy stages === #
    @staticmethod
    def edge_strength(rgb: np.ndarray) -> np.ndarray:
        """Sobel magnitude of the channel mean, scaled to 0..1; border is 0"""
        gray = rgb.astype(np.float32).mean(axis=2)
        h, w = gray.shape
        edges = np.zeros((h, w), dtype=np.float32)
        if h < 3 or w < 3:
            return edges

        def at(dy, dx):
            return gray[1 + dy:h - 1 + dy, 1 + dx:w - 1 + dx]

        gx = (at(-1, 1) + 2 * at(0, 1) + at(1, 1)) - (at(-1, -1) + 2 * at(0, -1) + at(1, -1))
        gy = (at(1, -1) + 2 * at(1, 0) + at(1, 1)) - (at(-1, -1) + 2 * at(-1, 0) + at(-1, 1))
        edges[1:-1, 1:-1] = np.minimum(np.hypot(gx, gy) / 1000.0, 1.0)
        return edges

    @classmethod
    def raw_mask(cls, rgba: np.ndarray) -> np.ndarray:
        h, w = rgba.shape[:2]
        rgb = rgba[..., :3].astype(np.float32)

        cx, cy = w / 2, h / 2
        max_dist = np.hypot(cx, cy)
        ys, xs = np.mgrid[0:h, 0:w]
        distance_factor = 1.0 - np.hypot(xs - cx, ys - cy) / max_dist

        brightness = rgb.mean(axis=2)
        saturation = rgb.max(axis=2) - rgb.min(axis=2)
        edges = cls.edge_strength(rgb)

        score = distance_factor * 0.5 + (saturation / 255.0) * 0.2 + edges * 0.3
        background = ((score < cls.SCORE_THRESHOLD)
                      | ((brightness > 245) & (saturation < 15))
                      | ((brightness < 10) & (saturation < 15)))
        return np.where(background, 0, 255).astype(np.uint8)

    @staticmethod
    def refine(mask: np.ndarray) -> np.ndarray:
        """One 3x3 majority pass over interior pixels"""
        h, w = mask.shape
        out = mask.copy()
        if h < 3 or w < 3:
            return out
        m = mask.astype(np.float32)
        acc = np.zeros((h - 2, w - 2), dtype=np.float32)
        for dy in range(3):
            for dx in range(3):
                acc += m[dy:dy + h - 2, dx:dx + w - 2]
        out[1:-1, 1:-1] = np.where(acc / 9.0 > 127, 255, 0)
        return out

    def compute_mask(self, rgba: np.ndarray) -> np.ndarray:
        mask = self.raw_mask(rgba)
        for _ in range(self.REFINE_PASSES):
            mask = self.refine(mask)
        logger.debug("Segmented %d of %d pixels as foreground", int((mask > 0).sum()), mask.size)
        return mask
