"""
Whole-layer filters and colour adjustments.

Both operate destructively on the RGB channels of a layer image and leave
alpha untouched. ``t`` is always the intensity as a 0..1 fraction.
"""

import logging
import math

import numpy as np

from ..enums import FilterType
from .raster import pixels

logger = logging.getLogger(__name__)

LUMA = np.array([0.299, 0.587, 0.114], dtype=np.float32)

KERNELS = {
    FilterType.BLUR: np.full((3, 3), 1 / 9, dtype=np.float32),
    FilterType.SHARPEN: np.array([[0, -1, 0],
                                  [-1, 5, -1],
                                  [0, -1, 0]], dtype=np.float32),
    FilterType.EMBOSS: np.array([[-2, -1, 0],
                                 [-1, 1, 1],
                                 [0, 1, 2]], dtype=np.float32),
}

SEPIA = np.array([[0.393, 0.769, 0.189],
                  [0.349, 0.686, 0.168],
                  [0.272, 0.534, 0.131]], dtype=np.float32)


# --- HELPERS ---
def _store(target: np.ndarray, rgb: np.ndarray):
    target[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)


def _lerp(a, b, t):
    return a + (b - a) * t


def convolve(rgb: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """3x3 convolution of the interior pixels; the 1px border is returned as-is"""
    h, w = rgb.shape[:2]
    out = rgb.copy()
    if h < 3 or w < 3:
        return out
    acc = np.zeros((h - 2, w - 2, rgb.shape[2]), dtype=np.float32)
    for ky in range(3):
        for kx in range(3):
            acc += rgb[ky:ky + h - 2, kx:kx + w - 2] * kernel[ky, kx]
    out[1:-1, 1:-1] = acc
    return out


# --- FILTERS ---
def apply_filter(image, kind, intensity: float = 100, rng: np.random.Generator = None) -> bool:
    """
    Apply one named filter to a layer image in place.

    Args:
        image: RGBA8888 layer image
        kind: FilterType or its string value
        intensity: 1..100 percent
        rng: random generator used by the noise filter

    Returns:
        bool: True (every filter rewrites the layer)
    """
    kind = FilterType(kind)
    intensity = max(1.0, min(float(intensity), 100.0))
    t = intensity / 100.0

    target = pixels(image)
    rgb = target[..., :3].astype(np.float32)
    h, w = rgb.shape[:2]

    if kind == FilterType.GRAYSCALE:
        gray = (rgb @ LUMA)[..., None]
        rgb = _lerp(rgb, gray, t)

    elif kind == FilterType.SEPIA:
        sepia = np.minimum(rgb @ SEPIA.T, 255.0)
        rgb = _lerp(rgb, sepia, t)

    elif kind == FilterType.INVERT:
        rgb = _lerp(rgb, 255.0 - rgb, t)

    elif kind == FilterType.NOISE:
        rng = rng or np.random.default_rng()
        # same offset on all three channels of a pixel
        noise = (rng.random((h, w, 1), dtype=np.float32) - 0.5) * intensity * 2.55
        rgb = np.clip(rgb + noise, 0, 255)

    elif kind == FilterType.POSTERIZE:
        levels = max(2, math.floor(10 - t * 8))
        step = 255.0 / (levels - 1)
        rgb = np.round(rgb / step) * step

    elif kind in KERNELS:
        rgb = _lerp(rgb, convolve(rgb, KERNELS[kind]), t)

    elif kind == FilterType.VIGNETTE:
        ys, xs = np.mgrid[0:h, 0:w].astype(np.float32)
        dx = (xs - w / 2) / (w / 2)
        dy = (ys - h / 2) / (h / 2)
        factor = 1.0 - (dx * dx + dy * dy) * 0.5 * t
        rgb = rgb * factor[..., None]

    _store(target, rgb)
    logger.debug("Applied %s filter at %d%%", kind.value, intensity)
    return True


# --- COLOR ADJUSTMENTS ---
def hue_matrix(degrees: float) -> np.ndarray:
    """Luminance-preserving hue rotation"""
    rad = math.radians(degrees)
    c, s = math.cos(rad), math.sin(rad)
    return np.array([
        [0.213 + c * 0.787 - s * 0.213, 0.715 - c * 0.715 - s * 0.715, 0.072 - c * 0.072 + s * 0.928],
        [0.213 - c * 0.213 + s * 0.143, 0.715 + c * 0.285 + s * 0.140, 0.072 - c * 0.072 - s * 0.283],
        [0.213 - c * 0.213 - s * 0.787, 0.715 - c * 0.715 + s * 0.715, 0.072 + c * 0.928 + s * 0.072],
    ], dtype=np.float32)


def apply_adjustments(image, adj) -> bool:
    """
    Apply brightness, contrast, saturation, hue, exposure, highlights and
    shadows in that order. Returns False without touching the image when
    every value is neutral.
    """
    if adj.is_neutral():
        return False

    target = pixels(image)
    rgb = target[..., :3].astype(np.float32)

    # === Brightness === #
    rgb *= adj.brightness / 100.0

    # === Contrast === #
    rgb = ((rgb / 255.0 - 0.5) * (adj.contrast / 100.0) + 0.5) * 255.0

    # === Saturation === #
    gray = (rgb @ LUMA)[..., None]
    rgb = gray + (rgb - gray) * (adj.saturation / 100.0)

    # === Hue === #
    if adj.hue != 0:
        rgb = rgb @ hue_matrix(adj.hue).T

    # === Exposure === #
    rgb *= adj.exposure / 100.0

    # === Highlights / Shadows === #
    if adj.highlights or adj.shadows:
        luma = np.clip(rgb @ LUMA, 0, 255) / 255.0
        bright = np.clip((luma - 0.5) * 2.0, 0.0, 1.0)[..., None]
        dark = np.clip((0.5 - luma) * 2.0, 0.0, 1.0)[..., None]
        rgb = rgb + adj.highlights * 2.55 * bright + adj.shadows * 2.55 * dark

    _store(target, rgb)
    return True
