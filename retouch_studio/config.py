"""
Configuration and Constants for Retouch Studio

"""

from PyQt6.QtGui import QPainter

from .enums import BlendMode, FilterType, ToolType

# ==========================================
# 🎨 BLEND MODES
# ==========================================
BLEND_MODES = {
    BlendMode.NORMAL: QPainter.CompositionMode.CompositionMode_SourceOver,
    BlendMode.MULTIPLY: QPainter.CompositionMode.CompositionMode_Multiply,
    BlendMode.SCREEN: QPainter.CompositionMode.CompositionMode_Screen,
    BlendMode.OVERLAY: QPainter.CompositionMode.CompositionMode_Overlay,
}

# ==========================================
# 🧱 CANVAS & LAYERS
# ==========================================
BACKGROUND_LAYER_NAME = "Background"
CHECKER_SIZE = 8
CHECKER_LIGHT = "#2a2a2a"
CHECKER_DARK = "#1a1a1a"

# ==========================================
# ⏪ HISTORY
# ==========================================
MAX_HISTORY = 50
INITIAL_HISTORY_LABEL = "Open image"

# ==========================================
# 🔍 VIEWPORT
# ==========================================
ZOOM_MIN = 0.1
ZOOM_MAX = 5.0
ZOOM_STEP = 0.1
FIT_MARGIN = 20

# ==========================================
# 🖌️ TOOLS
# ==========================================
FILL_TOLERANCE = 32
BRUSH_SPACING = 0.25       # dab spacing as a fraction of brush size
CROP_MIN_SIZE = 10         # crop must be strictly larger than this
DRAG_MIN_SIZE = 2          # shapes and selections
ARROW_HEAD_MIN = 12
TEXT_LINE_HEIGHT = 1.3

PRESET_COLORS = [
    "#000000", "#ffffff", "#ff0000", "#00ff00", "#0000ff",
    "#ffff00", "#ff00ff", "#00ffff", "#ff8800", "#8800ff",
]

TOOL_SHORTCUTS = {
    "V": ToolType.MOVE,
    "M": ToolType.SELECTION,
    "C": ToolType.CROP,
    "B": ToolType.BRUSH,
    "E": ToolType.ERASER,
    "G": ToolType.FILL,
    "I": ToolType.EYEDROPPER,
    "T": ToolType.TEXT,
    "U": ToolType.SHAPE,
    "R": ToolType.BLUR_BRUSH,
    "S": ToolType.CLONE,
}

# ==========================================
# 🎛️ FILTERS & ADJUSTMENTS
# ==========================================
FILTER_DEFAULT_INTENSITY = {
    FilterType.BLUR: 50,
    FilterType.SHARPEN: 50,
    FilterType.GRAYSCALE: 100,
    FilterType.SEPIA: 100,
    FilterType.INVERT: 100,
    FilterType.VIGNETTE: 60,
    FilterType.NOISE: 30,
    FilterType.EMBOSS: 50,
    FilterType.POSTERIZE: 50,
}

# name: (minimum, maximum, neutral)
ADJUSTMENT_RANGES = {
    "brightness": (0, 200, 100),
    "contrast": (0, 200, 100),
    "saturation": (0, 200, 100),
    "hue": (-180, 180, 0),
    "exposure": (50, 150, 100),
    "highlights": (-100, 100, 0),
    "shadows": (-100, 100, 0),
}
