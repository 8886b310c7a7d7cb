from enum import Enum


class ToolType(Enum):
    # --- NAVIGATION ---
    MOVE = "move"               # (V) Pan the view

    # --- SELECTION ---
    SELECTION = "selection"     # (M) Rectangular marquee
    CROP = "crop"               # (C) Crop canvas

    # --- CREATION ---
    BRUSH = "brush"             # (B) Paint
    ERASER = "eraser"           # (E) Erase
    FILL = "fill"               # (G) Bucket fill
    EYEDROPPER = "eyedropper"   # (I) Pick color
    TEXT = "text"               # (T) Stamp text
    SHAPE = "shape"             # (U) Rectangle / circle / line / arrow

    # --- RETOUCH ---
    BLUR_BRUSH = "blur-brush"   # (R) Local blur
    CLONE = "clone"             # (S) Clone stamp


class GestureState(Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    RECT_DRAGGING = "rect-dragging"
    PLACING = "placing"


class BlendMode(Enum):
    NORMAL = "normal"
    MULTIPLY = "multiply"
    SCREEN = "screen"
    OVERLAY = "overlay"


class ShapeType(Enum):
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    LINE = "line"
    ARROW = "arrow"


class FilterType(Enum):
    BLUR = "blur"
    SHARPEN = "sharpen"
    GRAYSCALE = "grayscale"
    SEPIA = "sepia"
    INVERT = "invert"
    VIGNETTE = "vignette"
    NOISE = "noise"
    EMBOSS = "emboss"
    POSTERIZE = "posterize"


class FlipAxis(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
