"""Per-tool configuration bundles."""

from dataclasses import dataclass, field, fields

from ..config import ADJUSTMENT_RANGES
from ..enums import ShapeType


def _clamp(value, low, high):
    return max(low, min(value, high))


@dataclass
class BrushSettings:
    size: int = 20          # 1..200 px
    opacity: int = 100      # 1..100 %
    hardness: int = 80      # 0..100 %
    color: str = "#000000"

    def __post_init__(self):
        self.size = _clamp(int(self.size), 1, 200)
        self.opacity = _clamp(int(self.opacity), 1, 100)
        self.hardness = _clamp(int(self.hardness), 0, 100)

    @property
    def radius(self) -> float:
        return self.size / 2


@dataclass
class TextSettings:
    content: str = "Text"
    font_family: str = "Arial"
    font_size: int = 32     # 8..200 px
    bold: bool = False
    italic: bool = False
    color: str = "#ffffff"
    align: str = "left"     # left / center / right

    def __post_init__(self):
        self.font_size = _clamp(int(self.font_size), 8, 200)
        if self.align not in ("left", "center", "right"):
            raise ValueError(f"Unknown text alignment: {self.align!r}")


@dataclass
class ShapeSettings:
    kind: ShapeType = ShapeType.RECTANGLE
    stroke_color: str = "#ff0000"
    stroke_width: int = 3   # 1..20 px
    fill_color: str = "#ff0000"
    filled: bool = False

    def __post_init__(self):
        self.kind = ShapeType(self.kind)
        self.stroke_width = _clamp(int(self.stroke_width), 1, 20)


@dataclass
class ColorAdjustments:
    """Slider values; the defaults are the neutral positions"""
    brightness: float = field(default=ADJUSTMENT_RANGES["brightness"][2])
    contrast: float = field(default=ADJUSTMENT_RANGES["contrast"][2])
    saturation: float = field(default=ADJUSTMENT_RANGES["saturation"][2])
    hue: float = field(default=ADJUSTMENT_RANGES["hue"][2])
    exposure: float = field(default=ADJUSTMENT_RANGES["exposure"][2])
    highlights: float = field(default=ADJUSTMENT_RANGES["highlights"][2])
    shadows: float = field(default=ADJUSTMENT_RANGES["shadows"][2])

    def __post_init__(self):
        for f in fields(self):
            low, high, _ = ADJUSTMENT_RANGES[f.name]
            setattr(self, f.name, _clamp(float(getattr(self, f.name)), low, high))

    def is_neutral(self) -> bool:
        return all(getattr(self, f.name) == ADJUSTMENT_RANGES[f.name][2] for f in fields(self))

    def reset(self):
        for f in fields(self):
            setattr(self, f.name, ADJUSTMENT_RANGES[f.name][2])
