"""
Layer Class for Retouch Studio

Represents a single layer with:
- Image buffer (the actual pixel data)
- A stable handle that survives reordering and history restores
- Visibility, opacity, blend mode and lock state

"""

import uuid

from PyQt6.QtGui import QImage

from ..enums import BlendMode
from .raster import new_image, memory_size_mb


def new_layer_id() -> str:
    return uuid.uuid4().hex[:12]


class Layer:
    """A single layer owning its pixel buffer"""

    def __init__(self, name: str, width: int, height: int, image: QImage = None):
        """
        Initialize a new layer

        Args:
            name: Layer name (e.g., "Background", "Layer 1")
            width: Canvas width in pixels
            height: Canvas height in pixels
            image: Optional initial pixels (must already be in layer format)
        """
        self.id = new_layer_id()
        self.name = name
        self.visible = True
        self.opacity = 1.0  # 0.0 to 1.0
        self.blend_mode = BlendMode.NORMAL
        self.locked = False

        # Image buffer - straight alpha RGBA
        self.image = image if image is not None else new_image(width, height)

    @property
    def width(self) -> int:
        return self.image.width()

    @property
    def height(self) -> int:
        return self.image.height()

    @property
    def editable(self) -> bool:
        return not self.locked

    def duplicate(self, name: str = None) -> "Layer":
        """Pixel-identical copy with a new handle"""
        copy = Layer(name or f"{self.name} copy", self.width, self.height, self.image.copy())
        copy.visible = self.visible
        copy.opacity = self.opacity
        copy.blend_mode = self.blend_mode
        return copy

    def get_memory_size(self) -> float:
        """
        Calculate memory usage in MB

        1920 x 1080 x 4 bytes = ~8.3 MB per layer.
        """
        return memory_size_mb(self.image)

    def __repr__(self):
        return (f"Layer('{self.name}', id={self.id}, visible={self.visible}, "
                f"opacity={self.opacity:.2f}, blend={self.blend_mode.value}, locked={self.locked})")
