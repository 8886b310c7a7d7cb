"""
Layer Stack for Retouch Studio

An arena of layers addressed by stable handles, plus the ordered list of
handles that defines back-to-front compositing order. Reordering or
removing layers never invalidates a handle held elsewhere (the active
layer, history snapshots).

Invariants:
- the stack is never empty
- ``active_id`` always names a layer that is currently in the stack
"""

import logging

from ..config import BACKGROUND_LAYER_NAME
from ..enums import BlendMode
from .compositor import blend_onto, composite
from .layer import Layer

logger = logging.getLogger(__name__)


class LayerStack:
    def __init__(self, base: Layer):
        self._layers = {base.id: base}
        self._order = [base.id]
        self.active_id = base.id
        self._counter = 1

    @classmethod
    def from_image(cls, image, name: str = BACKGROUND_LAYER_NAME) -> "LayerStack":
        return cls(Layer(name, image.width(), image.height(), image))

    # === Lookup === #
    def __len__(self):
        return len(self._order)

    def __iter__(self):
        return iter(self.layers)

    def __contains__(self, layer_id):
        return layer_id in self._layers

    @property
    def layers(self):
        """Layers bottom to top"""
        return [self._layers[i] for i in self._order]

    @property
    def order(self):
        return list(self._order)

    @property
    def width(self) -> int:
        return self._layers[self._order[0]].width

    @property
    def height(self) -> int:
        return self._layers[self._order[0]].height

    @property
    def active_layer(self) -> Layer:
        return self._layers.get(self.active_id)

    def get(self, layer_id) -> Layer:
        return self._layers.get(layer_id)

    def index_of(self, layer_id) -> int:
        return self._order.index(layer_id)

    def _resolve(self, layer_id):
        layer_id = self.active_id if layer_id is None else layer_id
        if layer_id not in self._layers:
            raise KeyError(f"No layer with id {layer_id!r}")
        return layer_id

    def set_active(self, layer_id) -> bool:
        if layer_id not in self._layers:
            return False
        self.active_id = layer_id
        return True

    # === Structure === #
    def add(self, name: str = None) -> Layer:
        """Append a blank layer on top and make it active"""
        layer = Layer(name or f"Layer {self._counter}", self.width, self.height)
        self._counter += 1
        self._layers[layer.id] = layer
        self._order.append(layer.id)
        self.active_id = layer.id
        logger.debug("Added layer %s", layer)
        return layer

    def delete(self, layer_id=None) -> bool:
        """Remove a layer. Refused (False) when it is the last one."""
        layer_id = self._resolve(layer_id)
        if len(self._order) <= 1:
            logger.debug("Refusing to delete the last layer")
            return False

        self._order.remove(layer_id)
        del self._layers[layer_id]
        if self.active_id == layer_id:
            self.active_id = self._order[-1]
        return True

    def duplicate(self, layer_id=None) -> Layer:
        """Insert a pixel-identical copy directly above the source"""
        layer_id = self._resolve(layer_id)
        copy = self._layers[layer_id].duplicate()
        self._layers[copy.id] = copy
        self._order.insert(self.index_of(layer_id) + 1, copy.id)
        self.active_id = copy.id
        return copy

    def move_up(self, layer_id=None) -> bool:
        """Swap with the layer above. No-op for the topmost layer."""
        idx = self.index_of(self._resolve(layer_id))
        if idx >= len(self._order) - 1:
            return False
        self._order[idx], self._order[idx + 1] = self._order[idx + 1], self._order[idx]
        return True

    def move_down(self, layer_id=None) -> bool:
        """Swap with the layer below. No-op for the bottom layer."""
        idx = self.index_of(self._resolve(layer_id))
        if idx <= 0:
            return False
        self._order[idx], self._order[idx - 1] = self._order[idx - 1], self._order[idx]
        return True

    def merge_down(self, layer_id=None) -> bool:
        """
        Composite a layer onto the one below it at its opacity and blend
        mode, then remove it. The lower layer becomes active.
        """
        layer_id = self._resolve(layer_id)
        idx = self.index_of(layer_id)
        if idx == 0:
            return False

        upper = self._layers[layer_id]
        lower = self._layers[self._order[idx - 1]]
        blend_onto(lower.image, upper.image, upper.opacity, upper.blend_mode)

        self._order.pop(idx)
        del self._layers[layer_id]
        self.active_id = lower.id
        logger.debug("Merged %s into %s", upper.name, lower.name)
        return True

    # === Attributes === #
    def set_visibility(self, layer_id, visible: bool):
        self._layers[self._resolve(layer_id)].visible = bool(visible)

    def set_opacity(self, layer_id, opacity: float):
        self._layers[self._resolve(layer_id)].opacity = max(0.0, min(1.0, float(opacity)))

    def set_blend_mode(self, layer_id, mode):
        self._layers[self._resolve(layer_id)].blend_mode = BlendMode(mode)

    def set_locked(self, layer_id, locked: bool):
        self._layers[self._resolve(layer_id)].locked = bool(locked)

    def rename(self, layer_id, name: str):
        self._layers[self._resolve(layer_id)].name = name

    # === Pixels === #
    def composite(self):
        return composite(self.layers, self.width, self.height)

    def transform_all(self, fn):
        """Replace every layer's buffer with ``fn(image)`` (crop, rotate, flip)"""
        for layer in self._layers.values():
            layer.image = fn(layer.image)

    def restore(self, order, active_id, layers):
        """
        Reinstate a recorded structure. ``layers`` maps handle -> Layer for
        every handle in ``order``; layers not listed are dropped.
        """
        self._layers = {layer_id: layers[layer_id] for layer_id in order}
        self._order = list(order)
        self.active_id = active_id if active_id in self._layers else self._order[-1]

    def get_memory_size(self) -> float:
        return sum(layer.get_memory_size() for layer in self._layers.values())
