"""
History Manager for Undo/Redo

Snapshot-based timeline:
- Every entry records each layer's pixels, the stack order, the active
  layer and the selection at the moment it was pushed
- A single index walks the timeline; pushing truncates the redo branch
- Limits history to prevent memory overflow

Snapshots use Qt's implicit sharing: ``QImage(other)`` shares the pixel
buffer until either side is written, so a push only costs memory for the
layers that are painted afterwards.

"""

import logging

from PyQt6.QtGui import QImage

from ..config import MAX_HISTORY

logger = logging.getLogger(__name__)


class HistoryEntry:
    """One undoable point on the timeline"""

    def __init__(self, label, order, active_id, layers, pixels, selection=None):
        self.label = label
        self.order = order            # layer handles, bottom to top
        self.active_id = active_id
        self.layers = layers          # handle -> Layer (kept alive for restores)
        self.pixels = pixels          # handle -> QImage snapshot
        self.selection = selection    # QRect or None

    @classmethod
    def capture(cls, label, stack, selection=None):
        layers = {layer.id: layer for layer in stack.layers}
        pixels = {layer_id: QImage(layer.image) for layer_id, layer in layers.items()}
        return cls(label, stack.order, stack.active_id, layers, pixels, selection)

    def restore(self, stack):
        for layer_id in self.order:
            self.layers[layer_id].image = QImage(self.pixels[layer_id])
        stack.restore(self.order, self.active_id, self.layers)

    def __repr__(self):
        return f"HistoryEntry('{self.label}', layers={len(self.order)})"


class HistoryManager:
    """Manages undo/redo over layer stack snapshots"""

    def __init__(self, limit: int = MAX_HISTORY):
        """
        Initialize history manager

        Args:
            limit: Maximum number of entries (default 50)
                Older entries are automatically removed to save memory
        """
        self.limit = max(1, int(limit))
        self.entries = []
        self.index = -1
        self._listeners = []

    def __len__(self):
        return len(self.entries)

    # === Timeline === #
    def reset(self, label, stack, selection=None):
        """Drop everything and capture the initial state at index 0"""
        self.entries = []
        self.index = -1
        self.push(label, stack, selection)

    def push(self, label, stack, selection=None):
        entry = HistoryEntry.capture(label, stack, selection)

        # New action = can't redo old futures!
        del self.entries[self.index + 1:]
        self.entries.append(entry)

        if len(self.entries) > self.limit:
            self.entries.pop(0)  # Remove the oldest memory

        self.index = len(self.entries) - 1
        logger.debug("History saved: %s (index %d of %d)", label, self.index, len(self.entries))
        self._notify()
        return entry

    def undo(self, stack):
        """
        Step back one entry and restore it.

        Returns:
            HistoryEntry: the entry now current, or None if nothing to undo
        """
        if not self.can_undo():
            return None
        undone = self.entries[self.index].label
        self.index -= 1
        entry = self.entries[self.index]
        entry.restore(stack)
        logger.info("Undo: %s", undone)
        self._notify()
        return entry

    def redo(self, stack):
        """
        Step forward one entry and restore it.

        Returns:
            HistoryEntry: the entry now current, or None if nothing to redo
        """
        if not self.can_redo():
            return None
        self.index += 1
        entry = self.entries[self.index]
        entry.restore(stack)
        logger.info("Redo: %s", entry.label)
        self._notify()
        return entry

    # === Queries === #
    @property
    def current(self):
        return self.entries[self.index] if self.entries else None

    @property
    def labels(self):
        return [entry.label for entry in self.entries]

    def can_undo(self) -> bool:
        return self.index > 0

    def can_redo(self) -> bool:
        return 0 <= self.index < len(self.entries) - 1

    def get_memory_size(self) -> float:
        """Approximate MB held by snapshots, counting shared buffers once"""
        seen = {}
        for entry in self.entries:
            for image in entry.pixels.values():
                seen.setdefault(image.cacheKey(), image.sizeInBytes())
        return sum(seen.values()) / (1024 * 1024)

    def get_stats(self) -> dict:
        """
        Get statistics about history usage

        Returns:
            dict: undo/redo counts, limit and snapshot memory
        """
        return {
            'undo_count': max(0, self.index),
            'redo_count': max(0, len(self.entries) - 1 - self.index),
            'limit': self.limit,
            'full': len(self.entries) >= self.limit,
            'memory_mb': self.get_memory_size(),
        }

    # === Listeners === #
    def add_listener(self, callback):
        self._listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self):
        for callback in list(self._listeners):
            callback()
