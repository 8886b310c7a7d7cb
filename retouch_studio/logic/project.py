"""
Output of the flattened image: in-memory PNG for the host application,
or a file on disk.
"""

import asyncio
import logging
import os
from dataclasses import dataclass

from PyQt6.QtCore import QBuffer, QByteArray, QIODevice
from PyQt6.QtGui import QImage

logger = logging.getLogger(__name__)

DEFAULT_NAME = "edited.png"


class EncodeError(RuntimeError):
    """The image could not be encoded."""


@dataclass(frozen=True)
class SavedImage:
    name: str
    data: bytes
    mime_type: str = "image/png"


class ProjectManager:
    @staticmethod
    def encode_png(image: QImage) -> bytes:
        data = QByteArray()
        buffer = QBuffer(data)
        buffer.open(QIODevice.OpenModeFlag.WriteOnly)
        ok = image.save(buffer, "PNG")
        buffer.close()
        if not ok:
            raise EncodeError(f"PNG encoding failed for {image.width()}x{image.height()} image")
        return bytes(data)

    @classmethod
    async def save(cls, image: QImage, name: str = DEFAULT_NAME) -> SavedImage:
        """Encode off the GUI thread; ``image`` must not be written meanwhile"""
        data = await asyncio.to_thread(cls.encode_png, image)
        logger.info("Saved %s (%d bytes)", name, len(data))
        return SavedImage(name, data)

    @staticmethod
    def export(image: QImage, path) -> bool:
        """
        Write the image to ``path``; the format follows the extension.

        Returns:
            bool: False (and an error in the log) when the write fails
        """
        path = os.fspath(path)
        if not image.save(path):
            logger.error("Export failed: could not write %s", path)
            return False
        logger.info("Exported %s (%dx%d)", os.path.basename(path), image.width(), image.height())
        return True
