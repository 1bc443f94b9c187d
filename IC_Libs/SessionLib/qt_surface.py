"""
PyQt5 drawing surface for ImageCraft Lite.

Shows the session's rendered image in a caller-owned QLabel, scaled to fit
while keeping its aspect ratio. Requires the optional `qt` extra.

Classes:
    QLabelSurface: Surface that renders into a QLabel
"""

from io import BytesIO
from typing import Any

from PyQt5.QtCore import Qt
from PyQt5.QtGui import QPixmap
from PyQt5.QtWidgets import QLabel

PLACEHOLDER_TEXT = "No image loaded"


class QLabelSurface:
    """Surface that shows the rendered image scaled to fit a caller-owned QLabel."""

    def __init__(self, label: QLabel, placeholder: str = PLACEHOLDER_TEXT) -> None:
        self.label = label
        self.placeholder = placeholder
        self.pixmap = QPixmap()

    def draw(self, image: Any) -> None:
        pixmap = QPixmap()
        if not pixmap.loadFromData(self._to_png_bytes(image), "PNG"):
            self.label.setText("Preview failed")
            return

        self.pixmap = pixmap
        scaled = pixmap.scaled(
            self.label.size(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        self.label.setPixmap(scaled)

    def clear(self) -> None:
        self.pixmap = QPixmap()
        self.label.clear()
        self.label.setText(self.placeholder)

    def _to_png_bytes(self, image: Any) -> bytes:
        buffer = BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()
