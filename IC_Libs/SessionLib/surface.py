"""
Drawing surfaces for ImageCraft Lite.

A surface is owned by the caller and lent to an EditSession through
`initialize_canvas`. The session only ever issues full redraws (`draw`) or
`clear`; it never creates, resizes or disposes the surface.

Classes:
    Surface: Protocol every surface implements
    ImageSurface: In-memory Pillow canvas, useful for headless callers and tests
"""

from typing import Any, Optional, Protocol, Tuple, runtime_checkable

from IC_Libs.pillow_compat import Image


@runtime_checkable
class Surface(Protocol):
    def draw(self, image: Any) -> None:
        """Replace the surface contents with `image`."""

    def clear(self) -> None:
        """Remove any drawn image."""


class ImageSurface:
    """
    Surface backed by a PIL Image.

    Attributes:
        image: Copy of the last drawn image, or None when cleared
        draw_count: Number of full redraws received
    """

    def __init__(self) -> None:
        self.image: Optional['Image.Image'] = None
        self.draw_count = 0

    @property
    def size(self) -> Optional[Tuple[int, int]]:
        return self.image.size if self.image is not None else None

    def draw(self, image: Any) -> None:
        self.image = image.copy()
        self.draw_count += 1

    def clear(self) -> None:
        self.image = None
