"""
Pytest configuration and shared fixtures for ImageCraft Lite tests.

All images are generated in memory; no test reads files from disk.
"""

import pytest

from IC_Libs.SessionLib import EditSession, ImageSurface
from tests.image_helpers import encode, make_photo


@pytest.fixture
def photo():
    """A 64x48 RGBA photo-like image."""
    return make_photo()


@pytest.fixture
def large_photo():
    """A 320x240 RGBA photo-like image for export size tests."""
    return make_photo(320, 240, seed=11)


@pytest.fixture
def png_bytes(photo):
    """PNG-encoded bytes of the `photo` fixture."""
    return encode(photo, "PNG")


@pytest.fixture
def surface():
    return ImageSurface()


@pytest.fixture
def session(surface):
    """An EditSession with an in-memory surface and no image loaded."""
    with EditSession(surface=surface) as editing:
        yield editing


@pytest.fixture
def loaded_session(session, png_bytes):
    """An EditSession with the `photo` fixture loaded as 'photo.png'."""
    result = session.load_image(png_bytes, "image/png", "photo.png")
    assert result.ok, result.message
    return session
