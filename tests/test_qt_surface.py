"""
Tests for the QLabel surface adapter.

Skipped when PyQt5 is not installed. Runs on the offscreen platform so no
display is needed.
"""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PyQt5.QtWidgets")

from IC_Libs.SessionLib import EditSession  # noqa: E402
from IC_Libs.SessionLib.qt_surface import QLabelSurface  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    return app


@pytest.fixture
def label(qapp):
    widget = QtWidgets.QLabel()
    widget.resize(200, 200)
    yield widget
    widget.deleteLater()


class TestQLabelSurface:
    def test_draw_scales_into_label(self, label, photo):
        surface = QLabelSurface(label)

        surface.draw(photo)

        assert surface.pixmap.width() == 64
        assert surface.pixmap.height() == 48
        shown = label.pixmap()
        assert shown is not None and not shown.isNull()
        assert shown.width() <= 200 and shown.height() <= 200

    def test_clear_shows_placeholder(self, label, photo):
        surface = QLabelSurface(label)
        surface.draw(photo)

        surface.clear()

        assert surface.pixmap.isNull()
        assert label.text() == "No image loaded"

    def test_session_drives_label(self, label, png_bytes):
        with EditSession(surface=QLabelSurface(label, placeholder="Drop an image")) as session:
            assert label.text() == "Drop an image"

            session.load_image(png_bytes, "image/png")
            assert not label.pixmap().isNull()

            session.delete_image()
            assert label.text() == "Drop an image"
