"""
Tests for the EditSession orchestrator.

Tests cover:
- Load / delete lifecycle and status transitions
- Failures leave state untouched
- Undo/redo restores exact pixels
- Resize, presets and rotate-after-resize
- Export, download and the export cache
- Rejection of calls while an operation is in progress
"""

import threading

import pytest

from IC_Libs.ImageEditingLib import image_loader
from IC_Libs.ImageEditingLib.editor_config import EditorConfig
from IC_Libs.ImageEditingLib.editor_errors import (
    DecodeError,
    NoDocumentError,
    NothingToRedoError,
    NothingToUndoError,
    OperationInProgressError,
    TargetSizeUnmetWarning,
    UnknownPresetError,
)
from IC_Libs.ImageEditingLib.export_engine import DownloadBlob, ExportResult
from IC_Libs.ImageEditingLib.image_models import FilterSettings, ResizeSettings, TransformOperation
from IC_Libs.SessionLib import EditSession, ImageSurface, ResultStatus, SessionStatus, edit_session


class TestLifecycle:
    """Load, delete and status transitions."""

    def test_new_session_is_empty(self, session):
        assert session.status == SessionStatus.EMPTY
        assert not session.has_image
        assert not session.can_undo

    def test_load(self, session, png_bytes, photo):
        result = session.load_image(png_bytes, "image/png", "photo.png")

        assert result.status == ResultStatus.SUCCESS
        assert session.status == SessionStatus.READY
        assert session.document.dimensions == (64, 48)
        assert session.document.file_name == "photo.png"
        assert session.document.current.tobytes() == photo.tobytes()
        assert session.filters == FilterSettings.neutral()
        assert session.resize_settings == ResizeSettings.native((64, 48))
        assert len(session.history) == 1

    def test_failed_load_on_empty_session(self, session):
        result = session.load_image(b"garbage", "image/png")

        assert result.failed
        assert isinstance(result.error, DecodeError)
        assert session.status == SessionStatus.EMPTY

    def test_failed_load_keeps_previous_document(self, loaded_session):
        document = loaded_session.document
        loaded_session.update_filter("brightness", 70)

        result = loaded_session.load_image(b"garbage", "image/png", "other.png")

        assert result.failed
        assert loaded_session.document is document
        assert loaded_session.filters["brightness"] == 70
        assert len(loaded_session.history) == 2

    def test_loading_again_resets_history(self, loaded_session, png_bytes):
        loaded_session.update_filter("contrast", 20)
        loaded_session.load_image(png_bytes, "image/png", "again.png")

        assert len(loaded_session.history) == 1
        assert loaded_session.filters.is_neutral
        assert not loaded_session.can_undo

    def test_delete(self, loaded_session, surface):
        result = loaded_session.delete_image()

        assert result.ok
        assert loaded_session.status == SessionStatus.EMPTY
        assert loaded_session.document is None
        assert len(loaded_session.history) == 0
        assert surface.image is None

    def test_delete_without_image(self, session):
        result = session.delete_image()
        assert isinstance(result.error, NoDocumentError)

    @pytest.mark.parametrize(
        "call",
        [
            lambda s: s.update_filter("brightness", 60),
            lambda s: s.reset_filters(),
            lambda s: s.apply_transform("rotate-left"),
            lambda s: s.apply_resize(),
            lambda s: s.apply_social_media_preset("Instagram Post"),
            lambda s: s.undo(),
            lambda s: s.redo(),
            lambda s: s.apply_export_settings(),
            lambda s: s.download_image(),
        ],
    )
    def test_operations_need_a_document(self, session, call):
        result = call(session)

        assert result.failed
        assert isinstance(result.error, NoDocumentError)
        assert result.message == "No image loaded"

    def test_state_view(self, loaded_session):
        loaded_session.update_filter("hue", 30)
        state = loaded_session.state

        assert state.has_image
        assert state.dimensions == (64, 48)
        assert state.can_undo
        assert not state.can_redo
        assert not state.is_processing


class TestSurface:
    """Drawing to the caller-owned surface."""

    def test_every_commit_redraws(self, loaded_session, surface):
        before = surface.draw_count
        loaded_session.update_filter("brightness", 80)
        loaded_session.apply_transform("flip-vertical")

        assert surface.draw_count == before + 2
        assert surface.image.tobytes() == loaded_session.document.current.tobytes()

    def test_late_canvas_is_drawn_immediately(self, png_bytes):
        with EditSession() as session:
            session.load_image(png_bytes, "image/png")
            surface = ImageSurface()

            result = session.initialize_canvas(surface)

            assert result.ok
            assert surface.size == (64, 48)

    def test_rejects_non_surface(self, session):
        result = session.initialize_canvas(object())
        assert isinstance(result.error, TypeError)

    def test_surface_image_is_independent(self, loaded_session, surface):
        surface.image.putpixel((0, 0), (1, 2, 3, 4))
        assert loaded_session.document.current.getpixel((0, 0)) != (1, 2, 3, 4)


class TestFilters:
    """Filter selection and updates."""

    def test_select_tool(self, loaded_session):
        loaded_session.update_filter("saturation", 20)
        result = loaded_session.select_tool("saturation")

        assert result.ok
        assert result.value == 20
        assert loaded_session.current_filter_value == 20

    def test_select_unknown_tool(self, loaded_session):
        assert isinstance(loaded_session.select_tool("blur").error, ValueError)

    def test_select_tool_does_not_commit(self, loaded_session):
        loaded_session.select_tool("contrast")
        assert len(loaded_session.history) == 1

    def test_invalid_value_changes_nothing(self, loaded_session):
        result = loaded_session.update_filter("brightness", 150)

        assert result.failed
        assert isinstance(result.error, ValueError)
        assert loaded_session.filters.is_neutral
        assert len(loaded_session.history) == 1

    def test_reset_is_idempotent(self, loaded_session, photo):
        loaded_session.update_filter("brightness", 90)
        first = loaded_session.reset_filters()
        second = loaded_session.reset_filters()

        assert first.ok and second.ok
        assert loaded_session.filters.is_neutral
        assert loaded_session.document.current.tobytes() == photo.tobytes()

    def test_reset_keeps_transforms(self, loaded_session):
        loaded_session.apply_transform("rotate-left")
        loaded_session.reset_filters()
        assert loaded_session.transforms == (TransformOperation.ROTATE_LEFT,)


class TestHistory:
    """Undo/redo through the session."""

    def test_undo_redo_restore_exact_pixels(self, loaded_session):
        loaded_session.update_filter("brightness", 70)
        after_brightness = loaded_session.document.current.tobytes()
        loaded_session.update_filter("contrast", 30)
        after_contrast = loaded_session.document.current.tobytes()

        assert loaded_session.undo().ok
        assert loaded_session.document.current.tobytes() == after_brightness
        assert loaded_session.filters["contrast"] == 50

        assert loaded_session.redo().ok
        assert loaded_session.document.current.tobytes() == after_contrast
        assert loaded_session.filters["contrast"] == 30

    def test_undo_to_original(self, loaded_session, photo):
        loaded_session.apply_transform("rotate-right")
        loaded_session.undo()

        assert loaded_session.document.dimensions == (64, 48)
        assert loaded_session.document.current.tobytes() == photo.tobytes()
        assert loaded_session.resize_settings.width == 64

    def test_commit_after_undo_drops_redo(self, loaded_session):
        loaded_session.update_filter("brightness", 70)
        loaded_session.update_filter("brightness", 80)
        loaded_session.undo()
        assert loaded_session.can_redo

        loaded_session.update_filter("hue", 10)

        assert not loaded_session.can_redo
        assert isinstance(loaded_session.redo().error, NothingToRedoError)

    def test_nothing_to_undo(self, loaded_session):
        result = loaded_session.undo()
        assert isinstance(result.error, NothingToUndoError)

    def test_bounded_history(self, png_bytes):
        with EditSession(EditorConfig(max_history_entries=2)) as session:
            session.load_image(png_bytes, "image/png")
            for value in (60, 70, 80):
                session.update_filter("brightness", value)

            assert len(session.history) == 2
            session.undo()
            assert not session.can_undo
            assert session.filters["brightness"] == 70

    @pytest.mark.parametrize("steps_back", [1, 3, 7])
    def test_mixed_operations_round_trip(self, loaded_session, steps_back):
        """Undoing k steps and redoing them lands on bit-identical states."""
        operations = [
            lambda s: s.update_filter("brightness", 70),
            lambda s: s.apply_transform("rotate-right"),
            lambda s: s.apply_social_media_preset("Twitter Post"),
            lambda s: s.apply_resize(ResizeSettings(width=40, height=30, maintain_aspect_ratio=False)),
            lambda s: s.reset_filters(),
            lambda s: s.update_filter("hue", 20),
            lambda s: s.apply_transform("flip-horizontal"),
        ]

        def capture(s):
            return (s.document.current.tobytes(), s.document.dimensions, s.filters, s.transforms, s.resize)

        states = [capture(loaded_session)]
        for operation in operations:
            assert operation(loaded_session).ok
            states.append(capture(loaded_session))

        for _ in range(steps_back):
            assert loaded_session.undo().ok
        assert capture(loaded_session) == states[-1 - steps_back]

        for _ in range(steps_back):
            assert loaded_session.redo().ok
        assert capture(loaded_session) == states[-1]
        assert not loaded_session.can_redo


class TestResize:
    """Resize, presets and transforms interacting with resize."""

    def test_update_settings_is_pending_only(self, loaded_session):
        result = loaded_session.update_resize_settings(width=32)

        assert result.ok
        assert loaded_session.resize_settings.width == 32
        assert loaded_session.document.dimensions == (64, 48)
        assert len(loaded_session.history) == 1

    def test_unknown_resize_key(self, loaded_session):
        assert isinstance(loaded_session.update_resize_settings(depth=3).error, ValueError)

    def test_apply_resize_keeps_aspect(self, loaded_session):
        loaded_session.update_resize_settings(width=32)
        result = loaded_session.apply_resize()

        assert result.ok
        assert loaded_session.document.dimensions == (32, 24)

    def test_apply_resize_unlocked(self, loaded_session):
        result = loaded_session.apply_resize(ResizeSettings(width=20, height=50, maintain_aspect_ratio=False))

        assert result.ok
        assert loaded_session.document.dimensions == (20, 50)

    def test_preset_is_exact(self, loaded_session):
        result = loaded_session.apply_social_media_preset("Instagram Post")

        assert result.ok
        assert loaded_session.document.dimensions == (1080, 1080)
        assert (loaded_session.resize_settings.width, loaded_session.resize_settings.height) == (1080, 1080)

    def test_preset_keeps_aspect_lock(self, loaded_session):
        loaded_session.apply_social_media_preset("Twitter Post")
        assert loaded_session.resize_settings.maintain_aspect_ratio

        loaded_session.apply_transform("flip-horizontal")
        assert loaded_session.resize_settings.maintain_aspect_ratio

        loaded_session.update_resize_settings(width=32, height=48)
        assert loaded_session.apply_resize().ok
        assert loaded_session.document.dimensions == (32, 24)

    def test_preset_keeps_unlocked_form(self, loaded_session):
        loaded_session.update_resize_settings(maintain_aspect_ratio=False)
        loaded_session.apply_social_media_preset("Instagram Post")
        assert not loaded_session.resize_settings.maintain_aspect_ratio

    def test_unknown_preset(self, loaded_session):
        result = loaded_session.apply_social_media_preset("Nope")

        assert isinstance(result.error, UnknownPresetError)
        assert loaded_session.document.dimensions == (64, 48)

    def test_rotate_after_resize_swaps_box(self, loaded_session):
        loaded_session.apply_resize(ResizeSettings(width=32, height=24))
        loaded_session.apply_transform("rotate-right")

        assert loaded_session.document.dimensions == (24, 32)
        assert (loaded_session.resize.width, loaded_session.resize.height) == (24, 32)
        assert (loaded_session.resize_settings.width, loaded_session.resize_settings.height) == (24, 32)

    def test_filters_survive_resize(self, loaded_session):
        loaded_session.update_filter("saturation", 0)
        loaded_session.apply_resize(ResizeSettings(width=32, height=24))

        r, g, b, _ = loaded_session.document.current.getpixel((10, 10))
        assert max(r, g, b) - min(r, g, b) <= 2

    def test_presets_exposed(self, session):
        assert session.social_media_presets[0].name == "Instagram Post"


class TestExport:
    """Export settings, encoding and download."""

    def test_export_settings_without_document(self, session):
        result = session.update_export_settings(format="jpg", quality=70)

        assert result.ok
        assert session.export_settings.format == "jpeg"

    def test_invalid_export_settings(self, session):
        result = session.update_export_settings(quality=0)

        assert isinstance(result.error, ValueError)
        assert session.export_settings.quality == 90

    @pytest.mark.parametrize("size", ["200", float("inf")])
    def test_bad_target_size_is_a_failed_result(self, loaded_session, size):
        result = loaded_session.update_export_settings(format="jpeg", target_file_size=size)

        assert result.failed
        assert isinstance(result.error, ValueError)
        assert loaded_session.export_settings.target_file_size is None
        assert loaded_session.apply_export_settings().ok
        assert loaded_session.download_image().ok

    def test_export_success(self, loaded_session):
        result = loaded_session.apply_export_settings()

        assert result.status == ResultStatus.SUCCESS
        assert isinstance(result.value, ExportResult)
        assert result.value.format == "png"

    def test_export_warning(self, loaded_session):
        loaded_session.update_export_settings(format="jpeg", target_file_size=0.01, file_size_unit="KB")

        result = loaded_session.apply_export_settings()

        assert result.ok
        assert result.has_warning
        assert isinstance(result.warning, TargetSizeUnmetWarning)
        assert result.value.size_bytes > 0

    def test_export_is_cached(self, loaded_session):
        first = loaded_session.apply_export_settings().value
        second = loaded_session.apply_export_settings().value
        assert second is first

        loaded_session.update_filter("brightness", 60)
        third = loaded_session.apply_export_settings().value
        assert third is not first

    def test_settings_change_invalidates_cache(self, loaded_session):
        first = loaded_session.apply_export_settings().value
        loaded_session.update_export_settings(format="webp")
        assert loaded_session.apply_export_settings().value is not first

    def test_download(self, loaded_session):
        result = loaded_session.download_image()

        blob = result.value
        assert isinstance(blob, DownloadBlob)
        assert blob.file_name == "photo-edited.png"
        assert blob.mime_type == "image/png"
        assert blob.data[:8] == b"\x89PNG\r\n\x1a\n"

    def test_download_jpeg_name(self, loaded_session):
        loaded_session.update_export_settings(format="jpeg")
        assert loaded_session.download_image().value.file_name == "photo-edited.jpg"

    def test_async_export(self, loaded_session):
        future = loaded_session.apply_export_settings_async()
        result = future.result(timeout=10)

        assert result.ok
        assert not loaded_session.is_processing


class TestProcessingGate:
    """Calls arriving while an operation runs are rejected, not queued."""

    def test_rejects_while_loading(self, loaded_session, png_bytes, monkeypatch):
        release = threading.Event()
        real_decode = image_loader.decode_image

        def slow_decode(file_bytes, mime_type):
            release.wait(5)
            return real_decode(file_bytes, mime_type)

        monkeypatch.setattr("IC_Libs.SessionLib.edit_session.decode_image", slow_decode)

        future = loaded_session.load_image_async(png_bytes, "image/png", "second.png")
        try:
            assert loaded_session.is_processing
            assert loaded_session.status == SessionStatus.PROCESSING

            rejected = loaded_session.update_filter("brightness", 70)
            assert isinstance(rejected.error, OperationInProgressError)
            assert rejected.message == "Operation in progress"

            second = loaded_session.load_image_async(png_bytes, "image/png").result(timeout=1)
            assert isinstance(second.error, OperationInProgressError)
        finally:
            release.set()

        result = future.result(timeout=10)
        assert result.ok
        assert loaded_session.document.file_name == "second.png"
        assert loaded_session.filters.is_neutral
        assert loaded_session.status == SessionStatus.READY

    def test_gate_released_after_failure(self, loaded_session):
        loaded_session.update_filter("brightness", 999)
        assert not loaded_session.is_processing
        assert loaded_session.update_filter("brightness", 70).ok

    def test_rejected_calls_change_nothing(self, loaded_session, monkeypatch):
        loaded_session.update_filter("contrast", 65)
        loaded_session.apply_transform("rotate-left")
        loaded_session.undo()

        release = threading.Event()
        real_export = edit_session.apply_export_settings

        def slow_export(*args, **kwargs):
            release.wait(5)
            return real_export(*args, **kwargs)

        monkeypatch.setattr(edit_session, "apply_export_settings", slow_export)

        filters = loaded_session.filters
        transforms = loaded_session.transforms
        resize_settings = loaded_session.resize_settings
        history_length = len(loaded_session.history)
        cursor = loaded_session.history.cursor
        pixels = loaded_session.document.current.tobytes()

        future = loaded_session.apply_export_settings_async()
        try:
            calls = [
                lambda s: s.update_filter("brightness", 10),
                lambda s: s.reset_filters(),
                lambda s: s.apply_transform("flip-vertical"),
                lambda s: s.apply_resize(ResizeSettings(width=10, height=10)),
                lambda s: s.apply_social_media_preset("Instagram Post"),
                lambda s: s.update_resize_settings(width=5),
                lambda s: s.undo(),
                lambda s: s.redo(),
                lambda s: s.delete_image(),
            ]
            for call in calls:
                assert isinstance(call(loaded_session).error, OperationInProgressError)

            assert loaded_session.filters == filters
            assert loaded_session.transforms == transforms
            assert loaded_session.resize_settings == resize_settings
            assert len(loaded_session.history) == history_length
            assert loaded_session.history.cursor == cursor
            assert loaded_session.document.current.tobytes() == pixels
        finally:
            release.set()

        assert future.result(timeout=10).ok
        assert loaded_session.can_redo

    def test_select_tool_allowed_while_processing(self, loaded_session, png_bytes, monkeypatch):
        release = threading.Event()
        real_decode = image_loader.decode_image

        def slow_decode(file_bytes, mime_type):
            release.wait(5)
            return real_decode(file_bytes, mime_type)

        monkeypatch.setattr("IC_Libs.SessionLib.edit_session.decode_image", slow_decode)
        future = loaded_session.load_image_async(png_bytes, "image/png")
        try:
            assert loaded_session.select_tool("hue").ok
        finally:
            release.set()
        future.result(timeout=10)
