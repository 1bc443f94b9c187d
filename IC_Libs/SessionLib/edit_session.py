"""
Editing session orchestrator for ImageCraft Lite.

EditSession owns the editing state for one image and is the only component
that draws to the caller's surface. Every public operation returns an
OperationResult instead of raising, so presentation code can turn it into a
message without inspecting engine internals.

State machine:

    EMPTY --load--> READY --(decode/encode/pixel pass)--> PROCESSING --> READY
    READY --delete--> EMPTY

While PROCESSING, mutating calls fail with OperationInProgressError; they
are never queued. Operations that change the picture compute the new image
first and only then commit a history snapshot, so a failure leaves the
document, settings and history exactly as they were.

Example:
    >>> session = EditSession()
    >>> session.initialize_canvas(ImageSurface())
    >>> session.load_image(png_bytes, "image/png", "photo.png")
    >>> session.update_filter("brightness", 65)
    >>> session.apply_transform("rotate-right")
    >>> session.undo()
    >>> blob = session.download_image().value
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace
from typing import Any, Callable, List, Optional, Tuple

from IC_Libs.constants import (
    FILTER_NAMES,
    FILTER_NEUTRAL_VALUE,
    RESIZE_MODE_COVER,
    RESIZE_MODE_STRETCH,
)
from IC_Libs.ImageEditingLib.editor_config import EditorConfig
from IC_Libs.ImageEditingLib.editor_errors import (
    EditorError,
    NoDocumentError,
    OperationInProgressError,
)
from IC_Libs.ImageEditingLib.export_engine import (
    DownloadBlob,
    ExportResult,
    apply_export_settings,
    build_download_name,
)
from IC_Libs.ImageEditingLib.image_loader import decode_image
from IC_Libs.ImageEditingLib.image_models import (
    ExportSettings,
    FilterSettings,
    HistorySnapshot,
    ImageDocument,
    ResizeSettings,
    SocialMediaPreset,
    TransformOperation,
)
from IC_Libs.ImageEditingLib.resize_engine import (
    get_social_media_preset,
    get_social_media_presets,
    resolve_resize_settings,
)
from IC_Libs.ImageEditingLib.transform_engine import coerce_operation, transformed_size
from IC_Libs.SessionLib.history_manager import HistoryManager
from IC_Libs.SessionLib.render_pipeline import render_image
from IC_Libs.SessionLib.session_models import (
    EditorState,
    OperationResult,
    SessionStatus,
)
from IC_Libs.SessionLib.surface import Surface

logger = logging.getLogger(__name__)


class EditSession:
    """
    Single-image editing session.

    Attributes:
        config: EditorConfig used for export search, history bound and threading
    """

    def __init__(self, config: Optional[EditorConfig] = None, surface: Optional[Surface] = None):
        self.config = config or EditorConfig()
        self._surface: Optional[Surface] = None
        self._document: Optional[ImageDocument] = None
        self._filters = FilterSettings.neutral()
        self._transforms: Tuple[TransformOperation, ...] = ()
        self._resize: Optional[ResizeSettings] = None
        self._resize_mode = RESIZE_MODE_STRETCH
        self._resize_settings: Optional[ResizeSettings] = None
        self._export_settings = self.config.default_export
        self._selected_tool: Optional[str] = None
        self._history: HistoryManager[HistorySnapshot] = HistoryManager(self.config.max_history_entries)
        self._last_export: Optional[Tuple[HistorySnapshot, ExportSettings, ExportResult]] = None

        self._gate = threading.Lock()
        self._processing = False
        self._executor: Optional[ThreadPoolExecutor] = None

        if surface is not None:
            self.initialize_canvas(surface)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def __enter__(self) -> "EditSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Shut down the worker pool, waiting for in-flight work."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.max_workers,
                thread_name_prefix="imagecraft",
            )
        return self._executor

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        if self._processing:
            return SessionStatus.PROCESSING
        if self._document is None:
            return SessionStatus.EMPTY
        return SessionStatus.READY

    @property
    def is_processing(self) -> bool:
        return self._processing

    @property
    def document(self) -> Optional[ImageDocument]:
        return self._document

    @property
    def has_image(self) -> bool:
        return self._document is not None

    @property
    def filters(self) -> FilterSettings:
        return self._filters

    @property
    def transforms(self) -> Tuple[TransformOperation, ...]:
        return self._transforms

    @property
    def resize(self) -> Optional[ResizeSettings]:
        return self._resize

    @property
    def resize_settings(self) -> Optional[ResizeSettings]:
        return self._resize_settings

    @property
    def export_settings(self) -> ExportSettings:
        return self._export_settings

    @property
    def selected_tool(self) -> Optional[str]:
        return self._selected_tool

    @property
    def current_filter_value(self) -> int:
        """Value of the selected tool's filter (neutral when no tool is selected)."""
        if self._selected_tool is None:
            return FILTER_NEUTRAL_VALUE
        return self._filters[self._selected_tool]

    @property
    def can_undo(self) -> bool:
        return self._document is not None and self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._document is not None and self._history.can_redo

    @property
    def history(self) -> HistoryManager:
        return self._history

    @property
    def social_media_presets(self) -> List[SocialMediaPreset]:
        return get_social_media_presets()

    @property
    def state(self) -> EditorState:
        return EditorState(
            status=self.status,
            document=self._document,
            filters=self._filters,
            transforms=self._transforms,
            resize=self._resize,
            resize_settings=self._resize_settings,
            export_settings=self._export_settings,
            selected_tool=self._selected_tool,
            history_cursor=self._history.cursor,
            history_length=len(self._history),
        )

    # ------------------------------------------------------------------
    # Processing gate
    # ------------------------------------------------------------------

    def _begin_processing(self) -> None:
        with self._gate:
            if self._processing:
                raise OperationInProgressError()
            self._processing = True

    def _end_processing(self) -> None:
        with self._gate:
            self._processing = False

    def _require_document(self) -> ImageDocument:
        if self._document is None:
            raise NoDocumentError()
        return self._document

    def _run(self, operation: str, func: Callable[..., OperationResult], *args: Any) -> OperationResult:
        """Run `func` holding the processing gate and turn engine errors into results."""
        try:
            self._begin_processing()
        except OperationInProgressError as exc:
            logger.debug(f"Rejected {operation}: operation in progress")
            return OperationResult.failure(exc)

        try:
            return self._call(operation, func, *args)
        finally:
            self._end_processing()

    def _call(self, operation: str, func: Callable[..., OperationResult], *args: Any) -> OperationResult:
        try:
            return func(*args)
        except (EditorError, ValueError) as exc:
            logger.debug(f"{operation} failed: {exc}")
            return OperationResult.failure(exc)

    def _run_async(self, operation: str, func: Callable[..., OperationResult], *args: Any) -> "Future[OperationResult]":
        """
        Take the processing gate now and run `func` on the worker pool.

        The gate is released by the worker when `func` finishes, so callers
        see PROCESSING from the moment this returns until the future resolves.
        """
        try:
            self._begin_processing()
        except OperationInProgressError as exc:
            rejected: Future = Future()
            rejected.set_result(OperationResult.failure(exc))
            return rejected

        def worker() -> OperationResult:
            try:
                return self._call(operation, func, *args)
            finally:
                self._end_processing()

        try:
            return self._get_executor().submit(worker)
        except RuntimeError:
            self._end_processing()
            raise

    # ------------------------------------------------------------------
    # Surface
    # ------------------------------------------------------------------

    def initialize_canvas(self, surface: Surface) -> OperationResult:
        """Borrow a caller-owned surface; it is redrawn immediately if an image is loaded."""
        if not isinstance(surface, Surface):
            return OperationResult.failure(TypeError(f"Surface must provide draw() and clear(), got {type(surface)}"))
        self._surface = surface
        self._redraw()
        return OperationResult.success("Canvas initialized", surface)

    def _redraw(self) -> None:
        if self._surface is None:
            return
        if self._document is None:
            self._surface.clear()
        else:
            self._surface.draw(self._document.current)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def _render(
        self,
        filters: FilterSettings,
        transforms: Tuple[TransformOperation, ...],
        resize: Optional[ResizeSettings],
        resize_mode: str,
    ) -> Any:
        document = self._require_document()
        return render_image(document.original, filters, transforms, resize, resize_mode, self.config.resample)

    def _commit(
        self,
        label: str,
        filters: FilterSettings,
        transforms: Tuple[TransformOperation, ...],
        resize: Optional[ResizeSettings],
        resize_mode: str,
    ) -> HistorySnapshot:
        bitmap = self._render(filters, transforms, resize, resize_mode)
        snapshot = HistorySnapshot(filters, transforms, resize, resize_mode, bitmap, label)
        self._history.commit(snapshot)
        self._restore(snapshot)
        return snapshot

    def _restore(self, snapshot: HistorySnapshot) -> None:
        document = self._require_document()
        self._filters = snapshot.filters
        self._transforms = snapshot.transforms
        self._resize = snapshot.resize
        self._resize_mode = snapshot.resize_mode
        if snapshot.bitmap is not None:
            document.current = snapshot.bitmap
        else:
            document.current = self._render(
                snapshot.filters, snapshot.transforms, snapshot.resize, snapshot.resize_mode
            )
        self._redraw()

    # ------------------------------------------------------------------
    # Load / delete
    # ------------------------------------------------------------------

    def load_image(self, file_bytes: bytes, mime_type: str, file_name: Optional[str] = None) -> OperationResult:
        """
        Decode an image and start a fresh editing history.

        Returns:
            SUCCESS with the new ImageDocument, or FAILURE with DecodeError
            (the previous document, if any, is kept)
        """
        return self._run("load_image", self._load, file_bytes, mime_type, file_name)

    def load_image_async(
        self, file_bytes: bytes, mime_type: str, file_name: Optional[str] = None
    ) -> "Future[OperationResult]":
        """Like load_image, but decodes on the worker pool."""
        return self._run_async("load_image", self._load, file_bytes, mime_type, file_name)

    def _load(self, file_bytes: bytes, mime_type: str, file_name: Optional[str]) -> OperationResult:
        decoded = decode_image(file_bytes, mime_type)

        filters = FilterSettings.neutral()
        initial = HistorySnapshot(filters, (), None, RESIZE_MODE_STRETCH, decoded.copy(), "load")
        document = ImageDocument(original=decoded, current=initial.bitmap, file_name=file_name, mime_type=mime_type)

        self._document = document
        self._history.reset(initial)
        self._filters = filters
        self._transforms = ()
        self._resize = None
        self._resize_mode = RESIZE_MODE_STRETCH
        self._resize_settings = ResizeSettings.native(decoded.size)
        self._last_export = None
        self._redraw()

        size_mb = len(file_bytes) / 1024 / 1024
        logger.info(f"Loaded {file_name or 'image'} {document.width}x{document.height} ({size_mb:.2f}MB)")
        return OperationResult.success(
            f"Loaded {file_name or 'image'} ({size_mb:.2f}MB)",
            document,
        )

    def delete_image(self) -> OperationResult:
        """Remove the document and its history; the session returns to EMPTY."""
        return self._run("delete_image", self._delete)

    def _delete(self) -> OperationResult:
        self._require_document()
        self._document = None
        self._history.clear()
        self._filters = FilterSettings.neutral()
        self._transforms = ()
        self._resize = None
        self._resize_mode = RESIZE_MODE_STRETCH
        self._resize_settings = None
        self._selected_tool = None
        self._last_export = None
        self._redraw()
        return OperationResult.success("Image has been removed from the editor")

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def select_tool(self, tool: Optional[str]) -> OperationResult:
        """Choose which filter's value is exposed for editing; pixels and history are untouched."""
        if tool is not None and tool not in FILTER_NAMES:
            return OperationResult.failure(ValueError(f"Unknown tool: {tool!r}"))
        self._selected_tool = tool
        return OperationResult.success(f"Selected {tool}" if tool else "Tool cleared", self.current_filter_value)

    def update_filter(self, name: str, value: int) -> OperationResult:
        return self._run("update_filter", self._update_filter, name, value)

    def _update_filter(self, name: str, value: int) -> OperationResult:
        self._require_document()
        filters = self._filters.with_value(name, value)
        self._commit(f"{name}={value}", filters, self._transforms, self._resize, self._resize_mode)
        return OperationResult.success(f"{name.capitalize()} set to {value}", filters)

    def reset_filters(self) -> OperationResult:
        """Return every filter to neutral; transforms and resize are kept."""
        return self._run("reset_filters", self._reset_filters)

    def _reset_filters(self) -> OperationResult:
        self._require_document()
        filters = FilterSettings.neutral()
        self._commit("reset", filters, self._transforms, self._resize, self._resize_mode)
        return OperationResult.success("All filters have been reset to default", filters)

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    def apply_transform(self, operation: Any) -> OperationResult:
        """Append a rotate/flip (TransformOperation or tag such as 'rotate-left')."""
        return self._run("apply_transform", self._apply_transform, operation)

    def _apply_transform(self, operation: Any) -> OperationResult:
        self._require_document()
        operation = coerce_operation(operation)
        transforms = self._transforms + (operation,)

        resize = self._resize
        if resize is not None and operation.swaps_dimensions:
            resize = resize.swapped()

        self._commit(operation.value, self._filters, transforms, resize, self._resize_mode)
        self._resize_settings = ResizeSettings.native(
            self._document.dimensions,
            self._resize_settings.maintain_aspect_ratio if self._resize_settings else True,
        )
        return OperationResult.success(f"Applied {operation.value} transformation", transforms)

    # ------------------------------------------------------------------
    # Resize
    # ------------------------------------------------------------------

    def update_resize_settings(self, **changes: Any) -> OperationResult:
        """
        Edit the pending resize form (width, height, maintain_aspect_ratio, unit).

        Nothing is rendered or committed until apply_resize().
        """
        return self._run("update_resize_settings", self._update_resize_settings, changes)

    def _update_resize_settings(self, changes: dict) -> OperationResult:
        document = self._require_document()
        unknown = set(changes) - set(ResizeSettings.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown resize settings: {', '.join(sorted(unknown))}")
        current = self._resize_settings or ResizeSettings.native(document.dimensions)
        self._resize_settings = replace(current, **changes)
        return OperationResult.success("Resize settings updated", self._resize_settings)

    def apply_resize(self, settings: Optional[ResizeSettings] = None) -> OperationResult:
        """Resize to `settings` (or the pending form) and commit."""
        return self._run("apply_resize", self._apply_resize, settings)

    def _apply_resize(self, settings: Optional[ResizeSettings]) -> OperationResult:
        document = self._require_document()
        requested = settings or self._resize_settings or ResizeSettings.native(document.dimensions)
        source_size = transformed_size(document.original_dimensions, self._transforms)
        resize = resolve_resize_settings(source_size, requested)

        self._commit("resize", self._filters, self._transforms, resize, RESIZE_MODE_STRETCH)
        self._resize_settings = requested
        return OperationResult.success(f"Resized to {resize.width}x{resize.height}px", resize)

    def apply_social_media_preset(self, name: str) -> OperationResult:
        """Resize (scale and centre-crop) to a preset's exact dimensions."""
        return self._run("apply_social_media_preset", self._apply_preset, name)

    def _apply_preset(self, name: str) -> OperationResult:
        self._require_document()
        preset = get_social_media_preset(name)
        resize = ResizeSettings(width=preset.width, height=preset.height, maintain_aspect_ratio=False)

        keep_ratio = self._resize_settings.maintain_aspect_ratio if self._resize_settings else True
        self._commit(f"preset:{preset.name}", self._filters, self._transforms, resize, RESIZE_MODE_COVER)
        self._resize_settings = ResizeSettings.native(preset.dimensions, keep_ratio)
        return OperationResult.success(f"Applied {preset.name} dimensions", preset)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def undo(self) -> OperationResult:
        return self._run("undo", self._undo)

    def _undo(self) -> OperationResult:
        self._require_document()
        self._restore(self._history.undo())
        self._sync_resize_form()
        return OperationResult.success("Reverted to previous state", self.state)

    def redo(self) -> OperationResult:
        return self._run("redo", self._redo)

    def _redo(self) -> OperationResult:
        self._require_document()
        self._restore(self._history.redo())
        self._sync_resize_form()
        return OperationResult.success("Applied next state", self.state)

    def _sync_resize_form(self) -> None:
        keep_ratio = self._resize_settings.maintain_aspect_ratio if self._resize_settings else True
        self._resize_settings = ResizeSettings.native(self._document.dimensions, keep_ratio)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def update_export_settings(self, **changes: Any) -> OperationResult:
        """Edit format, quality, target_file_size or file_size_unit."""
        return self._run("update_export_settings", self._update_export_settings, changes)

    def _update_export_settings(self, changes: dict) -> OperationResult:
        unknown = set(changes) - set(ExportSettings.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown export settings: {', '.join(sorted(unknown))}")
        self._export_settings = replace(self._export_settings, **changes)
        return OperationResult.success("Export settings updated", self._export_settings)

    def apply_export_settings(self) -> OperationResult:
        """
        Encode the current image with the export settings.

        Returns:
            SUCCESS with an ExportResult; WARNING with the closest ExportResult
            and a TargetSizeUnmetWarning when the target size was missed;
            FAILURE with EncodeError or NoDocumentError
        """
        return self._run("apply_export_settings", self._export)

    def apply_export_settings_async(self) -> "Future[OperationResult]":
        return self._run_async("apply_export_settings", self._export)

    def _export(self) -> OperationResult:
        export = self._encode_current()
        settings = self._export_settings

        description = f"Format: {settings.format}"
        if settings.is_lossy:
            description += f", Quality: {export.quality}%"
        if settings.target_file_size:
            description += f", Target size: {settings.target_file_size:g}{settings.file_size_unit}"

        if export.warning is not None:
            return OperationResult.warned(f"{description} (approximate: {export.size_bytes} bytes)", export.warning, export)
        return OperationResult.success(description, export)

    def _encode_current(self) -> ExportResult:
        document = self._require_document()
        settings = self._export_settings
        snapshot = self._history.current

        if self._last_export is not None:
            last_snapshot, last_settings, last_result = self._last_export
            if last_snapshot is snapshot and last_settings == settings:
                return last_result

        result = apply_export_settings(
            document.current,
            settings,
            tolerance=self.config.size_tolerance,
            max_attempts=self.config.max_encode_attempts,
        )
        self._last_export = (snapshot, settings, result)
        logger.info(f"Exported {settings.format} {result.size_bytes} bytes in {result.attempts} attempt(s)")
        return result

    def download_image(self) -> OperationResult:
        """
        Hand the exported bytes to the caller as a named blob.

        Reuses the last export when neither the image nor the export settings
        changed since; otherwise encodes again.
        """
        return self._run("download_image", self._download)

    def _download(self) -> OperationResult:
        export = self._encode_current()
        blob = DownloadBlob(
            data=export.data,
            file_name=build_download_name(self._document.file_name, export.format),
            mime_type=export.mime_type,
        )
        if export.warning is not None:
            return OperationResult.warned(f"Download ready: {blob.file_name}", export.warning, blob)
        return OperationResult.success(f"Download ready: {blob.file_name}", blob)
