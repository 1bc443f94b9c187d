"""
Session-level data models for ImageCraft Lite.

Classes:
    SessionStatus: EMPTY / READY / PROCESSING
    ResultStatus: SUCCESS / WARNING / FAILURE
    OperationResult: Structured outcome returned by every session operation
    EditorState: Immutable view of the session for presentation code
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from IC_Libs.ImageEditingLib.image_models import (
    ExportSettings,
    FilterSettings,
    ImageDocument,
    ResizeSettings,
    TransformOperation,
)


class SessionStatus(str, Enum):
    EMPTY = "empty"
    READY = "ready"
    PROCESSING = "processing"


class ResultStatus(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    FAILURE = "failure"


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a session operation.

    Attributes:
        status: SUCCESS, WARNING (succeeded with a caveat) or FAILURE
        message: Short human-readable summary
        value: Operation payload (document, export result, blob, ...)
        error: The engine error on FAILURE
        warning: The warning on WARNING
    """
    status: ResultStatus
    message: str
    value: Any = None
    error: Optional[Exception] = None
    warning: Optional[Warning] = None

    @property
    def ok(self) -> bool:
        """True for SUCCESS and WARNING."""
        return self.status != ResultStatus.FAILURE

    @property
    def failed(self) -> bool:
        return self.status == ResultStatus.FAILURE

    @property
    def has_warning(self) -> bool:
        return self.status == ResultStatus.WARNING

    @classmethod
    def success(cls, message: str, value: Any = None) -> "OperationResult":
        return cls(ResultStatus.SUCCESS, message, value)

    @classmethod
    def warned(cls, message: str, warning: Warning, value: Any = None) -> "OperationResult":
        return cls(ResultStatus.WARNING, message, value, warning=warning)

    @classmethod
    def failure(cls, error: Exception, message: Optional[str] = None) -> "OperationResult":
        return cls(ResultStatus.FAILURE, message or str(error), error=error)

    def raise_for_status(self) -> "OperationResult":
        """Re-raise the stored error on FAILURE; otherwise return self."""
        if self.failed and isinstance(self.error, Exception):
            raise self.error
        return self


@dataclass(frozen=True)
class EditorState:
    """Read-only snapshot of a session for rendering controls."""
    status: SessionStatus
    document: Optional[ImageDocument]
    filters: FilterSettings
    transforms: Tuple[TransformOperation, ...]
    resize: Optional[ResizeSettings]
    resize_settings: Optional[ResizeSettings]
    export_settings: ExportSettings
    selected_tool: Optional[str]
    history_cursor: int
    history_length: int

    @property
    def has_image(self) -> bool:
        return self.document is not None

    @property
    def is_processing(self) -> bool:
        return self.status == SessionStatus.PROCESSING

    @property
    def dimensions(self) -> Optional[Tuple[int, int]]:
        return self.document.dimensions if self.document is not None else None

    @property
    def can_undo(self) -> bool:
        return self.history_cursor > 0

    @property
    def can_redo(self) -> bool:
        return 0 <= self.history_cursor < self.history_length - 1
