"""
Error taxonomy for the ImageCraft Lite editing engine.

Every failure the engine can report is a subclass of EditorError so callers
can tell engine failures apart from programming errors. The only non-fatal
condition, an export that could not reach its requested size, is modelled as
a warning class that is attached to results rather than raised.

Classes:
    EditorError: Base class for all engine failures
    DecodeError: Image bytes could not be decoded
    NoDocumentError: A document operation was called with no image loaded
    UnknownPresetError: Social media preset name not in the table
    OperationInProgressError: Mutating call while a long operation runs
    EncodeError: Encoder failure during export
    HistoryError: Undo/redo requested with nothing to move to
    TargetSizeUnmetWarning: Export succeeded but missed the target size
"""


class EditorError(Exception):
    """Base class for recoverable editing engine failures."""


class DecodeError(EditorError):
    """Raised when an image file is unreadable, corrupt or unsupported."""


class NoDocumentError(EditorError):
    """Raised when an operation needs a loaded image and there is none."""

    def __init__(self, message: str = "No image loaded") -> None:
        super().__init__(message)


class UnknownPresetError(EditorError, KeyError):
    """Raised when a social media preset name is not in the preset table."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown social media preset: {name!r}")
        self.name = name

    def __str__(self) -> str:
        return self.args[0]


class OperationInProgressError(EditorError):
    """Raised when a mutating call arrives while the session is processing."""

    def __init__(self, message: str = "Operation in progress") -> None:
        super().__init__(message)


class EncodeError(EditorError):
    """Raised when the encoder fails to produce output."""


class HistoryError(EditorError):
    """Raised when undo or redo has no snapshot to move to."""


class NothingToUndoError(HistoryError):
    def __init__(self) -> None:
        super().__init__("Nothing to undo")


class NothingToRedoError(HistoryError):
    def __init__(self) -> None:
        super().__init__("Nothing to redo")


class TargetSizeUnmetWarning(UserWarning):
    """
    Export finished but the output size is outside the requested tolerance.

    Attributes:
        target_bytes: Requested size in bytes
        actual_bytes: Size of the closest result that was produced
        quality: Encoder quality of that result (None for lossless formats)
    """

    def __init__(self, target_bytes: int, actual_bytes: int, quality=None) -> None:
        super().__init__(
            f"Could not reach target size of {target_bytes} bytes; "
            f"closest result is {actual_bytes} bytes"
        )
        self.target_bytes = target_bytes
        self.actual_bytes = actual_bytes
        self.quality = quality
