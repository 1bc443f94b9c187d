"""
Editor configuration for ImageCraft Lite.

Classes:
    EditorConfig: Tunables for export search, history, threading and resampling
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from IC_Libs.constants import (
    DEFAULT_MAX_ENCODE_ATTEMPTS,
    DEFAULT_MAX_HISTORY_ENTRIES,
    DEFAULT_SIZE_TOLERANCE,
)
from IC_Libs.ImageEditingLib.image_models import ExportSettings


@dataclass
class EditorConfig:
    """Configuration for an editing session.

    Attributes:
        size_tolerance: Accepted relative deviation from an export target size (default: 0.10)
        max_encode_attempts: Upper bound on encodes per target size search (default: 8)
        max_history_entries: Oldest snapshots are dropped beyond this count (default: 50, None = unbounded)
        max_workers: Worker threads for asynchronous decode/encode (default: 1)
        resample: Resampling filter name for resizes (default: lanczos)
        default_export: Export settings a new session starts with
    """
    size_tolerance: float = DEFAULT_SIZE_TOLERANCE
    max_encode_attempts: int = DEFAULT_MAX_ENCODE_ATTEMPTS
    max_history_entries: Optional[int] = DEFAULT_MAX_HISTORY_ENTRIES
    max_workers: int = 1
    resample: str = "lanczos"
    default_export: ExportSettings = field(default_factory=ExportSettings)

    def __post_init__(self) -> None:
        if not (0 < self.size_tolerance < 1):
            raise ValueError(f"size_tolerance must be between 0 and 1, got {self.size_tolerance}")
        if self.max_encode_attempts < 1:
            raise ValueError(f"max_encode_attempts must be >= 1, got {self.max_encode_attempts}")
        if self.max_history_entries is not None and self.max_history_entries < 1:
            raise ValueError(f"max_history_entries must be >= 1, got {self.max_history_entries}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["default_export"] = self.default_export.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorConfig":
        """Create from dictionary, ignoring unknown keys."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        export = filtered.get("default_export")
        if isinstance(export, dict):
            filtered["default_export"] = ExportSettings.from_dict(export)
        return cls(**filtered)
