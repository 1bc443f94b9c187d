"""
Image editing data models for ImageCraft Lite.

This module defines core data structures used throughout the editing engine.
All settings objects are immutable; edits produce new instances through the
`with_*` helpers or `dataclasses.replace`.

Classes:
    ImageDocument: Decoded original image plus the current derived image
    FilterSettings: Fully populated filter name -> value mapping
    TransformOperation: Enumerated geometric operations
    ResizeSettings: Target dimensions, aspect lock and unit
    SocialMediaPreset: Named fixed target dimensions
    ExportSettings: Output format, quality and optional target size
    HistorySnapshot: Editable state captured after a committed operation
"""

import math
import numbers
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from IC_Libs.constants import (
    DEFAULT_QUALITY,
    EXPORT_FORMATS,
    FILTER_MAX_VALUE,
    FILTER_MIN_VALUE,
    FILTER_NAMES,
    FILTER_NEUTRAL_VALUE,
    FORMAT_PNG,
    LOSSY_FORMATS,
    MAX_QUALITY,
    MIN_QUALITY,
    RESIZE_MODE_STRETCH,
    RESIZE_UNITS,
    SIZE_UNIT_BYTES,
    SIZE_UNIT_KB,
    UNIT_PIXEL,
)
from IC_Libs.pillow_compat import Image


@dataclass
class ImageDocument:
    """The loaded image.

    Attributes:
        original: Decoded RGBA image; never mutated after load
        current: Image derived from `original` and the active operations
        file_name: Name supplied with the upload, if any
        mime_type: Declared MIME type of the upload
    """
    original: 'Image.Image'
    current: 'Image.Image'
    file_name: Optional[str] = None
    mime_type: Optional[str] = None

    @property
    def width(self) -> int:
        return self.current.width

    @property
    def height(self) -> int:
        return self.current.height

    @property
    def dimensions(self) -> Tuple[int, int]:
        return self.current.size

    @property
    def original_dimensions(self) -> Tuple[int, int]:
        return self.original.size


def _validate_filter_value(name: str, value: Any) -> int:
    if name not in FILTER_NAMES:
        raise ValueError(f"Unknown filter: {name!r}")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Filter value for {name!r} must be an integer, got {value!r}")
    if not (FILTER_MIN_VALUE <= value <= FILTER_MAX_VALUE):
        raise ValueError(
            f"Filter value for {name!r} must be {FILTER_MIN_VALUE}-{FILTER_MAX_VALUE}, got {value}"
        )
    return value


@dataclass(frozen=True)
class FilterSettings(Mapping[str, int]):
    """Immutable mapping holding one value per known filter.

    Missing names are filled with the neutral value, so an instance is always
    fully populated.
    """
    values: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        merged = {name: FILTER_NEUTRAL_VALUE for name in FILTER_NAMES}
        for name, value in dict(self.values).items():
            merged[name] = _validate_filter_value(name, value)
        object.__setattr__(self, "values", MappingProxyType(merged))

    @classmethod
    def neutral(cls) -> "FilterSettings":
        return cls()

    def with_value(self, name: str, value: int) -> "FilterSettings":
        updated = dict(self.values)
        updated[name] = _validate_filter_value(name, value)
        return FilterSettings(updated)

    @property
    def is_neutral(self) -> bool:
        return all(value == FILTER_NEUTRAL_VALUE for value in self.values.values())

    def __getitem__(self, name: str) -> int:
        return self.values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FilterSettings):
            return dict(self.values) == dict(other.values)
        if isinstance(other, Mapping):
            return dict(self.values) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.values.items())))

    def __repr__(self) -> str:
        return f"FilterSettings({dict(self.values)!r})"

    def to_dict(self) -> Dict[str, int]:
        return dict(self.values)


class TransformOperation(str, Enum):
    """Discrete geometric operations; values match the editor's tool tags."""
    ROTATE_LEFT = "rotate-left"
    ROTATE_RIGHT = "rotate-right"
    FLIP_HORIZONTAL = "flip-horizontal"
    FLIP_VERTICAL = "flip-vertical"

    @property
    def swaps_dimensions(self) -> bool:
        return self in (TransformOperation.ROTATE_LEFT, TransformOperation.ROTATE_RIGHT)


@dataclass(frozen=True)
class ResizeSettings:
    """Requested output dimensions.

    Attributes:
        width: Target width (pixels, or percent of the source width)
        height: Target height (pixels, or percent of the source height)
        maintain_aspect_ratio: Derive the non-driving dimension from the source ratio
        unit: 'px' or 'percent'
    """
    width: int
    height: int
    maintain_aspect_ratio: bool = True
    unit: str = UNIT_PIXEL

    def __post_init__(self) -> None:
        for label, value in (("width", self.width), ("height", self.height)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{label} must be an integer, got {value!r}")
            if value <= 0:
                raise ValueError(f"{label} must be positive, got {value}")
        if self.unit not in RESIZE_UNITS:
            raise ValueError(f"Unsupported resize unit: {self.unit!r}")

    @classmethod
    def native(cls, size: Tuple[int, int], maintain_aspect_ratio: bool = True) -> "ResizeSettings":
        width, height = size
        return cls(width=width, height=height, maintain_aspect_ratio=maintain_aspect_ratio)

    def swapped(self) -> "ResizeSettings":
        return replace(self, width=self.height, height=self.width)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "maintain_aspect_ratio": self.maintain_aspect_ratio,
            "unit": self.unit,
        }


@dataclass(frozen=True)
class SocialMediaPreset:
    name: str
    width: int
    height: int

    @property
    def dimensions(self) -> Tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class ExportSettings:
    """Output encoding options.

    Attributes:
        format: 'png', 'jpeg' or 'webp'
        quality: Encoder quality 1-100 (lossy formats only)
        target_file_size: Optional requested output size in `file_size_unit`
        file_size_unit: 'KB' or 'MB'
    """
    format: str = FORMAT_PNG
    quality: int = DEFAULT_QUALITY
    target_file_size: Optional[float] = None
    file_size_unit: str = SIZE_UNIT_KB

    def __post_init__(self) -> None:
        normalized = str(self.format).lower()
        if normalized == "jpg":
            normalized = "jpeg"
        if normalized not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {self.format!r}")
        object.__setattr__(self, "format", normalized)

        if isinstance(self.quality, bool) or not isinstance(self.quality, int):
            raise ValueError(f"quality must be an integer, got {self.quality!r}")
        if not (MIN_QUALITY <= self.quality <= MAX_QUALITY):
            raise ValueError(f"quality must be {MIN_QUALITY}-{MAX_QUALITY}, got {self.quality}")

        unit = str(self.file_size_unit).upper()
        if unit not in SIZE_UNIT_BYTES:
            raise ValueError(f"Unsupported file size unit: {self.file_size_unit!r}")
        object.__setattr__(self, "file_size_unit", unit)

        size = self.target_file_size
        if size is not None:
            if isinstance(size, bool) or not isinstance(size, numbers.Real):
                raise ValueError(f"target_file_size must be a number, got {size!r}")
            try:
                size_bytes = float(size) * SIZE_UNIT_BYTES[unit]
            except OverflowError:
                size_bytes = math.inf
            if not size_bytes > 0 or not math.isfinite(size_bytes):
                raise ValueError(f"target_file_size must be positive and finite, got {size}")

    @property
    def is_lossy(self) -> bool:
        return self.format in LOSSY_FORMATS

    @property
    def target_bytes(self) -> Optional[int]:
        """Target size converted to bytes, or None when no target is set."""
        if self.target_file_size is None:
            return None
        return int(round(self.target_file_size * SIZE_UNIT_BYTES[self.file_size_unit]))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "format": self.format,
            "quality": self.quality,
            "target_file_size": self.target_file_size,
            "file_size_unit": self.file_size_unit,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportSettings":
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)


@dataclass(frozen=True)
class HistorySnapshot:
    """Editable state captured after a committed operation.

    `resize` is the applied resize in resolved pixel units (None = native
    size) and `resize_mode` how it was applied. `bitmap` references the
    image rendered for this state.
    """
    filters: FilterSettings
    transforms: Tuple[TransformOperation, ...] = ()
    resize: Optional[ResizeSettings] = None
    resize_mode: str = RESIZE_MODE_STRETCH
    bitmap: Optional['Image.Image'] = field(default=None, compare=False, repr=False)
    label: str = ""
