"""
Export engine for ImageCraft Lite.

Encodes the final image to PNG, JPEG or WebP. When a target file size is
requested for a lossy format, encoder quality is found by bisection:

    lo, hi = 1, 100
    while lo <= hi and attempts < max_attempts:
        mid = (lo + hi) // 2
        encode at mid
        within tolerance -> done
        too large -> hi = mid - 1
        too small -> lo = mid + 1

Output size grows with quality, so each step halves the remaining range and
seven encodes cover all hundred qualities. If no attempt lands inside the
tolerance band, the attempt closest to the target is returned together with
a TargetSizeUnmetWarning. PNG is lossless, so a target size there is only
checked, never searched.

Classes:
    ExportResult: Encoded bytes plus search metadata
    DownloadBlob: Bytes and suggested name handed to the saving collaborator

Functions:
    encode_image: Single encode at a given quality
    apply_export_settings: Encode according to ExportSettings
    build_download_name: Suggested file name for an export
"""

import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import PurePath
from typing import Any, Dict, Optional

from IC_Libs.constants import (
    DEFAULT_DOWNLOAD_STEM,
    DEFAULT_MAX_ENCODE_ATTEMPTS,
    DEFAULT_SIZE_TOLERANCE,
    DOWNLOAD_SUFFIX,
    EXPORT_MIME_TYPES,
    FILE_EXTENSIONS,
    FORMAT_JPEG,
    FORMAT_PNG,
    FORMAT_WEBP,
    JPEG_BACKGROUND_COLOR,
    LOSSY_FORMATS,
    MAX_QUALITY,
    MIN_QUALITY,
    PIL_FORMAT_NAMES,
)
from IC_Libs.ImageEditingLib.editor_errors import EncodeError, TargetSizeUnmetWarning
from IC_Libs.ImageEditingLib.image_models import ExportSettings
from IC_Libs.pillow_compat import Image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportResult:
    """Outcome of an export.

    Attributes:
        data: Encoded bytes
        format: Export format ('png', 'jpeg', 'webp')
        quality: Quality used (None for PNG)
        target_bytes: Requested size in bytes, if any
        attempts: Number of encodes performed
        warning: Set when a target size was requested but not met
    """
    data: bytes
    format: str
    quality: Optional[int]
    target_bytes: Optional[int] = None
    attempts: int = 1
    warning: Optional[TargetSizeUnmetWarning] = None

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    @property
    def mime_type(self) -> str:
        return EXPORT_MIME_TYPES[self.format]

    @property
    def met_target(self) -> bool:
        return self.warning is None


@dataclass(frozen=True)
class DownloadBlob:
    data: bytes
    file_name: str
    mime_type: str

    @property
    def size_bytes(self) -> int:
        return len(self.data)


def build_download_name(source_name: Optional[str], export_format: str) -> str:
    """
    Suggest a file name for an export ('photo.png' -> 'photo-edited.jpg').

    Args:
        source_name: Name of the uploaded file, if known
        export_format: Export format key
    """
    stem = PurePath(source_name).stem if source_name else ""
    if stem:
        stem = f"{stem}{DOWNLOAD_SUFFIX}"
    else:
        stem = DEFAULT_DOWNLOAD_STEM
    return f"{stem}{FILE_EXTENSIONS[export_format]}"


def _prepare_for_format(image: Any, export_format: str) -> Any:
    if export_format == FORMAT_JPEG:
        if image.mode in ("RGBA", "LA", "P"):
            rgba = image.convert("RGBA")
            background = Image.new("RGB", rgba.size, JPEG_BACKGROUND_COLOR)
            background.paste(rgba, mask=rgba.getchannel("A"))
            return background
        return image.convert("RGB")
    return image


def _save_kwargs(export_format: str, quality: int) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {"format": PIL_FORMAT_NAMES[export_format]}
    if export_format == FORMAT_PNG:
        kwargs["optimize"] = True
    elif export_format == FORMAT_JPEG:
        kwargs["quality"] = max(MIN_QUALITY, min(MAX_QUALITY, quality))
        kwargs["optimize"] = True
    elif export_format == FORMAT_WEBP:
        kwargs["quality"] = max(MIN_QUALITY, min(MAX_QUALITY, quality))
        kwargs["method"] = 4
    return kwargs


def encode_image(image: Any, export_format: str, quality: int = MAX_QUALITY) -> bytes:
    """
    Encode an image once.

    Args:
        image: PIL Image
        export_format: 'png', 'jpeg' or 'webp'
        quality: Encoder quality (ignored for PNG)

    Returns:
        Encoded bytes

    Raises:
        EncodeError: If the encoder fails
        ValueError: If the format is unknown
    """
    if export_format not in PIL_FORMAT_NAMES:
        raise ValueError(f"Unsupported export format: {export_format!r}")

    prepared = _prepare_for_format(image, export_format)
    buffer = BytesIO()
    try:
        prepared.save(buffer, **_save_kwargs(export_format, quality))
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(f"Failed to encode {export_format}: {exc}") from exc
    return buffer.getvalue()


def _within_tolerance(size: int, target: int, tolerance: float) -> bool:
    return abs(size - target) <= tolerance * target


def _search_quality(
    image: Any,
    settings: ExportSettings,
    target: int,
    tolerance: float,
    max_attempts: int,
) -> ExportResult:
    lo, hi = MIN_QUALITY, MAX_QUALITY
    attempts = 0
    best_data: Optional[bytes] = None
    best_quality = lo

    while lo <= hi and attempts < max_attempts:
        mid = (lo + hi) // 2
        data = encode_image(image, settings.format, mid)
        attempts += 1
        size = len(data)
        logger.debug(f"Quality search attempt {attempts}: q={mid} -> {size} bytes (target {target})")

        if best_data is None or abs(size - target) < abs(len(best_data) - target):
            best_data, best_quality = data, mid

        if _within_tolerance(size, target, tolerance):
            return ExportResult(data, settings.format, mid, target, attempts)

        if size > target:
            hi = mid - 1
        else:
            lo = mid + 1

    warning = TargetSizeUnmetWarning(target, len(best_data), best_quality)
    logger.info(f"Target size {target} bytes not met; closest {len(best_data)} bytes at q={best_quality}")
    return ExportResult(best_data, settings.format, best_quality, target, attempts, warning)


def apply_export_settings(
    image: Any,
    settings: ExportSettings,
    tolerance: float = DEFAULT_SIZE_TOLERANCE,
    max_attempts: int = DEFAULT_MAX_ENCODE_ATTEMPTS,
) -> ExportResult:
    """
    Encode an image according to export settings.

    Args:
        image: Final rendered PIL Image
        settings: Format, quality and optional target size
        tolerance: Accepted relative deviation from the target size
        max_attempts: Upper bound on encodes during the quality search

    Returns:
        ExportResult; `warning` is set when a target could not be met

    Raises:
        EncodeError: If the encoder fails
    """
    target = settings.target_bytes

    if target is not None and settings.format in LOSSY_FORMATS:
        return _search_quality(image, settings, target, tolerance, max_attempts)

    quality = settings.quality if settings.format in LOSSY_FORMATS else None
    data = encode_image(image, settings.format, settings.quality)

    warning = None
    if target is not None and not _within_tolerance(len(data), target, tolerance):
        # Lossless output size cannot be steered; the target is advisory.
        warning = TargetSizeUnmetWarning(target, len(data), None)

    return ExportResult(data, settings.format, quality, target, 1, warning)
