"""
Resize engine and social media presets for ImageCraft Lite.

Functions:
    resolve_resize_dimensions: Turn ResizeSettings into exact pixel dimensions
    resolve_resize_settings: Same, returned as pixel-unit ResizeSettings
    apply_resize: Resample (and optionally centre-crop) an image
    get_social_media_presets: The read-only preset table
    get_social_media_preset: Look up one preset by name
"""

import logging
from types import MappingProxyType
from typing import Any, List, Mapping, Tuple

from IC_Libs.constants import (
    RESIZE_MODE_COVER,
    RESIZE_MODE_STRETCH,
    RESIZE_MODES,
    SOCIAL_MEDIA_PRESET_DIMENSIONS,
    UNIT_PERCENT,
    UNIT_PIXEL,
)
from IC_Libs.ImageEditingLib.editor_errors import UnknownPresetError
from IC_Libs.ImageEditingLib.image_models import ResizeSettings, SocialMediaPreset
from IC_Libs.pillow_compat import ImageOps, resampling_filter

logger = logging.getLogger(__name__)

SOCIAL_MEDIA_PRESETS: Mapping[str, SocialMediaPreset] = MappingProxyType({
    name: SocialMediaPreset(name=name, width=width, height=height)
    for name, (width, height) in SOCIAL_MEDIA_PRESET_DIMENSIONS.items()
})


def get_social_media_presets() -> List[SocialMediaPreset]:
    """Get all presets in table order."""
    return list(SOCIAL_MEDIA_PRESETS.values())


def get_social_media_preset(name: str) -> SocialMediaPreset:
    """
    Look up a preset by its exact name.

    Raises:
        UnknownPresetError: If no preset has that name
    """
    try:
        return SOCIAL_MEDIA_PRESETS[name]
    except KeyError:
        raise UnknownPresetError(name) from None


def _to_pixels(value: int, source: int, unit: str) -> int:
    if unit == UNIT_PERCENT:
        return max(1, int(round(source * value / 100.0)))
    return value


def resolve_resize_dimensions(source_size: Tuple[int, int], settings: ResizeSettings) -> Tuple[int, int]:
    """
    Resolve requested dimensions to pixels.

    With `maintain_aspect_ratio`, whichever requested dimension changes more
    relative to the source drives, and the other is derived from the source
    aspect ratio: height = round(width / ratio) or width = round(height * ratio).

    Args:
        source_size: (width, height) of the image being resized
        settings: Requested dimensions

    Returns:
        (width, height) in pixels, each at least 1
    """
    source_width, source_height = source_size
    width = _to_pixels(settings.width, source_width, settings.unit)
    height = _to_pixels(settings.height, source_height, settings.unit)

    if not settings.maintain_aspect_ratio:
        return width, height

    ratio = source_width / float(source_height)
    width_change = abs(width / float(source_width) - 1.0)
    height_change = abs(height / float(source_height) - 1.0)

    if width_change >= height_change:
        height = max(1, int(round(width / ratio)))
    else:
        width = max(1, int(round(height * ratio)))
    return width, height


def resolve_resize_settings(source_size: Tuple[int, int], settings: ResizeSettings) -> ResizeSettings:
    """Resolve to an exact pixel box that no longer depends on the source size."""
    width, height = resolve_resize_dimensions(source_size, settings)
    return ResizeSettings(width=width, height=height, maintain_aspect_ratio=False, unit=UNIT_PIXEL)


def apply_resize(
    image: Any,
    settings: ResizeSettings,
    mode: str = RESIZE_MODE_STRETCH,
    resample: str = "lanczos",
) -> Any:
    """
    Resize an image.

    Args:
        image: PIL Image (left unmodified)
        settings: Requested dimensions
        mode: 'stretch' scales to the exact box; 'cover' scales to fill the
              box and centre-crops the overflow
        resample: Resampling filter name (default lanczos)

    Returns:
        New PIL Image whose size equals the resolved dimensions

    Raises:
        ValueError: If mode is unknown
    """
    if not hasattr(image, "resize"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")
    if mode not in RESIZE_MODES:
        raise ValueError(f"Unsupported resize mode: {mode!r}")

    target = resolve_resize_dimensions(image.size, settings)
    if target == image.size:
        return image.copy()

    method = resampling_filter(resample)
    logger.debug(f"Resizing {image.size[0]}x{image.size[1]} -> {target[0]}x{target[1]} ({mode})")

    if mode == RESIZE_MODE_COVER:
        return ImageOps.fit(image, target, method=method, centering=(0.5, 0.5))
    return image.resize(target, method)
