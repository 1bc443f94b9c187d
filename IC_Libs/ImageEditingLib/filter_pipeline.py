"""
Adjustable filter pipeline for ImageCraft Lite.

Every filter takes a value in [0, 100] where 50 leaves the image untouched.
Filters are always applied in the fixed order given by FILTER_NAMES,
regardless of which slider was touched first:

    brightness -> contrast -> saturation -> hue -> sharpness

Colour filters work on float32 NumPy arrays of the RGB channels and clip the
result to [0, 255] before converting back to 8-bit, so no channel can wrap
around. Alpha always passes through unchanged.

Example:
    >>> from PIL import Image
    >>> img = Image.new("RGBA", (64, 64), (120, 80, 40, 255))
    >>> settings = FilterSettings({"brightness": 70, "saturation": 30})
    >>> adjusted = apply_filters(img, settings)
"""

import math
from typing import Any, Callable, Dict

import numpy as np

from IC_Libs.constants import (
    CHANNEL_MAX,
    CHANNEL_MIN,
    CONTRAST_PIVOT,
    FILTER_BRIGHTNESS,
    FILTER_CONTRAST,
    FILTER_HUE,
    FILTER_NAMES,
    FILTER_NEUTRAL_VALUE,
    FILTER_SATURATION,
    FILTER_SHARPNESS,
    HUE_DEGREES_PER_STEP,
    WORKING_MODE,
)
from IC_Libs.ImageEditingLib.image_models import FilterSettings
from IC_Libs.pillow_compat import Image, ImageEnhance

# Rec. 601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float32)


def filter_factor(value: int) -> float:
    """Map a slider value to a multiplicative strength (0 -> 0.0, 50 -> 1.0, 100 -> 2.0)."""
    return value / float(FILTER_NEUTRAL_VALUE)


def hue_degrees(value: int) -> float:
    """Map a slider value to a hue rotation in degrees (0 -> -180, 50 -> 0, 100 -> +180)."""
    return (value - FILTER_NEUTRAL_VALUE) * HUE_DEGREES_PER_STEP


# ============================================================================
# Array helpers
# ============================================================================

def _split_rgb(image: Any):
    rgba = np.asarray(image.convert(WORKING_MODE), dtype=np.float32)
    return rgba[..., :3], rgba[..., 3:]


def _merge_rgb(rgb: np.ndarray, alpha: np.ndarray) -> Any:
    clipped = np.clip(np.rint(rgb), CHANNEL_MIN, CHANNEL_MAX)
    merged = np.concatenate([clipped, alpha], axis=-1).astype(np.uint8)
    return Image.fromarray(merged)


# ============================================================================
# Transfer functions
# ============================================================================

def apply_brightness(image: Any, value: int) -> Any:
    """Scale RGB channels by value/50."""
    rgb, alpha = _split_rgb(image)
    return _merge_rgb(rgb * filter_factor(value), alpha)


def apply_contrast(image: Any, value: int) -> Any:
    """Stretch or compress RGB channels around mid-grey by value/50."""
    rgb, alpha = _split_rgb(image)
    return _merge_rgb((rgb - CONTRAST_PIVOT) * filter_factor(value) + CONTRAST_PIVOT, alpha)


def apply_saturation(image: Any, value: int) -> Any:
    """Blend each pixel with its luma; 0 gives greyscale, 100 doubles colourfulness."""
    rgb, alpha = _split_rgb(image)
    luma = (rgb @ LUMA_WEIGHTS)[..., np.newaxis]
    return _merge_rgb(luma + (rgb - luma) * filter_factor(value), alpha)


def hue_rotation_matrix(degrees: float) -> np.ndarray:
    """Luminance-preserving hue rotation matrix (the SVG/CSS hue-rotate matrix)."""
    radians = math.radians(degrees)
    cos_a = math.cos(radians)
    sin_a = math.sin(radians)
    return np.array(
        [
            [
                0.213 + cos_a * 0.787 - sin_a * 0.213,
                0.715 - cos_a * 0.715 - sin_a * 0.715,
                0.072 - cos_a * 0.072 + sin_a * 0.928,
            ],
            [
                0.213 - cos_a * 0.213 + sin_a * 0.143,
                0.715 + cos_a * 0.285 + sin_a * 0.140,
                0.072 - cos_a * 0.072 - sin_a * 0.283,
            ],
            [
                0.213 - cos_a * 0.213 - sin_a * 0.787,
                0.715 - cos_a * 0.715 + sin_a * 0.715,
                0.072 + cos_a * 0.928 + sin_a * 0.072,
            ],
        ],
        dtype=np.float32,
    )


def apply_hue(image: Any, value: int) -> Any:
    """Rotate hue by (value - 50) * 3.6 degrees."""
    rgb, alpha = _split_rgb(image)
    matrix = hue_rotation_matrix(hue_degrees(value))
    return _merge_rgb(rgb @ matrix.T, alpha)


def apply_sharpness(image: Any, value: int) -> Any:
    """Soften (below 50) or sharpen (above 50) using Pillow's sharpness enhancer."""
    source = image.convert(WORKING_MODE)
    rgb = source.convert("RGB")
    enhanced = ImageEnhance.Sharpness(rgb).enhance(filter_factor(value))
    enhanced.putalpha(source.getchannel("A"))
    return enhanced


FILTER_FUNCTIONS: Dict[str, Callable[[Any, int], Any]] = {
    FILTER_BRIGHTNESS: apply_brightness,
    FILTER_CONTRAST: apply_contrast,
    FILTER_SATURATION: apply_saturation,
    FILTER_HUE: apply_hue,
    FILTER_SHARPNESS: apply_sharpness,
}


# ============================================================================
# Pipeline
# ============================================================================

def apply_filters(source: Any, settings: FilterSettings) -> Any:
    """
    Apply every non-neutral filter to a copy of `source` in the fixed order.

    Args:
        source: PIL Image (left unmodified)
        settings: Filter values

    Returns:
        New RGBA PIL Image. With all values at 50 this is a pixel-identical copy.

    Raises:
        TypeError: If source is not a PIL Image
    """
    if not hasattr(source, "convert"):
        raise TypeError(f"Expected PIL Image, got {type(source)}")

    result = source.convert(WORKING_MODE)
    if result is source:
        result = source.copy()

    for name in FILTER_NAMES:
        value = settings[name]
        if value == FILTER_NEUTRAL_VALUE:
            continue
        result = FILTER_FUNCTIONS[name](result, value)

    return result
