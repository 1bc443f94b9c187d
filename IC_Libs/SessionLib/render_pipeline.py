"""
Declarative render pipeline for ImageCraft Lite.

The displayed image is never edited in place. Every render starts again from
the untouched original:

    resize(transforms(filters(original)))
"""

from typing import Any, Iterable, Optional

from IC_Libs.constants import RESIZE_MODE_STRETCH
from IC_Libs.ImageEditingLib.filter_pipeline import apply_filters
from IC_Libs.ImageEditingLib.image_models import FilterSettings, HistorySnapshot, ResizeSettings
from IC_Libs.ImageEditingLib.resize_engine import apply_resize
from IC_Libs.ImageEditingLib.transform_engine import apply_transforms


def render_image(
    original: Any,
    filters: FilterSettings,
    transforms: Iterable[Any] = (),
    resize: Optional[ResizeSettings] = None,
    resize_mode: str = RESIZE_MODE_STRETCH,
    resample: str = "lanczos",
) -> Any:
    """
    Compose filters, transforms and resize on top of `original`.

    Args:
        original: Source PIL Image (left unmodified)
        filters: Filter values
        transforms: Ordered geometric operations
        resize: Applied resize, or None for the transformed size
        resize_mode: 'stretch' or 'cover'
        resample: Resampling filter name

    Returns:
        New PIL Image
    """
    result = apply_filters(original, filters)
    result = apply_transforms(result, transforms)
    if resize is not None:
        result = apply_resize(result, resize, resize_mode, resample)
    return result


def render_snapshot(original: Any, snapshot: HistorySnapshot, resample: str = "lanczos") -> Any:
    return render_image(
        original,
        snapshot.filters,
        snapshot.transforms,
        snapshot.resize,
        snapshot.resize_mode,
        resample,
    )
