"""
ImageEditingLib - Core image editing functionality

This module provides the pure image operations (decode, filters, transforms,
resize, export), the data models they exchange and the engine's error types.
"""

from IC_Libs.ImageEditingLib.image_models import (
    ImageDocument,
    FilterSettings,
    TransformOperation,
    ResizeSettings,
    SocialMediaPreset,
    ExportSettings,
    HistorySnapshot,
)
from IC_Libs.ImageEditingLib.editor_config import EditorConfig
from IC_Libs.ImageEditingLib.editor_errors import (
    EditorError,
    DecodeError,
    NoDocumentError,
    UnknownPresetError,
    OperationInProgressError,
    EncodeError,
    HistoryError,
    NothingToUndoError,
    NothingToRedoError,
    TargetSizeUnmetWarning,
)
from IC_Libs.ImageEditingLib.image_loader import (
    decode_image,
    get_supported_mime_types,
    is_supported_mime_type,
)
from IC_Libs.ImageEditingLib.filter_pipeline import apply_filters
from IC_Libs.ImageEditingLib.transform_engine import apply_transform, apply_transforms
from IC_Libs.ImageEditingLib.resize_engine import (
    SOCIAL_MEDIA_PRESETS,
    apply_resize,
    get_social_media_preset,
    get_social_media_presets,
    resolve_resize_dimensions,
)
from IC_Libs.ImageEditingLib.export_engine import (
    DownloadBlob,
    ExportResult,
    apply_export_settings,
    build_download_name,
    encode_image,
)

__all__ = [
    "ImageDocument",
    "FilterSettings",
    "TransformOperation",
    "ResizeSettings",
    "SocialMediaPreset",
    "ExportSettings",
    "HistorySnapshot",
    "EditorConfig",
    "EditorError",
    "DecodeError",
    "NoDocumentError",
    "UnknownPresetError",
    "OperationInProgressError",
    "EncodeError",
    "HistoryError",
    "NothingToUndoError",
    "NothingToRedoError",
    "TargetSizeUnmetWarning",
    "decode_image",
    "get_supported_mime_types",
    "is_supported_mime_type",
    "apply_filters",
    "apply_transform",
    "apply_transforms",
    "SOCIAL_MEDIA_PRESETS",
    "apply_resize",
    "get_social_media_preset",
    "get_social_media_presets",
    "resolve_resize_dimensions",
    "DownloadBlob",
    "ExportResult",
    "apply_export_settings",
    "build_download_name",
    "encode_image",
]
