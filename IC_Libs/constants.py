"""
Constants and configuration values for ImageCraft Lite.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the editing engine.
"""

# Filter constants
FILTER_MIN_VALUE = 0
FILTER_MAX_VALUE = 100
FILTER_NEUTRAL_VALUE = 50

# Fixed application order for adjustable filters
FILTER_BRIGHTNESS = "brightness"
FILTER_CONTRAST = "contrast"
FILTER_SATURATION = "saturation"
FILTER_HUE = "hue"
FILTER_SHARPNESS = "sharpness"
FILTER_NAMES = (
    FILTER_BRIGHTNESS,
    FILTER_CONTRAST,
    FILTER_SATURATION,
    FILTER_HUE,
    FILTER_SHARPNESS,
)

# Degrees of hue rotation per filter step away from neutral
HUE_DEGREES_PER_STEP = 3.6

# Channel range for 8-bit pixel formats
CHANNEL_MIN = 0
CHANNEL_MAX = 255
CONTRAST_PIVOT = 128.0

# Working pixel mode
WORKING_MODE = "RGBA"

# Resize units and modes
UNIT_PIXEL = "px"
UNIT_PERCENT = "percent"
RESIZE_UNITS = (UNIT_PIXEL, UNIT_PERCENT)
RESIZE_MODE_STRETCH = "stretch"
RESIZE_MODE_COVER = "cover"
RESIZE_MODES = (RESIZE_MODE_STRETCH, RESIZE_MODE_COVER)

# Social media presets: name -> (width, height)
SOCIAL_MEDIA_PRESET_DIMENSIONS = {
    "Instagram Post": (1080, 1080),
    "Instagram Portrait": (1080, 1350),
    "Instagram Story": (1080, 1920),
    "Facebook Post": (1200, 630),
    "Facebook Cover": (820, 312),
    "Twitter Post": (1024, 512),
    "Twitter Header": (1500, 500),
    "LinkedIn Post": (1200, 627),
    "LinkedIn Banner": (1584, 396),
    "YouTube Thumbnail": (1280, 720),
    "Pinterest Pin": (1000, 1500),
}

# Export formats
FORMAT_PNG = "png"
FORMAT_JPEG = "jpeg"
FORMAT_WEBP = "webp"
EXPORT_FORMATS = (FORMAT_PNG, FORMAT_JPEG, FORMAT_WEBP)
LOSSY_FORMATS = {FORMAT_JPEG, FORMAT_WEBP}

# Pillow encoder names and MIME types per export format
PIL_FORMAT_NAMES = {
    FORMAT_PNG: "PNG",
    FORMAT_JPEG: "JPEG",
    FORMAT_WEBP: "WEBP",
}
EXPORT_MIME_TYPES = {
    FORMAT_PNG: "image/png",
    FORMAT_JPEG: "image/jpeg",
    FORMAT_WEBP: "image/webp",
}
FILE_EXTENSIONS = {
    FORMAT_PNG: ".png",
    FORMAT_JPEG: ".jpg",
    FORMAT_WEBP: ".webp",
}

# Quality search bounds
MIN_QUALITY = 1
MAX_QUALITY = 100
DEFAULT_QUALITY = 90
DEFAULT_SIZE_TOLERANCE = 0.10
DEFAULT_MAX_ENCODE_ATTEMPTS = 8
DEFAULT_MAX_HISTORY_ENTRIES = 50

# File size units
SIZE_UNIT_KB = "KB"
SIZE_UNIT_MB = "MB"
SIZE_UNIT_BYTES = {
    SIZE_UNIT_KB: 1024,
    SIZE_UNIT_MB: 1024 * 1024,
}

# JPEG carries no alpha; transparency is flattened onto this colour
JPEG_BACKGROUND_COLOR = (255, 255, 255)

# Supported input MIME types -> Pillow format names accepted for that type
SUPPORTED_MIME_TYPES = {
    "image/png": {"PNG"},
    "image/jpeg": {"JPEG", "MPO"},
    "image/jpg": {"JPEG", "MPO"},
    "image/webp": {"WEBP"},
    "image/bmp": {"BMP"},
    "image/gif": {"GIF"},
}

# File naming
DEFAULT_DOWNLOAD_STEM = "edited-image"
DOWNLOAD_SUFFIX = "-edited"
