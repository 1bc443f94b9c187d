"""
Image decoding for ImageCraft Lite.

Turns uploaded bytes plus a declared MIME type into the RGBA working image
the rest of the engine operates on.

Functions:
    get_supported_mime_types: List the MIME types accepted for upload
    is_supported_mime_type: Check a declared MIME type
    decode_image: Decode bytes into an RGBA PIL Image
"""

import logging
from io import BytesIO
from typing import List

from IC_Libs.constants import SUPPORTED_MIME_TYPES, WORKING_MODE
from IC_Libs.ImageEditingLib.editor_errors import DecodeError
from IC_Libs.pillow_compat import Image, ImageOps

logger = logging.getLogger(__name__)

DECODABLE_FORMATS = frozenset().union(*SUPPORTED_MIME_TYPES.values())


def get_supported_mime_types() -> List[str]:
    """
    Get list of supported upload MIME types.

    Returns:
        Sorted list of MIME type strings (e.g., ['image/bmp', 'image/gif', ...])
    """
    return sorted(SUPPORTED_MIME_TYPES)


def is_supported_mime_type(mime_type: str) -> bool:
    return _normalize_mime_type(mime_type) in SUPPORTED_MIME_TYPES


def _normalize_mime_type(mime_type: str) -> str:
    return str(mime_type or "").split(";", 1)[0].strip().lower()


def decode_image(file_bytes: bytes, mime_type: str) -> 'Image.Image':
    """
    Decode an uploaded image.

    The image is fully loaded (not lazily), rotated according to its EXIF
    orientation tag and converted to RGBA. Animated formats yield their
    first frame.

    Args:
        file_bytes: Raw file contents
        mime_type: Declared MIME type (e.g., 'image/png')

    Returns:
        A new RGBA PIL Image

    Raises:
        DecodeError: If the type is unsupported, the bytes are empty or
            corrupt, or the content is not a supported image format
    """
    normalized = _normalize_mime_type(mime_type)
    accepted_formats = SUPPORTED_MIME_TYPES.get(normalized)
    if accepted_formats is None:
        raise DecodeError(f"Unsupported file type: {mime_type!r}")

    if not file_bytes:
        raise DecodeError("Image file is empty")

    try:
        with Image.open(BytesIO(file_bytes)) as img:
            img.load()
            decoded_format = img.format
            oriented = ImageOps.exif_transpose(img)
            working = oriented.convert(WORKING_MODE)
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"Failed to decode image: {exc}") from exc

    if decoded_format not in DECODABLE_FORMATS:
        raise DecodeError(f"Unsupported image content: {decoded_format or 'unknown'}")
    if decoded_format not in accepted_formats:
        # Decoded by content; the declared type only gates the upload.
        logger.debug(f"Declared type {normalized} but content is {decoded_format}")

    logger.debug(f"Decoded {decoded_format} image {working.size[0]}x{working.size[1]}")
    return working
