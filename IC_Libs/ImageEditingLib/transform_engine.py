"""
Geometric transforms for ImageCraft Lite.

Rotations are exact quarter turns and flips are mirror images, both done by
Pillow's transpose, so no pixel is ever interpolated.

Functions:
    apply_transform: Apply one TransformOperation
    apply_transforms: Apply a sequence of operations in order
    transformed_size: Predict output dimensions without touching pixels
"""

from typing import Any, Dict, Iterable, Tuple

from IC_Libs.ImageEditingLib.image_models import TransformOperation
from IC_Libs.pillow_compat import transpose_method

# Quarter turns follow screen orientation: "left" is counter-clockwise.
TRANSPOSE_METHODS: Dict[TransformOperation, Any] = {
    TransformOperation.ROTATE_LEFT: transpose_method("ROTATE_90"),
    TransformOperation.ROTATE_RIGHT: transpose_method("ROTATE_270"),
    TransformOperation.FLIP_HORIZONTAL: transpose_method("FLIP_LEFT_RIGHT"),
    TransformOperation.FLIP_VERTICAL: transpose_method("FLIP_TOP_BOTTOM"),
}


def coerce_operation(operation: Any) -> TransformOperation:
    """
    Accept a TransformOperation or its tag string ('rotate-left', ...).

    Raises:
        ValueError: If the tag is not a known operation
    """
    if isinstance(operation, TransformOperation):
        return operation
    try:
        return TransformOperation(str(operation))
    except ValueError:
        raise ValueError(f"Unknown transform operation: {operation!r}") from None


def apply_transform(image: Any, operation: Any) -> Any:
    """
    Apply a single geometric operation.

    Args:
        image: PIL Image (left unmodified)
        operation: TransformOperation or its tag string

    Returns:
        New PIL Image; width and height are swapped for rotations
    """
    if not hasattr(image, "transpose"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")
    return image.transpose(TRANSPOSE_METHODS[coerce_operation(operation)])


def apply_transforms(image: Any, operations: Iterable[Any]) -> Any:
    result = image
    for operation in operations:
        result = apply_transform(result, operation)
    if result is image:
        result = image.copy()
    return result


def transformed_size(size: Tuple[int, int], operations: Iterable[Any]) -> Tuple[int, int]:
    width, height = size
    for operation in operations:
        if coerce_operation(operation).swaps_dimensions:
            width, height = height, width
    return width, height
