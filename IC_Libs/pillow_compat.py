"""
Compatibility wrapper to import Pillow (which provides the `PIL` namespace)
and expose the handful of modules the editing engine uses.

This module loads the Pillow-provided modules via importlib and re-exports
`Image`, `ImageEnhance` and `ImageOps`. Importing from `pillow_compat` keeps a
single place where the engine binds to Pillow and lets the resampling filter
be resolved across Pillow releases.
"""
from importlib import import_module
from types import ModuleType


def _import(name: str) -> ModuleType:
    try:
        return import_module(name)
    except ImportError as exc:
        raise ImportError("pillow (PIL) is required: install with 'pip install Pillow'") from exc


Image = _import("PIL.Image")
ImageEnhance = _import("PIL.ImageEnhance")
ImageOps = _import("PIL.ImageOps")


def resampling_filter(name: str) -> int:
    """
    Resolve a resampling filter by name ("lanczos", "bicubic", "bilinear").

    Pillow >= 9.1 moved the constants onto the `Image.Resampling` enum.
    """
    key = name.upper()
    resampling = getattr(Image, "Resampling", None)
    if resampling is not None and hasattr(resampling, key):
        return getattr(resampling, key)
    if hasattr(Image, key):
        return getattr(Image, key)
    raise ValueError(f"Unknown resampling filter: {name}")


def transpose_method(name: str) -> int:
    """Resolve a transpose method by name ("ROTATE_90", "FLIP_LEFT_RIGHT", ...)."""
    key = name.upper()
    transpose = getattr(Image, "Transpose", None)
    if transpose is not None and hasattr(transpose, key):
        return getattr(transpose, key)
    if hasattr(Image, key):
        return getattr(Image, key)
    raise ValueError(f"Unknown transpose method: {name}")
