"""
Single import point for the Pillow modules used by Pixel Pipeline.

Pillow provides the `PIL` namespace. The modules are loaded via importlib and
re-exported here so the rest of the package imports `Image`, `ImageDraw`,
`ImageFilter` and `ImageFont` from one place.
"""
from importlib import import_module
from types import ModuleType


def _import(name: str) -> ModuleType:
    try:
        return import_module(name)
    except ImportError as exc:
        raise ImportError(
            f"pillow is required for {name}: install with 'pip install Pillow'"
        ) from exc


Image = _import("PIL.Image")
ImageDraw = _import("PIL.ImageDraw")
ImageFilter = _import("PIL.ImageFilter")
ImageFont = _import("PIL.ImageFont")

# Raised by Image.open() when the bytes are not a recognised image
UnidentifiedImageError = Image.UnidentifiedImageError
