"""
Per-pixel colour filters.

All filters compute in floating point, then clamp to [0, 255] and truncate
to 8 bits (see to_channel_bytes). Every function returns a new buffer.

Functions:
    apply_sepia: Fixed sepia tone matrix on R, G, B
    apply_brightness: Additive brightness on R, G, B, A
    apply_contrast: Multiplicative contrast about mid-gray on R, G, B, A
    apply_saturation: Luma-based saturation on R, G, B
    apply_hue_rotate: Luminance-preserving hue rotation on R, G, B
"""

import math

import numpy as np

from PP_Libs.constants import CONTRAST_PIVOT, LUMA_WEIGHTS, SEPIA_MATRIX
from PP_Libs.ImageEditingLib.image_models import PixelBuffer, to_channel_bytes


def _apply_rgb_matrix(buffer: PixelBuffer, matrix: np.ndarray) -> PixelBuffer:
    """Multiply every pixel's RGB by a 3x3 matrix; alpha is kept."""
    pixels = buffer.to_array()
    rgb = pixels[..., :3].astype(np.float64)
    pixels[..., :3] = to_channel_bytes(rgb @ matrix.T)
    return PixelBuffer.from_array(pixels)


def apply_sepia(buffer: PixelBuffer) -> PixelBuffer:
    """
    Apply the classic sepia tone.

    tr = 0.393R + 0.769G + 0.189B
    tg = 0.349R + 0.686G + 0.168B
    tb = 0.272R + 0.534G + 0.131B
    """
    return _apply_rgb_matrix(buffer, np.array(SEPIA_MATRIX, dtype=np.float64))


def apply_brightness(buffer: PixelBuffer, value: float) -> PixelBuffer:
    """
    Add a constant to every channel.

    The offset is truncated toward zero to a whole step first. Alpha is
    adjusted like the colour channels.

    Args:
        buffer: Source buffer
        value: Offset in channel steps (0 is identity)
    """
    offset = int(value)
    if offset == 0:
        return buffer.copy()

    pixels = buffer.to_array().astype(np.int32)
    return PixelBuffer.from_array(to_channel_bytes(pixels + offset))


def apply_contrast(buffer: PixelBuffer, value: float) -> PixelBuffer:
    """
    Scale every channel's distance from mid-gray.

    out = (c - 128) * value + 128, on R, G, B and A.

    Args:
        buffer: Source buffer
        value: Contrast factor (1 is identity, 0 flattens to gray)
    """
    pixels = buffer.to_array().astype(np.float64)
    adjusted = (pixels - CONTRAST_PIVOT) * float(value) + CONTRAST_PIVOT
    return PixelBuffer.from_array(to_channel_bytes(adjusted))


def apply_saturation(buffer: PixelBuffer, value: float) -> PixelBuffer:
    """
    Scale each colour channel's distance from the pixel's luma.

    luma = 0.299R + 0.587G + 0.114B
    out  = luma + (c - luma) * value

    Args:
        buffer: Source buffer
        value: 0 desaturates to gray, 1 is identity, > 1 boosts saturation
    """
    value = float(value)
    pixels = buffer.to_array()
    rgb = pixels[..., :3].astype(np.float64)
    luma = rgb @ np.array(LUMA_WEIGHTS, dtype=np.float64)

    # Same as luma + (c - luma) * value, but exact for value == 1
    adjusted = rgb * value + luma[..., np.newaxis] * (1.0 - value)
    pixels[..., :3] = to_channel_bytes(adjusted)
    return PixelBuffer.from_array(pixels)


def hue_rotation_matrix(degrees: float) -> np.ndarray:
    """
    Build the luminance-preserving hue rotation matrix.

    The coefficients are those of the SVG feColorMatrix 'hueRotate' type.
    """
    angle = math.radians(degrees)
    cos_v = math.cos(angle)
    sin_v = math.sin(angle)

    return np.array(
        [
            [0.213 + cos_v * 0.787 - sin_v * 0.213,
             0.715 - cos_v * 0.715 - sin_v * 0.715,
             0.072 - cos_v * 0.072 + sin_v * 0.928],
            [0.213 - cos_v * 0.213 + sin_v * 0.143,
             0.715 + cos_v * 0.285 + sin_v * 0.140,
             0.072 - cos_v * 0.072 - sin_v * 0.283],
            [0.213 - cos_v * 0.213 - sin_v * 0.787,
             0.715 - cos_v * 0.715 + sin_v * 0.715,
             0.072 + cos_v * 0.928 + sin_v * 0.072],
        ],
        dtype=np.float64,
    )


def apply_hue_rotate(buffer: PixelBuffer, degrees: float) -> PixelBuffer:
    """
    Rotate the hue of every pixel.

    Args:
        buffer: Source buffer
        degrees: Rotation angle; whole turns are identity
    """
    if float(degrees) % 360.0 == 0.0:
        return buffer.copy()
    return _apply_rgb_matrix(buffer, hue_rotation_matrix(degrees))
