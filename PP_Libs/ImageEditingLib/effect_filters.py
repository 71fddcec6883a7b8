"""
Spatial and stochastic effect filters.

Functions:
    apply_grain: Monochrome film grain from an injected random generator
    apply_double_vision: Blend an offset ghost copy of the image over itself
    apply_vignette: Darken pixels with distance from the canvas centre
"""

from typing import Optional

import numpy as np

from PP_Libs.ImageEditingLib.image_models import PixelBuffer, to_channel_bytes


def apply_grain(
    buffer: PixelBuffer,
    intensity: float,
    rng: Optional[np.random.Generator] = None,
) -> PixelBuffer:
    """
    Add monochrome noise.

    One sample is drawn per pixel from [-0.5, 0.5), scaled by
    intensity * 255 and added to R, G and B alike. Alpha is untouched.

    Args:
        buffer: Source buffer
        intensity: Noise strength (0 adds nothing, 1 spans the full range)
        rng: Random generator; pass a seeded one for reproducible output.
             Defaults to a fresh numpy default_rng().
    """
    if rng is None:
        rng = np.random.default_rng()

    pixels = buffer.to_array()
    noise = (rng.random((buffer.height, buffer.width)) - 0.5) * float(intensity) * 255.0

    rgb = pixels[..., :3].astype(np.float64) + noise[..., np.newaxis]
    pixels[..., :3] = to_channel_bytes(rgb)
    return PixelBuffer.from_array(pixels)


def apply_double_vision(
    buffer: PixelBuffer,
    offset_x: int,
    offset_y: int,
    opacity: float,
) -> PixelBuffer:
    """
    Overlay a shifted ghost of the image.

    Each destination pixel (x, y) is blended with the original pixel at
    (x + offset_x, y + offset_y): out = current * (1 - opacity) + ghost * opacity.
    Destination pixels whose source lies outside the canvas keep their value.
    Only R, G and B are blended.

    Args:
        buffer: Source buffer (read as an untouched snapshot)
        offset_x: Horizontal sampling offset
        offset_y: Vertical sampling offset
        opacity: Ghost weight
    """
    original = buffer.to_array()
    result = original.copy()
    height, width = original.shape[:2]

    # Destination rectangle whose sources fall inside the canvas
    dx0 = max(0, -offset_x)
    dy0 = max(0, -offset_y)
    dx1 = min(width, width - offset_x)
    dy1 = min(height, height - offset_y)
    if dx0 >= dx1 or dy0 >= dy1:
        return buffer.copy()

    opacity = float(opacity)
    current = original[dy0:dy1, dx0:dx1, :3].astype(np.float64)
    ghost = original[dy0 + offset_y:dy1 + offset_y, dx0 + offset_x:dx1 + offset_x, :3].astype(np.float64)

    result[dy0:dy1, dx0:dx1, :3] = to_channel_bytes(current * (1.0 - opacity) + ghost * opacity)
    return PixelBuffer.from_array(result)


def apply_vignette(buffer: PixelBuffer, intensity: float) -> PixelBuffer:
    """
    Darken towards the corners.

    factor = 1 - (distance_to_centre / distance_centre_to_corner) * intensity
    R, G and B are multiplied by the factor and clamped, so intensities
    above 1 saturate to black at the corners instead of wrapping.

    Args:
        buffer: Source buffer
        intensity: 0 is identity, 1 turns the corners black
    """
    pixels = buffer.to_array()
    height, width = pixels.shape[:2]

    center_x = width / 2.0
    center_y = height / 2.0
    max_dist = np.hypot(center_x, center_y)

    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    dist = np.hypot(center_x - xs, center_y - ys)
    factor = 1.0 - (dist / max_dist) * float(intensity)

    rgb = pixels[..., :3].astype(np.float64) * factor[..., np.newaxis]
    pixels[..., :3] = to_channel_bytes(rgb)
    return PixelBuffer.from_array(pixels)
