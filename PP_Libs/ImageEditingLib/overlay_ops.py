"""
Overlay Compositing for Pixel Pipeline.

Composites a second image onto the working buffer at a given top-left
position. Overlay pixels that fall outside the base canvas are skipped; the
canvas never grows.

Two behaviours are defined:
- No opacity: straight overlay, every overlay pixel with alpha > 0 replaces
  the base pixel.
- With opacity: each overlay pixel with alpha > 0 is blended with
  alpha = (overlay_alpha / 255) * opacity, per channel (R, G, B and A):
  result = base * (1 - alpha) + overlay * alpha

Example:
    >>> base = PixelBuffer.new(100, 100, (255, 0, 0, 255))
    >>> logo = PixelBuffer.new(20, 20, (0, 0, 255, 255))
    >>> result = OverlayCompositor.composite(base, logo, x=10, y=10, opacity=0.5)
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np

from PP_Libs.constants import BLEND_MODE_NORMAL, SUPPORTED_BLEND_MODES
from PP_Libs.errors import InvalidParameterError
from PP_Libs.ImageEditingLib.image_io import load_image
from PP_Libs.ImageEditingLib.image_models import PixelBuffer, to_channel_bytes

logger = logging.getLogger(__name__)

# (base_x0, base_y0, base_x1, base_y1, overlay_x0, overlay_y0)
Region = Tuple[int, int, int, int, int, int]


class OverlayCompositor:
    """Handles placing one image on top of another."""

    @staticmethod
    def composite(
        base: PixelBuffer,
        overlay: PixelBuffer,
        x: int,
        y: int,
        opacity: Optional[float] = None,
        blend_mode: Optional[str] = None,
    ) -> PixelBuffer:
        """
        Composite overlay onto base with its top-left corner at (x, y).

        Args:
            base: Buffer to draw onto (not modified)
            overlay: Buffer to draw
            x: Horizontal position of the overlay's left edge (may be negative)
            y: Vertical position of the overlay's top edge (may be negative)
            opacity: Optional opacity in [0, 1]; None selects straight overlay
            blend_mode: Blending mode; every mode composites like 'normal'

        Returns:
            New PixelBuffer with the overlay applied

        Raises:
            InvalidParameterError: If opacity is out of range
        """
        OverlayCompositor._validate(opacity, blend_mode)

        region = OverlayCompositor._visible_region(base.size, overlay.size, x, y)
        if region is None:
            return base.copy()

        bx0, by0, bx1, by1, ox0, oy0 = region
        result = base.to_array()
        overlay_pixels = overlay.to_array()

        dest = result[by0:by1, bx0:bx1]
        src = overlay_pixels[oy0:oy0 + (by1 - by0), ox0:ox0 + (bx1 - bx0)]

        if opacity is None:
            result[by0:by1, bx0:bx1] = OverlayCompositor._replace(dest, src)
        else:
            result[by0:by1, bx0:bx1] = OverlayCompositor._blend(dest, src, float(opacity))

        return PixelBuffer.from_array(result)

    @staticmethod
    def _validate(opacity: Optional[float], blend_mode: Optional[str]) -> None:
        if opacity is not None and not (0.0 <= float(opacity) <= 1.0):
            raise InvalidParameterError(f"opacity must be 0.0-1.0, got {opacity}")

        mode = BLEND_MODE_NORMAL if blend_mode is None else str(blend_mode).lower()
        if mode not in SUPPORTED_BLEND_MODES:
            logger.warning(
                f"blend_mode '{blend_mode}' has no distinct behaviour, using {BLEND_MODE_NORMAL}"
            )

    @staticmethod
    def _visible_region(
        base_size: Tuple[int, int],
        overlay_size: Tuple[int, int],
        x: int,
        y: int,
    ) -> Optional[Region]:
        """Intersect the placed overlay with the base canvas, or None if disjoint."""
        base_w, base_h = base_size
        overlay_w, overlay_h = overlay_size

        bx0 = max(x, 0)
        by0 = max(y, 0)
        bx1 = min(x + overlay_w, base_w)
        by1 = min(y + overlay_h, base_h)

        if bx0 >= bx1 or by0 >= by1:
            return None

        return bx0, by0, bx1, by1, bx0 - x, by0 - y

    @staticmethod
    def _replace(dest: np.ndarray, src: np.ndarray) -> np.ndarray:
        visible = src[..., 3] > 0
        out = dest.copy()
        out[visible] = src[visible]
        return out

    @staticmethod
    def _blend(dest: np.ndarray, src: np.ndarray, opacity: float) -> np.ndarray:
        visible = src[..., 3] > 0
        alpha = (src[..., 3:4].astype(np.float64) / 255.0) * opacity
        blended = dest.astype(np.float64) * (1.0 - alpha) + src.astype(np.float64) * alpha

        out = dest.copy()
        out[visible] = to_channel_bytes(blended)[visible]
        return out


def apply_overlay(
    buffer: PixelBuffer,
    image_path: Union[str, Path],
    x: int,
    y: int,
    opacity: Optional[float] = None,
    blend_mode: Optional[str] = None,
) -> PixelBuffer:
    """
    Load an overlay image from disk and composite it onto buffer.

    Raises:
        PipelineIOError: If the overlay file cannot be read
        DecodeError: If the overlay file is not a valid image
        InvalidParameterError: If opacity is invalid
    """
    # Validate before touching the file system
    OverlayCompositor._validate(opacity, None)
    overlay = load_image(image_path)
    return OverlayCompositor.composite(buffer, overlay, x, y, opacity, blend_mode)
