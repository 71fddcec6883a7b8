"""
ImageEditingLib - Pixel algorithms for Pixel Pipeline

This module provides the pixel buffer model, image loading, and one
algorithm per pipeline operation (resize, overlay, filters, text).
"""

from PP_Libs.ImageEditingLib.image_models import (
    PixelBuffer,
    RgbaColor,
    parse_color,
    to_channel_bytes,
)
from PP_Libs.ImageEditingLib.image_io import load_image
from PP_Libs.ImageEditingLib.resize_ops import resize_buffer, resolve_resize_filter
from PP_Libs.ImageEditingLib.overlay_ops import OverlayCompositor, apply_overlay
from PP_Libs.ImageEditingLib.blur_filter import apply_gaussian_blur, gaussian_blur_image
from PP_Libs.ImageEditingLib.color_filters import (
    apply_sepia,
    apply_brightness,
    apply_contrast,
    apply_saturation,
    apply_hue_rotate,
)
from PP_Libs.ImageEditingLib.effect_filters import (
    apply_grain,
    apply_double_vision,
    apply_vignette,
)
from PP_Libs.ImageEditingLib.text_render import (
    TextStroke,
    TextShadow,
    load_font,
    render_text,
)

__all__ = [
    "PixelBuffer",
    "RgbaColor",
    "parse_color",
    "to_channel_bytes",
    "load_image",
    "resize_buffer",
    "resolve_resize_filter",
    "OverlayCompositor",
    "apply_overlay",
    "apply_gaussian_blur",
    "gaussian_blur_image",
    "apply_sepia",
    "apply_brightness",
    "apply_contrast",
    "apply_saturation",
    "apply_hue_rotate",
    "apply_grain",
    "apply_double_vision",
    "apply_vignette",
    "TextStroke",
    "TextShadow",
    "load_font",
    "render_text",
]
