"""
Text rendering for Pixel Pipeline.

Draws a line of text with a TrueType/OpenType font. Up to three layers are
composited back to front:

1. Shadow: the glyphs offset by (offset_x, offset_y), optionally Gaussian-blurred
2. Stroke: the glyph outline widened by the stroke width
3. Fill: the glyphs themselves

Each layer is rendered as a coverage mask and turned into a straight-alpha
RGBA layer of a single colour, then alpha-composited onto the buffer.
(x, y) is the left/ascender origin of the text.

Example:
    >>> result = render_text(
    ...     buffer, "Hello", "fonts/Inter.ttf", 48, "#ffffff", 20, 20,
    ...     stroke=TextStroke(color="#000000", width=2),
    ... )
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Tuple, Union

from PP_Libs.constants import MAX_STROKE_WIDTH, TEXT_ANCHOR
from PP_Libs.errors import DecodeError, InvalidParameterError, PipelineIOError
from PP_Libs.ImageEditingLib.blur_filter import gaussian_blur_image
from PP_Libs.ImageEditingLib.image_models import PixelBuffer, RgbaColor, parse_color
from PP_Libs.pillow_compat import Image, ImageDraw, ImageFont


@dataclass(frozen=True)
class TextStroke:
    """Outline drawn around the glyphs.

    Attributes:
        color: Hex colour string
        width: Outline width in pixels (0-256, rounded to whole pixels)
    """
    color: str
    width: float


@dataclass(frozen=True)
class TextShadow:
    """Drop shadow drawn behind the glyphs.

    Attributes:
        color: Hex colour string
        blur: Gaussian blur radius applied to the shadow (0 = hard shadow)
        offset_x: Horizontal shadow offset in pixels
        offset_y: Vertical shadow offset in pixels
    """
    color: str
    blur: float
    offset_x: int
    offset_y: int


def load_font(font_path: Union[str, Path], size: float) -> Any:
    """
    Load a font file at the given size.

    Raises:
        InvalidParameterError: If size is not positive
        PipelineIOError: If the font file does not exist
        DecodeError: If the file is not a usable font
    """
    if size <= 0:
        raise InvalidParameterError(f"font size must be > 0, got {size}")

    path = Path(font_path)
    if not path.is_file():
        raise PipelineIOError(f"Font file not found: {path}")

    try:
        return ImageFont.truetype(str(path), size=size)
    except OSError as e:
        raise DecodeError(f"Failed to load font {path}: {e}") from e


def _stroke_pixels(stroke: TextStroke) -> int:
    width = float(stroke.width)
    if width < 0 or width > MAX_STROKE_WIDTH:
        raise InvalidParameterError(
            f"stroke width must be 0-{MAX_STROKE_WIDTH}, got {stroke.width}"
        )
    return int(round(width))


def _glyph_mask(
    size: Tuple[int, int],
    content: str,
    font: Any,
    origin: Tuple[int, int],
    stroke_width: int = 0,
) -> Any:
    """Render glyph coverage (0-255) into an L-mode mask."""
    mask = Image.new("L", size, 0)
    draw = ImageDraw.Draw(mask)
    draw.text(
        origin,
        content,
        fill=255,
        font=font,
        anchor=TEXT_ANCHOR,
        stroke_width=stroke_width,
        stroke_fill=255,
    )
    return mask


def _colored_layer(mask: Any, color: RgbaColor) -> Any:
    """Turn a coverage mask into a single-colour straight-alpha RGBA layer."""
    r, g, b, a = color
    layer = Image.new("RGBA", mask.size, (r, g, b, 0))
    if a == 255:
        alpha = mask
    else:
        alpha = mask.point(lambda v: v * a // 255)
    layer.putalpha(alpha)
    return layer


def render_text(
    buffer: PixelBuffer,
    content: str,
    font_path: Union[str, Path],
    size: float,
    color: str,
    x: int,
    y: int,
    stroke: Optional[TextStroke] = None,
    shadow: Optional[TextShadow] = None,
) -> PixelBuffer:
    """
    Draw text onto a buffer.

    Args:
        buffer: Buffer to draw onto (not modified)
        content: Text to draw; empty text leaves the buffer unchanged
        font_path: Path to a TrueType/OpenType font file
        size: Font size in pixels (> 0)
        color: Fill colour as a hex string
        x: Left edge of the text origin
        y: Ascender line of the text origin
        stroke: Optional outline
        shadow: Optional drop shadow

    Returns:
        New PixelBuffer with the text drawn

    Raises:
        InvalidParameterError: If a colour, the size or the stroke width is invalid
        PipelineIOError: If the font file does not exist
        DecodeError: If the font file cannot be loaded
    """
    fill_color = parse_color(color)
    stroke_color = parse_color(stroke.color) if stroke is not None else None
    shadow_color = parse_color(shadow.color) if shadow is not None else None
    stroke_width = _stroke_pixels(stroke) if stroke is not None else 0
    if shadow is not None and shadow.blur < 0:
        raise InvalidParameterError(f"shadow blur must be >= 0, got {shadow.blur}")

    font = load_font(font_path, size)

    if not content:
        return buffer.copy()

    result = buffer.image.copy()
    canvas_size = result.size

    if shadow is not None:
        shadow_mask = _glyph_mask(
            canvas_size, content, font, (x + shadow.offset_x, y + shadow.offset_y)
        )
        if shadow.blur > 0:
            shadow_mask = gaussian_blur_image(shadow_mask, shadow.blur)
        result = Image.alpha_composite(result, _colored_layer(shadow_mask, shadow_color))

    if stroke is not None and stroke_width > 0:
        stroke_mask = _glyph_mask(canvas_size, content, font, (x, y), stroke_width)
        result = Image.alpha_composite(result, _colored_layer(stroke_mask, stroke_color))

    fill_mask = _glyph_mask(canvas_size, content, font, (x, y))
    result = Image.alpha_composite(result, _colored_layer(fill_mask, fill_color))

    return PixelBuffer(result)
