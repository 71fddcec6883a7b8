"""
Blur Filter Operations.

Gaussian blur delegates to Pillow's separable GaussianBlur filter. Each of
the four RGBA channels is blurred independently (straight alpha).

Example:
    >>> buffer = load_image("photo.jpg")
    >>> blurred = apply_gaussian_blur(buffer, radius=3.5)
"""

from typing import Any

from PP_Libs.errors import InvalidParameterError
from PP_Libs.ImageEditingLib.image_models import PixelBuffer
from PP_Libs.pillow_compat import ImageFilter


def gaussian_blur_image(image: Any, radius: float) -> Any:
    """
    Apply Gaussian blur to a PIL Image.

    Args:
        image: PIL Image
        radius: Standard deviation of the kernel in pixels (>= 0).
                0 returns an unchanged copy.

    Returns:
        Blurred PIL Image (same mode as input)

    Raises:
        InvalidParameterError: If radius is negative
        TypeError: If image is not a PIL Image
    """
    if not hasattr(image, "filter"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")

    if radius < 0:
        raise InvalidParameterError(f"blur radius must be >= 0, got {radius}")

    if radius == 0:
        return image.copy()

    return image.filter(ImageFilter.GaussianBlur(radius=float(radius)))


def apply_gaussian_blur(buffer: PixelBuffer, radius: float) -> PixelBuffer:
    """Gaussian-blur a pixel buffer; see gaussian_blur_image()."""
    return PixelBuffer(gaussian_blur_image(buffer.image, radius))
