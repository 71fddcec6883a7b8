"""
Image data models for Pixel Pipeline.

This module defines the pixel buffer every operation reads and writes, and
the colour helpers shared by the operation library.

Classes:
    PixelBuffer: Width x height grid of RGBA 8-bit samples

Functions:
    parse_color: Parse a hex colour string into an RGBA tuple
    to_channel_bytes: Clamp float channel values and narrow them to uint8

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
"""

import re
from dataclasses import dataclass
from typing import Any, List, Tuple

import numpy as np

from PP_Libs.constants import BUFFER_MODE, CHANNEL_MAX, CHANNEL_MIN
from PP_Libs.errors import InvalidParameterError
from PP_Libs.pillow_compat import Image

RgbaColor = Tuple[int, int, int, int]

_HEX_COLOR_PATTERN = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


@dataclass
class PixelBuffer:
    """RGBA pixel grid, row-major with the origin at the top-left.

    The buffer is backed by a Pillow image in RGBA mode. Images in any other
    mode are converted on construction.

    Attributes:
        image: Backing PIL Image (always RGBA)
    """
    image: Any

    def __post_init__(self):
        if not hasattr(self.image, "mode"):
            raise TypeError(f"Expected PIL Image, got {type(self.image)}")
        if self.image.mode != BUFFER_MODE:
            self.image = self.image.convert(BUFFER_MODE)

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    @classmethod
    def new(cls, width: int, height: int, color: RgbaColor = (0, 0, 0, 0)) -> "PixelBuffer":
        """Create a buffer filled with a single colour."""
        if width <= 0 or height <= 0:
            raise InvalidParameterError(
                f"Buffer dimensions must be positive, got {width}x{height}"
            )
        return cls(Image.new(BUFFER_MODE, (width, height), tuple(color)))

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Create a buffer from a (height, width, 4) uint8 array."""
        if array.ndim != 3 or array.shape[2] != 4:
            raise ValueError(f"Expected array of shape (H, W, 4), got {array.shape}")
        if array.dtype != np.uint8:
            array = to_channel_bytes(array)
        return cls(Image.fromarray(np.ascontiguousarray(array)))

    def to_array(self) -> np.ndarray:
        """Return a writable (height, width, 4) uint8 copy of the samples."""
        return np.array(self.image, dtype=np.uint8)

    def samples(self) -> List[RgbaColor]:
        """Return all samples in row-major order."""
        return list(self.image.getdata())

    def get_pixel(self, x: int, y: int) -> RgbaColor:
        return self.image.getpixel((x, y))

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.image.copy())

    def tobytes(self) -> bytes:
        return self.image.tobytes()


def to_channel_bytes(values: np.ndarray) -> np.ndarray:
    """
    Narrow float channel values to uint8.

    Values are clamped to [0, 255] first and then truncated toward zero,
    so out-of-range results saturate instead of wrapping.

    Args:
        values: Array of channel values (any numeric dtype)

    Returns:
        uint8 array of the same shape
    """
    clamped = np.clip(values, CHANNEL_MIN, CHANNEL_MAX)
    return np.trunc(clamped).astype(np.uint8)


def parse_color(value: str) -> RgbaColor:
    """
    Parse a hex colour string.

    Accepts 6 digits (RGB, alpha 255) or 8 digits (RGBA), with an optional
    leading '#'.

    Args:
        value: Colour string such as "#ff0000" or "00ff0080"

    Returns:
        RGBA tuple

    Raises:
        InvalidParameterError: If the string is not a 6 or 8 digit hex colour
    """
    if not isinstance(value, str):
        raise InvalidParameterError(f"Color must be a string, got {type(value).__name__}")

    match = _HEX_COLOR_PATTERN.match(value.strip())
    if match is None:
        raise InvalidParameterError(
            f"Invalid color format: {value!r} (expected #RRGGBB or #RRGGBBAA)"
        )

    digits = match.group(1)
    r = int(digits[0:2], 16)
    g = int(digits[2:4], 16)
    b = int(digits[4:6], 16)
    a = int(digits[6:8], 16) if len(digits) == 8 else 255
    return (r, g, b, a)
