"""
Image loading for Pixel Pipeline.

Loads base and overlay images from disk into pixel buffers, mapping the
failure modes onto the pipeline error types.

Functions:
    load_image: Load an image file as an RGBA PixelBuffer
"""

from pathlib import Path
from typing import Union

from PP_Libs.errors import DecodeError, PipelineIOError
from PP_Libs.ImageEditingLib.image_models import PixelBuffer
from PP_Libs.pillow_compat import Image, UnidentifiedImageError


def load_image(file_path: Union[str, Path]) -> PixelBuffer:
    """
    Load an image from disk.

    The first frame is used for animated formats. The result is always RGBA.

    Args:
        file_path: Path to the image file

    Returns:
        PixelBuffer holding the decoded image

    Raises:
        PipelineIOError: If the file is missing, not a file, or unreadable
        DecodeError: If the file is not a supported or valid image
    """
    path = Path(file_path)

    if not path.exists():
        raise PipelineIOError(f"Image file not found: {path}")

    if not path.is_file():
        raise PipelineIOError(f"Path is not a file: {path}")

    try:
        with Image.open(path) as img:
            img.load()
            return PixelBuffer(img.convert("RGBA"))
    except UnidentifiedImageError as e:
        raise DecodeError(f"Unsupported or corrupt image {path}: {e}") from e
    except OSError as e:
        # Pillow reports truncated data as OSError without an errno
        if e.errno is None:
            raise DecodeError(f"Failed to decode image {path}: {e}") from e
        raise PipelineIOError(f"Failed to read image {path}: {e}") from e
