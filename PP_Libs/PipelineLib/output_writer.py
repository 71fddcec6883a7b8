"""
Output format resolution and encoding for Pixel Pipeline.

The output codec is chosen from the explicit `format` setting when it names
a known format, otherwise from the destination's file extension, otherwise
PNG. Encoding happens fully in memory before anything touches the
destination, and the bytes are written through a temporary file that is
renamed into place, so a failed run never leaves a partial file.

Supported format names (case-insensitive):
- jpeg, jpg -> JPEG
- png -> PNG
- gif -> GIF
- bmp -> BMP
- ico -> ICO
- tiff, tif -> TIFF
- webp -> WEBP

Classes:
    ImageCodec: Output codecs
    OutputWriter: Encodes buffers and writes them to disk

Functions:
    resolve_format: Choose the codec for an output configuration
    encode_buffer: Encode a buffer to bytes
    persist: Encode and write a buffer to its configured destination
"""

import io
import logging
import os
import stat
import tempfile
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from PP_Libs.constants import (
    DEFAULT_OUTPUT_FORMAT,
    FORMAT_ALIASES,
    QUALITY_FORMATS,
    TEMP_FILE_PREFIX,
)
from PP_Libs.errors import EncodeError, PipelineIOError
from PP_Libs.ImageEditingLib.image_models import PixelBuffer
from PP_Libs.PipelineLib.pipeline_config import OutputConfig

logger = logging.getLogger(__name__)


class ImageCodec(Enum):
    """Output codecs; values are Pillow format names."""
    JPEG = "JPEG"
    PNG = "PNG"
    GIF = "GIF"
    BMP = "BMP"
    ICO = "ICO"
    TIFF = "TIFF"
    WEBP = "WEBP"


def codec_from_name(name: Optional[str]) -> Optional[ImageCodec]:
    """Look up a codec by alias (case-insensitive); None if unknown."""
    if not name:
        return None
    pil_format = FORMAT_ALIASES.get(name.strip().lower().lstrip("."))
    return ImageCodec(pil_format) if pil_format else None


def resolve_format(output_config: OutputConfig) -> ImageCodec:
    """
    Choose the output codec.

    Order: the explicit format setting, then the destination's extension,
    then PNG. An unknown explicit format falls through to the extension.

    Args:
        output_config: Output settings

    Returns:
        The codec to encode with
    """
    codec = codec_from_name(output_config.format)
    if codec is not None:
        return codec

    if output_config.format:
        logger.warning(
            f"Unknown output format '{output_config.format}', "
            f"inferring from destination {output_config.destination}"
        )

    codec = codec_from_name(Path(output_config.destination).suffix)
    if codec is not None:
        return codec

    return ImageCodec(DEFAULT_OUTPUT_FORMAT)


def get_save_kwargs(codec: ImageCodec, quality: Optional[int] = None) -> Dict[str, Any]:
    """Get PIL Image.save() kwargs for a codec."""
    kwargs: Dict[str, Any] = {"format": codec.value}

    if quality is not None and codec.value in QUALITY_FORMATS:
        kwargs["quality"] = int(quality)

    return kwargs


def encode_buffer(
    buffer: PixelBuffer,
    codec: ImageCodec,
    quality: Optional[int] = None,
) -> bytes:
    """
    Encode a buffer in memory.

    JPEG has no alpha channel, so the buffer is flattened to RGB first.

    Raises:
        EncodeError: If the codec cannot encode the image
    """
    image = buffer.image
    if codec is ImageCodec.JPEG:
        image = image.convert("RGB")

    stream = io.BytesIO()
    try:
        image.save(stream, **get_save_kwargs(codec, quality))
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(f"Failed to encode image as {codec.value}: {e}") from e

    return stream.getvalue()


class OutputWriter:
    """Writes encoded images to disk.

    Attributes:
        create_directories: Create missing destination directories (default False)
    """

    def __init__(self, create_directories: bool = False):
        self.create_directories = create_directories

    def write(self, buffer: PixelBuffer, output_config: OutputConfig) -> Path:
        """
        Encode buffer and write it to output_config.destination.

        Returns:
            Path the image was written to

        Raises:
            EncodeError: If encoding fails (nothing is written)
            PipelineIOError: If the destination cannot be written
        """
        if not isinstance(buffer, PixelBuffer):
            raise TypeError(f"Expected PixelBuffer, got {type(buffer)}")

        codec = resolve_format(output_config)
        output_file = Path(output_config.destination).resolve()

        data = encode_buffer(buffer, codec, output_config.quality)

        parent = output_file.parent
        if not parent.is_dir():
            if not self.create_directories:
                raise PipelineIOError(f"Destination directory does not exist: {parent}")
            try:
                parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise PipelineIOError(f"Failed to create directory {parent}: {e}") from e

        self._write_atomic(output_file, data)
        logger.info(f"Wrote {codec.value} image ({len(data)} bytes) to {output_file}")
        return output_file

    @staticmethod
    def _target_mode(output_file: Path) -> int:
        """Permission bits a plain open() would leave on output_file."""
        try:
            return stat.S_IMODE(os.stat(output_file).st_mode)
        except FileNotFoundError:
            # The umask can only be read by setting it
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    @staticmethod
    def _write_atomic(output_file: Path, data: bytes) -> None:
        """Write through a sibling temporary file and rename it into place."""
        temp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=output_file.parent, prefix=TEMP_FILE_PREFIX, delete=False
            ) as handle:
                temp_name = handle.name
                handle.write(data)
            # NamedTemporaryFile creates the file owner-only
            os.chmod(temp_name, OutputWriter._target_mode(output_file))
            os.replace(temp_name, output_file)
        except OSError as e:
            if temp_name is not None and os.path.exists(temp_name):
                os.unlink(temp_name)
            raise PipelineIOError(f"Failed to write image to {output_file}: {e}") from e


def persist(
    buffer: PixelBuffer,
    output_config: OutputConfig,
    create_directories: bool = False,
) -> Path:
    """
    Encode buffer with the resolved codec and write it to its destination.

    Args:
        buffer: Final pipeline buffer
        output_config: Destination and encoding settings
        create_directories: Create a missing destination directory

    Returns:
        Path the image was written to
    """
    return OutputWriter(create_directories=create_directories).write(buffer, output_config)
