"""
Tests for Output Writing.

Tests cover:
- Output format resolution
- Encoder quality handling
- Directory handling
- Atomic writes and failure cleanup
- Destinations above the working directory
- Permission bits of written files
"""

import io
import os
import stat
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import numpy as np
from PIL import Image

from PP_Libs.errors import EncodeError, PipelineIOError
from PP_Libs.ImageEditingLib.image_models import PixelBuffer
from PP_Libs.PipelineLib.output_writer import (
    ImageCodec,
    OutputWriter,
    codec_from_name,
    encode_buffer,
    get_save_kwargs,
    persist,
    resolve_format,
)
from PP_Libs.PipelineLib.pipeline_config import OutputConfig


class TestResolveFormat(unittest.TestCase):
    """Test codec selection."""

    def test_explicit_format_wins(self):
        cases = [
            ("jpeg", "out.png", ImageCodec.JPEG),
            ("JPG", "out.png", ImageCodec.JPEG),
            ("png", "out.jpg", ImageCodec.PNG),
            ("webp", "out", ImageCodec.WEBP),
            ("tif", "out.bmp", ImageCodec.TIFF),
        ]
        for fmt, destination, expected in cases:
            with self.subTest(format=fmt):
                config = OutputConfig(Path(destination), format=fmt)
                self.assertIs(resolve_format(config), expected)

    def test_inferred_from_extension(self):
        cases = [
            ("photo.jpg", ImageCodec.JPEG),
            ("photo.JPEG", ImageCodec.JPEG),
            ("icon.ico", ImageCodec.ICO),
            ("scan.tiff", ImageCodec.TIFF),
            ("anim.gif", ImageCodec.GIF),
            ("old.bmp", ImageCodec.BMP),
        ]
        for destination, expected in cases:
            with self.subTest(destination=destination):
                self.assertIs(resolve_format(OutputConfig(Path(destination))), expected)

    def test_defaults_to_png(self):
        self.assertIs(resolve_format(OutputConfig(Path("output"))), ImageCodec.PNG)
        self.assertIs(resolve_format(OutputConfig(Path("output.xyz"))), ImageCodec.PNG)

    def test_unknown_format_falls_back_to_extension(self):
        config = OutputConfig(Path("out.bmp"), format="heic")

        with self.assertLogs("PP_Libs.PipelineLib.output_writer", level="WARNING"):
            self.assertIs(resolve_format(config), ImageCodec.BMP)

    def test_codec_from_name(self):
        self.assertIs(codec_from_name(".png"), ImageCodec.PNG)
        self.assertIsNone(codec_from_name(""))
        self.assertIsNone(codec_from_name(None))
        self.assertIsNone(codec_from_name("psd"))


class TestEncodeBuffer(unittest.TestCase):
    """Test in-memory encoding."""

    def setUp(self):
        rng = np.random.default_rng(0)
        pixels = rng.integers(0, 256, size=(48, 48, 4), dtype=np.uint8)
        pixels[..., 3] = 255
        self.noisy = PixelBuffer.from_array(pixels)

    def test_quality_only_for_lossy_formats(self):
        self.assertEqual(get_save_kwargs(ImageCodec.JPEG, 80), {"format": "JPEG", "quality": 80})
        self.assertEqual(get_save_kwargs(ImageCodec.WEBP, 80), {"format": "WEBP", "quality": 80})
        self.assertEqual(get_save_kwargs(ImageCodec.PNG, 80), {"format": "PNG"})
        self.assertEqual(get_save_kwargs(ImageCodec.JPEG), {"format": "JPEG"})

    def test_jpeg_quality_is_honoured(self):
        low = encode_buffer(self.noisy, ImageCodec.JPEG, 10)
        high = encode_buffer(self.noisy, ImageCodec.JPEG, 95)

        self.assertLess(len(low), len(high))

    def test_jpeg_drops_alpha(self):
        data = encode_buffer(PixelBuffer.new(4, 4, (255, 0, 0, 128)), ImageCodec.JPEG)

        with Image.open(io.BytesIO(data)) as img:
            self.assertEqual(img.format, "JPEG")
            self.assertEqual(img.mode, "RGB")

    def test_png_is_lossless(self):
        data = encode_buffer(self.noisy, ImageCodec.PNG)

        with Image.open(io.BytesIO(data)) as img:
            self.assertEqual(img.convert("RGBA").tobytes(), self.noisy.tobytes())

    def test_every_codec_encodes(self):
        buffer = PixelBuffer.new(16, 16, (10, 20, 30, 255))
        for codec in ImageCodec:
            with self.subTest(codec=codec.value):
                data = encode_buffer(buffer, codec, 90)
                with Image.open(io.BytesIO(data)) as img:
                    self.assertEqual(img.format, codec.value)

    def test_codec_failure_raises_encode_error(self):
        buffer = PixelBuffer.new(2, 2, (0, 0, 0, 255))

        with patch.object(Image.Image, "save", side_effect=OSError("encoder broke")):
            with self.assertRaises(EncodeError):
                encode_buffer(buffer, ImageCodec.PNG)


class TestOutputWriter(unittest.TestCase):
    """Test writing files to disk."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.dir = Path(self.temp_dir.name)
        self.buffer = PixelBuffer.new(2, 2, (255, 0, 0, 255))

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_writes_png(self):
        path = OutputWriter().write(self.buffer, OutputConfig(self.dir / "out.png"))

        self.assertEqual(path, (self.dir / "out.png").resolve())
        with Image.open(path) as img:
            self.assertEqual(img.format, "PNG")
            self.assertEqual(img.size, (2, 2))

    def test_explicit_format_overrides_extension(self):
        path = OutputWriter().write(self.buffer, OutputConfig(self.dir / "out.png", format="jpeg"))

        with Image.open(path) as img:
            self.assertEqual(img.format, "JPEG")

    def test_overwrites_existing_file(self):
        destination = self.dir / "out.png"
        destination.write_bytes(b"old")

        OutputWriter().write(self.buffer, OutputConfig(destination))

        with Image.open(destination) as img:
            self.assertEqual(img.format, "PNG")

    def test_no_temporary_files_left(self):
        OutputWriter().write(self.buffer, OutputConfig(self.dir / "out.png"))

        self.assertEqual(os.listdir(self.dir), ["out.png"])

    def test_missing_directory_raises(self):
        destination = self.dir / "nested" / "out.png"

        with self.assertRaises(PipelineIOError):
            OutputWriter().write(self.buffer, OutputConfig(destination))

        self.assertFalse(destination.parent.exists())

    def test_create_directories(self):
        destination = self.dir / "a" / "b" / "out.png"

        path = OutputWriter(create_directories=True).write(self.buffer, OutputConfig(destination))

        self.assertTrue(path.is_file())

    def test_encode_failure_writes_nothing(self):
        destination = self.dir / "out.png"

        with patch.object(Image.Image, "save", side_effect=OSError("encoder broke")):
            with self.assertRaises(EncodeError):
                OutputWriter().write(self.buffer, OutputConfig(destination))

        self.assertEqual(os.listdir(self.dir), [])

    def test_rename_failure_cleans_up(self):
        destination = self.dir / "out.png"

        with patch("PP_Libs.PipelineLib.output_writer.os.replace", side_effect=OSError("denied")):
            with self.assertRaises(PipelineIOError):
                OutputWriter().write(self.buffer, OutputConfig(destination))

        self.assertEqual(os.listdir(self.dir), [])

    def test_rejects_non_buffer(self):
        with self.assertRaises(TypeError):
            OutputWriter().write(Image.new("RGBA", (1, 1)), OutputConfig(self.dir / "out.png"))

    def test_persist(self):
        path = persist(self.buffer, OutputConfig(self.dir / "out.bmp"))

        with Image.open(path) as img:
            self.assertEqual(img.format, "BMP")



class TestOutputDestinations(unittest.TestCase):
    """Test destinations outside the working directory."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.dir = Path(self.temp_dir.name).resolve()
        self.buffer = PixelBuffer.new(2, 2, (0, 255, 0, 255))

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_parent_segment_in_destination(self):
        (self.dir / "work").mkdir()
        destination = self.dir / "work" / ".." / "out.png"

        path = persist(self.buffer, OutputConfig(destination))

        self.assertEqual(path, self.dir / "out.png")
        self.assertTrue(path.is_file())

    def test_relative_destination_above_cwd(self):
        """Test that a ../ destination is written relative to the working directory."""
        (self.dir / "work").mkdir()
        (self.dir / "out").mkdir()
        cwd = os.getcwd()
        os.chdir(self.dir / "work")
        try:
            path = persist(self.buffer, OutputConfig(Path("../out/result.png")))
        finally:
            os.chdir(cwd)

        self.assertEqual(path, self.dir / "out" / "result.png")
        with Image.open(path) as img:
            self.assertEqual(img.size, (2, 2))


@unittest.skipIf(os.name == "nt", "POSIX permission bits")
class TestOutputPermissions(unittest.TestCase):
    """Test permission bits of written files."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.dir = Path(self.temp_dir.name)
        self.buffer = PixelBuffer.new(2, 2, (0, 0, 255, 255))
        self.old_umask = os.umask(0o022)

    def tearDown(self):
        os.umask(self.old_umask)
        self.temp_dir.cleanup()

    def test_new_file_matches_plain_save(self):
        written = persist(self.buffer, OutputConfig(self.dir / "out.png"))
        plain = self.dir / "plain.png"
        self.buffer.image.save(plain)

        self.assertEqual(stat.S_IMODE(written.stat().st_mode), 0o644)
        self.assertEqual(
            stat.S_IMODE(written.stat().st_mode), stat.S_IMODE(plain.stat().st_mode)
        )

    def test_umask_applied(self):
        os.umask(0o077)

        written = persist(self.buffer, OutputConfig(self.dir / "out.png"))

        self.assertEqual(stat.S_IMODE(written.stat().st_mode), 0o600)

    def test_existing_file_mode_kept(self):
        destination = self.dir / "out.png"
        destination.write_bytes(b"old")
        os.chmod(destination, 0o640)

        persist(self.buffer, OutputConfig(destination))

        self.assertEqual(stat.S_IMODE(destination.stat().st_mode), 0o640)
