"""
Tests for Gaussian Blur.
"""

import unittest

from PIL import Image

from PP_Libs.errors import InvalidParameterError
from PP_Libs.ImageEditingLib.blur_filter import apply_gaussian_blur, gaussian_blur_image
from PP_Libs.ImageEditingLib.image_models import PixelBuffer


class TestGaussianBlurImage(unittest.TestCase):
    """Test blur on PIL images."""

    def test_zero_radius_returns_copy(self):
        image = Image.new("RGBA", (5, 5), (1, 2, 3, 4))

        result = gaussian_blur_image(image, 0)

        self.assertIsNot(result, image)
        self.assertEqual(result.tobytes(), image.tobytes())

    def test_negative_radius_raises(self):
        image = Image.new("RGBA", (5, 5))

        with self.assertRaises(InvalidParameterError):
            gaussian_blur_image(image, -1)

    def test_non_image_raises(self):
        with self.assertRaises(TypeError):
            gaussian_blur_image("not an image", 2)

    def test_mode_preserved(self):
        image = Image.new("L", (5, 5), 100)

        self.assertEqual(gaussian_blur_image(image, 1.5).mode, "L")


class TestApplyGaussianBlur(unittest.TestCase):
    """Test blur on pixel buffers."""

    def test_spreads_single_pixel(self):
        buffer = PixelBuffer.new(9, 9, (0, 0, 0, 255))
        buffer.image.putpixel((4, 4), (255, 255, 255, 255))

        result = apply_gaussian_blur(buffer, 2.0)

        self.assertLess(result.get_pixel(4, 4)[0], 255)
        self.assertGreater(result.get_pixel(5, 4)[0], 0)
        self.assertEqual(result.size, (9, 9))

    def test_solid_color_unchanged(self):
        buffer = PixelBuffer.new(8, 8, (30, 60, 90, 255))

        result = apply_gaussian_blur(buffer, 3.0)

        for pixel in result.samples():
            for channel, expected in zip(pixel, (30, 60, 90, 255)):
                self.assertLessEqual(abs(channel - expected), 1)

    def test_input_not_modified(self):
        buffer = PixelBuffer.new(6, 6, (0, 0, 0, 255))
        buffer.image.putpixel((3, 3), (255, 255, 255, 255))
        before = buffer.tobytes()

        apply_gaussian_blur(buffer, 1.0)

        self.assertEqual(buffer.tobytes(), before)
