"""
Pytest configuration and shared fixtures for Pixel Pipeline tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import pytest
from pathlib import Path

from PIL import Image


@pytest.fixture
def temp_output_dir(tmp_path):
    """
    Provide a temporary directory for output files.

    Args:
        tmp_path: Pytest's built-in temporary directory fixture

    Returns:
        Path object pointing to a temporary directory
    """
    return tmp_path


@pytest.fixture
def red_image_path(tmp_path) -> Path:
    """
    Write a 4x4 solid red PNG and return its path.
    """
    path = tmp_path / "red.png"
    Image.new("RGBA", (4, 4), (255, 0, 0, 255)).save(path)
    return path


@pytest.fixture
def sample_rgba_colors():
    """
    Provide a list of sample RGBA color tuples for testing.

    Returns:
        List of (R, G, B, A) tuples with common test colors
    """
    return [
        (255, 0, 0, 255),    # Red
        (0, 255, 0, 255),    # Green
        (0, 0, 255, 255),    # Blue
        (255, 255, 255, 255),  # White
        (0, 0, 0, 255),      # Black
        (128, 128, 128, 255),  # Gray
    ]
