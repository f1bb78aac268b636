"""Pytest configuration and fixtures."""

import os
import pytest
import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Render without a display server
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

WHITE = 0xFFFFFFFF


@pytest.fixture(scope="session")
def qapp():
    """Create a QApplication for tests that need it."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])

    yield app


@pytest.fixture
def source_image(qapp):
    """An opaque white 80x60 ARGB32 image."""
    from PyQt6.QtGui import QImage

    image = QImage(80, 60, QImage.Format.Format_ARGB32)
    image.fill(WHITE)
    return image


@pytest.fixture
def pattern_image(qapp):
    """An 80x60 ARGB32 image with a distinct colour per pixel."""
    from PyQt6.QtGui import QImage

    image = QImage(80, 60, QImage.Format.Format_ARGB32)
    for y in range(image.height()):
        for x in range(image.width()):
            image.setPixel(x, y, 0xFF000000 | (x * 3 << 16) | (y * 4 << 8) | 0x40)
    return image


@pytest.fixture
def sample_png_file(tmp_path, pattern_image):
    """Write the pattern image to a PNG file."""
    png_path = tmp_path / "sample.png"
    assert pattern_image.save(str(png_path), "PNG")
    return png_path


@pytest.fixture
def sample_config_yaml(tmp_path):
    """Create a sample editor configuration file."""
    yaml_path = tmp_path / "region_marker.yaml"
    yaml_path.write_text(
        "brushSize: 40\n"
        "maxScale: 8.0\n"
        "markerColor: '#00FF00'\n"
        "panModifier: shift\n"
    )
    return yaml_path
