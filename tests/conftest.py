import pytest
import numpy as np

from image_fixer.processing.raster import RasterBuffer


@pytest.fixture
def sample_image_rgba():
    """Returns a 100x100 RGBA buffer with four colour quadrants and varying alpha."""
    img = np.zeros((100, 100, 4), dtype=np.uint8)
    img[:50, :50, :3] = [255, 0, 0]    # Red quadrant
    img[:50, 50:, :3] = [0, 255, 0]    # Green quadrant
    img[50:, :50, :3] = [0, 0, 255]    # Blue quadrant
    img[50:, 50:, :3] = [255, 255, 0]  # Yellow quadrant
    img[..., 3] = np.arange(100, dtype=np.uint8)[:, None] + 100  # Alpha 100..199 by row
    return RasterBuffer.from_array(img)


@pytest.fixture
def gradient_image_rgba():
    """Returns a 64x32 RGBA buffer with a muted, low-contrast colour gradient."""
    x = np.linspace(60, 180, 64)
    y = np.linspace(80, 140, 32)
    img = np.zeros((32, 64, 4), dtype=np.uint8)
    img[..., 0] = np.round(x[None, :]).astype(np.uint8)
    img[..., 1] = np.round(y[:, None]).astype(np.uint8)
    img[..., 2] = np.round((x[None, :] + y[:, None]) / 2).astype(np.uint8)
    img[..., 3] = 200
    return RasterBuffer.from_array(img)


@pytest.fixture
def uniform_image():
    """Returns a 10x8 buffer where every pixel is (120, 80, 40, 255)."""
    return RasterBuffer.blank(10, 8, (120, 80, 40, 255))


@pytest.fixture
def rng():
    """Seeded random generator for repeatable noise."""
    return np.random.default_rng(1234)
