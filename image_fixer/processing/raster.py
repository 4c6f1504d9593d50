"""
RGBA raster buffer shared by every processing stage.

A RasterBuffer is a width x height grid of pixels, four 8-bit channels per
pixel (R, G, B, A), stored row-major. The pixel data is a NumPy uint8 array
of shape (height, width, 4); its byte length always equals width * height * 4.
"""

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from ..utils.errors import BufferSizeError

CHANNELS = 4

BytesLike = Union[bytes, bytearray, memoryview, np.ndarray]


@dataclass(frozen=True, eq=False)
class RasterBuffer:
    """Row-major RGBA8 pixel grid with fixed dimensions."""
    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise BufferSizeError(f"Negative dimensions {self.width}x{self.height}")
        expected = self.width * self.height * CHANNELS
        pixels = self.pixels
        if not isinstance(pixels, np.ndarray) or pixels.dtype != np.uint8:
            raise BufferSizeError("Pixel data must be a uint8 NumPy array", expected=expected)
        if pixels.shape != (self.height, self.width, CHANNELS):
            raise BufferSizeError(
                f"Pixel data of shape {pixels.shape} does not match {self.width}x{self.height} RGBA",
                expected=expected,
                actual=pixels.size,
            )

    @classmethod
    def from_bytes(cls, data: BytesLike, width: int, height: int) -> "RasterBuffer":
        """
        Wraps row-major RGBA8 bytes. The data is copied, never shared.

        Raises:
            BufferSizeError: if len(data) != width * height * 4.
        """
        flat = np.frombuffer(bytes(data), dtype=np.uint8) if not isinstance(data, np.ndarray) else data.ravel()
        expected = width * height * CHANNELS
        if flat.dtype != np.uint8:
            raise BufferSizeError(f"Expected uint8 data, got {flat.dtype}", expected=expected)
        if width < 0 or height < 0 or flat.size != expected:
            raise BufferSizeError(
                f"Buffer holds {flat.size} bytes but {width}x{height} RGBA needs {expected}",
                expected=expected,
                actual=flat.size,
            )
        return cls(width, height, flat.reshape(height, width, CHANNELS).copy())

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RasterBuffer":
        """Wraps an (h, w, 4) uint8 array. The array is copied."""
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise BufferSizeError(f"Expected an (h, w, 4) array, got shape {array.shape}")
        if array.dtype != np.uint8:
            raise BufferSizeError(f"Expected uint8 pixel data, got {array.dtype}")
        height, width = array.shape[:2]
        return cls(width, height, array.copy())

    @classmethod
    def blank(cls, width: int, height: int, rgba: Sequence[int] = (0, 0, 0, 255)) -> "RasterBuffer":
        """A buffer filled with a single RGBA colour."""
        if width < 0 or height < 0:
            raise BufferSizeError(f"Negative dimensions {width}x{height}")
        pixels = np.empty((height, width, CHANNELS), dtype=np.uint8)
        pixels[...] = np.asarray(rgba, dtype=np.uint8)
        return cls(width, height, pixels)

    @property
    def dimensions(self):
        """(width, height)"""
        return (self.width, self.height)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def nbytes(self) -> int:
        return self.pixels.nbytes

    @property
    def rgb(self) -> np.ndarray:
        """View of the colour channels, shape (h, w, 3)."""
        return self.pixels[..., :3]

    @property
    def alpha(self) -> np.ndarray:
        """View of the alpha channel, shape (h, w)."""
        return self.pixels[..., 3]

    def is_empty(self) -> bool:
        return self.pixel_count == 0

    def to_bytes(self) -> bytes:
        """Row-major RGBA8 bytes."""
        return self.pixels.tobytes()

    def copy(self) -> "RasterBuffer":
        return RasterBuffer(self.width, self.height, self.pixels.copy())

    def with_pixels(self, pixels: np.ndarray) -> "RasterBuffer":
        """A buffer with the same dimensions holding new pixel data."""
        return RasterBuffer(self.width, self.height, pixels)

    def with_rgb(self, rgb: np.ndarray) -> "RasterBuffer":
        """A new buffer combining the given colour channels with this buffer's alpha."""
        pixels = np.empty_like(self.pixels)
        pixels[..., :3] = rgb
        pixels[..., 3] = self.pixels[..., 3]
        return RasterBuffer(self.width, self.height, pixels)

    def same_dimensions(self, other: "RasterBuffer") -> bool:
        return self.width == other.width and self.height == other.height
