"""Tests for the RGBA raster buffer."""

import numpy as np
import pytest

from image_fixer.processing.raster import RasterBuffer
from image_fixer.utils.errors import BufferSizeError, ProcessingError


class TestConstruction:
    """Tests for building buffers from raw data."""

    def test_from_bytes_row_major(self):
        """Bytes are read row-major, four channels per pixel."""
        data = bytes(range(2 * 3 * 4))
        buf = RasterBuffer.from_bytes(data, width=2, height=3)
        assert buf.dimensions == (2, 3)
        assert buf.pixels.shape == (3, 2, 4)
        # Second pixel of the first row
        assert list(buf.pixels[0, 1]) == [4, 5, 6, 7]
        # First pixel of the second row
        assert list(buf.pixels[1, 0]) == [8, 9, 10, 11]
        assert buf.to_bytes() == data

    def test_from_bytes_accepts_bytearray_and_flat_array(self):
        """bytearray and flat uint8 arrays are accepted like bytes."""
        data = bytearray(16)
        assert RasterBuffer.from_bytes(data, 2, 2).nbytes == 16
        flat = np.arange(16, dtype=np.uint8)
        assert RasterBuffer.from_bytes(flat, 2, 2).to_bytes() == flat.tobytes()

    def test_from_bytes_wrong_length_fails_fast(self):
        """A byte length that is not width*height*4 is a contract violation."""
        with pytest.raises(BufferSizeError) as exc_info:
            RasterBuffer.from_bytes(bytes(15), width=2, height=2)
        assert exc_info.value.expected == 16
        assert exc_info.value.actual == 15

    def test_buffer_size_error_is_value_and_processing_error(self):
        """BufferSizeError can be caught as ValueError or ProcessingError."""
        with pytest.raises(ValueError):
            RasterBuffer.from_bytes(bytes(3), 1, 1)
        with pytest.raises(ProcessingError):
            RasterBuffer.from_bytes(bytes(3), 1, 1)

    def test_mismatched_pixel_shape_rejected(self):
        """Direct construction checks the array shape against the dimensions."""
        with pytest.raises(BufferSizeError):
            RasterBuffer(3, 2, np.zeros((3, 2, 4), dtype=np.uint8))

    def test_non_uint8_rejected(self):
        """Pixel data must be uint8."""
        with pytest.raises(BufferSizeError):
            RasterBuffer.from_array(np.zeros((2, 2, 4), dtype=np.float32))

    def test_three_channel_array_rejected(self):
        """RGB arrays without alpha are not raster buffers."""
        with pytest.raises(BufferSizeError):
            RasterBuffer.from_array(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_from_bytes_copies_data(self):
        """The buffer owns a copy of the source data."""
        source = np.zeros(16, dtype=np.uint8)
        buf = RasterBuffer.from_bytes(source, 2, 2)
        source[:] = 255
        assert buf.pixels.max() == 0

    def test_blank_fills_colour(self):
        """blank() fills every pixel with the given RGBA."""
        buf = RasterBuffer.blank(3, 2, (1, 2, 3, 4))
        assert buf.pixels.shape == (2, 3, 4)
        assert np.all(buf.pixels == np.array([1, 2, 3, 4], dtype=np.uint8))

    def test_zero_size_buffer_is_legal(self):
        """Empty buffers are allowed."""
        buf = RasterBuffer.from_bytes(b"", 0, 5)
        assert buf.is_empty()
        assert buf.nbytes == 0


class TestDerivedBuffers:
    """Tests for copies and siblings."""

    def test_copy_is_independent(self, sample_image_rgba):
        """copy() allocates new pixel storage."""
        dup = sample_image_rgba.copy()
        assert dup is not sample_image_rgba
        assert not np.shares_memory(dup.pixels, sample_image_rgba.pixels)
        assert np.array_equal(dup.pixels, sample_image_rgba.pixels)

    def test_with_rgb_keeps_alpha(self, sample_image_rgba):
        """with_rgb() replaces colour and keeps the original alpha."""
        rgb = np.full((100, 100, 3), 7, dtype=np.uint8)
        out = sample_image_rgba.with_rgb(rgb)
        assert np.all(out.rgb == 7)
        assert np.array_equal(out.alpha, sample_image_rgba.alpha)
        # Source untouched
        assert sample_image_rgba.pixels[0, 0, 0] == 255

    def test_with_pixels_requires_same_dimensions(self, sample_image_rgba):
        """A sibling must have the same dimensions."""
        with pytest.raises(BufferSizeError):
            sample_image_rgba.with_pixels(np.zeros((10, 10, 4), dtype=np.uint8))

    def test_same_dimensions(self, sample_image_rgba, uniform_image):
        assert sample_image_rgba.same_dimensions(sample_image_rgba.copy())
        assert not sample_image_rgba.same_dimensions(uniform_image)
