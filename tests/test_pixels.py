"""Tests for the pixel source adapter."""

import numpy as np
import pytest
from PIL import Image

from ascii_engine.errors import CrossOriginError, InvalidSourceError, ResourceLimitError
from ascii_engine.models import PixelBuffer
from ascii_engine.pixels import (
    MAX_DIMENSION,
    PillowSurfaceProvider,
    check_dimensions,
    extract_pixel_data,
    source_dimensions,
)


class RecordingProvider:
    """Provider that records draw calls and returns a solid buffer."""

    def __init__(self, size=(8, 4), error=None):
        self.size = size
        self.error = error
        self.calls = []

    def size_of(self, source):
        return self.size

    def draw(self, source, width, height):
        self.calls.append((width, height))
        if self.error is not None:
            raise self.error
        return PixelBuffer(width, height, bytes([0, 0, 0, 255]) * (width * height))


class TestPixelBuffer:
    def test_length_must_match_dimensions(self):
        with pytest.raises(InvalidSourceError, match="does not match"):
            PixelBuffer(2, 2, bytes(15))

    def test_negative_dimensions(self):
        with pytest.raises(InvalidSourceError):
            PixelBuffer(-1, 2, b"")

    def test_array_view_shape(self, make_solid):
        arr = make_solid(3, 2, (1, 2, 3, 4)).to_array()
        assert arr.shape == (2, 3, 4)
        assert arr[1, 2].tolist() == [1, 2, 3, 4]

    def test_from_array_requires_rgba(self):
        with pytest.raises(InvalidSourceError):
            PixelBuffer.from_array(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_image_conversion(self):
        img = Image.new("RGB", (3, 2), (10, 20, 30))
        buf = PixelBuffer.from_image(img)
        assert (buf.width, buf.height) == (3, 2)
        assert buf.to_image().getpixel((2, 1)) == (10, 20, 30, 255)


class TestExtractPixelData:
    def test_buffer_passes_through_unchanged(self, make_solid):
        buf = make_solid(4, 4, (1, 2, 3, 255))
        assert extract_pixel_data(buf, 2, 2) is buf

    def test_zero_sized_buffer_is_rejected(self):
        with pytest.raises(InvalidSourceError, match="invalid dimensions"):
            extract_pixel_data(PixelBuffer(0, 0, b""))

    def test_image_is_resized_to_target(self):
        img = Image.new("RGB", (40, 20), (255, 0, 0))
        buf = extract_pixel_data(img, 4, 2)
        assert (buf.width, buf.height) == (4, 2)
        assert np.all(buf.to_array() == [255, 0, 0, 255])

    def test_image_without_target_keeps_size(self):
        img = Image.new("L", (7, 5), 128)
        buf = extract_pixel_data(img)
        assert (buf.width, buf.height) == (7, 5)
        assert buf.to_array()[0, 0].tolist() == [128, 128, 128, 255]

    def test_numpy_frame(self):
        frame = np.full((10, 20, 3), 200, dtype=np.uint8)
        assert source_dimensions(frame) == (20, 10)
        buf = extract_pixel_data(frame, 5, 2)
        assert buf.to_array()[1, 4].tolist() == [200, 200, 200, 255]

    def test_unsupported_frame_shape(self):
        with pytest.raises(InvalidSourceError, match="Unsupported frame shape"):
            extract_pixel_data(np.zeros((2, 2, 2), dtype=np.uint8))

    def test_unsupported_source_type(self):
        with pytest.raises(InvalidSourceError, match="Unsupported image source"):
            extract_pixel_data("photo.png")

    def test_zero_sized_provider_source(self):
        with pytest.raises(InvalidSourceError):
            extract_pixel_data(object(), provider=RecordingProvider(size=(0, 10)))

    def test_dimension_limit_checked_before_drawing(self):
        provider = RecordingProvider()
        with pytest.raises(ResourceLimitError, match="Dimension exceeds maximum allowed"):
            extract_pixel_data(object(), MAX_DIMENSION + 1, 1, provider=provider)
        assert provider.calls == []

    def test_pixel_count_limit(self):
        provider = RecordingProvider()
        with pytest.raises(ResourceLimitError, match="Total pixel count"):
            extract_pixel_data(object(), 6000, 5000, provider=provider)
        assert provider.calls == []

    def test_limit_applies_to_grid_over_raw_buffer(self, make_solid):
        with pytest.raises(ResourceLimitError):
            extract_pixel_data(make_solid(2, 2, (0, 0, 0, 255)), MAX_DIMENSION + 1, 1)

    def test_custom_provider_draws_at_target(self):
        provider = RecordingProvider()
        buf = extract_pixel_data(object(), 3, 2, provider=provider)
        assert provider.calls == [(3, 2)]
        assert (buf.width, buf.height) == (3, 2)

    def test_refused_readback_is_cross_origin_error(self):
        provider = RecordingProvider(error=PermissionError("tainted canvas"))
        with pytest.raises(CrossOriginError, match='crossOrigin="anonymous"') as excinfo:
            extract_pixel_data(object(), 3, 2, provider=provider)
        assert isinstance(excinfo.value.__cause__, PermissionError)


class TestCheckDimensions:
    def test_boundary_is_allowed(self):
        check_dimensions(MAX_DIMENSION, 2500)

    def test_default_provider_rejects_unknown(self):
        with pytest.raises(InvalidSourceError):
            PillowSurfaceProvider().size_of(3.14)
