"""Normalize image-like sources into RGBA pixel buffers."""

import logging
from typing import Any, Optional, Protocol, Tuple

import numpy as np
from PIL import Image

from .errors import CrossOriginError, InvalidSourceError, ResourceLimitError
from .models import PixelBuffer

LOG = logging.getLogger(__name__)

# Ceilings applied before any surface is allocated
MAX_DIMENSION = 10000
MAX_PIXELS = 25000000  # 5000x5000

CORS_MESSAGE = (
    "Cannot extract pixel data from cross-origin image. "
    'Ensure the image has proper CORS headers (crossOrigin="anonymous") '
    "or use a same-origin image."
)


class SurfaceProvider(Protocol):
    """Drawing and readback capability for non-buffer sources."""

    def size_of(self, source: Any) -> Tuple[int, int]:
        """Return the natural (width, height) of a source in pixels."""
        ...

    def draw(self, source: Any, width: int, height: int) -> PixelBuffer:
        """Draw the source onto a width x height surface and read it back."""
        ...


class PillowSurfaceProvider:
    """Surface provider backed by Pillow.

    Accepts decoded ``PIL.Image.Image`` bitmaps and numpy frames shaped
    (H, W), (H, W, 3) or (H, W, 4) in RGB(A) channel order.
    """

    resample = Image.Resampling.BILINEAR

    def size_of(self, source):
        if isinstance(source, Image.Image):
            return source.size
        if isinstance(source, np.ndarray):
            if source.ndim not in (2, 3) or (source.ndim == 3 and source.shape[2] not in (3, 4)):
                raise InvalidSourceError(
                    f"Unsupported frame shape {source.shape}; expected HxW, HxWx3 or HxWx4"
                )
            return source.shape[1], source.shape[0]
        raise InvalidSourceError(f"Unsupported image source: {type(source).__name__}")

    def draw(self, source, width, height):
        img = self._to_image(source)
        if img.mode != "RGBA":
            img = img.convert("RGBA")
        if img.size != (width, height):
            LOG.debug("Resampling %dx%d -> %dx%d", img.width, img.height, width, height)
            img = img.resize((width, height), resample=self.resample)
        return PixelBuffer.from_image(img)

    @staticmethod
    def _to_image(source) -> Image.Image:
        if isinstance(source, Image.Image):
            return source
        if isinstance(source, np.ndarray):
            return Image.fromarray(np.clip(source, 0, 255).astype(np.uint8))
        raise InvalidSourceError(f"Unsupported image source: {type(source).__name__}")


DEFAULT_PROVIDER = PillowSurfaceProvider()


def check_dimensions(width: int, height: int) -> None:
    """Raise ResourceLimitError if a surface of this size would be too large."""
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise ResourceLimitError(f"Dimension exceeds maximum allowed ({MAX_DIMENSION})")
    if width * height > MAX_PIXELS:
        raise ResourceLimitError(f"Total pixel count exceeds maximum allowed ({MAX_PIXELS})")


def source_dimensions(
    source, provider: Optional[SurfaceProvider] = None
) -> Tuple[int, int]:
    """Natural pixel size of a source; zero on either side is an error."""
    if isinstance(source, PixelBuffer):
        width, height = source.width, source.height
    else:
        width, height = (provider or DEFAULT_PROVIDER).size_of(source)

    if width == 0 or height == 0:
        raise InvalidSourceError(f"Source has invalid dimensions ({width}x{height})")
    return width, height


def extract_pixel_data(
    source,
    target_width: Optional[int] = None,
    target_height: Optional[int] = None,
    provider: Optional[SurfaceProvider] = None,
) -> PixelBuffer:
    """
    Produce an RGBA buffer for a source, resized to the target if given.

    A PixelBuffer is returned unchanged; resizing one is left to the
    caller (supply a drawable source instead).

    Raises:
        InvalidSourceError: zero-sized or unsupported source.
        ResourceLimitError: target surface exceeds the ceilings.
        CrossOriginError: the provider refused pixel readback.
    """
    if isinstance(source, PixelBuffer):
        source_dimensions(source)
        # The buffer passes through as-is, but the grid sampled from it is
        # still bounded by the same ceilings.
        check_dimensions(target_width or 0, target_height or 0)
        return source

    provider = provider or DEFAULT_PROVIDER
    width, height = source_dimensions(source, provider)
    final_width = target_width if target_width is not None else width
    final_height = target_height if target_height is not None else height
    check_dimensions(final_width, final_height)

    try:
        return provider.draw(source, final_width, final_height)
    except CrossOriginError:
        raise
    except PermissionError as exc:
        raise CrossOriginError(CORS_MESSAGE) from exc
