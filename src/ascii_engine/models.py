"""Data model shared by the conversion pipeline."""

from dataclasses import dataclass, field
from typing import List, Optional, Union

import numpy as np
from PIL import Image

from .charsets import CharsetPreset
from .errors import InvalidSourceError

# -----------------------------
# Configuration
# -----------------------------


@dataclass(frozen=True)
class AsciiConfig:
    """Generator settings; omitted fields take these defaults."""

    charset: Union[CharsetPreset, str] = CharsetPreset.STANDARD
    inverted: bool = False
    colored: bool = False
    aspect_ratio: float = 0.55  # glyph cells are taller than wide
    width: int = 0  # 0 => derive from source
    height: int = 0  # 0 => derive from source
    optimized: bool = True  # pre-size row containers


@dataclass(frozen=True)
class TextOptions:
    font: str = "Arial"
    font_size: int = 48
    font_weight: Union[str, int] = "normal"
    font_style: str = "normal"
    color: str = "#000000"
    background_color: str = "#ffffff"
    padding: int = 10


# -----------------------------
# Pixels
# -----------------------------


@dataclass(frozen=True)
class PixelBuffer:
    """Raw RGBA pixels, row-major, 4 bytes per pixel."""

    width: int
    height: int
    data: bytes = field(repr=False)

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise InvalidSourceError(
                f"Pixel buffer has negative dimensions ({self.width}x{self.height})"
            )
        expected = self.width * self.height * 4
        if len(self.data) != expected:
            raise InvalidSourceError(
                f"Pixel buffer length {len(self.data)} does not match "
                f"{self.width}x{self.height} RGBA ({expected} bytes)"
            )

    def to_array(self) -> np.ndarray:
        """Read-only (height, width, 4) uint8 view of the buffer."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(
            self.height, self.width, 4
        )

    def to_image(self) -> Image.Image:
        return Image.frombytes("RGBA", (self.width, self.height), bytes(self.data))

    @classmethod
    def from_image(cls, img: Image.Image) -> "PixelBuffer":
        if img.mode != "RGBA":
            img = img.convert("RGBA")
        return cls(img.width, img.height, img.tobytes())

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "PixelBuffer":
        """Build from a (height, width, 4) array of 0-255 values."""
        arr = np.asarray(arr)
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise InvalidSourceError(
                f"Expected an array of shape (height, width, 4), got {arr.shape}"
            )
        arr = np.ascontiguousarray(np.clip(arr, 0, 255).astype(np.uint8))
        return cls(arr.shape[1], arr.shape[0], arr.tobytes())


# -----------------------------
# Output
# -----------------------------


@dataclass(frozen=True)
class CellColor:
    r: int
    g: int
    b: int
    a: int = 255


@dataclass(frozen=True)
class AsciiMetadata:
    width: int
    height: int
    character_count: int
    processing_time: float  # milliseconds
    charset: str
    has_color: bool


@dataclass
class AsciiOutput:
    text: str
    html: str
    characters: List[List[str]]
    colors: Optional[List[List[CellColor]]]
    metadata: AsciiMetadata
