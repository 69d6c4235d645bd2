"""Grid geometry, per-cell colour averaging, and luminance-to-glyph mapping."""

import math
from typing import Optional, Tuple

import numpy as np

from .models import CellColor, PixelBuffer

# Returned for cells whose pixel rectangle holds no in-bounds pixels
EMPTY_CELL = CellColor(0, 0, 0, 255)

# -----------------------------
# Dimensions
# -----------------------------


def calculate_dimensions(
    source_width: int,
    source_height: int,
    target_width: Optional[int] = None,
    target_height: Optional[int] = None,
    aspect_ratio: float = 0.55,
) -> Tuple[int, int]:
    """
    Derive the character grid size for a source image.

    A non-zero target width wins over a target height; with neither, the
    grid is at most 100 columns wide. The free side is scaled by
    ``aspect_ratio`` to compensate for glyph cells being taller than wide.

    Returns:
        (width, height) in cells.
    """
    if target_width:
        height = math.floor(source_height / source_width * target_width * aspect_ratio)
        return target_width, height

    if target_height:
        width = math.floor(source_width / source_height * target_height / aspect_ratio)
        return width, target_height

    width = min(100, source_width)
    height = math.floor(source_height / source_width * width * aspect_ratio)
    return width, height


# -----------------------------
# Cell sampling
# -----------------------------


def cell_bounds(index: int, cell_size: float) -> Tuple[int, int]:
    """Half-open pixel span [start, end) covered by one grid cell."""
    return math.floor(index * cell_size), math.floor((index + 1) * cell_size)


def sample_cell_color(
    buffer: PixelBuffer, grid_x: int, grid_y: int, grid_width: int, grid_height: int
) -> CellColor:
    """Floor-averaged RGBA of the pixels mapped to one grid cell."""
    cell_width = buffer.width / grid_width
    cell_height = buffer.height / grid_height
    x0, x1 = cell_bounds(grid_x, cell_width)
    y0, y1 = cell_bounds(grid_y, cell_height)

    # Slicing clips the rectangle to the buffer
    region = buffer.to_array()[y0:y1, x0:x1]
    count = region.shape[0] * region.shape[1]
    if count == 0:
        return EMPTY_CELL

    r, g, b, a = (int(v) // count for v in region.sum(axis=(0, 1), dtype=np.int64))
    return CellColor(r, g, b, a)


def _grid_edges(pixels: int, cells: int) -> np.ndarray:
    edges = np.floor(np.arange(cells + 1, dtype=np.float64) * (pixels / cells))
    return np.clip(edges, 0, pixels).astype(np.intp)


def sample_grid_colors(
    buffer: PixelBuffer, grid_width: int, grid_height: int
) -> np.ndarray:
    """
    Average every cell at once.

    Same result as calling sample_cell_color for each cell. Each band of
    rows is collapsed to one int64 row before the column spans are summed
    with ``np.add.reduceat``, so memory stays proportional to the buffer
    width rather than its area.

    Returns:
        int64 array of shape (grid_height, grid_width, 4).
    """
    arr = buffer.to_array()
    xs = _grid_edges(buffer.width, grid_width)
    ys = _grid_edges(buffer.height, grid_height)

    sums = np.zeros((grid_height, grid_width, 4), dtype=np.int64)
    if buffer.width and grid_width:
        starts = xs[:-1]
        for gy in range(grid_height):
            band = arr[ys[gy]:ys[gy + 1]].sum(axis=0, dtype=np.int64)
            sums[gy] = np.add.reduceat(band, starts, axis=0)

    # reduceat yields the element itself for an empty span; counts mask it
    counts = (np.diff(ys)[:, None] * np.diff(xs)[None, :])[..., None]

    colors = np.empty_like(sums)
    np.floor_divide(sums, counts, out=colors, where=counts > 0)
    colors[(counts == 0)[..., 0]] = (EMPTY_CELL.r, EMPTY_CELL.g, EMPTY_CELL.b, EMPTY_CELL.a)
    return colors


# -----------------------------
# Luminance
# -----------------------------


def calculate_luminance(r: int, g: int, b: int) -> float:
    """ITU-R BT.601 luma: 0.299 R + 0.587 G + 0.114 B."""
    # Integer weights keep pure white at exactly 255.0
    return (299 * r + 587 * g + 114 * b) / 1000


def luminance_to_char(luminance: float, charset: str, inverted: bool = False) -> str:
    """Pick the glyph for a 0-255 luminance; index 0 is the darkest glyph."""
    if inverted:
        normalized = (255 - luminance) / 255
    else:
        normalized = luminance / 255

    last = len(charset) - 1
    index = math.floor(normalized * last)
    return charset[max(0, min(last, index))]


def rgb_to_css(r: int, g: int, b: int, a: int = 255) -> str:
    """``rgba(...)`` string with every channel clamped to 0-255."""
    r, g, b, a = (max(0, min(255, math.floor(v))) for v in (r, g, b, a))
    return f"rgba({r},{g},{b},{a / 255:.2f})"
