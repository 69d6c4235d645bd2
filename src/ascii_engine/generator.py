"""Image and text to ASCII art conversion."""

import dataclasses
import logging
import math
import time
from typing import Callable, List, Mapping, Optional

from .charsets import resolve_charset
from .colorize_html import build_html_output, html_cell
from .errors import InvalidParameterError, ResourceLimitError
from .models import AsciiConfig, AsciiMetadata, AsciiOutput, CellColor, PixelBuffer, TextOptions
from .pixels import MAX_DIMENSION, SurfaceProvider, extract_pixel_data, source_dimensions
from .rasterize import render_text_to_pixels
from .sampling import calculate_dimensions, calculate_luminance, luminance_to_char, sample_grid_colors

LOG = logging.getLogger(__name__)

MAX_TOTAL_CHARS = 25000000  # 5000x5000
# Each colored cell becomes a ~50 byte <span>
MAX_COLORED_CHARS = 1000000

CONFIG_FIELDS = frozenset(f.name for f in dataclasses.fields(AsciiConfig))


def check_grid_size(width: int, height: int, colored: bool) -> None:
    """Raise ResourceLimitError if a width x height grid is too large."""
    total = width * height
    if colored and total > MAX_COLORED_CHARS:
        raise ResourceLimitError(
            f"Total character count ({total}) exceeds maximum allowed "
            f"for colored output ({MAX_COLORED_CHARS})"
        )
    if total > MAX_TOTAL_CHARS:
        raise ResourceLimitError(
            f"Total character count ({total}) exceeds maximum allowed ({MAX_TOTAL_CHARS})"
        )


def validate_config(config: AsciiConfig, charset: str) -> None:
    """Check a resolved configuration against every invariant."""
    if not charset:
        raise InvalidParameterError("Charset cannot be empty")

    for name in ("width", "height"):
        value = getattr(config, name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidParameterError(f"{name.capitalize()} must be an integer")

    ratio = config.aspect_ratio
    if isinstance(ratio, bool) or not isinstance(ratio, (int, float)) or not math.isfinite(ratio):
        raise InvalidParameterError("Aspect ratio must be a finite number")
    if ratio <= 0:
        raise InvalidParameterError("Aspect ratio must be positive")

    if config.width < 0 or config.height < 0:
        raise InvalidParameterError("Width and height must be non-negative")

    if config.width > MAX_DIMENSION:
        raise ResourceLimitError(f"Width exceeds maximum allowed ({MAX_DIMENSION})")
    if config.height > MAX_DIMENSION:
        raise ResourceLimitError(f"Height exceeds maximum allowed ({MAX_DIMENSION})")

    # With 0 (auto) on either side the grid size is only known per source
    if config.width > 0 and config.height > 0:
        check_grid_size(config.width, config.height, config.colored)


def merge_config(config: AsciiConfig, changes: Mapping) -> AsciiConfig:
    unknown = set(changes) - CONFIG_FIELDS
    if unknown:
        raise InvalidParameterError(
            f"Unknown configuration option(s): {', '.join(sorted(unknown))}"
        )
    return dataclasses.replace(config, **changes)


class AsciiGenerator:
    """
    Convert images, video frames and text into ASCII art.

    One instance is configured once and reused for many conversions. It
    holds no state between calls apart from its configuration and is not
    safe to reconfigure from several threads at once.

    Example::

        generator = AsciiGenerator(charset=CharsetPreset.BLOCK, colored=True, width=80)
        result = generator.convert_image(Image.open("photo.jpg"))
        print(result.text)

    Args:
        config: base configuration; defaults to ``AsciiConfig()``.
        surface_provider: drawing/readback capability for non-buffer
            sources; defaults to Pillow.
        clock: monotonic clock in seconds used for ``processing_time``.
        **options: individual ``AsciiConfig`` fields applied over ``config``.

    Raises:
        InvalidParameterError, ResourceLimitError: invalid configuration.
    """

    def __init__(
        self,
        config: Optional[AsciiConfig] = None,
        *,
        surface_provider: Optional[SurfaceProvider] = None,
        clock: Optional[Callable[[], float]] = None,
        **options,
    ):
        self._surface_provider = surface_provider
        self._clock = clock or time.perf_counter
        self._config, self._charset = self._prepare(config or AsciiConfig(), options)

    @staticmethod
    def _prepare(base: AsciiConfig, changes: Mapping):
        config = merge_config(base, changes)
        charset = resolve_charset(config.charset)
        validate_config(config, charset)
        return config, charset

    # -----------------------------
    # Configuration
    # -----------------------------

    @property
    def charset(self) -> str:
        """The resolved glyph ramp, darkest first."""
        return self._charset

    def get_config(self) -> AsciiConfig:
        return self._config

    def update_config(self, changes: Optional[Mapping] = None, **options) -> None:
        """
        Apply the given fields over the current configuration.

        The merged configuration is validated as a whole and only then
        replaces the current one; on error the generator is unchanged.
        """
        merged = dict(changes or {}, **options)
        self._config, self._charset = self._prepare(self._config, merged)
        LOG.debug("Configuration updated: %s", self._config)

    # -----------------------------
    # Conversion
    # -----------------------------

    def _grid_for(self, source):
        width, height = source_dimensions(source, self._surface_provider)
        grid_width, grid_height = calculate_dimensions(
            width,
            height,
            self._config.width or None,
            self._config.height or None,
            self._config.aspect_ratio,
        )
        LOG.debug("Source %dx%d -> grid %dx%d", width, height, grid_width, grid_height)
        if grid_width == 0 or grid_height == 0:
            LOG.warning(
                "Source %dx%d is too small for a %dx%d grid; output is empty",
                width, height, grid_width, grid_height,
            )
            return grid_width, grid_height, None

        check_grid_size(grid_width, grid_height, self._config.colored)
        pixels = extract_pixel_data(source, grid_width, grid_height, self._surface_provider)
        return grid_width, grid_height, pixels

    def convert_image(self, source) -> AsciiOutput:
        """
        Convert an image source to ASCII art.

        Args:
            source: PixelBuffer, PIL image, numpy frame, or anything the
                configured surface provider can draw.

        Returns:
            AsciiOutput with text, HTML, the character grid, the colour
            grid when ``colored`` is set, and metadata.
        """
        start = self._clock()
        config = self._config
        charset = self._charset

        width, height, pixels = self._grid_for(source)
        rows = 0
        if pixels is not None:
            colors = sample_grid_colors(pixels, width, height)
            rows = height

        characters: List[List[str]] = [None] * rows if config.optimized else []
        color_grid: Optional[List[List[CellColor]]] = None
        if config.colored:
            color_grid = [None] * rows if config.optimized else []
        lines = []
        html_lines = []

        for y in range(rows):
            char_row = [""] * width if config.optimized else []
            color_row = None
            if color_grid is not None:
                color_row = [None] * width if config.optimized else []
            html_row = []

            for x in range(width):
                r, g, b, a = (int(v) for v in colors[y, x])
                color = CellColor(r, g, b, a)
                ch = luminance_to_char(calculate_luminance(r, g, b), charset, config.inverted)

                if config.optimized:
                    char_row[x] = ch
                    if color_row is not None:
                        color_row[x] = color
                else:
                    char_row.append(ch)
                    if color_row is not None:
                        color_row.append(color)
                html_row.append(html_cell(ch, color if config.colored else None))

            if config.optimized:
                characters[y] = char_row
                if color_grid is not None:
                    color_grid[y] = color_row
            else:
                characters.append(char_row)
                if color_grid is not None:
                    color_grid.append(color_row)
            lines.append("".join(char_row))
            html_lines.append("".join(html_row))

        text = "\n".join(lines)
        html = build_html_output(html_lines, config.colored)
        elapsed_ms = (self._clock() - start) * 1000
        LOG.debug("Converted %dx%d grid in %.3f ms", width, height, elapsed_ms)

        return AsciiOutput(
            text=text,
            html=html,
            characters=characters,
            colors=color_grid,
            metadata=AsciiMetadata(
                width=width,
                height=height,
                character_count=width * height,
                processing_time=elapsed_ms,
                charset=charset,
                has_color=config.colored,
            ),
        )

    def convert_text(self, text: str, options: Optional[TextOptions] = None, **overrides) -> AsciiOutput:
        """
        Render text with a font and convert the result like an image.

        Args:
            text: text to render; newlines start new lines.
            options: font and colour settings; defaults to ``TextOptions()``.
            **overrides: individual ``TextOptions`` fields.
        """
        options = options or TextOptions()
        if overrides:
            try:
                options = dataclasses.replace(options, **overrides)
            except TypeError as exc:
                raise InvalidParameterError(str(exc)) from exc
        pixels: PixelBuffer = render_text_to_pixels(text, options)
        return self.convert_image(pixels)

    def generate_color_map(self, source) -> List[List[CellColor]]:
        """Per-cell colours for a source, without glyph mapping."""
        width, height, pixels = self._grid_for(source)
        if pixels is None:
            return []
        colors = sample_grid_colors(pixels, width, height)
        return [
            [CellColor(*(int(v) for v in colors[y, x])) for x in range(width)]
            for y in range(height)
        ]
