"""Render text onto an offscreen Pillow surface for conversion."""

import logging
import math
import os
import re

from PIL import Image, ImageColor, ImageDraw, ImageFont

from .errors import InputTooLargeError, InvalidParameterError
from .models import PixelBuffer, TextOptions
from .pixels import check_dimensions

MAX_TEXT_LENGTH = 10000
MAX_FONT_SIZE = 1000
ALLOWED_FONT_STYLES = ("normal", "italic", "oblique")
ALLOWED_FONT_WEIGHTS = ("normal", "bold") + tuple(str(w) for w in range(100, 1000, 100))

LINE_HEIGHT = 1.5  # multiple of font size
ITALIC_SHEAR = 0.2

_UNSAFE_FONT_CHARS = re.compile(r"[\"'`<>]")

# =============================
# Font Management
# =============================

FALLBACK_FONTS = {
    "regular": [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
        "/System/Library/Fonts/Supplemental/Arial.ttf",
        "C:\\Windows\\Fonts\\arial.ttf",
    ],
    "bold": [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
        "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
        "C:\\Windows\\Fonts\\arialbd.ttf",
    ],
}


def sanitize_font_family(font: str) -> str:
    """Drop quote and angle-bracket characters from a font family name."""
    return _UNSAFE_FONT_CHARS.sub("", font)


def is_bold(font_weight) -> bool:
    weight = str(font_weight)
    return weight == "bold" or (weight.isdigit() and int(weight) >= 600)


def font_description(family: str, font_size: int, font_weight="normal", font_style="normal") -> str:
    """CSS-style shorthand, e.g. ``italic bold 48px "Arial"``."""
    return f'{font_style} {font_weight} {font_size}px "{sanitize_font_family(family)}"'


def validate_text_options(text: str, options: TextOptions) -> None:
    """Reject oversized text and malformed font parameters."""
    if len(text) > MAX_TEXT_LENGTH:
        raise InputTooLargeError(f"Text length exceeds maximum allowed ({MAX_TEXT_LENGTH})")

    if not 1 <= options.font_size <= MAX_FONT_SIZE:
        raise InvalidParameterError(f"Font size must be between 1 and {MAX_FONT_SIZE}")

    if options.font_style not in ALLOWED_FONT_STYLES:
        raise InvalidParameterError(
            f"Invalid font style. Allowed values: {', '.join(ALLOWED_FONT_STYLES)}"
        )

    if str(options.font_weight) not in ALLOWED_FONT_WEIGHTS:
        raise InvalidParameterError(
            f"Invalid font weight. Allowed values: {', '.join(ALLOWED_FONT_WEIGHTS)}"
        )

    if options.padding < 0:
        raise InvalidParameterError("Padding must be non-negative")


def _face_candidates(family: str, bold: bool, italic: bool) -> list[tuple[str, bool, bool]]:
    """(file name, is bold, is italic) that Pillow may find in the system font dirs."""
    faces = []
    if bold and italic:
        faces += [(name, True, True) for name in (f"{family} Bold Italic.ttf", f"{family}-BoldItalic.ttf", f"{family}bi.ttf")]
    if bold:
        faces += [(name, True, False) for name in (f"{family} Bold.ttf", f"{family}-Bold.ttf", f"{family}bd.ttf")]
    if italic:
        faces += [(name, False, True) for name in (f"{family} Italic.ttf", f"{family}-Italic.ttf", f"{family}i.ttf")]
    faces += [(name, False, False) for name in (f"{family}.ttf", f"{family}-Regular.ttf", family)]
    return faces


def load_font(family: str, font_size: int, bold: bool = False, italic: bool = False):
    """
    Load a font face for a family name.

    Returns:
        (font, synthesize_bold, synthesize_italic): the flags say which
        requested styles the loaded face does not provide.
    """
    logger = logging.getLogger(__name__)
    family = sanitize_font_family(family).strip()

    if family:
        for name, has_bold, has_italic in _face_candidates(family, bold, italic):
            try:
                font = ImageFont.truetype(name, font_size)
            except OSError:
                continue
            logger.debug("Loaded font %s (size=%d)", name, font_size)
            return font, bold and not has_bold, italic and not has_italic

    for key in (("bold", "regular") if bold else ("regular",)):
        for path in FALLBACK_FONTS[key]:
            if os.path.exists(path):
                logger.debug("Falling back to font %s (size=%d)", path, font_size)
                return ImageFont.truetype(path, font_size), bold and key != "bold", italic

    logger.debug("Using Pillow default font (size=%d)", font_size)
    return ImageFont.load_default(size=font_size), bold, italic


def _parse_color(value: str, name: str):
    try:
        return ImageColor.getcolor(value, "RGBA")
    except (ValueError, TypeError) as exc:
        raise InvalidParameterError(f"Invalid {name}: {value!r}") from exc


# =============================
# Text Rendering
# =============================


def render_text_to_image(text: str, options: TextOptions = TextOptions()) -> Image.Image:
    """
    Render text onto an RGBA image.

    The surface is ``ceil(text_width + 2*padding)`` wide and
    ``ceil(font_size*1.5*lines + 2*padding)`` tall; text is left aligned
    with its top at ``(padding, padding)``.
    """
    logger = logging.getLogger(__name__)
    validate_text_options(text, options)
    foreground = _parse_color(options.color, "color")
    background = _parse_color(options.background_color, "background color")

    bold = is_bold(options.font_weight)
    italic = options.font_style != "normal"
    font, fake_bold, fake_italic = load_font(options.font, options.font_size, bold, italic)
    logger.debug(
        "Rendering text with %s",
        font_description(options.font, options.font_size, options.font_weight, options.font_style),
    )

    lines = text.split("\n")
    stroke = max(1, round(options.font_size / 24)) if fake_bold else 0
    text_width = max(font.getlength(line) for line in lines) + 2 * stroke
    line_height = options.font_size * LINE_HEIGHT

    width = math.ceil(text_width + options.padding * 2)
    height = math.ceil(line_height * len(lines) + options.padding * 2)
    if fake_italic:
        # Room for the shear to push the top edge right
        width += math.ceil(ITALIC_SHEAR * height)
    check_dimensions(width, height)
    logger.debug("Text surface %dx%d (%d lines)", width, height, len(lines))

    layer = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    for i, line in enumerate(lines):
        y = options.padding + i * line_height
        draw.text(
            (options.padding, y),
            line,
            font=font,
            fill=foreground,
            stroke_width=stroke,
            stroke_fill=foreground,
        )

    if fake_italic:
        # Slant right around the bottom edge
        layer = layer.transform(
            layer.size,
            Image.Transform.AFFINE,
            (1, ITALIC_SHEAR, -ITALIC_SHEAR * height, 0, 1, 0),
            resample=Image.Resampling.BILINEAR,
        )

    img = Image.new("RGBA", (width, height), background)
    img.alpha_composite(layer)
    return img


def render_text_to_pixels(text: str, options: TextOptions = TextOptions()) -> PixelBuffer:
    """Rasterize text into a PixelBuffer ready for conversion."""
    return PixelBuffer.from_image(render_text_to_image(text, options))
