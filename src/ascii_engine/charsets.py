"""Character ramps, ordered from visually darkest to lightest."""

import unicodedata
from enum import Enum

from .errors import InvalidParameterError


class CharsetPreset(str, Enum):
    BLOCK = "BLOCK"
    STANDARD = "STANDARD"
    MINIMAL = "MINIMAL"
    EXTENDED = "EXTENDED"
    CUSTOM = "CUSTOM"


CHARSET_MAP = {
    CharsetPreset.BLOCK: "██▓▒░ ",
    CharsetPreset.STANDARD: "@%#*+=-:. ",
    CharsetPreset.MINIMAL: "@+. ",
    # Paul Bourke's 70-level ramp
    CharsetPreset.EXTENDED: (
        "$@B%8&WM#*oahkbdpqwmZO0QLCJUYXzcvunxrjft/\\|()1{}[]?-_+~<>i!lI;:,\"^`'. "
    ),
}

# Characters that break out of HTML text or attribute context
UNSAFE_CHARS = frozenset("<>'\"&`")

PRESET_NAMES = frozenset(preset.value for preset in CharsetPreset)


def sanitize_charset(charset: str) -> str:
    """Strip markup-special and control characters from a custom ramp."""
    return "".join(
        ch
        for ch in charset
        if ch not in UNSAFE_CHARS and unicodedata.category(ch) != "Cc"
    )


def resolve_charset(charset) -> str:
    """
    Turn a preset name or a literal ramp into the glyph string to index.

    Args:
        charset: a CharsetPreset, the exact name of one, or any other
            string, which is used as a literal dark-to-light ramp.

    Returns:
        Non-empty ramp string.

    Raises:
        InvalidParameterError: CUSTOM requested without a literal, or the
            literal is empty after sanitization.
    """
    if isinstance(charset, str) and charset in PRESET_NAMES:
        preset = CharsetPreset(charset)
        if preset is CharsetPreset.CUSTOM:
            raise InvalidParameterError(
                "CUSTOM preset requires a custom charset string"
            )
        return CHARSET_MAP[preset]

    if not isinstance(charset, str) or not charset:
        raise InvalidParameterError("Invalid charset configuration")

    sanitized = sanitize_charset(charset)
    if not sanitized:
        raise InvalidParameterError(
            "Custom charset contains only invalid characters. "
            "Characters <, >, ', \", &, ` and control characters are not allowed."
        )
    return sanitized
