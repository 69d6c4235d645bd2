"""HTML serialization of character grids."""

import html
from typing import Optional, Sequence

from .models import CellColor
from .sampling import rgb_to_css

PRE_STYLE = "font-family:monospace;line-height:1;white-space:pre"
PRE_STYLE_COLORED = PRE_STYLE + ";background:#000"


def escape_html(text: str) -> str:
    """Escape ``& < > " '`` and the backtick as entities."""
    return html.escape(text, quote=True).replace("`", "&#96;")


def html_cell(ch: str, color: Optional[CellColor] = None) -> str:
    """One escaped glyph, wrapped in a coloured span when a colour is given."""
    if color is None:
        return escape_html(ch)
    css = rgb_to_css(color.r, color.g, color.b, color.a)
    return f'<span style="color:{css}">{escape_html(ch)}</span>'


def build_html_output(lines: Sequence[str], colored: bool = False) -> str:
    """Wrap pre-rendered rows in a single monospace ``<pre>`` block."""
    style = PRE_STYLE_COLORED if colored else PRE_STYLE
    return f'<pre style="{style}">' + "\n".join(lines) + "</pre>"


def wrap_html(body: str, title: str = "ASCII Art", font_size_px: int = 12, line_height_px: Optional[int] = None) -> str:
    """Standalone HTML document around an already-serialized ``<pre>`` block."""
    # line-height in px, matching font-size unless given
    if line_height_px is None:
        line_height_px = font_size_px

    return (
        "<!doctype html>\n"
        "<html>\n<head>\n"
        '  <meta charset="utf-8">\n'
        '  <meta name="viewport" content="width=device-width, initial-scale=1">\n'
        f"  <title>{escape_html(title)}</title>\n"
        "  <style>\n"
        "    html, body { margin: 0; background: #000; color: #fff; }\n"
        "    .wrap { padding: 16px; }\n"
        "    pre {\n"
        "      margin: 0;\n"
        "      overflow: auto;\n"
        "      font-variant-ligatures: none;\n"
        f"      font-size: {font_size_px}px;\n"
        f"      line-height: {line_height_px}px !important;\n"
        "      letter-spacing: 0;\n"
        "    }\n"
        "  </style>\n"
        "</head>\n<body>\n"
        '  <div class="wrap">\n'
        f"    {body}\n"
        "  </div>\n"
        "</body>\n</html>\n"
    )
