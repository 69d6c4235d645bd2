#!/usr/bin/env python3
"""Convert text to ASCII art by rendering it with a font first."""

import argparse
import sys
from typing import Optional, Sequence

from .errors import AsciiEngineError
from .generator import AsciiGenerator
from .image_to_ascii import add_generator_arguments, config_from_args, fail, setup_logging, write_output
from .models import TextOptions
from .rasterize import ALLOWED_FONT_STYLES, ALLOWED_FONT_WEIGHTS

DEFAULTS = TextOptions()


def text_options_from_args(args: argparse.Namespace) -> TextOptions:
    return TextOptions(
        font=args.font,
        font_size=args.font_size,
        font_weight=args.font_weight,
        font_style=args.font_style,
        color=args.color,
        background_color=args.background_color,
        padding=args.padding,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for text-to-ASCII CLI."""
    parser = argparse.ArgumentParser(description="Convert text to ASCII art")

    parser.add_argument("text", nargs="?", default=None, help="Text to convert")
    parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read text from standard input (supports piped input)",
    )
    parser.add_argument("--font", default=DEFAULTS.font, help="Font family or .ttf file name")
    parser.add_argument(
        "--font-size", type=int, default=DEFAULTS.font_size, help="Font size in pixels"
    )
    parser.add_argument(
        "--font-weight", choices=ALLOWED_FONT_WEIGHTS, default=DEFAULTS.font_weight
    )
    parser.add_argument(
        "--font-style", choices=ALLOWED_FONT_STYLES, default=DEFAULTS.font_style
    )
    parser.add_argument("--color", default=DEFAULTS.color, help="Text colour (CSS syntax)")
    parser.add_argument(
        "--background-color", default=DEFAULTS.background_color, help="Background colour (CSS syntax)"
    )
    parser.add_argument(
        "--padding", type=int, default=DEFAULTS.padding, help="Padding around the text in pixels"
    )
    add_generator_arguments(parser)

    args = parser.parse_args(argv)
    setup_logging(args.log_level, args.log)

    # Get input text ! --stdin flag overrides CLI text
    if args.stdin:
        text = sys.stdin.read().strip()
    elif args.text:
        text = args.text
    else:
        parser.print_help()
        return fail("[1] no text provided")

    try:
        generator = AsciiGenerator(config_from_args(args))
        result = generator.convert_text(text, text_options_from_args(args))
    except AsciiEngineError as exc:
        return fail(str(exc))

    write_output(result, args)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
