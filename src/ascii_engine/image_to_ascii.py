#!/usr/bin/env python3
"""Convert an image file to ASCII art (plain text or HTML)."""

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from PIL import Image

from .charsets import CharsetPreset
from .colorize_html import wrap_html
from .errors import AsciiEngineError
from .generator import AsciiGenerator
from .models import AsciiConfig, AsciiOutput

LOG = logging.getLogger("ascii_engine")


# =============================
# Shared CLI plumbing
# =============================


def setup_logging(level: str = "WARNING", log_path: Optional[str] = None) -> None:
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING
    LOG.setLevel(logging.DEBUG if log_path else numeric_level)

    handlers: list[logging.Handler] = []

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(numeric_level)
    sh.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    handlers.append(sh)

    if log_path:
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(message)s"))
        handlers.append(fh)

    LOG.handlers[:] = handlers
    LOG.propagate = False  # prevent double logging via root logger


def add_generator_arguments(parser: argparse.ArgumentParser) -> None:
    """Flags shared by every command that builds an AsciiGenerator."""
    parser.add_argument(
        "-o", "--output", default=None, help="Output file (default: stdout)"
    )
    parser.add_argument(
        "--format",
        choices=["text", "html"],
        default=None,
        help="Output format (default: html for .html/.htm outputs, text otherwise)",
    )
    parser.add_argument(
        "-w", "--width", type=int, default=0, help="Output width in characters (0 = auto)"
    )
    parser.add_argument(
        "--height", type=int, default=0, help="Output height in characters (0 = auto)"
    )
    parser.add_argument(
        "--charset",
        default=CharsetPreset.STANDARD.value,
        help="Preset (BLOCK, STANDARD, MINIMAL, EXTENDED) or a literal dark-to-light ramp",
    )
    parser.add_argument("--invert", action="store_true", help="Reverse the dark-to-light mapping")
    parser.add_argument(
        "--colored", action="store_true", help="Keep per-character colour (HTML output)"
    )
    parser.add_argument(
        "--aspect-ratio",
        type=float,
        default=AsciiConfig.aspect_ratio,
        help="Glyph cell width/height correction (default: %(default)s)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: WARNING)",
    )
    parser.add_argument("--log", default=None, help="Also write a DEBUG log to this file")


def config_from_args(args: argparse.Namespace) -> AsciiConfig:
    return AsciiConfig(
        charset=args.charset,
        inverted=args.invert,
        colored=args.colored,
        aspect_ratio=args.aspect_ratio,
        width=args.width,
        height=args.height,
    )


def output_format(args: argparse.Namespace) -> str:
    if args.format:
        return args.format
    if args.output and os.path.splitext(args.output)[1].lower() in (".html", ".htm"):
        return "html"
    return "text"


def write_output(result: AsciiOutput, args: argparse.Namespace) -> None:
    if output_format(args) == "html":
        title = os.path.basename(args.output) if args.output else "ASCII Art"
        output = wrap_html(result.html, title=title)
    else:
        output = result.text + "\n"

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        LOG.info("Wrote %s", args.output)
    else:
        sys.stdout.write(output)


def fail(message: str) -> int:
    print(f"\033[31mError: {message}\033[0m", file=sys.stderr)
    return 1


# =============================
# CLI
# =============================


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for image-to-ASCII CLI."""
    parser = argparse.ArgumentParser(description="Convert an image to ASCII art")
    parser.add_argument("input", help="Input image path")
    add_generator_arguments(parser)
    args = parser.parse_args(argv)

    setup_logging(args.log_level, args.log)

    if not os.path.exists(args.input):
        return fail(f"file not found: {args.input}")

    try:
        generator = AsciiGenerator(config_from_args(args))
        with Image.open(args.input) as img:
            result = generator.convert_image(img)
    except (AsciiEngineError, OSError) as exc:
        return fail(str(exc))

    LOG.debug(
        "Converted %s to %dx%d in %.1f ms",
        args.input,
        result.metadata.width,
        result.metadata.height,
        result.metadata.processing_time,
    )
    write_output(result, args)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
