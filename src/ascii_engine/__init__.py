"""ASCII Engine - Convert images and text to ASCII art for the browser."""

__version__ = "1.0.0"

"""
Public names resolve lazily so that `python -m ascii_engine.<command>`
does not find its own submodule in `sys.modules` before execution, which
makes `runpy` warn. Importing a name pulls in its submodule on demand.
"""

_EXPORTS = {
    "AsciiGenerator": "generator",
    "check_grid_size": "generator",
    "AsciiConfig": "models",
    "AsciiMetadata": "models",
    "AsciiOutput": "models",
    "CellColor": "models",
    "PixelBuffer": "models",
    "TextOptions": "models",
    "CharsetPreset": "charsets",
    "CHARSET_MAP": "charsets",
    "resolve_charset": "charsets",
    "SurfaceProvider": "pixels",
    "PillowSurfaceProvider": "pixels",
    "extract_pixel_data": "pixels",
    "calculate_dimensions": "sampling",
    "calculate_luminance": "sampling",
    "luminance_to_char": "sampling",
    "sample_cell_color": "sampling",
    "rgb_to_css": "sampling",
    "render_text_to_pixels": "rasterize",
    "AsciiEngineError": "errors",
    "CrossOriginError": "errors",
    "InputTooLargeError": "errors",
    "InvalidParameterError": "errors",
    "InvalidSourceError": "errors",
    "ResourceLimitError": "errors",
}


def __getattr__(name):
    module = _EXPORTS.get(name)
    if module is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from importlib import import_module

    return getattr(import_module(f".{module}", __name__), name)


def image_to_ascii_main(*args, **kwargs):
    from .image_to_ascii import main as _m

    return _m(*args, **kwargs)


def text_to_ascii_main(*args, **kwargs):
    from .text_to_ascii import main as _m

    return _m(*args, **kwargs)


__all__ = sorted(_EXPORTS) + [
    "image_to_ascii_main",
    "text_to_ascii_main",
]
