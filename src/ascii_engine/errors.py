"""Exceptions raised by the conversion pipeline."""


class AsciiEngineError(Exception):
    """Base class for every error raised by ascii_engine."""


class InvalidSourceError(AsciiEngineError, ValueError):
    """Source has zero dimensions, a malformed buffer, or an unsupported type."""


class ResourceLimitError(AsciiEngineError, ValueError):
    """Requested pixel or character dimensions exceed a ceiling."""


class CrossOriginError(AsciiEngineError, PermissionError):
    """Pixel readback was refused for a tainted (cross-origin) source."""


class InvalidParameterError(AsciiEngineError, ValueError):
    """A configuration or text-rendering parameter is malformed."""


class InputTooLargeError(AsciiEngineError, ValueError):
    """Text input exceeds the maximum length."""
