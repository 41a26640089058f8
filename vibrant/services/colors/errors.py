"""
Color extraction failure taxonomy.

Every failure is terminal for the call: none is retried internally and none
is turned into a partial palette.
"""


class ColorExtractionError(Exception):
    """Base class for extraction failures."""

    code = "extraction_failed"


class LoadError(ColorExtractionError):
    """Source image could not be fetched or decoded."""

    code = "load_failed"


class ResourceError(ColorExtractionError):
    """Drawing surface could not be allocated or drawn onto."""

    code = "resource_unavailable"


class GrayscaleError(ColorExtractionError):
    """No sampled pixel was chromatic (all black, near-white or near-gray)."""

    code = "grayscale_image"


class TaintError(ColorExtractionError):
    """Pixel readback was refused or failed for the drawn image."""

    code = "tainted_canvas"
