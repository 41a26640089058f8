"""
Vibrant Palette

Extract a handful of vibrant accent colors from an image.
"""
from vibrant.schemas import ColorStat, ExtractionConfig, ExtractionResult
from vibrant.services.colors.errors import (
    ColorExtractionError, GrayscaleError, LoadError, ResourceError, TaintError
)
from vibrant.services.colors.extraction import extract
from vibrant.services.colors.extract_api import extract_vibrant_colors

__version__ = "1.0.0"

__all__ = [
    "ColorStat",
    "ExtractionConfig",
    "ExtractionResult",
    "ColorExtractionError",
    "GrayscaleError",
    "LoadError",
    "ResourceError",
    "TaintError",
    "extract",
    "extract_vibrant_colors",
]
