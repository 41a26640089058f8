"""
Color math helpers shared by the extraction pipeline.
"""
import math
from typing import Sequence, Tuple


def rgb_to_hex(rgb: Sequence[int]) -> str:
    """Convert an RGB triple to the canonical uppercase ``#RRGGBB`` string."""
    r, g, b = [int(x) for x in rgb[:3]]
    return f"#{r:02X}{g:02X}{b:02X}"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color string to RGB tuple."""
    hex_color = hex_color.lstrip('#')
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def calculate_brightness(r: int, g: int, b: int) -> float:
    """Weighted luma (ITU-R BT.601 weights)."""
    return 0.299 * r + 0.587 * g + 0.114 * b


def calculate_saturation(r: int, g: int, b: int) -> float:
    """Saturation as a percentage; 0 for black."""
    high = max(r, g, b)
    if high == 0:
        return 0.0
    return (high - min(r, g, b)) / high * 100


def calculate_color_distance(rgb1: Sequence[int], rgb2: Sequence[int]) -> float:
    """Euclidean distance between two colors in RGB space."""
    return math.sqrt(
        (rgb1[0] - rgb2[0]) ** 2 +
        (rgb1[1] - rgb2[1]) ** 2 +
        (rgb1[2] - rgb2[2]) ** 2
    )


def format_color(hex_color: str, color_format: str = "hex") -> str:
    """
    Render a canonical hex color in the requested output format.

    Args:
        hex_color: Canonical ``#RRGGBB`` string
        color_format: ``"hex"`` or ``"rgb"``

    Returns:
        The hex string unchanged, or ``"rgb(R, G, B)"``

    Raises:
        ValueError: For an unknown format
    """
    if color_format == "hex":
        return hex_color
    if color_format == "rgb":
        r, g, b = hex_to_rgb(hex_color)
        return f"rgb({r}, {g}, {b})"
    raise ValueError(f"Unsupported color format: {color_format}")
