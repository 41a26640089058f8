"""
Vibrant color extraction pipeline.

Samples one pixel per tile of a sparse grid laid over an RGBA pixel buffer,
filters out achromatic and dull samples, aggregates the survivors by hex
value, ranks them by brightness then frequency, and greedily keeps colors
that are far enough apart in RGB space.
"""

import time
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple, Union

import numpy as np
from loguru import logger

from vibrant.config import config
from vibrant.schemas import ColorStat, ExtractionConfig, ExtractionResult
from .errors import GrayscaleError
from .utils import (
    rgb_to_hex, hex_to_rgb, calculate_brightness, calculate_saturation,
    calculate_color_distance, format_color
)

PixelBuffer = Union[bytes, bytearray, memoryview, np.ndarray]


class SamplingOutcome(NamedTuple):
    """Aggregates produced by one pass over the tile grid."""
    color_stats: Dict[str, ColorStat]
    sampled_pixels: int
    chromatic_found: bool
    dark_color_count: int


def as_pixel_array(pixel_buffer: PixelBuffer, width: int, height: int) -> np.ndarray:
    """
    View a row-major RGBA buffer as a flat uint8 array.

    Raises:
        ValueError: If dimensions are not positive, the array is not uint8
            or the buffer is too short
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid buffer dimensions: {width}×{height}")

    if isinstance(pixel_buffer, np.ndarray):
        if pixel_buffer.dtype != np.uint8:
            raise ValueError(f"Pixel buffer must be uint8, got {pixel_buffer.dtype}")
        pixels = pixel_buffer.reshape(-1)
    elif isinstance(pixel_buffer, (bytes, bytearray, memoryview)):
        pixels = np.frombuffer(pixel_buffer, dtype=np.uint8)
    else:
        pixels = np.asarray(pixel_buffer, dtype=np.uint8).reshape(-1)

    expected = width * height * 4
    if pixels.size < expected:
        raise ValueError(
            f"Pixel buffer too short for {width}×{height} RGBA: "
            f"{pixels.size} < {expected} bytes"
        )
    return pixels


def iter_tile_centers(width: int, height: int, grid_size: int,
                      skip_tiles: int = 0) -> Iterator[Tuple[int, int]]:
    """
    Yield the (x, y) pixel at the center of every non-skipped tile, row-major.

    Tile (tx, ty) is skipped when ``(tx + ty) % (skip_tiles + 1) == 0`` and
    ``skip_tiles > 0``.
    """
    for ty in range(grid_size):
        # floor((ty + 0.5) * height / grid_size) in exact integer arithmetic
        cy = min(height - 1, ((2 * ty + 1) * height) // (2 * grid_size))
        for tx in range(grid_size):
            if skip_tiles > 0 and (tx + ty) % (skip_tiles + 1) == 0:
                continue
            cx = min(width - 1, ((2 * tx + 1) * width) // (2 * grid_size))
            yield cx, cy


def is_achromatic(r: int, g: int, b: int) -> bool:
    """True for pure black, near-white and near-gray pixels."""
    if r == 0 and g == 0 and b == 0:
        return True

    white = config.NEAR_WHITE_CHANNEL_GT
    if r > white and g > white and b > white:
        return True

    tol = config.NEAR_GRAY_TOLERANCE
    return abs(r - g) <= tol and abs(r - b) <= tol and abs(g - b) <= tol


def passes_vibrancy_filters(brightness: float, saturation: float,
                            saturation_threshold: float,
                            exclude_dark_colors: bool) -> bool:
    """Saturation and optional darkness checks applied to chromatic pixels."""
    if saturation < saturation_threshold:
        return False
    if exclude_dark_colors and brightness < config.EXCLUDE_DARK_BRIGHTNESS_LT:
        return False
    return True


def collect_color_stats(pixels: np.ndarray, width: int, height: int,
                        extraction_config: ExtractionConfig) -> SamplingOutcome:
    """
    Walk the tile grid and aggregate qualifying colors by canonical hex.

    Args:
        pixels: Flat RGBA uint8 array from ``as_pixel_array``
        width: Buffer width in pixels
        height: Buffer height in pixels
        extraction_config: Grid, skip and filter parameters

    Returns:
        SamplingOutcome with the hex -> ColorStat mapping in first-seen order
    """
    color_stats: Dict[str, ColorStat] = {}
    sampled = 0
    chromatic_found = False
    dark_count = 0

    for x, y in iter_tile_centers(width, height, extraction_config.grid_size,
                                  extraction_config.skip_tiles):
        sampled += 1
        offset = (y * width + x) * 4
        r, g, b = (int(v) for v in pixels[offset:offset + 3])

        if is_achromatic(r, g, b):
            continue
        chromatic_found = True

        brightness = calculate_brightness(r, g, b)
        saturation = calculate_saturation(r, g, b)
        if not passes_vibrancy_filters(brightness, saturation,
                                       extraction_config.saturation_threshold,
                                       extraction_config.exclude_dark_colors):
            continue

        if brightness < config.DARK_BRIGHTNESS_LT:
            dark_count += 1

        hex_color = rgb_to_hex((r, g, b))
        stat = color_stats.get(hex_color)
        if stat is not None:
            stat.count += 1
        else:
            color_stats[hex_color] = ColorStat(
                color=hex_color,
                count=1,
                brightness=brightness,
                saturation=saturation
            )

    logger.debug(f"Sampled {sampled} tiles: {len(color_stats)} distinct qualifying colors, "
                 f"{dark_count} dark")
    return SamplingOutcome(color_stats, sampled, chromatic_found, dark_count)


def suggest_skip_tiles(skip_tiles: int, dark_color_count: int) -> int:
    """Return the skip factor a follow-up call should use."""
    if dark_color_count > config.DARK_COUNT_LIMIT:
        return skip_tiles + 1
    return skip_tiles


def rank_color_stats(color_stats: Dict[str, ColorStat]) -> List[ColorStat]:
    """Sort by brightness, then count, both descending. Stable for full ties."""
    return sorted(color_stats.values(), key=lambda s: (-s.brightness, -s.count))


def select_distinct_colors(ranked: List[ColorStat], max_colors: int,
                           color_format: str = "hex",
                           min_distance: Optional[float] = None) -> List[str]:
    """
    Greedily accept colors in rank order that are at least ``min_distance``
    away from every color accepted so far.

    Returns:
        Formatted colors, at most ``max_colors`` of them
    """
    if min_distance is None:
        min_distance = config.DEDUP_MIN_DISTANCE

    accepted_rgb: List[Tuple[int, int, int]] = []
    seen = set()
    palette: List[str] = []

    for stat in ranked:
        if len(palette) >= max_colors:
            break
        if stat.color in seen:
            continue

        rgb = hex_to_rgb(stat.color)
        if any(calculate_color_distance(rgb, other) < min_distance for other in accepted_rgb):
            continue

        accepted_rgb.append(rgb)
        seen.add(stat.color)
        palette.append(format_color(stat.color, color_format))

    return palette


def extract(pixel_buffer: PixelBuffer, width: int, height: int,
            extraction_config: Optional[ExtractionConfig] = None) -> ExtractionResult:
    """
    Extract a vibrant palette from a decoded RGBA buffer.

    Args:
        pixel_buffer: Row-major RGBA bytes, ``width * height * 4`` long
        width: Buffer width in pixels
        height: Buffer height in pixels
        extraction_config: Parameters; defaults when omitted

    Returns:
        ExtractionResult with the ordered palette and call diagnostics

    Raises:
        ValueError: For invalid dimensions or a short buffer
        GrayscaleError: If no sampled pixel was chromatic
    """
    start_time = time.perf_counter()
    if extraction_config is None:
        extraction_config = ExtractionConfig()

    pixels = as_pixel_array(pixel_buffer, width, height)
    outcome = collect_color_stats(pixels, width, height, extraction_config)

    if not outcome.chromatic_found:
        raise GrayscaleError(
            f"Image is fully grayscale: none of {outcome.sampled_pixels} sampled pixels is chromatic"
        )

    suggested = suggest_skip_tiles(extraction_config.skip_tiles, outcome.dark_color_count)
    if suggested != extraction_config.skip_tiles:
        logger.debug(f"Dark-heavy image ({outcome.dark_color_count} dark samples), "
                     f"suggesting skip_tiles={suggested}")

    ranked = rank_color_stats(outcome.color_stats)
    colors = select_distinct_colors(ranked, extraction_config.max_colors,
                                    extraction_config.color_format)
    logger.debug(f"Selected {len(colors)}/{len(ranked)} colors: {colors}")

    return ExtractionResult(
        colors=colors,
        elapsed_time_ms=(time.perf_counter() - start_time) * 1000,
        suggested_skip_tiles=suggested,
        width=width,
        height=height,
        sampled_pixels=outcome.sampled_pixels,
        distinct_colors=len(outcome.color_stats),
        dark_color_count=outcome.dark_color_count
    )
