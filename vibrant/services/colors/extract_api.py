"""
Vibrant Color Extraction Orchestrator

Entry point that resolves an image source, draws it onto a scaled surface,
reads the pixels back and runs the extraction pipeline, with request-scoped
logging and metrics.
"""

import time
from typing import Any

from vibrant.config import config
from vibrant.schemas import ExtractionConfig, ExtractionResult
from vibrant.services.colors.errors import ColorExtractionError
from vibrant.services.colors.extraction import extract
from vibrant.services.imaging import load_image, render_pixel_buffer
from vibrant.utils.ids import generate_request_id
from vibrant.utils.logging import get_logger
from vibrant.utils.metrics import get_metrics


async def extract_vibrant_colors(
    image_source: Any,
    max_colors: int = config.DEFAULT_MAX_COLORS,
    sample_scale: float = config.DEFAULT_SAMPLE_SCALE,
    saturation_threshold: float = config.DEFAULT_SATURATION_THRESHOLD,
    color_format: str = config.DEFAULT_COLOR_FORMAT,
    exclude_dark_colors: bool = config.DEFAULT_EXCLUDE_DARK_COLORS,
    skip_tiles: int = config.DEFAULT_SKIP_TILES,
    grid_size: int = config.DEFAULT_GRID_SIZE
) -> ExtractionResult:
    """
    Extract up to ``max_colors`` vibrant colors from an image.

    Args:
        image_source: PIL image, numpy array, encoded bytes, file path or URL
        max_colors: Upper bound on palette size
        sample_scale: Linear scale the image is drawn at before sampling
        saturation_threshold: Minimum saturation percentage (0-100)
        color_format: "hex" or "rgb"
        exclude_dark_colors: Drop colors with brightness below 60
        skip_tiles: Sparse sampling factor, 0 samples every tile
        grid_size: Sampling grid is grid_size x grid_size tiles

    Returns:
        ExtractionResult; ``suggested_skip_tiles`` may be passed back as
        ``skip_tiles`` on the next call for the same source

    Raises:
        LoadError: Image could not be fetched or decoded
        ResourceError: Drawing surface unavailable
        TaintError: Pixel readback refused or failed
        GrayscaleError: No chromatic pixel was sampled
        pydantic.ValidationError: Parameters out of range
    """
    request_id = generate_request_id("vib")
    start_time = time.perf_counter()
    metrics = get_metrics()

    extraction_config = ExtractionConfig(
        max_colors=max_colors,
        sample_scale=sample_scale,
        saturation_threshold=saturation_threshold,
        color_format=color_format,
        exclude_dark_colors=exclude_dark_colors,
        skip_tiles=skip_tiles,
        grid_size=grid_size
    )
    log = get_logger(request_id, grid_size=grid_size, color_format=color_format)

    metrics.record_request()
    log.info("Starting vibrant color extraction")

    try:
        decoded = await load_image(image_source)
        load_time = time.perf_counter() - start_time
        log.debug(f"Image loaded: {decoded.width}x{decoded.height}",
                  origin=decoded.origin, ms_load=load_time * 1000)

        pixel_buffer, width, height = render_pixel_buffer(decoded, extraction_config.sample_scale)
        result = extract(pixel_buffer, width, height, extraction_config)

    except ColorExtractionError as e:
        error_time_ms = (time.perf_counter() - start_time) * 1000
        log.error(f"Vibrant color extraction failed: {str(e)}",
                  ms_total=error_time_ms, result="error", error_type=e.code)
        metrics.record_failure(e.code, error_time_ms)
        raise

    total_time_ms = (time.perf_counter() - start_time) * 1000
    result = result.model_copy(update={"elapsed_time_ms": total_time_ms})

    log.info("Vibrant color extraction completed successfully",
             dims=f"{width}x{height}",
             sampled_pixels=result.sampled_pixels,
             distinct_colors=result.distinct_colors,
             palette_size=len(result.colors),
             suggested_skip_tiles=result.suggested_skip_tiles,
             ms_total=total_time_ms,
             result="ok")

    metrics.record_success(
        extraction_config.color_format,
        total_time_ms,
        len(result.colors),
        skip_tiles_changed=result.suggested_skip_tiles != extraction_config.skip_tiles
    )
    return result
