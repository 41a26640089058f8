"""
Vibrant Palette Schemas
Pydantic models for extraction parameters, per-color statistics and results.
"""
from typing import List, Literal
from pydantic import BaseModel, ConfigDict, Field

from vibrant.config import config


class ExtractionConfig(BaseModel):
    """Immutable parameters for one extraction call."""
    model_config = ConfigDict(frozen=True)

    max_colors: int = Field(
        config.DEFAULT_MAX_COLORS,
        ge=1,
        description="Upper bound on the returned palette size"
    )
    sample_scale: float = Field(
        config.DEFAULT_SAMPLE_SCALE,
        gt=0.0,
        le=1.0,
        description="Linear scale the image is drawn at before sampling"
    )
    saturation_threshold: float = Field(
        config.DEFAULT_SATURATION_THRESHOLD,
        ge=0.0,
        le=100.0,
        description="Colors with saturation strictly below this percentage are discarded"
    )
    color_format: Literal["hex", "rgb"] = Field(
        config.DEFAULT_COLOR_FORMAT,
        description="Output encoding: '#RRGGBB' or 'rgb(R, G, B)'"
    )
    exclude_dark_colors: bool = Field(
        config.DEFAULT_EXCLUDE_DARK_COLORS,
        description="Discard colors with brightness below 60"
    )
    skip_tiles: int = Field(
        config.DEFAULT_SKIP_TILES,
        ge=0,
        description="Skip tiles where (x + y) % (skip_tiles + 1) == 0; 0 disables skipping"
    )
    grid_size: int = Field(
        config.DEFAULT_GRID_SIZE,
        ge=1,
        description="Sampling grid is grid_size x grid_size tiles, one pixel per tile"
    )


class ColorStat(BaseModel):
    """Aggregated record for one distinct qualifying color."""
    color: str = Field(
        ...,
        pattern=r"^#[0-9A-F]{6}$",
        description="Canonical uppercase hex color"
    )
    count: int = Field(1, ge=1, description="Occurrences within the current pass")
    brightness: float = Field(..., description="Weighted luma 0.299R + 0.587G + 0.114B")
    saturation: float = Field(
        ...,
        ge=0.0,
        le=100.0,
        description="(max - min) / max * 100 over the channel values"
    )


class ExtractionResult(BaseModel):
    """Palette produced by one extraction call."""
    model_config = ConfigDict(frozen=True)

    colors: List[str] = Field(
        ...,
        description="Formatted colors, best ranked first"
    )
    elapsed_time_ms: float = Field(..., ge=0.0, description="Wall-clock duration of the call")
    suggested_skip_tiles: int = Field(
        ...,
        ge=0,
        description="skip_tiles value to use on the next call for this source"
    )
    width: int = Field(..., description="Width of the sampled pixel buffer")
    height: int = Field(..., description="Height of the sampled pixel buffer")
    sampled_pixels: int = Field(..., description="Tile centers examined")
    distinct_colors: int = Field(..., description="Distinct qualifying colors aggregated")
    dark_color_count: int = Field(
        ...,
        description="Qualifying samples darker than the adaptive threshold"
    )
