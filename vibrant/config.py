"""
Vibrant Palette Configuration
Manages environment variables and defaults for color extraction.
"""
import os
from typing import List, Literal


class Config:
    """Configuration class for vibrant color extraction."""

    # Logging
    LOG_LEVEL: str = os.environ.get("VIBRANT_LOG_LEVEL", "INFO")

    # Extraction defaults
    DEFAULT_MAX_COLORS: int = int(os.environ.get("VIBRANT_DEFAULT_MAX_COLORS", "5"))
    DEFAULT_SAMPLE_SCALE: float = float(os.environ.get("VIBRANT_DEFAULT_SAMPLE_SCALE", "0.1"))
    DEFAULT_SATURATION_THRESHOLD: float = float(os.environ.get("VIBRANT_DEFAULT_SATURATION_THRESHOLD", "60"))
    DEFAULT_COLOR_FORMAT: Literal["hex", "rgb"] = os.environ.get("VIBRANT_DEFAULT_COLOR_FORMAT", "hex")
    DEFAULT_EXCLUDE_DARK_COLORS: bool = bool(int(os.environ.get("VIBRANT_DEFAULT_EXCLUDE_DARK_COLORS", "0")))
    DEFAULT_SKIP_TILES: int = int(os.environ.get("VIBRANT_DEFAULT_SKIP_TILES", "0"))
    DEFAULT_GRID_SIZE: int = int(os.environ.get("VIBRANT_DEFAULT_GRID_SIZE", "6"))

    # Image loading
    ALLOWED_ORIGINS: str = os.environ.get("VIBRANT_ALLOWED_ORIGINS", "")
    FETCH_TIMEOUT_SECONDS: float = float(os.environ.get("VIBRANT_FETCH_TIMEOUT_SECONDS", "10"))
    MAX_FILE_MB: int = int(os.environ.get("VIBRANT_MAX_FILE_MB", "20"))
    MAX_SURFACE_PIXELS: int = int(os.environ.get("VIBRANT_MAX_SURFACE_PIXELS", str(16384 * 16384)))

    # Pixel filter thresholds
    NEAR_WHITE_CHANNEL_GT: int = 200
    NEAR_GRAY_TOLERANCE: int = 10
    EXCLUDE_DARK_BRIGHTNESS_LT: float = 60.0

    # Adaptive re-sampling
    DARK_BRIGHTNESS_LT: float = 30.0
    DARK_COUNT_LIMIT: int = 100

    # Minimum Euclidean RGB distance between palette entries
    DEDUP_MIN_DISTANCE: float = 100.0

    @classmethod
    def allowed_origins(cls) -> List[str]:
        """Parse ALLOWED_ORIGINS into a list; empty means every origin is trusted."""
        return [o.strip().rstrip("/").lower() for o in cls.ALLOWED_ORIGINS.split(",") if o.strip()]


# Global config instance
config = Config()
