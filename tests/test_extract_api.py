"""
Integration tests for the async extract_vibrant_colors entry point.

Tests the complete flow:
- source loading, surface drawing and readback
- each failure kind surfacing as its own exception
- metrics and timing reported per call
"""

import asyncio

import pytest
from PIL import Image
from pydantic import ValidationError

from vibrant import (
    extract_vibrant_colors, ExtractionResult, ColorExtractionError,
    GrayscaleError, LoadError, ResourceError, TaintError
)
from vibrant.config import Config
from vibrant.services import imaging
from vibrant.utils.metrics import get_metrics

from conftest import make_rgba, make_checkerboard, encode_png


class TestExtractVibrantColors:
    """Test the public async API"""

    @pytest.mark.asyncio
    async def test_red_image_default_config(self):
        result = await extract_vibrant_colors(make_rgba(100, 100, (255, 0, 0)))

        assert isinstance(result, ExtractionResult)
        assert result.colors == ["#FF0000"]
        assert (result.width, result.height) == (10, 10)
        assert result.elapsed_time_ms >= 0.0
        assert result.suggested_skip_tiles == 0

    @pytest.mark.asyncio
    async def test_red_buffer_full_scale(self):
        result = await extract_vibrant_colors(make_rgba(10, 10, (255, 0, 0)), sample_scale=1.0)
        assert result.colors == ["#FF0000"]

    @pytest.mark.asyncio
    async def test_checkerboard_is_grayscale(self):
        with pytest.raises(GrayscaleError):
            await extract_vibrant_colors(make_checkerboard(10, 10), sample_scale=1.0)

    @pytest.mark.asyncio
    async def test_rgb_format(self, primaries_image):
        hex_result = await extract_vibrant_colors(primaries_image, sample_scale=1.0)
        rgb_result = await extract_vibrant_colors(primaries_image, sample_scale=1.0, color_format="rgb")

        assert hex_result.colors == ["#FFFF00", "#00FFFF", "#00FF00", "#FF00FF", "#FF0000"]
        assert rgb_result.colors == [
            "rgb(255, 255, 0)", "rgb(0, 255, 255)", "rgb(0, 255, 0)",
            "rgb(255, 0, 255)", "rgb(255, 0, 0)"
        ]

    @pytest.mark.asyncio
    async def test_encoded_file_source(self, tmp_path, primaries_image):
        path = tmp_path / "primaries.png"
        path.write_bytes(encode_png(primaries_image))

        result = await extract_vibrant_colors(str(path), max_colors=3, sample_scale=1.0)
        assert result.colors == ["#FFFF00", "#00FFFF", "#00FF00"]

    @pytest.mark.asyncio
    async def test_concurrent_calls_are_independent(self, primaries_image):
        results = await asyncio.gather(*[
            extract_vibrant_colors(primaries_image, sample_scale=1.0, max_colors=4)
            for _ in range(5)
        ])
        assert all(r.colors == results[0].colors for r in results)
        assert get_metrics().get_counters()["extract_requests_total"] == 5

    @pytest.mark.asyncio
    async def test_suggested_skip_tiles_feeds_next_call(self):
        dark = make_rgba(12, 12, (50, 0, 0))
        first = await extract_vibrant_colors(dark, sample_scale=1.0, grid_size=12)
        assert first.suggested_skip_tiles == 1

        second = await extract_vibrant_colors(
            dark, sample_scale=1.0, grid_size=12, skip_tiles=first.suggested_skip_tiles
        )
        assert second.sampled_pixels == 72
        assert second.suggested_skip_tiles == 1
        assert get_metrics().get_counters()["extract_skip_tiles_suggested_total"] == 1

    @pytest.mark.asyncio
    async def test_invalid_parameters(self):
        with pytest.raises(ValidationError):
            await extract_vibrant_colors(make_rgba(10, 10, (255, 0, 0)), grid_size=0)


class TestFailureKinds:
    """Each failure surfaces as a distinct ColorExtractionError subclass"""

    @pytest.mark.asyncio
    async def test_load_error(self):
        with pytest.raises(LoadError):
            await extract_vibrant_colors(b"not an image")

    @pytest.mark.asyncio
    async def test_resource_error(self, monkeypatch):
        monkeypatch.setattr(Config, "MAX_SURFACE_PIXELS", 0)
        with pytest.raises(ResourceError):
            await extract_vibrant_colors(make_rgba(10, 10, (255, 0, 0)))

    @pytest.mark.asyncio
    async def test_taint_error(self, monkeypatch):
        png = encode_png(make_rgba(10, 10, (255, 0, 0)))

        class Response:
            content = png

            def raise_for_status(self):
                pass

        monkeypatch.setattr(imaging.requests, "get", lambda url, timeout=None: Response())
        monkeypatch.setattr(Config, "ALLOWED_ORIGINS", "https://cdn.example.com")

        with pytest.raises(TaintError):
            await extract_vibrant_colors("https://elsewhere.example.net/red.png", sample_scale=1.0)

        result = await extract_vibrant_colors("https://cdn.example.com/red.png", sample_scale=1.0)
        assert result.colors == ["#FF0000"]

    @pytest.mark.asyncio
    async def test_oversized_image_is_load_error(self, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
        with pytest.raises(LoadError):
            await extract_vibrant_colors(encode_png(make_rgba(20, 20, (255, 0, 0))))

        assert get_metrics().get_counters()["extract_failed_total_load_failed"] == 1

    @pytest.mark.asyncio
    async def test_failures_share_base_class(self):
        with pytest.raises(ColorExtractionError):
            await extract_vibrant_colors(make_rgba(10, 10, (128, 128, 128)))


class TestMetrics:

    @pytest.mark.asyncio
    async def test_success_metrics(self):
        await extract_vibrant_colors(make_rgba(10, 10, (255, 0, 0)), sample_scale=1.0)

        metrics = get_metrics()
        counters = metrics.get_counters()
        assert counters["extract_requests_total"] == 1
        assert counters["extract_format_total_hex"] == 1
        assert metrics.get_distribution("extract_duration_ms")["count"] == 1
        assert metrics.get_distribution("palette_size")["mean"] == 1.0

    @pytest.mark.asyncio
    async def test_failure_metrics(self):
        with pytest.raises(GrayscaleError):
            await extract_vibrant_colors(make_checkerboard(10, 10), sample_scale=1.0)

        counters = get_metrics().get_counters()
        assert counters["extract_requests_total"] == 1
        assert counters["extract_failed_total_grayscale_image"] == 1
        assert get_metrics().get_distribution("extract_duration_ms") == {}
