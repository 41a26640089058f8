"""
Vibrant Palette Imaging Utilities
Loads image sources, draws them onto a scaled RGBA surface and reads the
pixels back for sampling.
"""
import asyncio
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Tuple
from urllib.parse import urlsplit

import cv2
import numpy as np
import requests
from PIL import Image, UnidentifiedImageError

from vibrant.config import config
from vibrant.services.colors.errors import LoadError, ResourceError, TaintError


@dataclass(frozen=True)
class DecodedImage:
    """A fully decoded image plus where it came from."""
    image: Image.Image
    origin: Optional[str] = None
    tainted: bool = False

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


def get_origin(url: str) -> str:
    """Return ``scheme://host[:port]`` for a URL, lowercased."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}".lower()


def is_origin_allowed(origin: str) -> bool:
    """An empty allow-list trusts every origin."""
    allowed = config.allowed_origins()
    return not allowed or origin in allowed


def _is_url(source: Any) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def _decode_bytes(data: bytes) -> Image.Image:
    if len(data) > config.MAX_FILE_MB * 1024 * 1024:
        raise LoadError(f"Image too large. Maximum size: {config.MAX_FILE_MB}MB")
    try:
        image = Image.open(io.BytesIO(data))
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise LoadError(f"Failed to decode image: {str(e)}") from e
    return _ensure_decoded(image)


def _ensure_decoded(image: Image.Image) -> Image.Image:
    """Force lazy decoding so truncated or oversized data fails at load time."""
    try:
        image.load()
    except (Image.DecompressionBombError, OSError, ValueError) as e:
        raise LoadError(f"Failed to decode image: {str(e)}") from e
    return image


def _fetch_url(url: str) -> bytes:
    try:
        response = requests.get(url, timeout=config.FETCH_TIMEOUT_SECONDS)
        response.raise_for_status()
    except requests.RequestException as e:
        raise LoadError(f"Image loading failed: {str(e)}") from e
    return response.content


def _array_to_image(array: np.ndarray) -> Image.Image:
    if array.ndim != 3 or array.shape[2] not in (3, 4):
        raise LoadError(f"Expected an H×W×3 or H×W×4 array, got shape {array.shape}")
    if array.shape[0] == 0 or array.shape[1] == 0:
        raise LoadError("Image has no pixels")
    return Image.fromarray(np.ascontiguousarray(array, dtype=np.uint8))


def load_image_sync(source: Any) -> DecodedImage:
    """
    Resolve an image source to a decoded image.

    Args:
        source: PIL image, numpy array, encoded bytes, file path or http(s) URL

    Returns:
        DecodedImage; remote images from untrusted origins come back tainted

    Raises:
        LoadError: If the source cannot be fetched or decoded
    """
    if isinstance(source, DecodedImage):
        return source

    if isinstance(source, Image.Image):
        return DecodedImage(image=_ensure_decoded(source))

    if isinstance(source, np.ndarray):
        return DecodedImage(image=_array_to_image(source))

    if isinstance(source, (bytes, bytearray, memoryview)):
        return DecodedImage(image=_decode_bytes(bytes(source)))

    if _is_url(source):
        origin = get_origin(source)
        image = _decode_bytes(_fetch_url(source))
        return DecodedImage(image=image, origin=origin, tainted=not is_origin_allowed(origin))

    if isinstance(source, (str, Path)):
        try:
            data = Path(source).read_bytes()
        except OSError as e:
            raise LoadError(f"Image loading failed: {str(e)}") from e
        return DecodedImage(image=_decode_bytes(data))

    raise LoadError(f"Unsupported image source type: {type(source).__name__}")


async def load_image(source: Any) -> DecodedImage:
    """Load an image source without blocking the event loop."""
    return await asyncio.to_thread(load_image_sync, source)


def get_surface_dimensions(width: int, height: int, sample_scale: float) -> Tuple[int, int]:
    """
    Size of the drawing surface for an image drawn at ``sample_scale``.

    Dimensions are truncated and never drop below one pixel.
    """
    return max(1, int(width * sample_scale)), max(1, int(height * sample_scale))


def draw_to_surface(decoded: DecodedImage, sample_scale: float) -> np.ndarray:
    """
    Draw the image onto an RGBA surface scaled by ``sample_scale``.

    Returns:
        H×W×4 uint8 array in RGBA order

    Raises:
        ResourceError: If the surface cannot be allocated or drawn onto
    """
    surface_w, surface_h = get_surface_dimensions(decoded.width, decoded.height, sample_scale)
    if surface_w * surface_h > config.MAX_SURFACE_PIXELS:
        raise ResourceError(
            f"Drawing surface too large: {surface_w}×{surface_h} exceeds "
            f"{config.MAX_SURFACE_PIXELS} pixels"
        )

    try:
        rgba = np.asarray(decoded.image.convert("RGBA"), dtype=np.uint8)
        if (surface_w, surface_h) == (decoded.width, decoded.height):
            return np.ascontiguousarray(rgba)
        # INTER_AREA for downscaling (better quality)
        return cv2.resize(rgba, (surface_w, surface_h), interpolation=cv2.INTER_AREA)
    except (cv2.error, MemoryError, ValueError, OSError) as e:
        raise ResourceError(f"Unable to obtain drawing surface: {str(e)}") from e


def read_pixels(decoded: DecodedImage, surface: np.ndarray) -> bytes:
    """
    Read the surface back as row-major RGBA bytes.

    Raises:
        TaintError: If the image is cross-origin tainted or readback fails
    """
    if decoded.tainted:
        raise TaintError(f"Surface was tainted by cross-origin data from {decoded.origin}")
    try:
        return np.ascontiguousarray(surface, dtype=np.uint8).tobytes()
    except Exception as e:
        raise TaintError(f"Pixel readback failed: {str(e)}") from e


def render_pixel_buffer(decoded: DecodedImage, sample_scale: float) -> Tuple[bytes, int, int]:
    """
    Draw and read back an image for sampling.

    Returns:
        Tuple of (rgba_bytes, width, height)
    """
    surface = draw_to_surface(decoded, sample_scale)
    height, width = surface.shape[:2]
    return read_pixels(decoded, surface), width, height
