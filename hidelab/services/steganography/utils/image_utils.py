"""
Image utility functions bridging Pillow images and codec pixel buffers
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

import httpx
import numpy as np
from PIL import Image, UnidentifiedImageError

from ..core.errors import UnsupportedCarrierFormat
from ..models.stego_models import OutputFormat

# Pillow format names for the lossless outputs we allow
PIL_FORMATS = {
    OutputFormat.png: "PNG",
    OutputFormat.bmp: "BMP",
    OutputFormat.tiff: "TIFF",
}


def _http_client(timeout: float) -> httpx.Client:
    return httpx.Client(timeout=timeout, follow_redirects=True)


def read_image_input(data: Optional[bytes] = None, url: Optional[str] = None, timeout: float = 30.0) -> bytes:
    """
    Raw bytes of an uploaded image, or of one fetched from a URL

    Args:
        data: Uploaded image bytes, preferred when given
        url: HTTP(S) URL to fetch the image from
        timeout: Fetch timeout in seconds

    Returns:
        The encoded image bytes

    Raises:
        ValueError: If neither an upload nor a URL is provided
        UnsupportedCarrierFormat: If the URL cannot be fetched
    """
    if data is not None:
        return data
    if url:
        try:
            with _http_client(timeout) as client:
                resp = client.get(url)
                resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise UnsupportedCarrierFormat(f"Failed to fetch image from {url}: {exc}", {"url": url}) from exc
        return resp.content
    raise ValueError("Provide an image upload or url")


def load_image_from_bytes(data: bytes) -> Image.Image:
    """
    Decode image bytes, forcing the pixel data to load

    Raises:
        UnsupportedCarrierFormat: If Pillow cannot identify or decode the data
    """
    try:
        image = Image.open(BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise UnsupportedCarrierFormat(f"Failed to load image: {exc}") from exc
    return image


def ensure_carrier_mode(image: Image.Image) -> Image.Image:
    """
    Normalise an image to RGB or RGBA

    RGB and RGBA images are returned unchanged; images with transparency
    become RGBA, everything else RGB.
    """
    if image.mode in ("RGB", "RGBA"):
        return image
    if image.mode in ("LA", "PA") or (image.mode == "P" and "transparency" in image.info):
        return image.convert("RGBA")
    return image.convert("RGB")


def image_to_pixels(image: Image.Image) -> np.ndarray:
    """Pixel buffer of shape (height, width, channels) for a carrier image."""
    return np.array(ensure_carrier_mode(image), dtype=np.uint8)


def pixels_to_image(pixels: np.ndarray) -> Image.Image:
    """Wrap an RGB or RGBA pixel buffer back into a Pillow image."""
    return Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))


def encode_lossless(image: Image.Image, fmt: Union[OutputFormat, str] = OutputFormat.png) -> bytes:
    """
    Serialise an image in a lossless format

    Raises:
        UnsupportedCarrierFormat: For formats that would destroy the hidden payload
    """
    try:
        fmt = OutputFormat(str(getattr(fmt, "value", fmt)).lower())
    except ValueError as exc:
        raise UnsupportedCarrierFormat(
            f"Output format {fmt!r} is not lossless; use one of {[f.value for f in OutputFormat]}"
        ) from exc

    buffer = BytesIO()
    image.save(buffer, format=PIL_FORMATS[fmt])
    return buffer.getvalue()


def save_lossless(image: Image.Image, path: Path, fmt: Union[OutputFormat, str] = OutputFormat.png) -> int:
    """Write an image losslessly and return the number of bytes written."""
    data = encode_lossless(image, fmt)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return len(data)

