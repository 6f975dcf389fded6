"""
Capacity estimation for BLTM embedding
"""

from typing import Tuple

import numpy as np

from .errors import InvalidImageDimensions, UnsupportedCarrierFormat
from .header import HEADER_SIZE, MAX_PAYLOAD_LENGTH

# Carrier bits per group; one RGB pixel per group
GROUP_SIZE = 3
MIN_CHANNELS = 3
MAX_CHANNELS = 4


def _check_dimension(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidImageDimensions(f"{name} must be an integer, got {type(value).__name__}")
    if value <= 0:
        raise InvalidImageDimensions(f"{name} must be positive, got {value}", {name: int(value)})
    return int(value)


def group_count(width: int, height: int, channels: int, k: int = GROUP_SIZE) -> int:
    """
    Number of complete carrier bit groups in a width x height x channels grid

    Raises:
        InvalidImageDimensions: If any dimension or the group size is not positive
    """
    width = _check_dimension("width", width)
    height = _check_dimension("height", height)
    channels = _check_dimension("channels", channels)
    k = _check_dimension("group size", k)
    return (width * height * channels) // k


def capacity(width: int, height: int, channels: int, k: int = GROUP_SIZE) -> int:
    """
    Calculate how many payload bytes an image can carry

    Every complete group of k carrier bits yields k syndrome bits. The fixed
    header is subtracted and the result is rounded down to whole bytes.

    Args:
        width: Image width in pixels
        height: Image height in pixels
        channels: Channel values per pixel
        k: Carrier bits per group

    Returns:
        Usable payload bytes, 0 if the image cannot even hold the header

    Raises:
        InvalidImageDimensions: If any dimension is zero or negative
    """
    bits = group_count(width, height, channels, k) * k
    usable = bits // 8 - HEADER_SIZE
    return max(0, min(usable, MAX_PAYLOAD_LENGTH))


def validate_pixels(pixels: np.ndarray) -> Tuple[int, int, int]:
    """
    Check that a pixel buffer can act as a carrier

    Returns:
        Tuple of (height, width, channels)

    Raises:
        UnsupportedCarrierFormat: Wrong dtype, rank or channel layout
        InvalidImageDimensions: Zero-sized width or height
    """
    if not isinstance(pixels, np.ndarray):
        raise UnsupportedCarrierFormat(f"Pixel buffer must be a numpy array, got {type(pixels).__name__}")
    if pixels.dtype != np.uint8:
        raise UnsupportedCarrierFormat(f"Pixel values must be 8-bit, got dtype {pixels.dtype}")
    if pixels.ndim == 2:
        height, width = pixels.shape
        channels = 1
    elif pixels.ndim == 3:
        height, width, channels = pixels.shape
    else:
        raise UnsupportedCarrierFormat(f"Pixel buffer must be 2-D or 3-D, got {pixels.ndim} dimensions")

    if height == 0 or width == 0:
        raise InvalidImageDimensions(
            f"Image has no pixels ({width}x{height})", {"width": width, "height": height}
        )
    if channels < MIN_CHANNELS or channels > MAX_CHANNELS:
        raise UnsupportedCarrierFormat(
            f"Unsupported channel count {channels}, expected RGB or RGBA",
            {"channels": channels},
        )
    return height, width, channels


def capacity_for_pixels(pixels: np.ndarray, k: int = GROUP_SIZE) -> int:
    """Capacity of a validated (height, width, channels) pixel buffer."""
    height, width, channels = validate_pixels(pixels)
    return capacity(width, height, channels, k)
