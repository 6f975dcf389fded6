"""
Public BLTM codec surface: capacity, encode, decode and raw extraction

All functions work on raw pixel buffers (numpy uint8 arrays shaped
(height, width, channels)) and raise the structured errors from
``core.errors``. A fresh matrix is generated from the seed on every call.
"""

from typing import Optional

import numpy as np

from . import matrix as bltm
from .capacity import GROUP_SIZE, capacity, capacity_for_pixels
from .embedder import embed_payload
from .extractor import extract
from .raw import extract_raw_bits

__all__ = ["capacity", "capacity_for_pixels", "encode", "decode", "extract_raw"]


def encode(cover_pixels: np.ndarray, payload: bytes, seed: Optional[int] = None) -> np.ndarray:
    """
    Hide a payload in a cover image

    Args:
        cover_pixels: Cover pixel buffer; never mutated
        payload: Bytes to hide
        seed: Matrix seed, None for the built-in default

    Returns:
        A new pixel buffer with the payload embedded

    Raises:
        InvalidImageDimensions, UnsupportedCarrierFormat, MessageTooLarge
    """
    matrix = bltm.generate(seed, GROUP_SIZE)
    return embed_payload(cover_pixels, bytes(payload), matrix)


def decode(stego_pixels: np.ndarray, seed: Optional[int] = None) -> bytes:
    """
    Recover a payload hidden with ``encode`` using the same seed

    Raises:
        InvalidImageDimensions, UnsupportedCarrierFormat, NoMessageFound, CorruptHeader
    """
    matrix = bltm.generate(seed, GROUP_SIZE)
    return extract(stego_pixels, matrix)


def extract_raw(stego_pixels: np.ndarray, seed: Optional[int] = None) -> bytes:
    """Every syndrome bit in the image as bytes, with no header validation."""
    matrix = bltm.generate(seed, GROUP_SIZE)
    return extract_raw_bits(stego_pixels, matrix)
