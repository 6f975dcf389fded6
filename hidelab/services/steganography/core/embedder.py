"""
Matrix-encoding embedder

For each carrier group v and message block m the embedder finds the flip
vector e with A(v xor e) = m and toggles exactly the LSBs where e is 1.
"""

import numpy as np

from .capacity import capacity, group_count, validate_pixels
from .errors import MessageTooLarge
from .header import HEADER_SIZE, bytes_to_bits, encode_header
from .matrix import is_valid_bltm, solve_flips, syndrome


def frame(payload: bytes) -> np.ndarray:
    """Header followed by the payload, as a flat bit array."""
    return np.concatenate([encode_header(len(payload)), bytes_to_bits(payload)])


def pad_bits(bits: np.ndarray, k: int) -> np.ndarray:
    """Zero-pad a bit array to a whole number of k-bit blocks."""
    bits = np.asarray(bits, dtype=np.uint8)
    remainder = (-len(bits)) % k
    if remainder:
        bits = np.concatenate([bits, np.zeros(remainder, dtype=np.uint8)])
    return bits


def embed(cover: np.ndarray, framed_bits: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """
    Embed a framed bitstream into a copy of the cover pixels

    Args:
        cover: (height, width, channels) uint8 pixel buffer, left untouched
        framed_bits: Header and payload bits
        matrix: (k, k) BLTM shared with the extractor

    Returns:
        A new pixel buffer holding the stego image

    Raises:
        MessageTooLarge: If the bitstream needs more groups than the image has
    """
    if not is_valid_bltm(matrix):
        raise ValueError("Embedding matrix must be binary lower triangular with a unit diagonal")
    height, width, channels = validate_pixels(cover)
    k = matrix.shape[0]

    blocks = pad_bits(framed_bits, k)
    needed = len(blocks) // k
    available = group_count(width, height, channels, k)
    if needed > available:
        # Checked before any pixel is copied or touched
        raise MessageTooLarge(
            f"Message is too large for the given image: {needed} carrier groups needed, {available} available",
            {
                "message_bytes": max(0, len(framed_bits) // 8 - HEADER_SIZE),
                "groups_needed": needed,
                "groups_available": available,
            },
        )

    stego = cover.copy()
    flat = stego.reshape(-1)
    span = needed * k

    carriers = (flat[:span] & 1).reshape(needed, k)
    delta = syndrome(matrix, carriers) ^ blocks.reshape(needed, k)
    flips = solve_flips(matrix, delta)
    flat[:span] ^= flips.reshape(-1)
    return stego


def embed_payload(cover: np.ndarray, payload: bytes, matrix: np.ndarray) -> np.ndarray:
    """
    Frame a payload and embed it

    The payload length is checked against the capacity before the bit
    array, eight times the payload size, is built.
    """
    height, width, channels = validate_pixels(cover)
    available = capacity(width, height, channels, matrix.shape[0])
    if len(payload) > available:
        raise MessageTooLarge(
            f"Message is too large for the given image: {len(payload)} bytes, capacity {available} bytes",
            {"message_bytes": len(payload), "max_message_bytes": available},
        )
    return embed(cover, frame(payload), matrix)
