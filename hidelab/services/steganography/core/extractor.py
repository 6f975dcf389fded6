"""
Syndrome extraction, the inverse of the embedder

The message block of a group is simply A @ v over GF(2); no knowledge of
which bits were flipped is needed.
"""

import numpy as np

from .capacity import capacity, group_count, validate_pixels
from .errors import NoMessageFound
from .header import HEADER_BITS, bits_to_bytes, decode_header
from .matrix import is_valid_bltm, syndrome


def read_syndromes(pixels: np.ndarray, matrix: np.ndarray, n_groups: int) -> np.ndarray:
    """Syndrome bits of the first n_groups carrier groups, flattened."""
    k = matrix.shape[0]
    flat = pixels.reshape(-1)
    carriers = (flat[: n_groups * k] & 1).reshape(n_groups, k)
    return syndrome(matrix, carriers).reshape(-1)


def extract(stego: np.ndarray, matrix: np.ndarray) -> bytes:
    """
    Recover the payload hidden in a pixel buffer

    Args:
        stego: (height, width, channels) uint8 pixel buffer, not modified
        matrix: The BLTM used when embedding

    Returns:
        The payload bytes

    Raises:
        NoMessageFound: If the header tag is missing
        CorruptHeader: If the declared length cannot fit this image
    """
    if not is_valid_bltm(matrix):
        raise ValueError("Embedding matrix must be binary lower triangular with a unit diagonal")
    height, width, channels = validate_pixels(stego)
    k = matrix.shape[0]

    header_groups = -(-HEADER_BITS // k)
    if header_groups > group_count(width, height, channels, k):
        raise NoMessageFound("Image is too small to contain a message header")

    header_bits = read_syndromes(stego, matrix, header_groups)
    payload_len = decode_header(header_bits, capacity(width, height, channels, k))

    total_bits = HEADER_BITS + payload_len * 8
    bits = read_syndromes(stego, matrix, -(-total_bits // k))
    return bits_to_bytes(bits[HEADER_BITS:total_bits])
