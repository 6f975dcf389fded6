"""
Raw syndrome extraction without header validation, for inspecting carriers
"""

import struct

import numpy as np

from .capacity import group_count, validate_pixels
from .header import HEADER_FORMAT, HEADER_SIZE, MAGIC, VERSION, bits_to_bytes
from .extractor import read_syndromes


def extract_raw_bits(stego: np.ndarray, matrix: np.ndarray) -> bytes:
    """Syndrome stream of every complete carrier group, packed into bytes."""
    height, width, channels = validate_pixels(stego)
    k = matrix.shape[0]
    bits = read_syndromes(stego, matrix, group_count(width, height, channels, k))
    return bits_to_bytes(bits)


def format_data_preview(data: bytes, n: int = 32) -> str:
    """
    Render the first n bytes as hex, binary and ASCII, and interpret the
    leading bytes as a header when enough are available
    """
    n = min(n, len(data))
    lines = ["Raw data preview:"]

    if len(data) >= HEADER_SIZE:
        magic, version, reserved, length = struct.unpack(HEADER_FORMAT, data[:HEADER_SIZE])
        tag_ok = magic == MAGIC and version == VERSION
        lines.append(
            f"Header: magic={magic!r} version={version} reserved={reserved} "
            f"length={length} ({'valid' if tag_ok else 'invalid'} tag)"
        )

    lines.append(f"First {n} bytes:")
    lines.append("Offset  Hex  Binary    ASCII")
    for offset, byte in enumerate(data[:n]):
        char = chr(byte) if 32 <= byte < 127 else "."
        lines.append(f"{offset:06x}  {byte:02x}   {byte:08b}  {char}")

    if len(data) > n:
        lines.append(f"... {len(data) - n} more bytes")
    return "\n".join(lines)
