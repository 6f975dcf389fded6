"""
Fixed-width header framing the hidden payload

Layout (big endian, 8 bytes):
    magic (2s) | version (B) | reserved (B) | payload length (I)
"""

import struct
from typing import Optional

import numpy as np

from .errors import CorruptHeader, MessageTooLarge, NoMessageFound

MAGIC = b"HB"
VERSION = 1
HEADER_FORMAT = ">2sBBI"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
HEADER_BITS = HEADER_SIZE * 8
MAX_PAYLOAD_LENGTH = 0xFFFFFFFF


def bytes_to_bits(data: bytes) -> np.ndarray:
    """Unpack bytes into a uint8 array of bits, most significant bit first."""
    return np.unpackbits(np.frombuffer(data, dtype=np.uint8))


def bits_to_bytes(bits: np.ndarray) -> bytes:
    """Pack bits into bytes; a trailing partial byte is padded with zeros."""
    return np.packbits(np.asarray(bits, dtype=np.uint8)).tobytes()


def encode_header(payload_len: int) -> np.ndarray:
    """
    Build the header bits for a payload of the given length

    Raises:
        MessageTooLarge: If the length does not fit the 32-bit length field
    """
    if payload_len < 0 or payload_len > MAX_PAYLOAD_LENGTH:
        raise MessageTooLarge(
            f"Payload length {payload_len} cannot be represented in the header",
            {"payload_bytes": payload_len},
        )
    raw = struct.pack(HEADER_FORMAT, MAGIC, VERSION, 0, payload_len)
    return bytes_to_bits(raw)


def decode_header(bits: np.ndarray, capacity_bytes: Optional[int] = None) -> int:
    """
    Parse header bits back into the payload length

    Args:
        bits: At least HEADER_BITS extracted bits; extra bits are ignored
        capacity_bytes: Capacity of the carrying image, used to reject
            lengths no valid encode could have produced

    Returns:
        The payload length in bytes

    Raises:
        NoMessageFound: If there are too few bits or the magic/version tag does not match
        CorruptHeader: If the tag matches but the length exceeds the capacity
    """
    if len(bits) < HEADER_BITS:
        raise NoMessageFound("Image is too small to contain a message header")

    magic, version, _reserved, payload_len = struct.unpack(
        HEADER_FORMAT, bits_to_bytes(bits[:HEADER_BITS])
    )
    if magic != MAGIC:
        raise NoMessageFound("No message found in the image")
    if version != VERSION:
        raise NoMessageFound(
            f"Unsupported message format version: {version}", {"version": version}
        )

    if capacity_bytes is not None and payload_len > capacity_bytes:
        raise CorruptHeader(
            f"Header declares {payload_len} bytes but the image can hold at most {capacity_bytes}",
            {"message_length": payload_len, "max_message_bytes": capacity_bytes},
        )
    return payload_len
