"""
Validation utilities for steganography requests
"""

from typing import Optional

from ..core.errors import StegoError
from ..models.stego_models import StegoLimits


class LimitExceeded(StegoError):
    """An upload exceeded a configured size limit."""


class ImageTooLarge(LimitExceeded):
    error_code = "image_too_large"


class MessageLimitExceeded(LimitExceeded):
    error_code = "message_too_large"


def validate_image_size(limits: StegoLimits, image_size: int) -> None:
    """
    Validate the encoded size of an uploaded image

    Raises:
        ImageTooLarge: If the upload exceeds limits.max_image_bytes
    """
    if limits.max_image_bytes and image_size > limits.max_image_bytes:
        raise ImageTooLarge(
            f"Image exceeds allowed size: {image_size} > {limits.max_image_bytes} bytes",
            {"size_bytes": image_size, "max_image_bytes": limits.max_image_bytes},
        )


def validate_message_size(limits: StegoLimits, payload_size: int) -> None:
    """
    Validate the size of a secret payload against the configured limit

    Raises:
        MessageLimitExceeded: If the payload exceeds limits.max_message_bytes
    """
    if limits.max_message_bytes and payload_size > limits.max_message_bytes:
        raise MessageLimitExceeded(
            f"Secret data exceeds allowed bytes: {payload_size} > {limits.max_message_bytes}",
            {"message_bytes": payload_size, "max_message_bytes": limits.max_message_bytes},
        )


def parse_seed(value: Optional[str]) -> Optional[int]:
    """
    Parse an optional seed given as text (decimal or 0x-prefixed hex)

    Raises:
        ValueError: If the value is not a non-negative integer
    """
    if value is None or value.strip() == "":
        return None
    try:
        seed = int(value.strip(), 0)
    except ValueError as exc:
        raise ValueError(f"Invalid seed: {value!r}") from exc
    if seed < 0:
        raise ValueError(f"Invalid seed: {value!r}, must be non-negative")
    return seed
