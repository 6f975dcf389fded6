"""
Error types raised by the BLTM codec

Every error derives from ValueError so callers that only care about
"bad input" can keep catching ValueError. The ``error_code`` attribute is
the stable identifier surfaced by the HTTP layer.
"""

from typing import Any, Dict, Optional


class StegoError(ValueError):
    """Base class for all codec errors."""

    error_code = "internal_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class EncodeError(StegoError):
    """Errors that can abort an embed call."""


class DecodeError(StegoError):
    """Errors that can abort an extract call."""


class InvalidImageDimensions(EncodeError, DecodeError):
    error_code = "invalid_image"


class UnsupportedCarrierFormat(EncodeError, DecodeError):
    error_code = "invalid_image"


class MessageTooLarge(EncodeError):
    error_code = "message_too_large"


class NoMessageFound(DecodeError):
    error_code = "no_message_found"


class CorruptHeader(DecodeError):
    error_code = "corrupt_header"
