"""
API response models for the Image Steganography Service
"""

import uuid
from typing import Any, Dict, Optional

from pydantic import BaseModel

from ..models.stego_models import ImageMetadata


class ErrorCodes:
    VALIDATION_ERROR = "validation_error"
    IMAGE_TOO_LARGE = "image_too_large"
    MESSAGE_TOO_LARGE = "message_too_large"
    INVALID_IMAGE = "invalid_image"
    NO_MESSAGE_FOUND = "no_message_found"
    CORRUPT_HEADER = "corrupt_header"
    INTERNAL_ERROR = "internal_error"
    NOT_FOUND = "not_found"


class HealthResponse(BaseModel):
    status: str
    version: str


class EncodeResponse(BaseModel):
    """
    Successful encode: where to download the stego image and what it holds
    """
    request_id: uuid.UUID
    status: str = "success"
    image_id: uuid.UUID
    download_url: str
    metadata: ImageMetadata


class DecodeResponse(BaseModel):
    """
    Successful decode; ``message`` is only set when the payload is UTF-8 text
    """
    request_id: uuid.UUID
    status: str = "success"
    message: Optional[str] = None
    binary_message: str
    message_length: int
    raw: bool = False


class ErrorResponse(BaseModel):
    """
    Standard error response model
    """
    request_id: uuid.UUID
    status: str = "error"
    error_code: str
    message: str
    details: Optional[Dict[str, Any]] = None
