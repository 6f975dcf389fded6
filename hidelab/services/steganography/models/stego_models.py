from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class OutputFormat(str, Enum):
    png = "png"
    bmp = "bmp"
    tiff = "tiff"


class StegoLimits(BaseModel):
    max_image_bytes: Optional[int] = Field(default=None, description="Max encoded size of an uploaded image")
    max_message_bytes: Optional[int] = Field(default=None, description="Absolute max bytes of secret content")


class StegoOptions(BaseModel):
    seed: Optional[int] = Field(default=None, ge=0, description="Matrix seed, omitted for the built-in default")
    output_format: OutputFormat = Field(default=OutputFormat.png, description="Lossless format of the stego image")
    limits: StegoLimits = Field(default_factory=StegoLimits)


class ImageMetadata(BaseModel):
    width: int
    height: int
    format: str
    size_bytes: int = 0
    max_message_bytes: int
    embedded_message_bytes: Optional[int] = None
    psnr: Optional[float] = None


class StegoCapacityResult(BaseModel):
    width: int
    height: int
    channels: int
    group_size: int
    carrier_groups: int
    capacity_bits: int
    capacity_bytes: int
    header_bytes: int


class StegoHideResult(BaseModel):
    payload_size_bytes: int
    used_capacity_bits: int
    flipped_bits: int
    psnr: Optional[float] = Field(default=None, description="PSNR in dB, None when no pixel changed")
    metadata: ImageMetadata


class StegoRevealResult(BaseModel):
    payload: bytes
    text: Optional[str] = None
    message_length: int
    raw: bool = False
