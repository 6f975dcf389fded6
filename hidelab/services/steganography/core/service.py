"""
Main service class for Image Steganography operations
"""

import logging
from typing import Optional, Tuple

import numpy as np
from PIL import Image
from skimage.metrics import peak_signal_noise_ratio

from ..models.stego_models import (
    ImageMetadata,
    StegoCapacityResult,
    StegoHideResult,
    StegoOptions,
    StegoRevealResult,
)
from ..utils.image_utils import image_to_pixels, pixels_to_image
from ..utils.validation import validate_message_size
from .capacity import GROUP_SIZE, capacity_for_pixels, group_count, validate_pixels
from .header import HEADER_SIZE
from .steganography import decode, encode, extract_raw

logger = logging.getLogger(__name__)


def decode_text(payload: bytes) -> Optional[str]:
    """UTF-8 text of a payload, or None for binary data."""
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError:
        return None


class ImageStegoService:
    """
    Main service class for Image Steganography operations

    Works on Pillow images and delegates the bit-level work to the BLTM
    codec. Instances hold no per-request state and can be shared.
    """

    def __init__(self, default_seed: Optional[int] = None):
        self.default_seed = default_seed

    def _seed(self, seed: Optional[int]) -> Optional[int]:
        return self.default_seed if seed is None else seed

    def capacity(self, image: Image.Image) -> StegoCapacityResult:
        """
        Calculate steganography capacity for an image

        Args:
            image: Input image

        Returns:
            StegoCapacityResult with capacity information
        """
        pixels = image_to_pixels(image)
        height, width, channels = validate_pixels(pixels)
        groups = group_count(width, height, channels, GROUP_SIZE)

        return StegoCapacityResult(
            width=width,
            height=height,
            channels=channels,
            group_size=GROUP_SIZE,
            carrier_groups=groups,
            capacity_bits=groups * GROUP_SIZE,
            capacity_bytes=capacity_for_pixels(pixels),
            header_bytes=HEADER_SIZE,
        )

    def hide(
        self,
        cover: Image.Image,
        payload: bytes,
        options: Optional[StegoOptions] = None,
    ) -> Tuple[Image.Image, StegoHideResult]:
        """
        Hide a payload in an image

        Args:
            cover: Cover image, left unchanged
            payload: Bytes to hide
            options: Seed, output format and limits

        Returns:
            Tuple of (stego_image, result_metadata)

        Raises:
            MessageTooLarge: If the payload does not fit the image
            MessageLimitExceeded: If the payload exceeds the configured limit
        """
        options = options or StegoOptions()
        validate_message_size(options.limits, len(payload))

        pixels = image_to_pixels(cover)
        stego_pixels = encode(pixels, payload, self._seed(options.seed))

        flipped = int(np.count_nonzero(stego_pixels != pixels))
        psnr = None
        if flipped:
            psnr = float(peak_signal_noise_ratio(pixels, stego_pixels, data_range=255))

        height, width = pixels.shape[:2]
        metadata = ImageMetadata(
            width=width,
            height=height,
            format=options.output_format.value,
            max_message_bytes=capacity_for_pixels(pixels),
            embedded_message_bytes=len(payload),
            psnr=psnr,
        )
        logger.info(
            f"Embedded {len(payload)} bytes into {width}x{height} image, "
            f"{flipped} LSBs flipped"
        )

        result = StegoHideResult(
            payload_size_bytes=len(payload),
            used_capacity_bits=(HEADER_SIZE + len(payload)) * 8,
            flipped_bits=flipped,
            psnr=psnr,
            metadata=metadata,
        )
        return pixels_to_image(stego_pixels), result

    def hide_text(
        self,
        cover: Image.Image,
        text: str,
        options: Optional[StegoOptions] = None,
    ) -> Tuple[Image.Image, StegoHideResult]:
        """Hide UTF-8 encoded text in an image."""
        return self.hide(cover, text.encode("utf-8"), options)

    def reveal(self, stego_image: Image.Image, seed: Optional[int] = None) -> StegoRevealResult:
        """
        Reveal a payload hidden with ``hide``

        Raises:
            NoMessageFound: If the image carries no header
            CorruptHeader: If the header declares an impossible length
        """
        payload = decode(image_to_pixels(stego_image), self._seed(seed))
        logger.info(f"Recovered {len(payload)} bytes from image")
        return StegoRevealResult(
            payload=payload,
            text=decode_text(payload),
            message_length=len(payload),
        )

    def reveal_raw(self, stego_image: Image.Image, seed: Optional[int] = None) -> StegoRevealResult:
        """Every syndrome byte of the image, without header validation."""
        data = extract_raw(image_to_pixels(stego_image), self._seed(seed))
        return StegoRevealResult(payload=data, message_length=len(data), raw=True)
