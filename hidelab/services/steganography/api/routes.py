"""
API routes for the Image Steganography Service
"""

import base64
import logging
import traceback
import uuid
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from PIL import Image
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse

from .. import __version__
from ..core.errors import StegoError
from ..core.service import ImageStegoService
from ..models.stego_models import OutputFormat, StegoCapacityResult, StegoLimits, StegoOptions
from ..utils.image_utils import load_image_from_bytes, read_image_input, save_lossless
from ..utils.validation import LimitExceeded, parse_seed, validate_image_size
from .responses import DecodeResponse, EncodeResponse, ErrorCodes, ErrorResponse, HealthResponse
from hidelab.utility.constants_manager import ServerConfig

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["stego"])

MEDIA_TYPES = {
    OutputFormat.png: "image/png",
    OutputFormat.bmp: "image/bmp",
    OutputFormat.tiff: "image/tiff",
}


def get_config(request: Request) -> ServerConfig:
    return request.app.state.config


def get_limits(config: ServerConfig) -> StegoLimits:
    return StegoLimits(
        max_image_bytes=config.max_image_bytes,
        max_message_bytes=config.max_message_bytes,
    )


def send_error(
    status_code: int,
    request_id: uuid.UUID,
    error_code: str,
    message: str,
    details: Optional[dict] = None,
) -> JSONResponse:
    """
    Helper function to send consistent error responses

    Args:
        status_code: HTTP status code
        request_id: Identifier of the failed request
        error_code: Stable machine-readable error code
        message: Human-readable message
        details: Optional additional details

    Returns:
        JSONResponse with the ErrorResponse body
    """
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            request_id=request_id,
            error_code=error_code,
            message=message,
            details=details or None,
        ).model_dump(mode="json"),
    )


def send_stego_error(exc: StegoError, request_id: uuid.UUID) -> JSONResponse:
    """Map a codec or limit error onto its HTTP status and error code."""
    status_code = 413 if isinstance(exc, LimitExceeded) else 400
    return send_error(status_code, request_id, exc.error_code, exc.message, exc.details)


def send_internal_error(request_id: uuid.UUID, action: str, exc: Exception) -> JSONResponse:
    logger.error(f"Unexpected error in {action}: {str(exc)}\n{traceback.format_exc()}")
    return send_error(500, request_id, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(status="ok", version=__version__)


@router.get("/ping", response_class=PlainTextResponse)
async def ping():
    return "pong"


def load_carrier(image: Optional[UploadFile], url: Optional[str], limits: StegoLimits) -> Image.Image:
    """
    Read the carrier from an upload or a URL, enforcing the image size limit

    Raises:
        ValueError: If neither an upload nor a URL was given
        ImageTooLarge: If the encoded image exceeds limits.max_image_bytes
        UnsupportedCarrierFormat: If the image cannot be fetched or decoded
    """
    data = image.file.read() if image is not None else None
    data = read_image_input(data, url)
    validate_image_size(limits, len(data))
    return load_image_from_bytes(data)


@router.post("/capacity", response_model=StegoCapacityResult)
def check_capacity(
    image: Optional[UploadFile] = File(None),
    url: Optional[str] = Form(None),
    config: ServerConfig = Depends(get_config),
):
    """
    Check how many payload bytes an image can carry

    Args:
        image: The image file to check
        url: Image URL, used when no file is uploaded

    Returns:
        StegoCapacityResult with capacity information
    """
    request_id = uuid.uuid4()
    try:
        cover = load_carrier(image, url, get_limits(config))
        return ImageStegoService(config.seed).capacity(cover)
    except StegoError as e:
        return send_stego_error(e, request_id)
    except ValueError as e:
        return send_error(400, request_id, ErrorCodes.VALIDATION_ERROR, str(e))
    except Exception as e:
        return send_internal_error(request_id, "capacity", e)


@router.post("/encode", response_model=EncodeResponse)
def encode(
    image: Optional[UploadFile] = File(None),
    url: Optional[str] = Form(None),
    message: Optional[str] = Form(None),
    message_file: Optional[UploadFile] = File(None),
    seed: Optional[str] = Form(None),
    output_format: str = Form("png"),
    config: ServerConfig = Depends(get_config),
):
    """
    Hide a message in an image

    Args:
        image: Cover image
        url: Cover image URL, used when no file is uploaded
        message: Text to hide
        message_file: File to hide, used when no text message is given
        seed: Optional matrix seed (decimal or 0x hex)
        output_format: Lossless output format (png, bmp, tiff)

    Returns:
        EncodeResponse with the download URL of the stego image
    """
    request_id = uuid.uuid4()
    limits = get_limits(config)
    try:
        source = image.filename if image is not None else url
        logger.info(f"Received encode request {request_id}: image={source}")

        if message is not None:
            payload = message.encode("utf-8")
        elif message_file is not None:
            payload = message_file.file.read()
        else:
            return send_error(400, request_id, ErrorCodes.VALIDATION_ERROR, "Missing message content")

        try:
            fmt = OutputFormat(output_format.strip().lower())
        except ValueError:
            return send_error(
                400,
                request_id,
                ErrorCodes.VALIDATION_ERROR,
                f"Unsupported output format {output_format!r}; lossy formats destroy the hidden message",
                {"allowed": [f.value for f in OutputFormat]},
            )

        options = StegoOptions(seed=parse_seed(seed), output_format=fmt, limits=limits)
        cover = load_carrier(image, url, limits)
        stego_img, result = ImageStegoService(config.seed).hide(cover, payload, options)

        image_id = uuid.uuid4()
        output_path = Path(config.upload_dir) / f"{image_id}.{fmt.value}"
        size_bytes = save_lossless(stego_img, output_path, fmt)

        return EncodeResponse(
            request_id=request_id,
            image_id=image_id,
            download_url=f"/api/images/{image_id}",
            metadata=result.metadata.model_copy(update={"size_bytes": size_bytes}),
        )
    except StegoError as e:
        logger.warning(f"Encode request {request_id} rejected: {e.message}")
        return send_stego_error(e, request_id)
    except ValueError as e:
        return send_error(400, request_id, ErrorCodes.VALIDATION_ERROR, str(e))
    except Exception as e:
        return send_internal_error(request_id, "encode", e)


@router.post("/decode", response_model=DecodeResponse)
def decode(
    image: Optional[UploadFile] = File(None),
    url: Optional[str] = Form(None),
    seed: Optional[str] = Form(None),
    raw: bool = Form(False),
    config: ServerConfig = Depends(get_config),
):
    """
    Extract a hidden message from an image

    Args:
        image: The stego image
        url: Stego image URL, used when no file is uploaded
        seed: Matrix seed used when encoding
        raw: Return every syndrome byte without header validation

    Returns:
        DecodeResponse with the message text (if UTF-8) and base64 bytes
    """
    request_id = uuid.uuid4()
    try:
        source = image.filename if image is not None else url
        logger.info(f"Received decode request {request_id}: image={source}, raw={raw}")

        stego_img = load_carrier(image, url, get_limits(config))
        service = ImageStegoService(config.seed)
        seed_value = parse_seed(seed)
        result = service.reveal_raw(stego_img, seed_value) if raw else service.reveal(stego_img, seed_value)

        return DecodeResponse(
            request_id=request_id,
            message=result.text,
            binary_message=base64.b64encode(result.payload).decode("ascii"),
            message_length=result.message_length,
            raw=result.raw,
        )
    except StegoError as e:
        logger.warning(f"Decode request {request_id} failed: {e.message}")
        return send_stego_error(e, request_id)
    except ValueError as e:
        return send_error(400, request_id, ErrorCodes.VALIDATION_ERROR, str(e))
    except Exception as e:
        return send_internal_error(request_id, "decode", e)


@router.get("/images/{image_id}")
def get_image(image_id: str, config: ServerConfig = Depends(get_config)):
    """Serve a stego image produced by /encode."""
    request_id = uuid.uuid4()
    try:
        parsed = uuid.UUID(image_id)
    except ValueError:
        return send_error(400, request_id, ErrorCodes.VALIDATION_ERROR, f"Invalid image id: {image_id}")

    for fmt, media_type in MEDIA_TYPES.items():
        path = Path(config.upload_dir) / f"{parsed}.{fmt.value}"
        if path.is_file():
            return FileResponse(path, media_type=media_type, filename=path.name)

    return send_error(404, request_id, ErrorCodes.NOT_FOUND, f"Image {image_id} not found")
