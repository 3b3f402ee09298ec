"""
API routes for the Image Steganography Service
"""

import base64
import logging
import os
import traceback
import uuid
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import JSONResponse

from src.utility.constants_manager import ConstantsManager

from ..core.errors import StegoError
from ..core.service import ImageStegoService
from ..models.stego_models import StegoLimits
from ..utils.image_utils import encode_png
from .responses import StegoAPIResult, status_for


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stego", tags=["stego"])

constants = ConstantsManager()
OUTPUT_DIR = Path(constants.get_output_dir())

# Service instance
stego_service = ImageStegoService(
    kdf_iterations=constants.get_kdf_iterations(),
    limits=StegoLimits(
        max_file_bytes=constants.get_max_file_size(),
        max_cover_pixels=constants.get_max_pixels(),
    ),
)


def send_response(
    status_code: int,
    message: str,
    path: Optional[str] = None,
    details: Optional[dict] = None
) -> JSONResponse:
    """
    Helper function to send consistent API responses

    Args:
        status_code: HTTP status code
        message: Response message
        path: Optional file path
        details: Optional additional details

    Returns:
        JSONResponse with consistent format
    """
    return JSONResponse(
        status_code=status_code,
        content=StegoAPIResult(
            success=status_code < 400,
            message=message,
            path=path,
            details=details
        ).model_dump()
    )


def send_error(e: Exception) -> JSONResponse:
    """Map an exception to an API error response."""
    if isinstance(e, StegoError):
        return send_response(status_for(e.code), str(e), None, {"code": e.code, **e.details})
    logger.error(f"Unexpected error: {e}\n{traceback.format_exc()}")
    return send_response(500, "Internal server error", None, {"code": "INTERNAL_ERROR"})


async def read_carrier(file: Optional[UploadFile], url: Optional[str]):
    """Open the carrier from an upload or, failing that, a URL."""
    if file is not None:
        return stego_service.open_image(await file.read())
    if url:
        return stego_service.open_url(url)
    return None


def missing_image() -> JSONResponse:
    return send_response(400, "No image file provided", None, {"code": "MISSING_IMAGE"})


@router.get("/formats", response_model=StegoAPIResult)
async def supported_formats():
    """List the lossless container formats accepted as carriers."""
    return send_response(200, "Supported formats", None, {"formats": stego_service.supported_formats()})


@router.post("/capacity", response_model=StegoAPIResult)
async def check_capacity(
    file: Optional[UploadFile] = File(None),
    url: Optional[str] = Form(None),
):
    """
    Check capacity of an image for steganography

    Args:
        file: The image file to check
        url: Image URL, used when no file is uploaded

    Returns:
        StegoAPIResult with capacity information
    """
    try:
        img = await read_carrier(file, url)
        if img is None:
            return missing_image()
        result = stego_service.capacity(img)
        return send_response(
            200,
            f"Image can hold {result.available_bytes} bytes",
            None,
            result.model_dump()
        )
    except Exception as e:
        return send_error(e)


@router.post("/encode", response_model=StegoAPIResult)
async def encode(
    file: UploadFile = File(...),
    text: Optional[str] = Form(None),
    secret: Optional[UploadFile] = File(None),
    password: Optional[str] = Form(None),
):
    """
    Hide a text message or a file in an image

    Args:
        file: Cover image
        text: Text to hide
        secret: File to hide (used when no text is given)
        password: Optional password for encryption

    Returns:
        StegoAPIResult with the path of the written PNG
    """
    try:
        if text is not None:
            data = text.encode("utf-8")
        elif secret is not None:
            data = await secret.read()
        else:
            return send_response(400, "Provide either text or a secret file to hide", None, {"code": "MISSING_PAYLOAD"})

        logger.info(f"Received encode request: filename={file.filename}, payload_len={len(data)}, encrypted={bool(password)}")

        cover = stego_service.open_image(await file.read())
        output_name = f"stego_{uuid.uuid4().hex}.png"
        stego_img, result = stego_service.hide(cover, data, password, output_name)

        os.makedirs(OUTPUT_DIR, exist_ok=True)
        output_path = OUTPUT_DIR / output_name
        output_path.write_bytes(encode_png(stego_img))

        return send_response(
            200,
            "Message hidden successfully",
            str(output_path),
            {
                "used_capacity_bits": result.used_capacity_bits,
                "payload_size_bytes": result.payload_size_bytes,
                "available_bytes": result.available_bytes,
                "encrypted": result.encrypted,
                "encryption": result.encryption,
                "kdf": result.kdf,
            }
        )
    except Exception as e:
        return send_error(e)


@router.post("/decode", response_model=StegoAPIResult)
async def decode(
    file: Optional[UploadFile] = File(None),
    url: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
):
    """
    Reveal the message hidden in an image

    Args:
        file: The steganographic image
        url: Image URL, used when no file is uploaded
        password: Password, required for encrypted messages

    Returns:
        StegoAPIResult with the revealed text, the raw payload in base64 and metadata
    """
    try:
        img = await read_carrier(file, url)
        if img is None:
            return missing_image()
        result = stego_service.reveal(img, password)
        return send_response(
            200,
            "Message revealed successfully",
            None,
            {
                "text": result.data.decode("utf-8", errors="replace"),
                "data_base64": base64.b64encode(result.data).decode("ascii"),
                "length": result.length,
                "encrypted": result.encrypted,
            }
        )
    except Exception as e:
        return send_error(e)


@router.post("/decode-file", response_model=StegoAPIResult)
async def decode_file(
    file: Optional[UploadFile] = File(None),
    url: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
):
    """
    Reveal the hidden payload and write it to a file

    Args:
        file: The steganographic image
        url: Image URL, used when no file is uploaded
        password: Password, required for encrypted messages

    Returns:
        StegoAPIResult with the path of the recovered file
    """
    try:
        img = await read_carrier(file, url)
        if img is None:
            return missing_image()
        result = stego_service.reveal_file(img, password, OUTPUT_DIR / "recovered")
        return send_response(
            200,
            f"Recovered {result.size_bytes} bytes",
            str(result.output_path),
            {
                "size_bytes": result.size_bytes,
                "encrypted": result.encrypted,
            }
        )
    except Exception as e:
        return send_error(e)


@router.post("/check", response_model=StegoAPIResult)
async def check(
    file: Optional[UploadFile] = File(None),
    url: Optional[str] = Form(None),
):
    """Report whether an image carries a hidden message."""
    try:
        img = await read_carrier(file, url)
        if img is None:
            return missing_image()
        result = stego_service.check(img)
        message = "Hidden data detected" if result.has_hidden_data else "No hidden data detected"
        return send_response(200, message, None, result.model_dump())
    except Exception as e:
        return send_error(e)
