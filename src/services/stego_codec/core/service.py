"""
Main service class for Image Steganography operations
"""

import logging
import uuid
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Tuple

import httpx
from PIL import Image, UnidentifiedImageError

from ..models.stego_models import (
    StegoCapacityResult,
    StegoCheckResult,
    StegoHideResult,
    StegoLimits,
    StegoRevealFileResult,
    StegoRevealResult,
    StegoRevealTextResult,
    StegoTextHideRequest,
    StegoTextRevealRequest,
)
from ..utils.image_utils import fetch_image_bytes, image_to_pixel_buffer, pixel_buffer_to_image
from ..utils.validation import SUPPORTED_FORMATS, validate_image_format, validate_limits
from . import steganography
from .encryption import ENCRYPTION_NAME, KDF_NAME
from .errors import InvalidImage, StegoError
from .frame import ENCRYPTED_OVERHEAD, HEADER_BYTES


logger = logging.getLogger(__name__)


class ImageStegoService:
    """
    Main service class for Image Steganography operations

    Wraps the pure codec with image container handling, limits and logging.
    Codec errors propagate unchanged to the caller.
    """

    def __init__(self, kdf_iterations: Optional[int] = None, limits: Optional[StegoLimits] = None):
        self.kdf_iterations = kdf_iterations
        self.limits = limits or StegoLimits()

    def open_image(self, raw: bytes) -> Image.Image:
        """
        Open an uploaded carrier and check it against the service limits

        Args:
            raw: Encoded image container bytes

        Returns:
            Opened PIL image

        Raises:
            InvalidImage: If the bytes are not a supported, readable image
        """
        try:
            image = Image.open(BytesIO(raw))
        except (UnidentifiedImageError, OSError) as exc:
            raise InvalidImage("Failed to process image. Please ensure it is a valid image file.") from exc

        validate_image_format(image)
        validate_limits(self.limits, image, len(raw))

        try:
            image.load()
        except OSError as exc:
            raise InvalidImage("Image data is truncated or corrupt") from exc
        return image

    def open_url(self, url: str) -> Image.Image:
        """Fetch a carrier over HTTP and open it like an upload."""
        try:
            raw = fetch_image_bytes(url)
        except httpx.HTTPError as exc:
            raise InvalidImage(f"Failed to fetch image from {url}", {"url": url}) from exc
        return self.open_image(raw)

    def capacity(self, image: Image.Image) -> StegoCapacityResult:
        """
        Calculate steganography capacity for an image

        Args:
            image: Input image

        Returns:
            StegoCapacityResult with capacity information
        """
        buffer = image_to_pixel_buffer(image)
        report = steganography.capacity(buffer)

        return StegoCapacityResult(
            width=buffer.width,
            height=buffer.height,
            channels=buffer.channels,
            capacity_bits=report.total_bits,
            total_capacity_bytes=report.total_capacity_bytes,
            available_bytes=report.available_bytes,
            header_overhead_bytes=report.header_overhead_bytes,
            max_bytes_with_password=max(0, report.available_bytes - ENCRYPTED_OVERHEAD),
        )

    def hide(
        self,
        cover: Image.Image,
        data: bytes,
        password: Optional[str] = None,
        output_filename: Optional[str] = None,
    ) -> Tuple[Image.Image, StegoHideResult]:
        """
        Hide raw bytes in an image

        Args:
            cover: Cover image
            data: Bytes to hide
            password: Optional password for encryption
            output_filename: Name reported in the result

        Returns:
            Tuple of (stego_image, result_metadata)

        Raises:
            StegoError: If the cover is invalid or the payload does not fit
        """
        buffer = image_to_pixel_buffer(cover)
        try:
            encoded = steganography.encode(buffer, data, password, self.kdf_iterations)
        except StegoError as e:
            logger.warning(f"Encoding failed ({e.code}): {e}")
            raise

        encrypted = bool(password)
        payload_size = len(data) + (ENCRYPTED_OVERHEAD if encrypted else 0)
        frame_size = HEADER_BYTES + payload_size
        report = steganography.capacity(buffer)

        logger.info(
            f"Message encoded: payload={payload_size} bytes, encrypted={encrypted}, "
            f"image={buffer.width}x{buffer.height}x{buffer.channels}"
        )

        result = StegoHideResult(
            output_path=Path(output_filename) if output_filename else None,
            used_capacity_bits=frame_size * 8,
            payload_size_bytes=payload_size,
            frame_size_bytes=frame_size,
            available_bytes=report.available_bytes,
            encrypted=encrypted,
            encryption=ENCRYPTION_NAME if encrypted else None,
            kdf=KDF_NAME if encrypted else None,
        )
        return pixel_buffer_to_image(encoded), result

    def hide_text(self, cover: Image.Image, req: StegoTextHideRequest) -> Tuple[Image.Image, StegoHideResult]:
        options = req.options
        validate_limits(options.limits, cover)
        return self.hide(
            cover,
            req.text.encode("utf-8"),
            password=options.password,
            output_filename=options.output_filename,
        )

    def reveal(self, stego_image: Image.Image, password: Optional[str] = None) -> StegoRevealResult:
        """
        Reveal hidden bytes from a steganographic image

        Args:
            stego_image: Image with hidden data
            password: Password, required for encrypted payloads

        Returns:
            StegoRevealResult with the payload and metadata

        Raises:
            StegoError: If no valid frame is found or decryption fails
        """
        buffer = image_to_pixel_buffer(stego_image)
        try:
            decoded = steganography.decode(buffer, password, self.kdf_iterations)
        except StegoError as e:
            logger.warning(f"Decoding failed ({e.code}): {e}")
            raise

        logger.info(f"Message decoded: length={decoded.length} bytes, encrypted={decoded.encrypted}")
        return StegoRevealResult(data=decoded.payload, length=decoded.length, encrypted=decoded.encrypted)

    def reveal_text(self, stego_image: Image.Image, req: StegoTextRevealRequest) -> StegoRevealTextResult:
        result = self.reveal(stego_image, req.password)
        return StegoRevealTextResult(
            text=result.data.decode("utf-8", errors="replace"),
            length=result.length,
            encrypted=result.encrypted,
        )

    def reveal_file(
        self,
        stego_image: Image.Image,
        password: Optional[str],
        output_dir: Path,
    ) -> StegoRevealFileResult:
        """
        Reveal hidden bytes and write them to a file

        The payload is written unchanged, so binary secrets survive the round trip.

        Args:
            stego_image: Image with hidden data
            password: Password, required for encrypted payloads
            output_dir: Directory the recovered file is written to

        Returns:
            StegoRevealFileResult with the written path
        """
        result = self.reveal(stego_image, password)

        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / f"recovered_{uuid.uuid4().hex}.bin"
        output_path.write_bytes(result.data)

        logger.info(f"Recovered payload written to {output_path} ({result.length} bytes)")
        return StegoRevealFileResult(output_path=output_path, size_bytes=result.length, encrypted=result.encrypted)

    def check(self, image: Image.Image) -> StegoCheckResult:
        buffer = image_to_pixel_buffer(image)
        report = steganography.capacity(buffer)
        return StegoCheckResult(
            has_hidden_data=steganography.has_hidden_data(buffer),
            width=buffer.width,
            height=buffer.height,
            available_bytes=report.available_bytes,
        )

    def supported_formats(self) -> List[str]:
        return list(SUPPORTED_FORMATS)
