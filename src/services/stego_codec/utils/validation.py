"""
Validation utilities for steganography operations
"""

from typing import Optional

from PIL import Image

from .image_utils import calculate_pixel_count
from ..core.errors import InvalidImage
from ..models.stego_models import StegoLimits, SupportedFormat


SUPPORTED_FORMATS = [f.value for f in SupportedFormat]


def validate_image_format(image: Image.Image) -> str:
    """
    Validate that the image came from a lossless container

    Args:
        image: Opened PIL image

    Returns:
        The container format name

    Raises:
        InvalidImage: If the format is not PNG, BMP or TIFF
    """
    fmt = (image.format or "").upper()
    if fmt not in SUPPORTED_FORMATS:
        raise InvalidImage(
            f"Unsupported image format: {image.format or 'unknown'}. "
            f"Supported formats: {', '.join(SUPPORTED_FORMATS)}",
            {"format": image.format},
        )
    return fmt


def validate_file_size(size: int, max_bytes: Optional[int]) -> None:
    """
    Validate uploaded carrier size

    Raises:
        InvalidImage: If the carrier exceeds the limit
    """
    if max_bytes and size > max_bytes:
        raise InvalidImage(
            f"Image size ({size} bytes) exceeds maximum allowed ({max_bytes} bytes)",
            {"size": size, "max_bytes": max_bytes},
        )


def validate_pixel_count(image: Image.Image, max_pixels: Optional[int]) -> None:
    pixels = calculate_pixel_count(image)
    if pixels == 0:
        raise InvalidImage("Image has zero dimensions")
    if max_pixels and pixels > max_pixels:
        raise InvalidImage(
            f"Cover image exceeds allowed pixel count: {pixels} > {max_pixels}",
            {"pixels": pixels, "max_pixels": max_pixels},
        )


def validate_limits(limits: StegoLimits, image: Image.Image, file_size: Optional[int] = None) -> None:
    """
    Validate steganography limits

    Args:
        limits: StegoLimits object containing constraints
        image: Cover image
        file_size: Size of the uploaded container, if known

    Raises:
        InvalidImage: If any limits are exceeded
    """
    if file_size is not None:
        validate_file_size(file_size, limits.max_file_bytes)
    validate_pixel_count(image, limits.max_cover_pixels)
