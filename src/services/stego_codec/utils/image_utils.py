"""
Image utility functions for steganography operations
"""

import httpx
from io import BytesIO
from PIL import Image

import numpy as np

from ..models.stego_models import PixelBuffer


def fetch_image_bytes(url: str) -> bytes:
    """
    Download an image container from a URL

    Args:
        url: URL to fetch image from

    Returns:
        Raw container bytes

    Raises:
        httpx.HTTPError: If the request fails or returns an error status
    """
    with httpx.Client(timeout=30, follow_redirects=True) as client:
        resp = client.get(url)
        resp.raise_for_status()
        return resp.content


def has_transparency(image: Image.Image) -> bool:
    if image.mode in ("RGBA", "LA", "PA"):
        return True
    return image.mode == "P" and "transparency" in image.info


def image_to_pixel_buffer(image: Image.Image) -> PixelBuffer:
    """
    Convert a PIL image to a raw pixel buffer

    RGBA stays RGBA; palette or grayscale images with transparency become
    RGBA; everything else becomes RGB.

    Args:
        image: Input PIL Image

    Returns:
        PixelBuffer with 3 or 4 channels
    """
    mode = "RGBA" if has_transparency(image) else "RGB"
    if image.mode != mode:
        image = image.convert(mode)
    arr = np.asarray(image, dtype=np.uint8)
    height, width, channels = arr.shape
    return PixelBuffer(width=width, height=height, channels=channels, data=arr.tobytes())


def pixel_buffer_to_image(buffer: PixelBuffer) -> Image.Image:
    arr = buffer.as_array().reshape(buffer.height, buffer.width, buffer.channels)
    return Image.fromarray(arr)


def encode_png(image: Image.Image) -> bytes:
    """Serialize an image as PNG (lossless)."""
    out = BytesIO()
    image.save(out, format="PNG", compress_level=9)
    return out.getvalue()


def get_image_dimensions(image: Image.Image) -> tuple[int, int]:
    return image.size


def calculate_pixel_count(image: Image.Image) -> int:
    """
    Calculate total number of pixels in image

    Args:
        image: PIL Image object

    Returns:
        Total pixel count
    """
    width, height = get_image_dimensions(image)
    return width * height
