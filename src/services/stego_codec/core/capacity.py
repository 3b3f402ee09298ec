"""
Capacity accounting for LSB embedding
"""

from ..models.stego_models import USABLE_CHANNELS, CapacityReport, PixelBuffer


# magic (32) + length (32) + encrypted flag (8)
HEADER_BITS = 72


def compute_capacity(width: int, height: int, channels: int) -> CapacityReport:
    """
    Calculate how many payload bytes fit in a carrier of the given geometry

    Only the first three channels of each pixel carry data; alpha is excluded.

    Args:
        width: Image width in pixels
        height: Image height in pixels
        channels: Channels per pixel (3 or 4)

    Returns:
        CapacityReport with total bits, header bits and available payload bytes
    """
    total_bits = width * height * min(channels, USABLE_CHANNELS)
    if total_bits < HEADER_BITS:
        available = 0
    else:
        available = (total_bits - HEADER_BITS) // 8

    return CapacityReport(
        total_bits=total_bits,
        header_bits=HEADER_BITS,
        available_payload_bytes=available,
    )


def capacity_for(buffer: PixelBuffer) -> CapacityReport:
    return compute_capacity(buffer.width, buffer.height, buffer.channels)
