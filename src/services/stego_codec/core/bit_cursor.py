"""
Bit cursor over the usable channel bytes of a pixel buffer

Scan order is fixed: pixels row-major, and within each pixel the R, G and B
channels in that order. Alpha is never visited. One bit is stored in the
least significant bit of each visited byte, most significant bit of each
source byte first.
"""

import numpy as np

from ..models.stego_models import USABLE_CHANNELS, PixelBuffer
from .errors import CapacityExceeded, CorruptData


class BitCursor:
    """
    Forward-only position over the usable channel bytes of a buffer

    The cursor never moves backwards. Reading a header and then the payload
    must go through the same instance so both streams stay aligned.
    """

    def __init__(self, samples: np.ndarray, channels: int):
        if samples.ndim != 1 or samples.dtype != np.uint8:
            raise ValueError("samples must be a flat uint8 array")
        self._samples = samples
        self._channels = channels
        self._total = (samples.size // channels) * min(channels, USABLE_CHANNELS)
        self._position = 0

    @classmethod
    def reader(cls, buffer: PixelBuffer) -> "BitCursor":
        return cls(buffer.as_array(), buffer.channels)

    @property
    def position(self) -> int:
        """Number of channel bits consumed so far."""
        return self._position

    @property
    def pixel_index(self) -> int:
        return self._position // USABLE_CHANNELS

    @property
    def channel_index(self) -> int:
        return self._position % USABLE_CHANNELS

    @property
    def bit_offset(self) -> int:
        """Bit within the current source byte (0 is the most significant)."""
        return self._position % 8

    @property
    def total_bits(self) -> int:
        return self._total

    @property
    def remaining(self) -> int:
        return self._total - self._position

    def _offsets(self, count: int) -> np.ndarray:
        idx = np.arange(self._position, self._position + count, dtype=np.int64)
        return (idx // USABLE_CHANNELS) * self._channels + idx % USABLE_CHANNELS

    def read_bits(self, count: int) -> np.ndarray:
        if count < 0:
            raise ValueError("count must be non-negative")
        if count > self.remaining:
            raise CorruptData(
                f"Carrier too short: {count} bits requested, {self.remaining} remaining",
                {"requested_bits": count, "remaining_bits": self.remaining},
            )
        bits = self._samples[self._offsets(count)] & 1
        self._position += count
        return bits.astype(np.uint8)

    def read_bytes(self, count: int) -> bytes:
        return np.packbits(self.read_bits(count * 8)).tobytes()

    def write_bits(self, bits) -> None:
        bits = np.asarray(bits, dtype=np.uint8)
        count = bits.size
        if count > self.remaining:
            raise CapacityExceeded(required=-(-count // 8), available=self.remaining // 8)
        offsets = self._offsets(count)
        self._samples[offsets] = (self._samples[offsets] & 0xFE) | (bits & 1)
        self._position += count

    def write_bytes(self, data: bytes) -> None:
        self.write_bits(np.unpackbits(np.frombuffer(data, dtype=np.uint8)))


def embed(buffer: PixelBuffer, data: bytes) -> PixelBuffer:
    """
    Write ``data`` into a copy of ``buffer`` starting at the first channel

    Args:
        buffer: Carrier pixels (left untouched)
        data: Bytes to store

    Returns:
        New PixelBuffer holding the embedded bits
    """
    work = np.array(buffer.as_array(), dtype=np.uint8, copy=True)
    cursor = BitCursor(work, buffer.channels)
    cursor.write_bytes(data)
    return buffer.with_data(work.tobytes())


def extract(cursor: BitCursor, count: int) -> np.ndarray:
    """Read ``count`` bits from where ``cursor`` currently stands."""
    return cursor.read_bits(count)
