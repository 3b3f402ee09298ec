from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import List, Optional

import numpy as np
from pydantic import BaseModel, Field

from ..core.errors import InvalidImage


USABLE_CHANNELS = 3


@dataclass(frozen=True)
class PixelBuffer:
    """
    Raw pixel data handed to the codec

    Row-major, channel-interleaved (R, G, B[, A]). The alpha channel, when
    present, is never written by the codec.
    """

    width: int
    height: int
    channels: int
    data: bytes

    def validate(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidImage(
                f"Image dimensions must be positive: {self.width}x{self.height}",
                {"width": self.width, "height": self.height},
            )
        if self.channels not in (3, 4):
            raise InvalidImage(
                f"Unsupported channel count: {self.channels} (expected 3 or 4)",
                {"channels": self.channels},
            )
        expected = self.width * self.height * self.channels
        if len(self.data) != expected:
            raise InvalidImage(
                f"Pixel data size mismatch: {len(self.data)} != {expected}",
                {"expected": expected, "actual": len(self.data)},
            )

    def as_array(self) -> np.ndarray:
        """Read-only flat uint8 view over the pixel data."""
        return np.frombuffer(self.data, dtype=np.uint8)

    def with_data(self, data: bytes) -> "PixelBuffer":
        return replace(self, data=bytes(data))


@dataclass(frozen=True)
class CapacityReport:
    total_bits: int
    header_bits: int
    available_payload_bytes: int

    @property
    def total_capacity_bytes(self) -> int:
        return self.total_bits // 8

    @property
    def header_overhead_bytes(self) -> int:
        return self.header_bits // 8

    @property
    def available_bytes(self) -> int:
        return self.available_payload_bytes


@dataclass(frozen=True)
class DecodeResult:
    payload: bytes
    encrypted: bool
    length: int


class SupportedFormat(str, Enum):
    PNG = "PNG"
    BMP = "BMP"
    TIFF = "TIFF"


class StegoLimits(BaseModel):
    max_file_bytes: Optional[int] = Field(default=None, description="Max size of an uploaded carrier in bytes")
    max_cover_pixels: Optional[int] = Field(default=None, description="Max total pixels allowed for cover image")


class StegoOptions(BaseModel):
    password: Optional[str] = None
    output_filename: Optional[str] = None
    limits: StegoLimits = Field(default_factory=StegoLimits)


class StegoTextHideRequest(BaseModel):
    text: str
    options: StegoOptions = Field(default_factory=StegoOptions)


class StegoTextRevealRequest(BaseModel):
    password: Optional[str] = None


class StegoCapacityResult(BaseModel):
    width: int
    height: int
    channels: int
    capacity_bits: int
    total_capacity_bytes: int
    available_bytes: int
    header_overhead_bytes: int
    max_bytes_with_password: int


class StegoHideResult(BaseModel):
    output_path: Optional[Path] = None
    used_capacity_bits: int
    payload_size_bytes: int
    frame_size_bytes: int
    available_bytes: int
    encrypted: bool = False
    encryption: Optional[str] = None
    kdf: Optional[str] = None
    channels_used: List[str] = Field(default_factory=lambda: ["R", "G", "B"])


class StegoRevealResult(BaseModel):
    data: bytes
    length: int
    encrypted: bool = False


class StegoRevealFileResult(BaseModel):
    output_path: Path
    size_bytes: int
    encrypted: bool = False


class StegoRevealTextResult(BaseModel):
    text: str
    length: int
    encrypted: bool = False


class StegoCheckResult(BaseModel):
    has_hidden_data: bool
    width: int
    height: int
    available_bytes: int
