"""
Frame format for embedded data

    magic "CAPN" (4) | payload length, big-endian u32 (4) | flag (1) | payload

When the flag is 1 the payload is an encrypted blob:

    salt (16) | iv (12) | auth tag (16) | ciphertext
"""

import struct
from dataclasses import dataclass, replace
from typing import Union

from ..models.stego_models import CapacityReport
from .bit_cursor import BitCursor
from .errors import AuthenticationFailed, CapacityExceeded, CorruptData, NoHiddenData


MAGIC = b"CAPN"
HEADER_FORMAT = ">4sIB"
HEADER_BYTES = struct.calcsize(HEADER_FORMAT)
MAX_PAYLOAD_LENGTH = 0xFFFFFFFF

FLAG_PLAIN = 0
FLAG_ENCRYPTED = 1

SALT_LENGTH = 16
IV_LENGTH = 12
TAG_LENGTH = 16
ENCRYPTED_OVERHEAD = SALT_LENGTH + IV_LENGTH + TAG_LENGTH


@dataclass(frozen=True)
class PlainPayload:
    data: bytes

    encrypted = False

    def to_bytes(self) -> bytes:
        return self.data


@dataclass(frozen=True)
class EncryptedPayload:
    salt: bytes
    iv: bytes
    auth_tag: bytes
    ciphertext: bytes

    encrypted = True

    def to_bytes(self) -> bytes:
        return self.salt + self.iv + self.auth_tag + self.ciphertext

    @classmethod
    def from_bytes(cls, blob: bytes) -> "EncryptedPayload":
        if len(blob) < ENCRYPTED_OVERHEAD:
            raise AuthenticationFailed(
                f"Encrypted payload too short: {len(blob)} < {ENCRYPTED_OVERHEAD} bytes",
                {"length": len(blob)},
            )
        iv_end = SALT_LENGTH + IV_LENGTH
        tag_end = iv_end + TAG_LENGTH
        return cls(
            salt=blob[:SALT_LENGTH],
            iv=blob[SALT_LENGTH:iv_end],
            auth_tag=blob[iv_end:tag_end],
            ciphertext=blob[tag_end:],
        )


Payload = Union[PlainPayload, EncryptedPayload]


@dataclass(frozen=True)
class Frame:
    magic: bytes
    payload_length: int
    encrypted_flag: int
    payload: bytes

    @property
    def encrypted(self) -> bool:
        return self.encrypted_flag == FLAG_ENCRYPTED

    def to_payload(self) -> Payload:
        if self.encrypted:
            return EncryptedPayload.from_bytes(self.payload)
        return PlainPayload(self.payload)


def serialize(payload: bytes, encrypted: bool) -> bytes:
    """
    Build the byte frame for a payload

    Args:
        payload: Payload bytes (already encrypted when ``encrypted`` is set)
        encrypted: Whether the payload is an encrypted blob

    Returns:
        Header followed by the payload
    """
    if len(payload) > MAX_PAYLOAD_LENGTH:
        raise CapacityExceeded(required=len(payload), available=MAX_PAYLOAD_LENGTH)
    flag = FLAG_ENCRYPTED if encrypted else FLAG_PLAIN
    return struct.pack(HEADER_FORMAT, MAGIC, len(payload), flag) + payload


def serialize_payload(payload: Payload) -> bytes:
    return serialize(payload.to_bytes(), payload.encrypted)


def read_header(cursor: BitCursor) -> Frame:
    """
    Read the 9 header bytes, leaving the cursor at the first payload bit

    The returned frame has an empty payload.
    """
    magic, length, flag = struct.unpack(HEADER_FORMAT, cursor.read_bytes(HEADER_BYTES))
    if magic != MAGIC:
        raise NoHiddenData("No hidden message found or invalid format")
    if flag not in (FLAG_PLAIN, FLAG_ENCRYPTED):
        raise CorruptData(f"Invalid encryption flag: {flag}", {"flag": flag})
    return Frame(magic=magic, payload_length=length, encrypted_flag=flag, payload=b"")


def validate_length(header: Frame, capacity: CapacityReport) -> None:
    if header.payload_length > capacity.available_payload_bytes:
        raise CorruptData(
            f"Invalid payload length {header.payload_length}: "
            f"carrier holds at most {capacity.available_payload_bytes} bytes",
            {"length": header.payload_length, "available": capacity.available_payload_bytes},
        )


def read_payload(cursor: BitCursor, header: Frame) -> Frame:
    return replace(header, payload=cursor.read_bytes(header.payload_length))


def parse(cursor: BitCursor, capacity: CapacityReport) -> Frame:
    """
    Parse a frame from the cursor's current position

    Args:
        cursor: Cursor positioned at the start of the frame
        capacity: Capacity of the carrier the cursor reads from

    Returns:
        Parsed frame

    Raises:
        NoHiddenData: If the magic bytes do not match
        CorruptData: If the flag or length are implausible for this carrier
    """
    header = read_header(cursor)
    validate_length(header, capacity)
    return read_payload(cursor, header)
