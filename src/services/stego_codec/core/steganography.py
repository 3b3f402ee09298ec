"""
Core steganography operations: encode and decode a frame in a pixel buffer

These functions are pure. They never mutate their input, keep no state
between calls and do not log; every failure is raised as a StegoError.
"""

from enum import Enum
from typing import Optional

from ..models.stego_models import CapacityReport, DecodeResult, PixelBuffer
from .bit_cursor import BitCursor, embed
from .capacity import capacity_for
from .encryption import decrypt_payload, encrypt
from .errors import CapacityExceeded, CorruptData, NoHiddenData, PasswordRequired, StegoError
from .frame import (
    HEADER_BYTES,
    PlainPayload,
    read_header,
    read_payload,
    serialize_payload,
    validate_length,
)


class DecodeState(str, Enum):
    INIT = "init"
    HEADER_READ = "header_read"
    LENGTH_VALIDATED = "length_validated"
    PAYLOAD_READ = "payload_read"
    DECRYPT = "decrypt"
    DONE = "done"


def capacity(buffer: PixelBuffer) -> CapacityReport:
    """Capacity of a carrier after header overhead."""
    buffer.validate()
    return capacity_for(buffer)


def encode(
    buffer: PixelBuffer,
    data: bytes,
    password: Optional[str] = None,
    iterations: Optional[int] = None,
) -> PixelBuffer:
    """
    Hide ``data`` in a copy of ``buffer``

    Args:
        buffer: Carrier pixels
        data: Payload bytes
        password: Optional passphrase; when given the payload is encrypted
        iterations: KDF iteration count for encryption

    Returns:
        New PixelBuffer with the frame embedded from the first channel

    Raises:
        InvalidImage: If the buffer fails structural checks
        CapacityExceeded: If the frame does not fit
    """
    buffer.validate()

    if password:
        payload = encrypt(data, password, iterations)
    else:
        payload = PlainPayload(data)

    frame = serialize_payload(payload)
    report = capacity_for(buffer)
    required = len(frame) - HEADER_BYTES
    if required > report.available_payload_bytes or report.total_bits < report.header_bits:
        raise CapacityExceeded(required=required, available=report.available_payload_bytes)

    return embed(buffer, frame)


def decode(
    buffer: PixelBuffer,
    password: Optional[str] = None,
    iterations: Optional[int] = None,
) -> DecodeResult:
    """
    Recover the payload hidden in ``buffer``

    The header and the payload are read through one cursor, so the payload
    bits start exactly where the header bits end. A failure at any step
    aborts the decode; the last state reached is recorded in the error's
    ``details["state"]``.

    Args:
        buffer: Carrier pixels
        password: Passphrase, required when the frame is encrypted
        iterations: KDF iteration count used at encode time

    Returns:
        DecodeResult with the plaintext and frame metadata

    Raises:
        InvalidImage: If the buffer fails structural checks
        NoHiddenData: If the buffer holds no frame
        CorruptData: If the header is inconsistent with the carrier
        PasswordRequired: If the frame is encrypted and no password was given
        AuthenticationFailed: If decryption fails
    """
    state = DecodeState.INIT
    try:
        buffer.validate()
        report = capacity_for(buffer)
        if report.total_bits < report.header_bits:
            raise NoHiddenData("Image too small to hold a hidden message")
        cursor = BitCursor.reader(buffer)

        header = read_header(cursor)
        state = DecodeState.HEADER_READ

        validate_length(header, report)
        state = DecodeState.LENGTH_VALIDATED

        frame = read_payload(cursor, header)
        state = DecodeState.PAYLOAD_READ

        if frame.encrypted:
            if not password:
                raise PasswordRequired("Password required to decode encrypted message")
            state = DecodeState.DECRYPT
            plaintext = decrypt_payload(frame.to_payload(), password, iterations)
        else:
            plaintext = frame.payload
    except StegoError as exc:
        exc.details.setdefault("state", state.value)
        raise

    return DecodeResult(payload=plaintext, encrypted=frame.encrypted, length=len(plaintext))


def has_hidden_data(buffer: PixelBuffer) -> bool:
    """Whether the buffer starts with a frame header that decode would accept."""
    buffer.validate()
    report = capacity_for(buffer)
    if report.total_bits < report.header_bits:
        return False
    cursor = BitCursor.reader(buffer)
    try:
        validate_length(read_header(cursor), report)
    except (NoHiddenData, CorruptData):
        return False
    return True
