"""
Unit tests for the CAPN frame format
"""

import struct

import pytest

from src.services.stego_codec.core.bit_cursor import BitCursor, embed
from src.services.stego_codec.core.capacity import capacity_for
from src.services.stego_codec.core.errors import AuthenticationFailed, CorruptData, NoHiddenData
from src.services.stego_codec.core.frame import (
    HEADER_BYTES,
    MAGIC,
    EncryptedPayload,
    PlainPayload,
    parse,
    read_header,
    serialize,
    serialize_payload,
)


def frame_cursor(buffer, raw):
    """Embed raw frame bytes and return a fresh reader over the result."""
    return BitCursor.reader(embed(buffer, raw))


class TestSerialize:
    """Test cases for serialize."""

    def test_layout(self):
        frame = serialize(b"hi", encrypted=False)

        assert frame == b"CAPN" + b"\x00\x00\x00\x02" + b"\x00" + b"hi"

    def test_encrypted_flag(self):
        frame = serialize(b"x" * 44, encrypted=True)

        assert frame[8] == 1

    def test_length_is_big_endian(self):
        frame = serialize(b"\x00" * 258, encrypted=False)

        assert frame[4:8] == b"\x00\x00\x01\x02"

    def test_empty_payload(self):
        assert serialize(b"", encrypted=False) == MAGIC + bytes(5)

    def test_header_size(self):
        assert HEADER_BYTES == 9

    def test_serialize_payload_variants(self):
        enc = EncryptedPayload(salt=b"s" * 16, iv=b"i" * 12, auth_tag=b"t" * 16, ciphertext=b"c")

        assert serialize_payload(PlainPayload(b"abc")) == serialize(b"abc", False)
        assert serialize_payload(enc) == serialize(b"s" * 16 + b"i" * 12 + b"t" * 16 + b"c", True)


class TestParse:
    """Test cases for parse and read_header."""

    def test_parse_plain(self, rgb_buffer):
        cursor = frame_cursor(rgb_buffer, serialize(b"payload", False))
        frame = parse(cursor, capacity_for(rgb_buffer))

        assert frame.magic == MAGIC
        assert frame.payload_length == 7
        assert frame.encrypted is False
        assert frame.payload == b"payload"
        assert isinstance(frame.to_payload(), PlainPayload)

    def test_parse_leaves_cursor_after_frame(self, rgb_buffer):
        cursor = frame_cursor(rgb_buffer, serialize(b"abc", False))
        parse(cursor, capacity_for(rgb_buffer))

        assert cursor.position == (HEADER_BYTES + 3) * 8

    def test_wrong_magic(self, rgb_buffer):
        cursor = frame_cursor(rgb_buffer, b"NOPE" + struct.pack(">IB", 1, 0) + b"x")

        with pytest.raises(NoHiddenData):
            parse(cursor, capacity_for(rgb_buffer))

    def test_length_beyond_capacity(self, small_rgb):
        cursor = frame_cursor(small_rgb, MAGIC + struct.pack(">IB", 29, 0))

        with pytest.raises(CorruptData) as exc:
            parse(cursor, capacity_for(small_rgb))
        assert exc.value.details["available"] == 28

    def test_length_at_capacity(self, small_rgb):
        raw = serialize(b"z" * 28, False)
        frame = parse(frame_cursor(small_rgb, raw), capacity_for(small_rgb))

        assert frame.payload == b"z" * 28

    def test_invalid_flag(self, rgb_buffer):
        cursor = frame_cursor(rgb_buffer, MAGIC + struct.pack(">IB", 0, 7))

        with pytest.raises(CorruptData):
            read_header(cursor)

    def test_encrypted_variant(self, rgb_buffer):
        blob = bytes(range(16)) + bytes(range(12)) + bytes(range(16)) + b"cipher"
        frame = parse(frame_cursor(rgb_buffer, serialize(blob, True)), capacity_for(rgb_buffer))
        payload = frame.to_payload()

        assert isinstance(payload, EncryptedPayload)
        assert payload.salt == bytes(range(16))
        assert payload.iv == bytes(range(12))
        assert payload.auth_tag == bytes(range(16))
        assert payload.ciphertext == b"cipher"

    def test_short_encrypted_payload(self, rgb_buffer):
        frame = parse(frame_cursor(rgb_buffer, serialize(b"short", True)), capacity_for(rgb_buffer))

        with pytest.raises(AuthenticationFailed):
            frame.to_payload()


class TestEncryptedPayload:
    """Test cases for the encrypted blob layout."""

    def test_round_trip_bytes(self):
        blob = b"S" * 16 + b"I" * 12 + b"T" * 16 + b"ciphertext"

        assert EncryptedPayload.from_bytes(blob).to_bytes() == blob

    def test_empty_ciphertext_allowed(self):
        payload = EncryptedPayload.from_bytes(b"\x01" * 44)

        assert payload.ciphertext == b""
