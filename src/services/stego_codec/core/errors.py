"""
Error types raised by the steganographic codec

Every failure the codec can produce is one of the classes below. Each carries
a stable ``code`` so callers can map failures to protocol responses without
parsing messages.
"""

from typing import Any, Dict, Optional


class StegoError(ValueError):
    """Base class for all codec failures."""

    code = "STEGO_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class InvalidImage(StegoError):
    """Pixel buffer or image container fails structural checks."""

    code = "INVALID_IMAGE"


class CapacityExceeded(StegoError):
    """Payload does not fit in the carrier."""

    code = "CAPACITY_EXCEEDED"

    def __init__(self, required: int, available: int, message: Optional[str] = None):
        super().__init__(
            message or f"Payload too large: {required} bytes required, {available} bytes available",
            {"required": required, "available": available},
        )
        self.required = required
        self.available = available


class NoHiddenData(StegoError):
    """Carrier does not start with the frame magic."""

    code = "NO_HIDDEN_DATA"


class CorruptData(StegoError):
    """Frame header is inconsistent with the carrier it was read from."""

    code = "CORRUPT_DATA"


class PasswordRequired(StegoError):
    """Frame is encrypted and no passphrase was supplied."""

    code = "PASSWORD_REQUIRED"


class AuthenticationFailed(StegoError):
    """AEAD tag verification failed (wrong passphrase or tampered data)."""

    code = "AUTHENTICATION_FAILED"
