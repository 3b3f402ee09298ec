"""
Encryption utilities for steganography operations

Encrypted payloads are laid out as ``salt(16) | iv(12) | tag(16) | ciphertext``.
"""

import os
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .errors import AuthenticationFailed
from .frame import IV_LENGTH, SALT_LENGTH, TAG_LENGTH, EncryptedPayload


KEY_LENGTH = 32
KDF_ITERATIONS = 100_000

ENCRYPTION_NAME = "AES-256-GCM"
KDF_NAME = "PBKDF2-HMAC-SHA256"


def derive_key(password: str, salt: bytes, iterations: Optional[int] = None) -> bytes:
    """
    Derive encryption key from password using PBKDF2-HMAC-SHA256

    Args:
        password: User password
        salt: Random salt for key derivation
        iterations: KDF iteration count (defaults to KDF_ITERATIONS)

    Returns:
        Derived 256-bit key
    """
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=iterations or KDF_ITERATIONS,
    )
    return kdf.derive(password.encode("utf-8"))


def encrypt(data: bytes, password: str, iterations: Optional[int] = None) -> EncryptedPayload:
    """
    Encrypt data using AES-256-GCM with a password-derived key

    A fresh salt and nonce are drawn on every call, so encrypting the same
    data twice never gives the same bytes.

    Args:
        data: Data to encrypt
        password: Password for encryption
        iterations: KDF iteration count

    Returns:
        EncryptedPayload with salt, iv, tag and ciphertext
    """
    salt = os.urandom(SALT_LENGTH)
    key = derive_key(password, salt, iterations)
    nonce = os.urandom(IV_LENGTH)
    sealed = AESGCM(key).encrypt(nonce, data, None)
    # AESGCM appends the tag to the ciphertext
    ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
    return EncryptedPayload(salt=salt, iv=nonce, auth_tag=tag, ciphertext=ciphertext)


def encrypt_bytes(data: bytes, password: str, iterations: Optional[int] = None) -> bytes:
    return encrypt(data, password, iterations).to_bytes()


def decrypt_payload(payload: EncryptedPayload, password: str, iterations: Optional[int] = None) -> bytes:
    key = derive_key(password, payload.salt, iterations)
    try:
        return AESGCM(key).decrypt(payload.iv, payload.ciphertext + payload.auth_tag, None)
    except InvalidTag as exc:
        raise AuthenticationFailed("Invalid password or corrupted payload") from exc


def decrypt(blob: bytes, password: str, iterations: Optional[int] = None) -> bytes:
    """
    Decrypt a ``salt | iv | tag | ciphertext`` blob

    Args:
        blob: Encrypted blob
        password: Password for decryption
        iterations: KDF iteration count used at encryption time

    Returns:
        Decrypted data

    Raises:
        AuthenticationFailed: If the blob is truncated, the password is wrong
            or the data was tampered with
    """
    return decrypt_payload(EncryptedPayload.from_bytes(blob), password, iterations)
