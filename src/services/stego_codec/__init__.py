"""
Image Steganography Service - CAPN LSB codec

Hides arbitrary bytes in the least significant bits of a lossless image:
- Fixed "CAPN" frame: magic, big-endian length, encryption flag, payload
- One bit per R, G and B channel, alpha never touched
- Optional AES-256-GCM encryption with a PBKDF2-SHA256 derived key
- Capacity checks before embedding and before trusting a decoded header
"""

__version__ = "1.0.0"
__author__ = "Image Lab Team"
