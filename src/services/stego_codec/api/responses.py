"""
API response models for the Image Steganography Service
"""

from pydantic import BaseModel
from typing import Any, Dict, Optional


class StegoAPIResult(BaseModel):
    """
    Standard API response model for all steganography endpoints
    """
    success: bool
    message: str
    path: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


# HTTP status for each codec error code
ERROR_STATUS = {
    "INVALID_IMAGE": 400,
    "CAPACITY_EXCEEDED": 413,
    "NO_HIDDEN_DATA": 404,
    "CORRUPT_DATA": 422,
    "PASSWORD_REQUIRED": 401,
    "AUTHENTICATION_FAILED": 401,
}


def status_for(code: str) -> int:
    return ERROR_STATUS.get(code, 400)
