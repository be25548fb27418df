"""Secret field handling.

Passwords and server fingerprints are opaque binary values. Clients send
them as base64 text; they are stored as raw bytes and never serialized back.
"""

import base64
import binascii
from typing import Optional

from fastapi import HTTPException, status


class SecretDecodeError(ValueError):
    """Raised when a secret is not valid base64 text."""


def decode_secret(value: str) -> bytes:
    """Strictly decode base64 text into bytes.

    Empty strings and text containing characters outside the base64
    alphabet are rejected rather than silently decoded to garbage.
    """
    if not isinstance(value, str) or not value.strip():
        raise SecretDecodeError("value must be a non-empty base64 string")
    try:
        return base64.b64decode(value.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise SecretDecodeError(str(e)) from e


def decode_secret_or_400(value: Optional[str], field_name: str) -> Optional[bytes]:
    """Decode a request secret, mapping failures to 400 Bad Request.

    ``None`` passes through so that an absent field leaves the stored
    secret untouched on update.
    """
    if value is None:
        return None
    try:
        return decode_secret(value)
    except SecretDecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid Base64 encoding for {field_name}",
        )

