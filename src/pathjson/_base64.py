"""Unpadded base64 for embedding ``Binary`` payloads in JSON strings."""

import base64
import binascii

_PAD_BLOCK = 4


def encode(data: bytes, url_safe: bool = False) -> str:
    """Encodes bytes with the standard or URL-safe alphabet, without padding."""
    encoder = base64.urlsafe_b64encode if url_safe else base64.b64encode
    return encoder(data).decode("ascii").rstrip("=")


def decode(text: str, url_safe: bool = False) -> bytes:
    """
    Decodes base64 text, accepting input with or without padding.

    Raises ``ValueError`` for characters outside the selected alphabet.
    """
    stripped = text.rstrip("=")
    padded = stripped + "=" * (-len(stripped) % _PAD_BLOCK)
    altchars = b"-_" if url_safe else b"+/"
    try:
        return base64.b64decode(padded, altchars=altchars, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 text: {e}") from e
