"""
Vault Codec — Packs (salt, nonce, ciphertext‖tag) into one storable token.

Format: base64( [salt 16B][nonce 12B][ciphertext + tag] )

Salt and nonce lengths are protocol constants, so the fields are split by
fixed offsets instead of a length prefix or delimiter.
"""
import base64
import binascii
from typing import NamedTuple

from ..exceptions import FormatError
from .crypto import NONCE_SIZE, SALT_SIZE

HEADER_SIZE = SALT_SIZE + NONCE_SIZE


class VaultBlob(NamedTuple):
    salt: bytes
    nonce: bytes
    ciphertext: bytes


def encode(salt: bytes, nonce: bytes, ciphertext: bytes) -> str:
    """Concatenate salt, nonce and ciphertext and return a base64 token.

    Raises:
        FormatError: If salt or nonce does not have its fixed length.
    """
    if len(salt) != SALT_SIZE or len(nonce) != NONCE_SIZE:
        raise FormatError(
            f"Salt and nonce must be {SALT_SIZE} and {NONCE_SIZE} bytes"
        )
    raw = bytes(salt) + bytes(nonce) + bytes(ciphertext)
    return base64.b64encode(raw).decode("ascii")


def decode(token: str) -> VaultBlob:
    """Split a stored token back into a :class:`VaultBlob`.

    Any input, including garbage of the wrong type, either decodes or
    raises :class:`FormatError`. Only the canonical base64 spelling is
    accepted, so two different tokens never decode to the same bytes.

    Raises:
        FormatError: If the token is not canonical base64 or is shorter
            than salt + nonce once decoded.
    """
    if isinstance(token, bytes):
        try:
            token = token.decode("ascii")
        except UnicodeDecodeError:
            raise FormatError("Vault token is not ASCII") from None
    if not isinstance(token, str):
        raise FormatError("Vault token must be a string")
    try:
        raw = base64.b64decode(token, validate=True)
    except (binascii.Error, ValueError):
        raise FormatError("Vault token is not valid base64") from None
    if base64.b64encode(raw).decode("ascii") != token:
        raise FormatError("Vault token is not canonical base64")
    if len(raw) < HEADER_SIZE:
        raise FormatError(
            f"Vault token too short: {len(raw)} bytes (minimum {HEADER_SIZE})"
        )
    return VaultBlob(
        salt=raw[:SALT_SIZE],
        nonce=raw[SALT_SIZE:HEADER_SIZE],
        ciphertext=raw[HEADER_SIZE:],
    )
