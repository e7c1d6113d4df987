"""
Vault Crypto Core — Passphrase key derivation and authenticated encryption.

- Key derivation: PBKDF2-HMAC-SHA256(passphrase, salt 16B) → 32-byte key
- Cipher: AES-256-GCM (or ChaCha20-Poly1305) with a 96-bit nonce → ciphertext‖tag

A fresh salt and nonce are drawn for every write, so a (key, nonce) pair
is never reused.

Security Note:
    Never log passphrases, keys, plaintext or ciphertext values.
"""
import os
import logging

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives.ciphers.aead import AESGCM, ChaCha20Poly1305

from ..conf import CIPHER_BACKEND, MIN_KDF_ITERATIONS
from ..exceptions import AuthError, CipherError, DerivationError

logger = logging.getLogger("credential_vault")

SALT_SIZE = 16  # 128-bit salt
NONCE_SIZE = 12  # 96-bit nonce
KEY_LENGTH = 32  # AES-256
TAG_SIZE = 16  # GCM / Poly1305 tag

_CIPHERS = {
    "aesgcm": AESGCM,
    "chacha20": ChaCha20Poly1305,
}


def get_cipher_cls(backend: str) -> type:
    """Return the AEAD cipher class for a backend name."""
    try:
        return _CIPHERS[backend.lower()]
    except (KeyError, AttributeError):
        raise CipherError(f"Unsupported cipher backend: {backend!r}") from None


def _default_cipher_cls(backend: str) -> type:
    """Resolve the process-wide backend, falling back to AES-GCM."""
    cipher_cls = _CIPHERS.get(backend.lower())
    if cipher_cls is None:
        logger.warning(
            "Unsupported VAULT_CIPHER_BACKEND=%r, falling back to aesgcm", backend,
        )
        return AESGCM
    return cipher_cls


# Default backend is fixed at import so a changed env var cannot split
# encryption and decryption within one process.
CIPHER_CLS = _default_cipher_cls(CIPHER_BACKEND)


# ---------------------------------------------------------------------------
# Random material
# ---------------------------------------------------------------------------

def generate_salt() -> bytes:
    """Return 16 random bytes for key derivation."""
    return os.urandom(SALT_SIZE)


def generate_nonce() -> bytes:
    """Return 12 random bytes for one encryption."""
    return os.urandom(NONCE_SIZE)


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------

def derive_key(
    passphrase: str,
    salt: bytes,
    iterations: int = MIN_KDF_ITERATIONS,
) -> bytes:
    """Derive a 32-byte encryption key from a passphrase using PBKDF2-HMAC-SHA256.

    The same (passphrase, salt, iterations) always yields the same key.
    Passphrase strength is not checked here.

    Args:
        passphrase: User passphrase, never persisted.
        salt: 16 random bytes stored alongside the ciphertext.
        iterations: Work factor, at least ``MIN_KDF_ITERATIONS``.

    Returns:
        32-byte derived key.

    Raises:
        DerivationError: If the passphrase is empty, not a string or not
            encodable as UTF-8, the salt is not exactly 16 bytes, or the
            work factor is too low.
    """
    if not isinstance(passphrase, str) or not passphrase:
        raise DerivationError("Passphrase must be a non-empty string")
    if not isinstance(salt, (bytes, bytearray)) or len(salt) != SALT_SIZE:
        raise DerivationError(f"Salt must be exactly {SALT_SIZE} bytes")
    if iterations < MIN_KDF_ITERATIONS:
        raise DerivationError(
            f"Key derivation needs at least {MIN_KDF_ITERATIONS} iterations"
        )
    try:
        material = passphrase.encode("utf-8")
    except UnicodeEncodeError:
        raise DerivationError("Passphrase is not valid Unicode text") from None
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=bytes(salt),
        iterations=iterations,
    )
    return kdf.derive(material)


# ---------------------------------------------------------------------------
# Authenticated encryption
# ---------------------------------------------------------------------------

def _check_key_nonce(key: bytes, nonce: bytes) -> None:
    if not isinstance(key, (bytes, bytearray)) or len(key) != KEY_LENGTH:
        raise CipherError(f"Key must be exactly {KEY_LENGTH} bytes")
    if not isinstance(nonce, (bytes, bytearray)) or len(nonce) != NONCE_SIZE:
        raise CipherError(f"Nonce must be exactly {NONCE_SIZE} bytes")


def seal(
    key: bytes,
    nonce: bytes,
    plaintext: bytes,
    cipher_cls: type = None,
) -> bytes:
    """Encrypt and authenticate plaintext.

    Format: [encrypted_payload][tag 16B]

    The caller must never reuse a nonce with the same key.

    Raises:
        CipherError: If key or nonce has the wrong length.
    """
    _check_key_nonce(key, nonce)
    cipher = (cipher_cls or CIPHER_CLS)(bytes(key))
    return cipher.encrypt(bytes(nonce), bytes(plaintext), None)


def open_sealed(
    key: bytes,
    nonce: bytes,
    sealed: bytes,
    cipher_cls: type = None,
) -> bytes:
    """Verify and decrypt ``ciphertext‖tag``.

    Fails closed: a tag mismatch, truncated input or corrupted ciphertext
    never yields partial plaintext.

    Raises:
        CipherError: If key or nonce has the wrong length.
        AuthError: If authentication fails for any reason.
    """
    _check_key_nonce(key, nonce)
    if len(sealed) < TAG_SIZE:
        raise AuthError()
    cipher = (cipher_cls or CIPHER_CLS)(bytes(key))
    try:
        return cipher.decrypt(bytes(nonce), bytes(sealed), None)
    except InvalidTag:
        raise AuthError() from None
