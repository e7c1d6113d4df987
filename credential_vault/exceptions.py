"""Credential Vault exceptions.

Every failure raised by the vault derives from :class:`VaultError`.
Messages never carry passphrases, key material, secrets or tokens.
"""
from typing import Optional


class VaultError(Exception):
    """Base class for all vault failures."""

    message: str = "vault operation failed"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(VaultError, ValueError):
    """Input (or decrypted output) does not have the expected shape."""

    message = "invalid secret or passphrase"


class DerivationError(VaultError, ValueError):
    """Malformed key derivation input (empty passphrase, wrong salt length)."""

    message = "invalid key derivation input"


class CipherError(VaultError, ValueError):
    """Malformed cipher input (wrong key or nonce length)."""

    message = "invalid cipher input"


class FormatError(VaultError, ValueError):
    """The stored token cannot be split into salt, nonce and ciphertext."""

    message = "malformed vault token"


class AuthError(VaultError):
    """Authentication failed.

    A wrong passphrase and a tampered blob are deliberately
    indistinguishable, so the message is fixed.
    """

    message = "wrong passphrase or corrupted data"

    def __init__(self) -> None:
        super().__init__(self.message)


class StoreError(VaultError):
    """The persistence layer could not complete the operation."""

    message = "vault storage unavailable"


class EmptyVaultError(VaultError, LookupError):
    """A secret was requested but the vault slot is empty."""

    message = "no secret is stored in the vault"
