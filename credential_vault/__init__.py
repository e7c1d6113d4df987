"""Credential Vault.

Keeps a bearer credential encrypted under a user passphrase in local
storage, and decrypts it in memory for a single use.
"""
from .version import __version__
from .exceptions import (
    VaultError,
    ValidationError,
    DerivationError,
    CipherError,
    AuthError,
    FormatError,
    StoreError,
    EmptyVaultError,
)
from .vault import (
    VaultSession,
    VaultState,
    VaultConfig,
    MemoryStore,
    FileStore,
)

__all__ = (
    "__version__",
    "VaultError",
    "ValidationError",
    "DerivationError",
    "CipherError",
    "AuthError",
    "FormatError",
    "StoreError",
    "EmptyVaultError",
    "VaultSession",
    "VaultState",
    "VaultConfig",
    "MemoryStore",
    "FileStore",
)
