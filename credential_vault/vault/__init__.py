"""Credential Vault — A bearer credential encrypted under a user passphrase.

Security Note (Threat Model):
    The decrypted secret lives in process memory while the caller uses it.
    Code running with full privileges in the same process can read it.
    This is an accepted limitation; the vault only guarantees that the
    plaintext and the passphrase never reach persistent storage.
"""

from .session_vault import VaultSession, VaultState, looks_like_jwt, prefix_validator
from .store import VaultStore, MemoryStore, FileStore
from .rotation import change_passphrase, migrate_plaintext
from .config import VaultConfig

__all__ = [
    "VaultSession",
    "VaultState",
    "looks_like_jwt",
    "prefix_validator",
    "VaultStore",
    "MemoryStore",
    "FileStore",
    "change_passphrase",
    "migrate_plaintext",
    "VaultConfig",
]
