"""
Credential Vault defaults, read once from the environment.

    VAULT_SLOT_KEY          storage key holding the encrypted token
    VAULT_LEGACY_SLOT_KEY   storage key used by older plaintext releases
    VAULT_STORAGE_PATH      JSON document backing the FileStore
    VAULT_KDF_ITERATIONS    PBKDF2-HMAC-SHA256 work factor
    VAULT_CIPHER_BACKEND    "aesgcm" or "chacha20"
    VAULT_SECRET_PREFIX     magic prefix expected on stored credentials
"""
import os
from pathlib import Path

SLOT_KEY = os.environ.get("VAULT_SLOT_KEY", "pinata-jwt-encrypted")
LEGACY_SLOT_KEY = os.environ.get("VAULT_LEGACY_SLOT_KEY", "pinata-jwt")

STORAGE_PATH = Path(
    os.environ.get(
        "VAULT_STORAGE_PATH",
        Path.home().joinpath(".credential_vault", "storage.json"),
    )
).expanduser()

# Minimum accepted by the key derivation; blobs carry no version field,
# so the configured value must match the one used when they were written.
MIN_KDF_ITERATIONS = 100_000
KDF_ITERATIONS = int(os.environ.get("VAULT_KDF_ITERATIONS", MIN_KDF_ITERATIONS))

CIPHER_BACKEND = os.environ.get("VAULT_CIPHER_BACKEND", "aesgcm").lower()

SECRET_PREFIX = os.environ.get("VAULT_SECRET_PREFIX", "eyJ")
