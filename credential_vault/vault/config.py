"""
Vault Configuration — Validated settings for a credential vault.

Values default to ``credential_vault.conf``, which reads:
    VAULT_SLOT_KEY, VAULT_LEGACY_SLOT_KEY, VAULT_STORAGE_PATH,
    VAULT_KDF_ITERATIONS, VAULT_CIPHER_BACKEND, VAULT_SECRET_PREFIX

Security Note:
    Key derivation cost and cipher backend are fixed for every stored blob.
    Changing either makes previously saved secrets unreadable.
"""
import logging
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

from .. import conf

logger = logging.getLogger("credential_vault")


class VaultConfig(BaseModel):
    """Validated vault configuration."""

    slot_key: str = Field(default=conf.SLOT_KEY, min_length=1)
    legacy_slot_key: str = Field(default=conf.LEGACY_SLOT_KEY, min_length=1)
    storage_path: Path = Field(default=conf.STORAGE_PATH)
    kdf_iterations: int = Field(
        default=conf.KDF_ITERATIONS, ge=conf.MIN_KDF_ITERATIONS
    )
    cipher_backend: str = Field(default=conf.CIPHER_BACKEND)
    secret_prefix: str = Field(default=conf.SECRET_PREFIX, min_length=1)

    @field_validator("cipher_backend")
    @classmethod
    def validate_cipher(cls, v: str) -> str:
        """Validate cipher backend is supported."""
        v = v.lower()
        if v not in ("aesgcm", "chacha20"):
            raise ValueError(f"Unsupported cipher backend: {v}")
        return v

    @model_validator(mode="after")
    def validate_distinct_slots(self) -> "VaultConfig":
        """The legacy plaintext slot must not alias the vault slot."""
        if self.slot_key == self.legacy_slot_key:
            raise ValueError(
                f"slot_key and legacy_slot_key must differ (both {self.slot_key!r})"
            )
        return self

    @classmethod
    def from_env(cls) -> "VaultConfig":
        """Create VaultConfig from the environment-backed defaults.

        Returns:
            Populated VaultConfig instance.
        """
        config = cls(
            slot_key=conf.SLOT_KEY,
            legacy_slot_key=conf.LEGACY_SLOT_KEY,
            storage_path=conf.STORAGE_PATH,
            kdf_iterations=conf.KDF_ITERATIONS,
            cipher_backend=conf.CIPHER_BACKEND,
            secret_prefix=conf.SECRET_PREFIX,
        )
        logger.debug(
            "Vault config: slot=%s backend=%s iterations=%d",
            config.slot_key, config.cipher_backend, config.kdf_iterations,
        )
        return config
