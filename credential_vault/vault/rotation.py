"""
Vault Rotation — Re-encrypting the stored secret.

- ``change_passphrase`` re-encrypts the secret under a new passphrase with a
  fresh salt and nonce.
- ``migrate_plaintext`` moves a credential left in clear text by older
  releases into the vault and removes the plaintext copy.

Security Note:
    Plaintext exists in memory only during re-encryption.
    Never log plaintext or ciphertext values.
"""
import logging

from ..exceptions import ValidationError
from .session_vault import VaultSession
from .store import VaultStore

logger = logging.getLogger("credential_vault")


async def change_passphrase(
    vault: VaultSession,
    old_passphrase: str,
    new_passphrase: str,
) -> None:
    """Re-encrypt the stored secret from ``old_passphrase`` to ``new_passphrase``.

    The stored blob is left untouched if the old passphrase is rejected.

    Raises:
        EmptyVaultError: If nothing is stored.
        AuthError: If ``old_passphrase`` is wrong or the blob is corrupted.
        ValidationError: If ``new_passphrase`` is empty.
    """
    secret = await vault.use_secret(old_passphrase)
    try:
        await vault.save_secret(secret, new_passphrase)
    finally:
        del secret
    logger.info("Vault passphrase changed: slot=%s", vault.store.slot_key)


async def migrate_plaintext(
    vault: VaultSession,
    legacy_store: VaultStore,
    passphrase: str,
) -> bool:
    """Encrypt a plaintext credential from ``legacy_store`` into the vault.

    The legacy slot is deleted only after the encrypted copy is stored.

    Args:
        vault: Target vault session.
        legacy_store: Slot holding the credential in clear text.
        passphrase: Passphrase for the new encrypted blob.

    Returns:
        True if a credential was migrated, False if the legacy slot was empty.

    Raises:
        ValidationError: If the legacy value fails the format check (it is
            left in place), or the legacy slot is the vault slot.
        StoreError: If either store fails.
    """
    if legacy_store.slot_key == vault.store.slot_key:
        raise ValidationError("Legacy slot must differ from the vault slot")
    secret = await legacy_store.get()
    if secret is None:
        return False
    try:
        await vault.save_secret(secret, passphrase)
    finally:
        del secret
    await legacy_store.delete()
    logger.info(
        "Vault migrated plaintext credential: %s -> %s",
        legacy_store.slot_key, vault.store.slot_key,
    )
    return True
