"""
VaultSession — Passphrase-protected single-secret vault.

Provides the public API of the credential vault:
- ``save_secret(secret, passphrase)`` — validate, encrypt and persist
- ``use_secret(passphrase)`` — load, decrypt and validate for one use
- ``clear()`` — delete the stored blob (idempotent)
- ``is_configured()`` / ``state()`` — slot occupancy
- ``subscribe(callback)`` — notification after every save/clear

Every save derives a fresh key from a fresh salt and encrypts under a
fresh nonce. Key derivation and cipher work run in a worker thread so the
event loop is never blocked.

Security Note:
    Never log passphrases, secrets, keys or tokens. Only log slot keys,
    operations and sizes. The passphrase is never stored; a forgotten
    passphrase cannot be recovered.
"""
import enum
import asyncio
import inspect
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Optional

from ..exceptions import EmptyVaultError, ValidationError
from ..conf import KDF_ITERATIONS, SECRET_PREFIX
from .codec import decode, encode
from .config import VaultConfig
from .crypto import (
    CIPHER_CLS,
    derive_key,
    generate_nonce,
    generate_salt,
    get_cipher_cls,
    open_sealed,
    seal,
)
from .store import FileStore, VaultStore

logger = logging.getLogger("credential_vault")

SecretValidator = Callable[[str], bool]
StateListener = Callable[["VaultState"], Any]


class VaultState(str, enum.Enum):
    EMPTY = "empty"
    OCCUPIED = "occupied"


def prefix_validator(prefix: str) -> SecretValidator:
    """Build a predicate accepting strings that start with ``prefix``."""
    def _validator(secret: str) -> bool:
        return isinstance(secret, str) and secret.startswith(prefix)
    _validator.__name__ = f"starts_with_{prefix!r}"
    return _validator


def _check_encodable(value: str, name: str) -> None:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValidationError(f"{name} is not valid Unicode text") from None


# Format sanity check only: base64url-encoded JSON headers start with "eyJ".
looks_like_jwt = prefix_validator(SECRET_PREFIX)


class VaultSession:
    """Credential vault over one storage slot.

    States: ``EMPTY`` (nothing stored) and ``OCCUPIED`` (a blob is stored).
    The session keeps no secret, passphrase or key between calls.

    Concurrent ``save_secret`` calls are not coordinated: the last write
    wins. Reads never modify the stored blob.
    """

    def __init__(
        self,
        store: VaultStore,
        *,
        validator: Optional[SecretValidator] = None,
        kdf_iterations: int = KDF_ITERATIONS,
        cipher_cls: Optional[type] = None,
    ):
        self._store = store
        self._validator = validator or looks_like_jwt
        self._iterations = kdf_iterations
        self._cipher_cls = cipher_cls or CIPHER_CLS
        self._listeners: list[StateListener] = []

    def __repr__(self) -> str:
        return f"<VaultSession store={self._store!r}>"

    @property
    def store(self) -> VaultStore:
        return self._store

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate_secret(self, secret: Any) -> None:
        if not isinstance(secret, str) or not secret:
            raise ValidationError("Secret must be a non-empty string")
        if not self._validator(secret):
            raise ValidationError("Secret does not have the expected format")
        _check_encodable(secret, "Secret")

    def _validate_passphrase(self, passphrase: Any) -> None:
        if not isinstance(passphrase, str) or not passphrase:
            raise ValidationError("Passphrase is required")
        _check_encodable(passphrase, "Passphrase")

    # ------------------------------------------------------------------
    # Blocking crypto (run in a worker thread)
    # ------------------------------------------------------------------

    def _encrypt(self, secret: str, passphrase: str) -> str:
        salt = generate_salt()
        nonce = generate_nonce()
        key = derive_key(passphrase, salt, self._iterations)
        sealed = seal(key, nonce, secret.encode("utf-8"), self._cipher_cls)
        del key
        return encode(salt, nonce, sealed)

    def _decrypt(self, token: str, passphrase: str) -> str:
        blob = decode(token)
        key = derive_key(passphrase, blob.salt, self._iterations)
        plaintext = open_sealed(key, blob.nonce, blob.ciphertext, self._cipher_cls)
        del key
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError:
            raise ValidationError(
                "Decrypted secret is not valid UTF-8"
            ) from None

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, callback: StateListener) -> Callable[[], None]:
        """Register a callback run with the new state after save or clear.

        The callback may be a plain function or a coroutine function.

        Returns:
            A callable that removes the subscription.
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)
        return unsubscribe

    async def _notify(self, state: VaultState) -> None:
        for callback in list(self._listeners):
            try:
                result = callback(state)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    "Vault listener %r failed on state=%s", callback, state.value,
                )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def save_secret(self, secret: str, passphrase: str) -> None:
        """Encrypt ``secret`` under ``passphrase`` and store it.

        Overwrites any previously stored secret. Storage is not touched
        when validation fails.

        Raises:
            ValidationError: If the secret fails the format predicate or the
                passphrase is empty.
            DerivationError, CipherError: On malformed crypto input.
            StoreError: If the store rejects the write.
        """
        self._validate_secret(secret)
        self._validate_passphrase(passphrase)
        token = await asyncio.to_thread(self._encrypt, secret, passphrase)
        await self._store.put(token)
        logger.debug(
            "Vault save: slot=%s token_length=%d", self._store.slot_key, len(token),
        )
        await self._notify(VaultState.OCCUPIED)

    async def use_secret(self, passphrase: str) -> str:
        """Decrypt and return the stored secret.

        The caller should use the result immediately (e.g. for one request)
        and drop it.

        Raises:
            ValidationError: If the passphrase is empty, or the decrypted
                value fails the format predicate.
            EmptyVaultError: If nothing is stored.
            FormatError: If the stored token is malformed.
            AuthError: Wrong passphrase or corrupted data.
        """
        self._validate_passphrase(passphrase)
        token = await self._store.get()
        if token is None:
            raise EmptyVaultError()
        secret = await asyncio.to_thread(self._decrypt, token, passphrase)
        if not self._validator(secret):
            logger.warning(
                "Vault use: slot=%s decrypted value failed format check",
                self._store.slot_key,
            )
            raise ValidationError("Decrypted secret does not have the expected format")
        logger.debug("Vault use: slot=%s", self._store.slot_key)
        return secret

    @asynccontextmanager
    async def unlocked(self, passphrase: str) -> AsyncIterator[str]:
        """Scoped form of :meth:`use_secret`.

        Usage::

            async with vault.unlocked(passphrase) as token:
                headers = {"Authorization": f"Bearer {token}"}
        """
        secret = await self.use_secret(passphrase)
        try:
            yield secret
        finally:
            del secret

    async def clear(self) -> None:
        """Remove the stored secret. Clearing an empty vault is not an error."""
        await self._store.delete()
        logger.debug("Vault clear: slot=%s", self._store.slot_key)
        await self._notify(VaultState.EMPTY)

    async def is_configured(self) -> bool:
        """Return True if a secret is stored."""
        return await self._store.exists()

    async def state(self) -> VaultState:
        if await self._store.exists():
            return VaultState.OCCUPIED
        return VaultState.EMPTY

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def from_config(
        cls,
        config: Optional[VaultConfig] = None,
        store: Optional[VaultStore] = None,
        validator: Optional[SecretValidator] = None,
    ) -> "VaultSession":
        """Build a session from a :class:`VaultConfig`.

        Args:
            config: Settings; defaults to ``VaultConfig.from_env()``.
            store: Storage slot; defaults to a ``FileStore`` at
                ``config.storage_path``.
            validator: Secret predicate; defaults to the configured prefix.

        Returns:
            Configured VaultSession instance.
        """
        config = config or VaultConfig.from_env()
        if store is None:
            store = FileStore(config.storage_path, config.slot_key)
        return cls(
            store,
            validator=validator or prefix_validator(config.secret_prefix),
            kdf_iterations=config.kdf_iterations,
            cipher_cls=get_cipher_cls(config.cipher_backend),
        )
