"""
Vault Store — Single-slot persistence for the encrypted token.

A store owns exactly one text key in a text key/value storage and treats
the token as opaque:

- ``put(token)`` — overwrite the slot, never partially
- ``get()`` — the stored token, or ``None`` when the slot is empty
- ``delete()`` — empty the slot (idempotent)
- ``exists()`` — slot occupancy, without touching cryptographic material
"""
import os
import asyncio
import logging
import tempfile
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

import orjson

from ..exceptions import StoreError

logger = logging.getLogger("credential_vault")


@runtime_checkable
class VaultStore(Protocol):
    slot_key: str

    async def put(self, token: str) -> None:
        ...

    async def get(self) -> Optional[str]:
        ...

    async def delete(self) -> None:
        ...

    async def exists(self) -> bool:
        ...


class MemoryStore:
    """In-process store, for tests and embedding.

    ``quota`` (characters) emulates a storage quota: a larger token is
    rejected with :class:`StoreError` and the previous token is kept.
    """

    def __init__(self, slot_key: str = "vault", quota: Optional[int] = None):
        self.slot_key = slot_key
        self._quota = quota
        self._value: Optional[Any] = None

    def __repr__(self) -> str:
        return f"<MemoryStore slot={self.slot_key!r} occupied={self._value is not None}>"

    async def put(self, token: str) -> None:
        if self._quota is not None and len(token) > self._quota:
            raise StoreError(
                f"Storage quota exceeded for slot {self.slot_key!r}"
            )
        self._value = token

    async def get(self) -> Optional[str]:
        return self._value

    async def delete(self) -> None:
        self._value = None

    async def exists(self) -> bool:
        return self._value is not None


class FileStore:
    """Durable store backed by a JSON document of text keys and values.

    The document may hold other keys; only ``slot_key`` is ever touched.
    Writes go through a temporary file that replaces the document
    atomically, created with owner-only permissions.
    """

    def __init__(self, path: os.PathLike, slot_key: str):
        self.path = Path(path)
        self.slot_key = slot_key

    def __repr__(self) -> str:
        return f"<FileStore path={str(self.path)!r} slot={self.slot_key!r}>"

    # ------------------------------------------------------------------
    # Document helpers (blocking, run in a worker thread)
    # ------------------------------------------------------------------

    def _read(self) -> dict:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError as err:
            raise StoreError(f"Cannot read vault storage: {err.strerror}") from err
        if not raw.strip():
            return {}
        try:
            document = orjson.loads(raw)
        except orjson.JSONDecodeError as err:
            raise StoreError("Vault storage document is corrupted") from err
        if not isinstance(document, dict):
            raise StoreError("Vault storage document is not a key/value object")
        return document

    def _write(self, document: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
        except OSError as err:
            raise StoreError(f"Cannot write vault storage: {err.strerror}") from err
        try:
            with os.fdopen(fd, "wb") as fp:
                fp.write(orjson.dumps(document))
                fp.flush()
                os.fsync(fp.fileno())
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.path)
        except OSError as err:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise StoreError(f"Cannot write vault storage: {err.strerror}") from err

    def _put(self, token: str) -> None:
        document = self._read()
        document[self.slot_key] = token
        self._write(document)

    def _delete(self) -> None:
        document = self._read()
        if self.slot_key in document:
            del document[self.slot_key]
            self._write(document)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def put(self, token: str) -> None:
        await asyncio.to_thread(self._put, token)
        logger.debug("Vault store put: slot=%s path=%s", self.slot_key, self.path)

    async def get(self) -> Optional[str]:
        document = await asyncio.to_thread(self._read)
        return document.get(self.slot_key)

    async def delete(self) -> None:
        await asyncio.to_thread(self._delete)
        logger.debug("Vault store delete: slot=%s path=%s", self.slot_key, self.path)

    async def exists(self) -> bool:
        document = await asyncio.to_thread(self._read)
        return document.get(self.slot_key) is not None
