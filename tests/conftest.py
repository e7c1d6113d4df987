import pytest

from credential_vault.vault import MemoryStore, VaultSession

JWT = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJzdWIiOiJ1cGxvYWRlciIsImlhdCI6MTcwMDAwMDAwMH0."
    "c2lnbmF0dXJlLW5vdC1jaGVja2Vk"
)
PASSPHRASE = "correct-horse-battery-staple"


@pytest.fixture
def secret():
    return JWT


@pytest.fixture
def passphrase():
    return PASSPHRASE


@pytest.fixture
def store():
    """Create an empty in-memory vault slot."""
    return MemoryStore(slot_key="pinata-jwt-encrypted")


@pytest.fixture
def vault(store):
    """Create a VaultSession over the in-memory slot."""
    return VaultSession(store)
