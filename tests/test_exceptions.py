"""
Tests for the vault exception hierarchy.
"""
import pytest

from credential_vault.exceptions import (
    AuthError,
    CipherError,
    DerivationError,
    EmptyVaultError,
    FormatError,
    StoreError,
    ValidationError,
    VaultError,
)


class TestVaultError:
    """Tests for messages and base classes."""

    def test_default_message(self):
        """Test each error falls back to its class message."""
        assert str(VaultError()) == "vault operation failed"
        assert StoreError().message == "vault storage unavailable"
        assert str(EmptyVaultError()) == "no secret is stored in the vault"

    def test_explicit_message(self):
        """Test an explicit message replaces the default."""
        err = ValidationError("Passphrase is required")
        assert err.message == "Passphrase is required"
        assert str(err) == "Passphrase is required"

    def test_auth_message_fixed(self):
        """Test AuthError always carries the generic message."""
        assert str(AuthError()) == "wrong passphrase or corrupted data"

    @pytest.mark.parametrize("cls", [
        ValidationError, DerivationError, CipherError, FormatError,
        AuthError, StoreError, EmptyVaultError,
    ])
    def test_common_base(self, cls):
        """Test every failure can be caught as VaultError."""
        assert issubclass(cls, VaultError)

    def test_builtin_bases(self):
        """Test input errors stay ValueError and an empty vault a LookupError."""
        for cls in (ValidationError, DerivationError, CipherError, FormatError):
            assert issubclass(cls, ValueError)
        assert issubclass(EmptyVaultError, LookupError)
