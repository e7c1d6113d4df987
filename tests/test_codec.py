"""
Tests for the vault token codec.
"""
import base64

import pytest

from credential_vault.exceptions import FormatError
from credential_vault.vault.codec import HEADER_SIZE, VaultBlob, decode, encode

SALT = b"s" * 16
NONCE = b"n" * 12
CIPHERTEXT = b"ciphertext-and-sixteen-byte-tag!"


class TestEncode:
    """Tests for token encoding."""

    def test_layout(self):
        """Test salt, nonce and ciphertext are concatenated in order."""
        token = encode(SALT, NONCE, CIPHERTEXT)
        assert isinstance(token, str)
        assert base64.b64decode(token) == SALT + NONCE + CIPHERTEXT

    def test_decode_splits_fields(self):
        """Test decoding recovers the three fields."""
        blob = decode(encode(SALT, NONCE, CIPHERTEXT))
        assert isinstance(blob, VaultBlob)
        assert blob.salt == SALT
        assert blob.nonce == NONCE
        assert blob.ciphertext == CIPHERTEXT

    def test_wrong_salt_length(self):
        """Test encoding refuses a salt of the wrong size."""
        with pytest.raises(FormatError):
            encode(b"short", NONCE, CIPHERTEXT)

    def test_wrong_nonce_length(self):
        """Test encoding refuses a nonce of the wrong size."""
        with pytest.raises(FormatError):
            encode(SALT, b"short", CIPHERTEXT)


class TestDecode:
    """Tests for token decoding on bad input."""

    @pytest.mark.parametrize("token", [
        None,
        42,
        3.14,
        ["a"],
        {"token": "x"},
        "",
        "!!!!",
        "not base64 at all",
        "ZXlK",  # valid base64, 3 bytes
        "é" * 40,
        b"\xff\xfe",
    ])
    def test_garbage_is_format_error(self, token):
        """Test arbitrary garbage raises FormatError and nothing else."""
        with pytest.raises(FormatError):
            decode(token)

    def test_header_only_is_accepted(self):
        """Test a token of exactly salt + nonce splits with empty ciphertext."""
        blob = decode(base64.b64encode(bytes(HEADER_SIZE)).decode())
        assert blob.ciphertext == b""

    def test_one_byte_short(self):
        """Test a token one byte short of the header."""
        with pytest.raises(FormatError):
            decode(base64.b64encode(bytes(HEADER_SIZE - 1)).decode())

    def test_non_canonical_base64(self):
        """Test tokens differing only in discarded bits are rejected."""
        token = base64.b64encode(bytes(HEADER_SIZE + 3)).decode()
        assert token.endswith("AA==")
        tampered = token[:-3] + "B=="
        assert base64.b64decode(tampered) == base64.b64decode(token)
        with pytest.raises(FormatError):
            decode(tampered)

    def test_bytes_token(self):
        """Test an ASCII bytes token is accepted."""
        token = encode(SALT, NONCE, CIPHERTEXT).encode("ascii")
        assert decode(token).ciphertext == CIPHERTEXT

    def test_format_error_is_value_error(self):
        """Test FormatError can be caught as ValueError."""
        with pytest.raises(ValueError):
            decode("")


class TestTamperSweep:
    """Tests that every single-character change is detectable."""

    @pytest.mark.parametrize("ciphertext_size", [16, 17, 18, 45])
    def test_every_position(self, ciphertext_size):
        """Test no flipped character decodes to the original fields."""
        token = encode(SALT, NONCE, bytes(range(ciphertext_size)))
        original = decode(token)
        for index, char in enumerate(token):
            for replacement in ("A", "/", "="):
                if replacement == char:
                    continue
                tampered = token[:index] + replacement + token[index + 1:]
                try:
                    blob = decode(tampered)
                except FormatError:
                    continue
                assert blob != original, f"position {index} -> {replacement!r}"
