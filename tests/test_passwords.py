"""Tests for password hashing."""

from unittest.mock import MagicMock, patch

import pytest

from src.exceptions import ConstraintViolation, HashingFailure
from src.models.user import User
from src.services.passwords import (
    hash_password,
    is_hashed,
    needs_rehash,
    set_password,
    verify,
)


class TestHashPassword:
    def test_hash_differs_from_plaintext(self):
        """Test that the hash never equals the plaintext."""
        hashed = hash_password("hunter2")
        assert hashed != "hunter2"
        assert hashed.startswith("$2")

    def test_hash_is_salted(self):
        """Test that hashing the same password twice gives different hashes."""
        assert hash_password("hunter2") != hash_password("hunter2")

    def test_hash_uses_configured_rounds(self):
        """Test that the configured cost factor is encoded in the hash."""
        assert hash_password("hunter2").split("$")[2] == "04"

    def test_hash_with_explicit_rounds(self):
        """Test overriding the cost factor for one hash."""
        hashed = hash_password("hunter2", rounds=5)
        assert hashed.split("$")[2] == "05"
        assert verify("hunter2", hashed)

    def test_primitive_error_raises_hashing_failure(self):
        """Test that errors from the hash primitive surface as HashingFailure."""
        broken = MagicMock()
        broken.hash.side_effect = MemoryError("out of memory")
        with patch("src.services.passwords.get_password_context", return_value=broken):
            with pytest.raises(HashingFailure) as exc_info:
                hash_password("hunter2")
        assert "out of memory" in exc_info.value.message


class TestVerify:
    def test_verify_correct_password(self):
        """Test verification with the right plaintext."""
        assert verify("hunter2", hash_password("hunter2")) is True

    def test_verify_wrong_password(self):
        """Test verification with the wrong plaintext."""
        assert verify("hunter3", hash_password("hunter2")) is False

    def test_verify_against_non_hash(self):
        """Test that a plaintext stored value never verifies."""
        assert verify("hunter2", "hunter2") is False

    def test_verify_none(self):
        assert verify(None, hash_password("hunter2")) is False
        assert verify("hunter2", None) is False


class TestSetPassword:
    def test_set_password_stores_hash(self):
        """Test that set_password replaces the field with a verifiable hash."""
        user = User(username="alice", email="alice@example.com")
        set_password(user, "hunter2")
        assert user.password != "hunter2"
        assert verify("hunter2", user.password)

    def test_set_password_empty(self):
        """Test that an empty password is rejected."""
        user = User(username="alice", email="alice@example.com")
        with pytest.raises(ConstraintViolation) as exc_info:
            set_password(user, "")
        assert exc_info.value.field == "password"
        assert user.password is None

    def test_set_password_failure_leaves_record_untouched(self):
        """Test that a hashing failure does not modify the record."""
        user = User(username="alice", email="alice@example.com", password="hunter2")
        broken = MagicMock()
        broken.hash.side_effect = ValueError("bad salt")
        with patch("src.services.passwords.get_password_context", return_value=broken):
            with pytest.raises(HashingFailure):
                set_password(user, "hunter2")
        assert user.password == "hunter2"


def test_is_hashed():
    """Test hash detection."""
    assert is_hashed(hash_password("hunter2"))
    assert not is_hashed("hunter2")
    assert not is_hashed("")
    assert not is_hashed(None)


def test_needs_rehash():
    """Test that hashes made with another cost factor need rehashing."""
    assert not needs_rehash(hash_password("hunter2"))
    assert needs_rehash(hash_password("hunter2", rounds=5))
    assert needs_rehash("hunter2")


def test_hash_password_with_nul_is_constraint_violation():
    """Test that bcrypt's refusal of NUL bytes is reported as bad input."""
    with pytest.raises(ConstraintViolation) as exc_info:
        hash_password("pa\x00ss")
    assert exc_info.value.field == "password"
