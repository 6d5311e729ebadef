"""Unit tests for password digest utilities."""

from unittest.mock import patch

import pytest

from shared_kernel.security import (
    MAX_SECRET_BYTES,
    SecretHashingError,
    hash_secret,
    verify_secret,
)


class TestHashSecret:
    """Tests for hash_secret function."""

    def test_returns_bcrypt_hash(self):
        """Should return a bcrypt hash string."""
        hashed = hash_secret("my-secret", rounds=4)

        assert hashed.startswith("$2b$04$")

    def test_same_secret_produces_different_hashes(self):
        """Salting makes each hash unique."""
        assert hash_secret("my-secret", rounds=4) != hash_secret("my-secret", rounds=4)

    def test_failure_is_wrapped(self):
        """Should raise SecretHashingError rather than leak bcrypt errors."""
        with patch("shared_kernel.security.bcrypt.hashpw", side_effect=ValueError("boom")):
            with pytest.raises(SecretHashingError):
                hash_secret("my-secret")


class TestVerifySecret:
    """Tests for verify_secret function."""

    def test_correct_secret(self):
        hashed = hash_secret("correct", rounds=4)

        assert verify_secret("correct", hashed) is True

    def test_wrong_secret(self):
        hashed = hash_secret("correct", rounds=4)

        assert verify_secret("wrong", hashed) is False

    def test_invalid_hash_returns_false(self):
        """Should return False rather than raise on a malformed hash."""
        assert verify_secret("anything", "not-a-hash") is False


class TestSecretLength:
    """Secrets longer than bcrypt can hash are rejected as bad input."""

    def test_secret_at_limit_is_hashed(self):
        hashed = hash_secret("a" * MAX_SECRET_BYTES, rounds=4)

        assert verify_secret("a" * MAX_SECRET_BYTES, hashed) is True

    def test_secret_over_limit_raises_value_error(self):
        with pytest.raises(ValueError) as exc_info:
            hash_secret("a" * MAX_SECRET_BYTES + "X", rounds=4)

        assert not isinstance(exc_info.value, SecretHashingError)

    def test_limit_counts_encoded_bytes(self):
        """37 two-byte characters encode to 74 bytes."""
        with pytest.raises(ValueError):
            hash_secret("é" * 37, rounds=4)
