"""Password digest utilities.

Secrets are never stored; only a bcrypt hash is kept, which is enough to
check a candidate password but cannot be reversed into the original.
"""

import bcrypt

DEFAULT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of its input.
MAX_SECRET_BYTES = 72


class SecretHashingError(RuntimeError):
    """Raised when a secret cannot be hashed.

    This is not a validation problem with the input: the calling operation
    must abort rather than persist a missing or partial digest.
    """


def hash_secret(secret: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a secret using bcrypt.

    Uses bcrypt with automatic salt generation. The cost is adaptive:
    every extra round doubles the work of an offline brute force.

    Args:
        secret: The plaintext secret to hash
        rounds: bcrypt cost factor

    Returns:
        The bcrypt hash as a string

    Raises:
        ValueError: If the secret is longer than MAX_SECRET_BYTES once encoded
        SecretHashingError: If bcrypt fails for any other reason
    """
    encoded = secret.encode()
    if len(encoded) > MAX_SECRET_BYTES:
        raise ValueError(
            f"secret must be at most {MAX_SECRET_BYTES} bytes, got {len(encoded)}"
        )

    try:
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode()
    except Exception as e:
        raise SecretHashingError(f"Failed to hash secret: {e}") from e


def verify_secret(secret: str, digest: str) -> bool:
    """Verify a secret against its hash using constant-time comparison.

    Args:
        secret: The plaintext secret to verify
        digest: The bcrypt hash to verify against

    Returns:
        True if the secret matches the hash, False otherwise
    """
    try:
        return bcrypt.checkpw(secret.encode(), digest.encode())
    except Exception:
        # Return False for any error (invalid hash format, etc.)
        return False
