"""Salted password hashing.

Digests are HMAC-SHA512 keyed by a random per-user salt over the UTF-8
password, stored base64 encoded.
"""

import base64
import binascii
import hashlib
import hmac
import secrets

SALT_LENGTH = 16


class PasswordHasher:
    """Derives and verifies salted password digests."""

    def __init__(self, salt_length: int = SALT_LENGTH) -> None:
        """Initialize the hasher.

        Args:
            salt_length: Number of random bytes per salt

        Raises:
            ValueError: If salt_length is not positive
        """
        if salt_length <= 0:
            raise ValueError("salt_length must be positive")

        self.salt_length = salt_length

    def generate_salt(self) -> bytes:
        """Generate a cryptographically random salt."""
        return secrets.token_bytes(self.salt_length)

    def hash_password(self, password: str, salt: bytes) -> str:
        """Derive the storable digest for a password.

        Args:
            password: Plain-text password
            salt: Per-user salt used as the HMAC key

        Returns:
            str: Base64 encoded digest

        Raises:
            UnicodeEncodeError: If the password is not encodable as UTF-8
        """
        digest = hmac.new(salt, password.encode("utf-8"), hashlib.sha512).digest()
        return base64.b64encode(digest).decode("ascii")

    def verify_password(self, password: str, stored_hash: str, salt: bytes) -> bool:
        """Check a password against a stored digest.

        The full stored digest is compared in constant time. A malformed or
        truncated stored digest never matches, and neither does a password
        that cannot be encoded as UTF-8 (e.g. lone surrogates).

        Args:
            password: Plain-text password to check
            stored_hash: Base64 digest produced by hash_password
            salt: Salt the digest was created with

        Returns:
            bool: True if the password matches, False otherwise
        """
        try:
            stored = base64.b64decode(stored_hash, validate=True)
        except (binascii.Error, ValueError):
            return False

        try:
            encoded = password.encode("utf-8")
        except UnicodeEncodeError:
            return False

        computed = hmac.new(salt, encoded, hashlib.sha512).digest()
        return hmac.compare_digest(computed, stored)
