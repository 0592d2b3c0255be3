"""
bcrypt password hashing.

Passwords are pre-hashed with SHA-256 before bcrypt so that inputs longer
than bcrypt's 72-byte limit are not silently truncated.

Example:
    hasher = PasswordHasher()
    digest = hasher.hash_password("MyP@ss123")
    assert hasher.verify_password("MyP@ss123", digest)
"""

import base64
import hashlib

import bcrypt as bcrypt_lib

from common.auth.base import CredentialHasher


class PasswordHasher(CredentialHasher):
    """bcrypt hasher with SHA-256 pre-hashing."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def _prehash_password(self, password: str) -> str:
        sha256_hash = hashlib.sha256(password.encode("utf-8")).digest()
        return base64.b64encode(sha256_hash).decode("utf-8")

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt with SHA-256 pre-hashing."""
        prehashed = self._prehash_password(password)
        salt = bcrypt_lib.gensalt(rounds=self.rounds)
        return bcrypt_lib.hashpw(prehashed.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        """
        Verify a password against its hash.

        Accounts created before pre-hashing was introduced hold direct bcrypt
        hashes, so those are checked as a fallback.
        """
        if not hashed:
            return False

        hashed_bytes = hashed.encode("utf-8")

        prehashed = self._prehash_password(password)
        try:
            if bcrypt_lib.checkpw(prehashed.encode("utf-8"), hashed_bytes):
                return True
        except ValueError:
            # Malformed digest
            return False

        try:
            return bcrypt_lib.checkpw(password.encode("utf-8"), hashed_bytes)
        except ValueError:
            # Password too long for direct bcrypt - definitely not a match
            return False
