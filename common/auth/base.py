"""
Abstract credential and token interfaces.

Defines the contracts the account pipelines depend on, so the hashing
scheme and the token format can be swapped without touching orchestration
code.

Example:
    from common.auth import CredentialHasher, TokenIssuer, JWTAuth, PasswordHasher

    def build_auth(settings) -> tuple[CredentialHasher, TokenIssuer]:
        return PasswordHasher(), JWTAuth(secret=settings.JWT_SECRET)
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class CredentialHasher(ABC):
    """One-way password hashing with a constant-time compare."""

    @abstractmethod
    def hash_password(self, password: str) -> str:
        """
        Hash a plaintext password.

        Args:
            password: Plaintext password

        Returns:
            Opaque digest suitable for storage
        """
        pass

    @abstractmethod
    def verify_password(self, password: str, hashed: str) -> bool:
        """
        Compare a plaintext password against a stored digest.

        Args:
            password: Plaintext password
            hashed: Digest previously returned by hash_password

        Returns:
            True if the password matches
        """
        pass


class TokenIssuer(ABC):
    """
    Mints and verifies bearer tokens bound to a user identifier.

    Tokens are opaque strings to callers.
    """

    @abstractmethod
    def issue_access_token(self, user_id: str, **claims: Any) -> str:
        """
        Create a short-lived access token.

        Args:
            user_id: The user's ID (stored as the `sub` claim)
            **claims: Additional claims to include in the token

        Returns:
            The encoded token
        """
        pass

    @abstractmethod
    def issue_refresh_token(self, user_id: str) -> str:
        """
        Create a longer-lived refresh token.

        Args:
            user_id: The user's ID (stored as the `sub` claim)

        Returns:
            The encoded token
        """
        pass

    @abstractmethod
    def verify_token(self, token: str, token_type: str = "access") -> Dict[str, Any]:
        """
        Verify a token and return its claims.

        Args:
            token: The token to verify
            token_type: Expected `typ` claim ("access" or "refresh")

        Returns:
            Dictionary of decoded claims (at minimum: sub)

        Raises:
            ValueError: If token is invalid, expired, or of the wrong type
        """
        pass
