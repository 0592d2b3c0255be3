"""
Authentication module - Password hashing, JWT tokens, Google ID tokens.
"""

from common.auth.base import CredentialHasher, TokenIssuer
from common.auth.jwt_auth import JWTAuth
from common.auth.password_hasher import PasswordHasher
from common.auth.google_auth import GoogleIdTokenVerifier
from common.auth.dependencies import create_auth_dependency

__all__ = [
    "CredentialHasher",
    "TokenIssuer",
    "JWTAuth",
    "PasswordHasher",
    "GoogleIdTokenVerifier",
    "create_auth_dependency",
]
