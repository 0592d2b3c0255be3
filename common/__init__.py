"""
Common library for reusable infrastructure components.

This package provides generic modules that can be used across projects:

- database: Async MongoDB connection (Motor)
- auth: Password hashing, JWT tokens, Google ID token verification
- utils: Standard responses and exceptions
- config: Base settings class
"""

from common.database import MongoDB
from common.auth import (
    CredentialHasher,
    TokenIssuer,
    JWTAuth,
    PasswordHasher,
    GoogleIdTokenVerifier,
    create_auth_dependency,
)
from common.utils import (
    success_response,
    error_response,
    APIException,
    BadRequestException,
    UnauthorizedException,
    NotFoundException,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    # Auth
    "CredentialHasher",
    "TokenIssuer",
    "JWTAuth",
    "PasswordHasher",
    "GoogleIdTokenVerifier",
    "create_auth_dependency",
    # Utils
    "success_response",
    "error_response",
    "APIException",
    "BadRequestException",
    "UnauthorizedException",
    "NotFoundException",
    # Config
    "BaseAppSettings",
]
