"""
Accounts Pydantic Schemas.

Request and response models for API endpoints.
"""

from accounts.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    GoogleClaim,
    GoogleProfile,
    GoogleLoginRequest,
    SendOtpRequest,
    VerifyOtpRequest,
    UserResponse,
    RegisterResponse,
    LoginResponse,
    GoogleAuthResponse,
)

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "GoogleClaim",
    "GoogleProfile",
    "GoogleLoginRequest",
    "SendOtpRequest",
    "VerifyOtpRequest",
    "UserResponse",
    "RegisterResponse",
    "LoginResponse",
    "GoogleAuthResponse",
]
