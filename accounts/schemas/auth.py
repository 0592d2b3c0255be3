"""
Pydantic models for Auth request/response validation.

Defines schemas for registration, login, Google sign-in and OTP verification.
"""

from datetime import date, datetime
from typing import List, Optional, Tuple
from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request body for user registration."""
    firstName: str = Field(..., min_length=1, max_length=50)
    lastName: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    dateOfBirth: date
    country: str = Field(..., min_length=2, max_length=56)
    about: Optional[str] = Field(None, max_length=1000)


class LoginRequest(BaseModel):
    """Request body for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class GoogleClaim(BaseModel):
    """A single email or photo claim from a Google profile."""
    value: Optional[str] = None


class GoogleProfile(BaseModel):
    """
    Federated identity payload from Google.

    Every field is optional. Derived values follow fixed defaulting rules:
    the first email claim is the email, the first whitespace-delimited token
    of the display name is the given name and the remainder the family name
    (both default to ""), and the first photo claim is the profile picture.
    """
    emails: List[GoogleClaim] = Field(default_factory=list)
    displayName: Optional[str] = None
    photos: List[GoogleClaim] = Field(default_factory=list)

    @property
    def primary_email(self) -> Optional[str]:
        if not self.emails:
            return None
        return self.emails[0].value or None

    @property
    def display_name(self) -> str:
        return self.displayName or ""

    def split_name(self) -> Tuple[str, str]:
        """Split the display name into (first name, last name)."""
        parts = self.display_name.split(None, 1)
        first_name = parts[0] if parts else ""
        last_name = parts[1].strip() if len(parts) > 1 else ""
        return first_name, last_name

    @property
    def profile_picture(self) -> Optional[str]:
        if not self.photos:
            return None
        return self.photos[0].value or None

    @classmethod
    def from_id_token_claims(cls, claims: dict) -> "GoogleProfile":
        """
        Build a profile from verified Google ID token claims.

        The email claim is only taken when Google marks it verified.
        """
        email = claims.get("email") if claims.get("email_verified") is True else None
        picture = claims.get("picture")
        return cls(
            emails=[GoogleClaim(value=email)] if email else [],
            displayName=claims.get("name"),
            photos=[GoogleClaim(value=picture)] if picture else [],
        )


class GoogleLoginRequest(BaseModel):
    """Request body for Google sign-in."""
    idToken: str = Field(..., min_length=1, description="Google ID token from the Sign-In client")


class SendOtpRequest(BaseModel):
    """Request body for sending a verification code."""
    email: EmailStr


class VerifyOtpRequest(BaseModel):
    """Request body for checking a verification code."""
    email: EmailStr
    otp: str = Field(..., min_length=1, max_length=12)


class UserResponse(BaseModel):
    """User data in responses. Never includes the password hash."""
    id: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: str
    dateOfBirth: Optional[date] = None
    country: Optional[str] = None
    about: Optional[str] = None
    profilePicture: Optional[str] = None
    isGoogleUser: bool = False
    createdAt: Optional[datetime] = None

    @classmethod
    def from_document(cls, user: dict) -> "UserResponse":
        return cls(
            id=str(user["_id"]),
            firstName=user.get("firstName"),
            lastName=user.get("lastName"),
            email=user["email"],
            dateOfBirth=user.get("dateOfBirth"),
            country=user.get("country"),
            about=user.get("about"),
            profilePicture=user.get("profilePicture"),
            isGoogleUser=user.get("isGoogleUser", False),
            createdAt=user.get("createdAt"),
        )


class RegisterResponse(BaseModel):
    """Response for successful registration."""
    user: UserResponse
    accessToken: str
    refreshToken: str


class LoginResponse(BaseModel):
    """Response for successful login."""
    id: str
    email: str
    accessToken: str
    refreshToken: str


class GoogleAuthResponse(BaseModel):
    """Response for Google sign-in. Carries an access token only."""
    accessToken: str
