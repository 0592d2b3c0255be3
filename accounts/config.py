"""
Accounts application settings.

Extends the base settings with account-specific configuration.
"""

from typing import Optional
from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """Accounts-specific settings."""

    # ==========================================================================
    # OTP Settings
    # ==========================================================================
    OTP_LENGTH: int = 6
    OTP_EXPIRE_MINUTES: int = 5
    OTP_STORE: str = "memory"  # "memory" (single process) or "mongo"
    # Keep a pending code after a wrong guess (retry until expiry) unless set
    OTP_CLEAR_ON_MISMATCH: bool = False

    # ==========================================================================
    # Google OAuth
    # ==========================================================================
    GOOGLE_OAUTH_CLIENT_ID: Optional[str] = None

    # ==========================================================================
    # Email Settings
    # ==========================================================================
    EMAIL_MODE: str = "console"  # console, smtp, resend
    RESEND_API_KEY: Optional[str] = None
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_FROM_EMAIL: str = "noreply@example.com"
    SMTP_FROM_NAME: str = "Accounts"
    EMAIL_TEAM_NAME: str = "The Accounts Team"

    # Development-only fallback so the API boots without a configured secret
    DEV_JWT_SECRET: str = "dev-secret-change-me"

    def get_jwt_secret(self) -> str:
        """JWT secret, falling back to the dev secret in development."""
        if self.JWT_SECRET:
            return self.JWT_SECRET
        if self.is_development():
            return self.DEV_JWT_SECRET
        raise ValueError("JWT_SECRET is required outside development")


# Global settings instance
settings = Settings()
