"""
FastAPI dependencies for the Accounts application.

Services are built once at startup by init_auth_services() and handed to
route handlers through the getters below.
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from common.auth import JWTAuth, PasswordHasher, GoogleIdTokenVerifier, create_auth_dependency
from accounts.config import Settings
from accounts.services.email.email_service import EmailService
from accounts.services.otp.otp_service import OtpService
from accounts.services.otp.otp_store import InMemoryOtpStore, MongoOtpStore, OtpStore
from accounts.services.user.user_repository import UserRepository

logger = logging.getLogger(__name__)

_user_repository: Optional[UserRepository] = None
_password_hasher: Optional[PasswordHasher] = None
_jwt_auth: Optional[JWTAuth] = None
_otp_service: Optional[OtpService] = None
_otp_store: Optional[OtpStore] = None
_google_verifier: Optional[GoogleIdTokenVerifier] = None


def build_otp_store(db: AsyncIOMotorDatabase, settings: Settings) -> OtpStore:
    """Pick the OTP store named by OTP_STORE."""
    if settings.OTP_STORE == "mongo":
        return MongoOtpStore(db)
    if settings.OTP_STORE != "memory":
        raise ValueError(f"Unknown OTP_STORE: {settings.OTP_STORE}")
    return InMemoryOtpStore()


def build_email_service(settings: Settings) -> EmailService:
    return EmailService(
        mode=settings.EMAIL_MODE,
        resend_api_key=settings.RESEND_API_KEY,
        from_email=settings.SMTP_FROM_EMAIL,
        from_name=settings.SMTP_FROM_NAME,
        team_name=settings.EMAIL_TEAM_NAME,
        smtp_host=settings.SMTP_HOST,
        smtp_port=settings.SMTP_PORT,
        smtp_user=settings.SMTP_USER,
        smtp_password=settings.SMTP_PASSWORD,
    )


def init_auth_services(
    db: AsyncIOMotorDatabase,
    settings: Settings,
    email_service: Optional[EmailService] = None,
) -> None:
    """
    Initialize auth services with database and settings.

    Called once at application startup.

    Args:
        db: MongoDB database connection
        settings: Application settings
        email_service: Override for the mailer (defaults to EMAIL_MODE)
    """
    global _user_repository, _password_hasher, _jwt_auth
    global _otp_service, _otp_store, _google_verifier

    _user_repository = UserRepository(db)
    _password_hasher = PasswordHasher()
    _jwt_auth = JWTAuth(
        secret=settings.get_jwt_secret(),
        algorithm=settings.JWT_ALGORITHM,
        access_token_expire_minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES,
        refresh_token_expire_days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS,
        issuer=settings.JWT_ISSUER,
    )

    _otp_store = build_otp_store(db, settings)
    _otp_service = OtpService(
        store=_otp_store,
        email_service=email_service or build_email_service(settings),
        length=settings.OTP_LENGTH,
        expire_minutes=settings.OTP_EXPIRE_MINUTES,
        clear_on_mismatch=settings.OTP_CLEAR_ON_MISMATCH,
    )

    _google_verifier = GoogleIdTokenVerifier(client_id=settings.GOOGLE_OAUTH_CLIENT_ID)

    logger.info(f"Auth services initialized (OTP store: {settings.OTP_STORE})")


async def ensure_indexes() -> None:
    """Create the indexes the auth services rely on."""
    await get_user_repository().ensure_indexes()
    if isinstance(_otp_store, MongoOtpStore):
        await _otp_store.ensure_indexes()


def get_user_repository() -> UserRepository:
    """Get user repository."""
    if _user_repository is None:
        raise RuntimeError("Auth services not initialized. Call init_auth_services first.")
    return _user_repository


def get_password_hasher() -> PasswordHasher:
    """Get password hasher."""
    if _password_hasher is None:
        raise RuntimeError("Auth services not initialized. Call init_auth_services first.")
    return _password_hasher


def get_jwt_auth() -> JWTAuth:
    """Get JWT token issuer."""
    if _jwt_auth is None:
        raise RuntimeError("Auth services not initialized. Call init_auth_services first.")
    return _jwt_auth


def get_otp_service() -> OtpService:
    """Get OTP service."""
    if _otp_service is None:
        raise RuntimeError("Auth services not initialized. Call init_auth_services first.")
    return _otp_service


def get_google_verifier() -> GoogleIdTokenVerifier:
    """Get Google ID token verifier."""
    if _google_verifier is None:
        raise RuntimeError("Auth services not initialized. Call init_auth_services first.")
    return _google_verifier


require_user_id = create_auth_dependency(get_jwt_auth)
