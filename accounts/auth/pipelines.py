"""
Auth pipeline functions.

Stateless orchestration logic for registration, login, Google sign-in and
email OTP verification. Business-rule failures raise BadRequestException;
storage, hashing and mail failures propagate unchanged.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from common.auth.base import CredentialHasher, TokenIssuer
from common.utils.exceptions import BadRequestException
from accounts.schemas.auth import GoogleProfile, LoginRequest, RegisterRequest
from accounts.services.otp.otp_service import OtpService, OtpStatus
from accounts.services.user.user_repository import UserRepository

logger = logging.getLogger(__name__)

EMAIL_EXISTS_MESSAGE = "Email already registered"
INVALID_EMAIL_MESSAGE = "Invalid email"
INVALID_PASSWORD_MESSAGE = "Invalid password"
OTP_EXPIRED_MESSAGE = "OTP has expired. Please request a new one."
OTP_INVALID_MESSAGE = "Invalid OTP. Please check the code and try again."
GOOGLE_EMAIL_MISSING_MESSAGE = "Google account did not provide an email address"


def first_validation_message(error: ValidationError) -> str:
    """Render the first pydantic error as `field: message`."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


async def register_pipeline(
    user_repository: UserRepository,
    hasher: CredentialHasher,
    token_issuer: TokenIssuer,
    payload: Optional[RegisterRequest],
    validation_error: Optional[ValidationError] = None,
) -> dict:
    """
    Orchestrates email/password registration.

    Args:
        user_repository: For the existence check and insert
        hasher: Password hasher
        token_issuer: Mints the token pair
        payload: Validated registration body
        validation_error: Upstream validation failure, if any

    Returns:
        dict with user (stored document), accessToken and refreshToken

    Raises:
        BadRequestException: Invalid payload or email already registered
    """
    if validation_error is not None:
        message = first_validation_message(validation_error)
        logger.warning(f"Registration rejected - validation failed: {message}")
        raise BadRequestException(message, code="VALIDATION_ERROR")

    if payload is None:
        raise BadRequestException("Request body is required", code="VALIDATION_ERROR")

    existing_user = await user_repository.find_by_email(payload.email)
    if existing_user:
        logger.warning(f"Registration rejected - email already exists: {payload.email}")
        raise BadRequestException(EMAIL_EXISTS_MESSAGE, code="EMAIL_EXISTS")

    password_hash = hasher.hash_password(payload.password)

    user = await user_repository.create({
        "firstName": payload.firstName,
        "lastName": payload.lastName,
        "email": payload.email,
        "password": password_hash,
        "dateOfBirth": payload.dateOfBirth,
        "country": payload.country,
        "about": payload.about,
        "isGoogleUser": False,
    })

    user_id = str(user["_id"])
    access_token = token_issuer.issue_access_token(user_id)
    refresh_token = token_issuer.issue_refresh_token(user_id)

    logger.info(f"User registered: {user_id}")

    return {
        "user": user,
        "accessToken": access_token,
        "refreshToken": refresh_token,
    }


async def login_pipeline(
    user_repository: UserRepository,
    hasher: CredentialHasher,
    token_issuer: TokenIssuer,
    credentials: LoginRequest,
) -> dict:
    """
    Orchestrates email/password login.

    Unknown email and wrong password fail with different messages.

    Returns:
        dict with id, email, accessToken and refreshToken

    Raises:
        BadRequestException: Unknown email or wrong password
    """
    user = await user_repository.find_by_email(credentials.email)
    if not user:
        logger.warning(f"Login failed - user not found: {credentials.email}")
        raise BadRequestException(INVALID_EMAIL_MESSAGE, code="INVALID_EMAIL")

    # Google accounts have no local password
    stored_hash = user.get("password")
    if not stored_hash or not hasher.verify_password(credentials.password, stored_hash):
        logger.warning(f"Login failed - invalid password for user: {user['_id']}")
        raise BadRequestException(INVALID_PASSWORD_MESSAGE, code="INVALID_PASSWORD")

    user_id = str(user["_id"])
    access_token = token_issuer.issue_access_token(user_id)
    refresh_token = token_issuer.issue_refresh_token(user_id)

    logger.info(f"User logged in: {user_id}")

    return {
        "id": user_id,
        "email": user["email"],
        "accessToken": access_token,
        "refreshToken": refresh_token,
    }


async def google_register_pipeline(
    user_repository: UserRepository,
    token_issuer: TokenIssuer,
    profile: GoogleProfile,
) -> str:
    """
    Orchestrates Google sign-in, creating the account on first use.

    Returns:
        Access token only. Unlike register and login no refresh token is
        issued here.

    Raises:
        BadRequestException: Profile carries no email claim
    """
    email = profile.primary_email
    if not email:
        logger.warning("Google sign-in rejected - no email claim in profile")
        raise BadRequestException(GOOGLE_EMAIL_MISSING_MESSAGE, code="GOOGLE_EMAIL_MISSING")

    user = await user_repository.find_by_email(email)

    if not user:
        first_name, last_name = profile.split_name()
        user = await user_repository.create({
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "profilePicture": profile.profile_picture,
            "password": None,
            "isGoogleUser": True,
        })
        logger.info(f"Google user created: {user['_id']}")

    access_token = token_issuer.issue_access_token(str(user["_id"]))

    logger.info(f"Google sign-in: {user['_id']}")
    return access_token


async def send_otp_pipeline(
    user_repository: UserRepository,
    otp_service: OtpService,
    email: str,
) -> None:
    """
    Sends a verification code to an email that is not yet registered.

    Raises:
        BadRequestException: Email already registered (no email is sent)
        EmailDeliveryError: Mail provider rejected the message
    """
    existing_user = await user_repository.find_by_email(email)
    if existing_user:
        logger.warning(f"OTP request rejected - email already registered: {email}")
        raise BadRequestException(EMAIL_EXISTS_MESSAGE, code="EMAIL_EXISTS")

    otp = otp_service.generate()
    await otp_service.save(email, otp)
    await otp_service.send_by_email(email, otp)


async def verify_otp_pipeline(
    otp_service: OtpService,
    email: str,
    otp: str,
) -> None:
    """
    Gates registration on a valid code. Returns normally when the code matches.

    Raises:
        BadRequestException: Code expired or invalid
    """
    status = await otp_service.verify(email, otp)

    if status is OtpStatus.EXPIRED:
        logger.info(f"OTP expired for {email}")
        raise BadRequestException(OTP_EXPIRED_MESSAGE, code="OTP_EXPIRED")

    if status is OtpStatus.INVALID:
        logger.info(f"Invalid OTP submitted for {email}")
        raise BadRequestException(OTP_INVALID_MESSAGE, code="OTP_INVALID")

    logger.info(f"OTP verified for {email}")
