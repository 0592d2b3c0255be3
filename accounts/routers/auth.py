"""
FastAPI router for Auth endpoints.

Provides registration, login, Google sign-in and email OTP verification.
"""

import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Body, Depends, status
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from common.auth import GoogleIdTokenVerifier, JWTAuth, PasswordHasher
from common.utils import success_response
from common.utils.exceptions import NotFoundException, UnauthorizedException
from accounts.auth.pipelines import (
    register_pipeline,
    login_pipeline,
    google_register_pipeline,
    send_otp_pipeline,
    verify_otp_pipeline,
)
from accounts.dependencies import (
    get_user_repository,
    get_password_hasher,
    get_jwt_auth,
    get_otp_service,
    get_google_verifier,
    require_user_id,
)
from accounts.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    GoogleProfile,
    GoogleLoginRequest,
    SendOtpRequest,
    VerifyOtpRequest,
    UserResponse,
    RegisterResponse,
    LoginResponse,
    GoogleAuthResponse,
)
from accounts.services.otp.otp_service import OtpService
from accounts.services.user.user_repository import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    jwt_auth: Annotated[JWTAuth, Depends(get_jwt_auth)],
    body: Dict[str, Any] = Body(...),
):
    """
    Register a new user account.

    The body is validated here rather than by FastAPI so a validation
    failure reaches the pipeline and is reported as a 400.
    """
    payload = None
    validation_error = None
    try:
        payload = RegisterRequest.model_validate(body)
    except ValidationError as e:
        validation_error = e

    result = await register_pipeline(
        user_repository=user_repository,
        hasher=hasher,
        token_issuer=jwt_auth,
        payload=payload,
        validation_error=validation_error,
    )

    response = RegisterResponse(
        user=UserResponse.from_document(result["user"]),
        accessToken=result["accessToken"],
        refreshToken=result["refreshToken"],
    )
    return success_response(
        response.model_dump(mode="json"),
        message="Registration successful",
    )


@router.post("/login")
async def login(
    body: LoginRequest,
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    jwt_auth: Annotated[JWTAuth, Depends(get_jwt_auth)],
):
    """Authenticate with email and password and return a token pair."""
    result = await login_pipeline(
        user_repository=user_repository,
        hasher=hasher,
        token_issuer=jwt_auth,
        credentials=body,
    )
    return success_response(
        LoginResponse(**result).model_dump(),
        message="Signed in successfully",
    )


@router.post("/google")
async def google_sign_in(
    body: GoogleLoginRequest,
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    jwt_auth: Annotated[JWTAuth, Depends(get_jwt_auth)],
    verifier: Annotated[GoogleIdTokenVerifier, Depends(get_google_verifier)],
):
    """
    Sign in with a Google ID token, creating the account on first use.

    Returns an access token only. Tokens whose email Google has not
    verified are rejected.
    """
    try:
        claims = await run_in_threadpool(verifier.verify, body.idToken)
    except ValueError as e:
        logger.warning(f"Google token verification failed: {e}")
        raise UnauthorizedException("Invalid Google token", code="INVALID_GOOGLE_TOKEN")

    # An unverified address must not resolve to an existing account
    if claims.get("email") and claims.get("email_verified") is not True:
        logger.warning("Google sign-in rejected - email not verified by Google")
        raise UnauthorizedException(
            "Google account email is not verified",
            code="GOOGLE_EMAIL_UNVERIFIED",
        )

    access_token = await google_register_pipeline(
        user_repository=user_repository,
        token_issuer=jwt_auth,
        profile=GoogleProfile.from_id_token_claims(claims),
    )
    return success_response(
        GoogleAuthResponse(accessToken=access_token).model_dump(),
        message="Signed in with Google",
    )


@router.post("/otp/send")
async def send_otp(
    body: SendOtpRequest,
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    otp_service: Annotated[OtpService, Depends(get_otp_service)],
):
    """Email a verification code to an address that is not registered yet."""
    await send_otp_pipeline(
        user_repository=user_repository,
        otp_service=otp_service,
        email=body.email,
    )
    return success_response(message="Verification code sent")


@router.post("/otp/verify")
async def verify_otp(
    body: VerifyOtpRequest,
    otp_service: Annotated[OtpService, Depends(get_otp_service)],
):
    """Check a verification code."""
    await verify_otp_pipeline(
        otp_service=otp_service,
        email=body.email,
        otp=body.otp,
    )
    return success_response(message="Email verified")


@router.get("/me")
async def me(
    user_id: Annotated[str, Depends(require_user_id)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
):
    """Return the account behind the bearer access token."""
    user = await user_repository.find_by_id(user_id)
    if not user:
        raise NotFoundException("User not found", code="USER_NOT_FOUND")

    return success_response(UserResponse.from_document(user).model_dump(mode="json"))
