"""
FastAPI authentication dependencies.

Provides a factory that creates an auth dependency which can be
injected into route handlers. Works with any TokenIssuer implementation.

Example:
    from common.auth import JWTAuth, create_auth_dependency

    def get_auth() -> JWTAuth:
        return JWTAuth(secret="your-secret")

    get_current_user_id = create_auth_dependency(get_auth)

    @app.get("/profile")
    async def get_profile(user_id: str = Depends(get_current_user_id)):
        return {"user_id": user_id}
"""

from typing import Callable, Optional
from fastapi import Depends, Header

from common.auth.base import TokenIssuer
from common.utils.exceptions import UnauthorizedException


def create_auth_dependency(
    get_token_issuer: Callable[[], TokenIssuer],
    header_name: str = "Authorization",
    scheme: str = "Bearer",
):
    """
    Factory to create FastAPI auth dependencies.

    Args:
        get_token_issuer: FastAPI dependency that returns the TokenIssuer
        header_name: Header to extract token from (default: Authorization)
        scheme: Auth scheme prefix (default: Bearer)

    Returns:
        A FastAPI dependency function that extracts and verifies the user ID
    """

    async def get_current_user_id(
        authorization: Optional[str] = Header(None, alias=header_name),
        issuer: TokenIssuer = Depends(get_token_issuer),
    ) -> str:
        """
        Extract and verify user ID from the authorization header.

        Raises:
            UnauthorizedException: If token is missing, invalid, or expired
        """
        if not authorization:
            raise UnauthorizedException("Missing authorization header")

        prefix = f"{scheme} "
        if not authorization.startswith(prefix):
            raise UnauthorizedException(
                f"Invalid authorization scheme. Expected: {scheme}",
                code="INVALID_AUTH_SCHEME",
            )

        token = authorization[len(prefix):].strip()
        if not token:
            raise UnauthorizedException("Token is empty", code="EMPTY_TOKEN")

        try:
            payload = issuer.verify_token(token)
        except ValueError as e:
            raise UnauthorizedException(str(e), code="INVALID_TOKEN")

        return payload["sub"]

    return get_current_user_id
