"""
JWT token issuer.

Stateless access and refresh tokens signed with a shared secret.

Example:
    auth = JWTAuth(
        secret="your-secret-key",
        access_token_expire_minutes=15,
        refresh_token_expire_days=7,
    )

    access = auth.issue_access_token(user_id)
    refresh = auth.issue_refresh_token(user_id)

    claims = auth.verify_token(access)
    print(claims["sub"])  # user_id
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional, Callable

from jose import jwt, JWTError, ExpiredSignatureError

from common.auth.base import TokenIssuer

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class JWTAuth(TokenIssuer):
    """
    JWT token issuer.

    Both token kinds carry the user ID as `sub` and a `typ` claim so a refresh
    token can never be presented where an access token is expected.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 15,
        refresh_token_expire_days: int = 7,
        issuer: Optional[str] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize JWT issuer.

        Args:
            secret: Secret key for JWT signing (keep this secure!)
            algorithm: JWT algorithm (default: HS256)
            access_token_expire_minutes: Access token lifetime
            refresh_token_expire_days: Refresh token lifetime
            issuer: Optional `iss` claim
            now: Clock override (tests)
        """
        if not secret:
            raise ValueError("JWTAuth requires a non-empty secret")

        self.secret = secret
        self.algorithm = algorithm
        self.access_token_expire = timedelta(minutes=access_token_expire_minutes)
        self.refresh_token_expire = timedelta(days=refresh_token_expire_days)
        self.issuer = issuer
        self._now = now or (lambda: datetime.now(timezone.utc))

    def _encode(
        self,
        user_id: str,
        token_type: str,
        lifetime: timedelta,
        claims: Dict[str, Any],
    ) -> str:
        issued_at = self._now()
        payload = {
            **claims,
            "sub": str(user_id),
            "typ": token_type,
            "iat": issued_at,
            "exp": issued_at + lifetime,
            "jti": secrets.token_hex(8),
        }
        if self.issuer:
            payload["iss"] = self.issuer
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def issue_access_token(self, user_id: str, **claims: Any) -> str:
        """Create a JWT access token for the user."""
        return self._encode(user_id, ACCESS_TOKEN_TYPE, self.access_token_expire, claims)

    def issue_refresh_token(self, user_id: str) -> str:
        """Create a JWT refresh token for the user."""
        return self._encode(user_id, REFRESH_TOKEN_TYPE, self.refresh_token_expire, {})

    def verify_token(self, token: str, token_type: str = ACCESS_TOKEN_TYPE) -> Dict[str, Any]:
        """Verify and decode a JWT token."""
        options = {"verify_iss": bool(self.issuer)}
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options=options,
            )
        except ExpiredSignatureError:
            raise ValueError("Token has expired")
        except JWTError as e:
            logger.debug(f"JWT decode failed: {e}")
            raise ValueError(f"Invalid token: {e}")

        if payload.get("typ") != token_type:
            raise ValueError(f"Expected {token_type} token")

        if not payload.get("sub"):
            raise ValueError("Token missing subject")

        return payload
