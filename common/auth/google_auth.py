"""
Google ID token verification.

Verifies ID tokens issued by Google Sign-In and returns their claims.

Example:
    verifier = GoogleIdTokenVerifier(client_id=settings.GOOGLE_OAUTH_CLIENT_ID)
    claims = verifier.verify(id_token_str)
    print(claims["email"], claims.get("name"), claims.get("picture"))
"""

import logging
from typing import Any, Dict, Optional

from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

logger = logging.getLogger(__name__)

GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


class GoogleIdTokenVerifier:
    """Verifies Google-issued ID tokens against this app's OAuth client ID."""

    def __init__(self, client_id: Optional[str] = None):
        self._client_id = client_id
        self._request = google_requests.Request()

    def verify(self, id_token_str: str) -> Dict[str, Any]:
        """
        Verify a Google ID token and return its claims.

        Args:
            id_token_str: ID token from the Google Sign-In client

        Returns:
            Dictionary of verified claims (sub, email, name, picture, ...)

        Raises:
            ValueError: If the token is invalid, expired or not issued by Google
        """
        if not self._client_id:
            raise ValueError("Google OAuth client ID not configured")

        claims = id_token.verify_oauth2_token(
            id_token_str,
            self._request,
            self._client_id,
        )

        if claims.get("iss") not in GOOGLE_ISSUERS:
            logger.warning(f"Rejected Google token with issuer: {claims.get('iss')}")
            raise ValueError("Wrong token issuer")

        return claims
