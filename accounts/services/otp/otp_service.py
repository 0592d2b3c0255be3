"""
One-time password service.

Generates numeric codes, keeps them in an injected store with an expiry,
emails them and checks submitted codes.
"""

import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional

from accounts.services.email.email_service import EmailService
from accounts.services.otp.otp_store import OtpRecord, OtpStore
from accounts.services.user.user_repository import normalize_email

logger = logging.getLogger(__name__)


class OtpStatus(str, Enum):
    """Outcome of checking a submitted code."""
    VALID = "valid"
    EXPIRED = "expired"
    INVALID = "invalid"


class EmailDeliveryError(RuntimeError):
    """The mail provider did not accept the message."""

    def __init__(self, to_email: str, reason: Optional[str]):
        super().__init__(f"Failed to deliver email to {to_email}: {reason}")
        self.to_email = to_email
        self.reason = reason


class OtpService:
    """
    Issues and checks email verification codes.

    A matching, unexpired code is consumed on verify. An expired code is
    removed when it is seen. A wrong code leaves the pending record in place
    so the user can retry until expiry, unless clear_on_mismatch is set.
    """

    def __init__(
        self,
        store: OtpStore,
        email_service: EmailService,
        length: int = 6,
        expire_minutes: int = 5,
        clear_on_mismatch: bool = False,
        now: Optional[Callable[[], datetime]] = None,
    ):
        if length < 4:
            raise ValueError("OTP length must be at least 4 digits")

        self._store = store
        self._email_service = email_service
        self._length = length
        self._expire_minutes = expire_minutes
        self._clear_on_mismatch = clear_on_mismatch
        self._now = now or (lambda: datetime.now(timezone.utc))

    @property
    def expire_minutes(self) -> int:
        return self._expire_minutes

    def generate(self) -> str:
        """Generate a numeric code without a leading zero."""
        lower = 10 ** (self._length - 1)
        return str(lower + secrets.randbelow(9 * lower))

    async def save(self, email: str, code: str) -> OtpRecord:
        """Store a code for the email, replacing any pending one, and start its expiry clock."""
        now = self._now()
        record = OtpRecord(
            email=normalize_email(email),
            code=code,
            expires_at=now + timedelta(minutes=self._expire_minutes),
            created_at=now,
        )
        await self._store.put(record)
        logger.debug(f"OTP saved for {record.email}, expires at {record.expires_at.isoformat()}")
        return record

    async def send_by_email(self, email: str, code: str) -> None:
        """
        Email the code.

        Raises:
            EmailDeliveryError: If the provider rejected the message
        """
        result = await self._email_service.send_otp_email(
            to_email=email,
            otp=code,
            expires_minutes=self._expire_minutes,
        )
        if not result.get("success"):
            logger.error(f"OTP email delivery failed for {email}: {result.get('error')}")
            raise EmailDeliveryError(email, result.get("error"))

        logger.info(f"OTP email sent to {email}")

    async def verify(self, email: str, code: str) -> OtpStatus:
        """Check a submitted code against the pending one for the email."""
        normalized = normalize_email(email)
        record = await self._store.get(normalized)

        if record is None:
            return OtpStatus.INVALID

        if self._now() >= record.expires_at:
            await self._store.delete(normalized)
            return OtpStatus.EXPIRED

        if not hmac.compare_digest(record.code.encode("utf-8"), code.strip().encode("utf-8")):
            if self._clear_on_mismatch:
                await self._store.delete(normalized)
            return OtpStatus.INVALID

        await self._store.delete(normalized)
        return OtpStatus.VALID
