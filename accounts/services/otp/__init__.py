from accounts.services.otp.otp_store import (
    OtpRecord,
    OtpStore,
    InMemoryOtpStore,
    MongoOtpStore,
)
from accounts.services.otp.otp_service import OtpService, OtpStatus, EmailDeliveryError

__all__ = [
    "OtpRecord",
    "OtpStore",
    "InMemoryOtpStore",
    "MongoOtpStore",
    "OtpService",
    "OtpStatus",
    "EmailDeliveryError",
]
