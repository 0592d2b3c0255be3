"""
Accounts services: user persistence, OTP codes and email delivery.
"""

from accounts.services.user import UserRepository
from accounts.services.otp import OtpService, OtpStatus, InMemoryOtpStore, MongoOtpStore
from accounts.services.email import EmailService

__all__ = [
    "UserRepository",
    "OtpService",
    "OtpStatus",
    "InMemoryOtpStore",
    "MongoOtpStore",
    "EmailService",
]
