"""
Configuration module - Fixed, environment-independent constants.
"""

from config.email_config import (
    RESEND_API_URL,
    RESEND_TIMEOUT_SECONDS,
    EMAIL_MODES,
    EMAIL_DEFAULTS,
    OTP_EMAIL_SUBJECT,
)

__all__ = [
    "RESEND_API_URL",
    "RESEND_TIMEOUT_SECONDS",
    "EMAIL_MODES",
    "EMAIL_DEFAULTS",
    "OTP_EMAIL_SUBJECT",
]
