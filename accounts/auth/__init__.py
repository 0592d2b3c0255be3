"""
Auth System

Registration, login, Google sign-in and email OTP verification flows.
"""

from accounts.auth.pipelines import (
    register_pipeline,
    login_pipeline,
    google_register_pipeline,
    send_otp_pipeline,
    verify_otp_pipeline,
)

__all__ = [
    "register_pipeline",
    "login_pipeline",
    "google_register_pipeline",
    "send_otp_pipeline",
    "verify_otp_pipeline",
]
