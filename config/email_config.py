"""
Email service configuration constants.

These are fixed values that don't change per environment.
Environment-specific values (API keys, hosts) are loaded from settings.
"""

# Resend API endpoint
RESEND_API_URL = "https://api.resend.com/emails"

# HTTP timeout for the Resend API (seconds)
RESEND_TIMEOUT_SECONDS = 10.0

# Supported delivery modes
EMAIL_MODES = ("console", "smtp", "resend")

# Default values (can be overridden by env vars)
EMAIL_DEFAULTS = {
    "mode": "console",
    "from_email": "noreply@example.com",
    "from_name": "Accounts",
    "team_name": "The Accounts Team",
}

OTP_EMAIL_SUBJECT = "Your verification code"
