"""
Accounts application code.

This package contains the account-system implementation:
- auth: Registration, login, Google sign-in and OTP pipelines
- services: User repository, OTP codes, email delivery
- schemas: Request/response models
- routers: FastAPI endpoints
- config: Application settings

Uses generic infrastructure from the common/ package.
"""
