"""Shared test fixtures for the Accounts backend tests."""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from common.auth import JWTAuth, PasswordHasher
from accounts.services.otp import InMemoryOtpStore, OtpService
from accounts.services.user.user_repository import normalize_email


class FakeUserRepository:
    """In-memory stand-in for UserRepository with the same unique-email rule."""

    def __init__(self):
        self.users = {}

    async def find_by_email(self, email):
        return self.users.get(normalize_email(email))

    async def find_by_id(self, user_id):
        for user in self.users.values():
            if str(user["_id"]) == user_id:
                return user
        return None

    async def create(self, fields):
        email = normalize_email(fields["email"])
        if email in self.users:
            raise DuplicateKeyError("E11000 duplicate key error: email")
        now = datetime.now(timezone.utc)
        user = {
            **fields,
            "_id": ObjectId(),
            "email": email,
            "isGoogleUser": bool(fields.get("isGoogleUser", False)),
            "createdAt": now,
            "updatedAt": now,
        }
        self.users[email] = user
        return user

    async def ensure_indexes(self):
        return None


class FakeClock:
    """Controllable UTC clock."""

    def __init__(self):
        self.current = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously (not a coroutine)
    collection.find = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


@pytest.fixture
def user_repository():
    return FakeUserRepository()


@pytest.fixture
def hasher():
    # Minimum bcrypt cost keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def jwt_auth():
    return JWTAuth(secret="test-secret", access_token_expire_minutes=15, refresh_token_expire_days=7)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mock_email_service():
    service = MagicMock()
    service.send_otp_email = AsyncMock(return_value={"success": True, "mode": "console"})
    return service


@pytest.fixture
def otp_store():
    return InMemoryOtpStore()


@pytest.fixture
def otp_service(otp_store, mock_email_service, clock):
    return OtpService(
        store=otp_store,
        email_service=mock_email_service,
        length=6,
        expire_minutes=5,
        now=clock,
    )


@pytest.fixture
def sent_code(mock_email_service):
    """Returns the code passed to the most recent send_otp_email call."""
    def _sent_code():
        return mock_email_service.send_otp_email.call_args.kwargs["otp"]
    return _sent_code


@pytest.fixture
def register_payload():
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "password": "Analytical1843",
        "dateOfBirth": "1815-12-10",
        "country": "United Kingdom",
        "about": "First programmer",
    }
