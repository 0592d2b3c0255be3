"""
User repository.

Stores user accounts in the `users` collection. Email uniqueness is enforced
by a unique index; callers' existence checks only avoid a wasted insert.
"""

import logging
from datetime import date, datetime, time, timezone
from typing import Optional, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"

USER_FIELDS = (
    "firstName",
    "lastName",
    "email",
    "password",
    "dateOfBirth",
    "country",
    "about",
    "profilePicture",
    "isGoogleUser",
)


def normalize_email(email: str) -> str:
    """Emails are matched case-insensitively."""
    return email.strip().lower()


def _to_datetime(value: Any) -> Any:
    # BSON has no date-only type
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    return value


class UserRepository:
    """Create and look up user documents."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db
        self._collection = db[USERS_COLLECTION]

    async def ensure_indexes(self) -> None:
        """Create the unique email index. Safe to call on every startup."""
        await self._collection.create_index(
            [("email", ASCENDING)],
            unique=True,
            name="email_unique",
        )
        logger.info("User indexes ensured")

    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Get a user document by email, or None."""
        normalized = normalize_email(email)
        logger.debug(f"Looking up user by email: {normalized}")
        return await self._collection.find_one({"email": normalized})

    async def find_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get a user document by ID, or None for unknown or malformed IDs."""
        if not ObjectId.is_valid(user_id):
            return None
        return await self._collection.find_one({"_id": ObjectId(user_id)})

    async def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a new user document.

        Args:
            fields: User fields (see USER_FIELDS); unknown keys are ignored

        Returns:
            The stored document including `_id`

        Raises:
            pymongo.errors.DuplicateKeyError: If the email is already taken
        """
        now = datetime.now(timezone.utc)

        user_doc: Dict[str, Any] = {
            key: _to_datetime(fields.get(key)) for key in USER_FIELDS
        }
        user_doc["email"] = normalize_email(fields["email"])
        user_doc["isGoogleUser"] = bool(fields.get("isGoogleUser", False))
        user_doc["createdAt"] = now
        user_doc["updatedAt"] = now

        result = await self._collection.insert_one(user_doc)
        user_doc["_id"] = result.inserted_id

        logger.info(f"Created user {result.inserted_id}")
        return user_doc
