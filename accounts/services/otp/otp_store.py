"""
OTP record stores.

One pending code per email: `put` overwrites whatever was stored before.
The in-memory store is per process and suits development and tests; the
MongoDB store is shared across API instances and lets a TTL index purge
dead records.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

logger = logging.getLogger(__name__)

OTP_COLLECTION = "otps"


@dataclass(frozen=True)
class OtpRecord:
    """A pending one-time code for an email address."""
    email: str
    code: str
    expires_at: datetime
    created_at: datetime


def _as_utc(value: datetime) -> datetime:
    # Clients created without tz_aware return naive UTC datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class OtpStore(Protocol):
    """Storage contract used by OtpService."""

    async def put(self, record: OtpRecord) -> None: ...

    async def get(self, email: str) -> Optional[OtpRecord]: ...

    async def delete(self, email: str) -> None: ...


class InMemoryOtpStore:
    """Dict-backed store for a single process."""

    def __init__(self):
        self._records: Dict[str, OtpRecord] = {}

    async def put(self, record: OtpRecord) -> None:
        self._records[record.email] = record

    async def get(self, email: str) -> Optional[OtpRecord]:
        return self._records.get(email)

    async def delete(self, email: str) -> None:
        self._records.pop(email, None)

    def __len__(self) -> int:
        return len(self._records)


class MongoOtpStore:
    """MongoDB-backed store (collection: otps), one document per email."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db
        self._collection = db[OTP_COLLECTION]

    async def ensure_indexes(self) -> None:
        """Unique email plus a TTL index so MongoDB removes expired codes."""
        await self._collection.create_index(
            [("email", ASCENDING)],
            unique=True,
            name="email_unique",
        )
        await self._collection.create_index(
            [("expiresAt", ASCENDING)],
            expireAfterSeconds=0,
            name="expires_ttl",
        )
        logger.info("OTP indexes ensured")

    async def put(self, record: OtpRecord) -> None:
        await self._collection.update_one(
            {"email": record.email},
            {
                "$set": {
                    "code": record.code,
                    "expiresAt": record.expires_at,
                    "createdAt": record.created_at,
                },
                "$setOnInsert": {"email": record.email},
            },
            upsert=True,
        )

    async def get(self, email: str) -> Optional[OtpRecord]:
        doc = await self._collection.find_one({"email": email})
        if not doc:
            return None

        return OtpRecord(
            email=doc["email"],
            code=doc["code"],
            expires_at=_as_utc(doc["expiresAt"]),
            created_at=_as_utc(doc["createdAt"]),
        )

    async def delete(self, email: str) -> None:
        await self._collection.delete_one({"email": email})
