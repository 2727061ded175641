"""
app/db/mongo.py

Purpose: MongoDB-backed user store

- Initializes Motor client with connection pooling
- Single collection: users
- Health checks and retry logic
- Per-document atomic writes (insert_one, find_one_and_update, find_one_and_delete)
"""

import asyncio
import re
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from app.core.exceptions import StorageError
from app.core.logging import get_logger
from app.db.base import UserStore
from app.db.indexes import create_indexes
from app.models.user import UserFields, UserRecord
from utils.constants import CREATED_AT_FIELD, UPDATED_AT_FIELD
from utils.time_utils import utc_now

logger = get_logger(__name__)


def document_to_record(doc: Dict[str, Any]) -> UserRecord:
    """
    Converts a stored document into a UserRecord (ObjectId -> str).
    """
    return UserRecord(
        id=str(doc["_id"]),
        name=doc["name"],
        age=doc["age"],
        city=doc["city"],
        created_at=doc.get(CREATED_AT_FIELD),
        updated_at=doc.get(UPDATED_AT_FIELD),
    )


def parse_object_id(user_id: str) -> Optional[ObjectId]:
    """
    Returns the ObjectId for a path id, or None if it cannot be one.
    """
    if not ObjectId.is_valid(user_id):
        return None
    return ObjectId(user_id)


class MongoUserStore(UserStore):
    """
    User store on a MongoDB collection.
    """

    backend_name = "mongo"

    def __init__(
        self,
        url: str,
        db_name: str,
        collection_name: str = "users",
        timeout: float = 10.0,
        collection: Optional[AsyncIOMotorCollection] = None,
    ):
        super().__init__(timeout=timeout)
        self.url = url
        self.db_name = db_name
        self.collection_name = collection_name
        self._client: Optional[AsyncIOMotorClient] = None
        self.collection = collection

    async def connect(self, max_retries: int = 3, retry_delay: float = 2):
        """
        Establishes connection to MongoDB with retry logic and ensures indexes.
        Called during application startup.
        """
        if self._client is not None:
            logger.warning("MongoDB client already initialized")
            return

        for attempt in range(1, max_retries + 1):
            try:
                logger.info(
                    f"Attempting to connect to MongoDB (attempt {attempt}/{max_retries})"
                )

                client = AsyncIOMotorClient(
                    self.url,
                    maxPoolSize=50,
                    minPoolSize=0,
                    serverSelectionTimeoutMS=5000,
                    connectTimeoutMS=10000,
                    retryWrites=True,
                    retryReads=True,
                )

                # Verify connection
                await client.admin.command("ping")

                self._client = client
                self.collection = client[self.db_name][self.collection_name]
                logger.info(f"✅ Successfully connected to MongoDB: {self.db_name}")
                break

            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                logger.error(
                    f"Failed to connect to MongoDB (attempt {attempt}/{max_retries}): {e}"
                )

                if attempt < max_retries:
                    logger.info(f"Retrying in {retry_delay} seconds...")
                    await asyncio.sleep(retry_delay)
                    retry_delay *= 2  # Exponential backoff
                else:
                    logger.critical("Failed to connect to MongoDB after all retries")
                    raise ConnectionError("Could not establish MongoDB connection") from e

        await create_indexes(self.collection)

    async def close(self):
        """
        Closes the MongoDB connection.
        Called during application shutdown.
        """
        if self._client:
            logger.info("Closing MongoDB connection")
            self._client.close()
            self._client = None
            self.collection = None
            logger.info("MongoDB connection closed")

    async def check_health(self) -> bool:
        """
        Checks if the database connection is healthy.
        """
        try:
            if self._client is None:
                logger.error("MongoDB client not initialized")
                return False

            await asyncio.wait_for(self._client.admin.command("ping"), timeout=self.timeout)
            return True

        except Exception as e:
            logger.error(f"Database health check failed: {str(e)}")
            return False

    def _get_collection(self) -> AsyncIOMotorCollection:
        if self.collection is None:
            raise StorageError(
                "Database not initialized",
                details="Call connect() during startup."
            )
        return self.collection

    async def _list(self, search: Optional[str]) -> List[UserRecord]:
        query: Dict[str, Any] = {}
        if search:
            pattern = {"$regex": re.escape(search), "$options": "i"}
            query = {"$or": [{"name": pattern}, {"city": pattern}]}

        cursor = self._get_collection().find(query).sort(
            [(CREATED_AT_FIELD, ASCENDING), ("_id", ASCENDING)]
        )
        docs = await cursor.to_list(length=None)
        return [document_to_record(doc) for doc in docs]

    async def _create(self, fields: UserFields) -> UserRecord:
        now = utc_now()
        doc = {
            **fields.model_dump(),
            CREATED_AT_FIELD: now,
            UPDATED_AT_FIELD: now,
        }
        result = await self._get_collection().insert_one(doc)
        doc["_id"] = result.inserted_id
        return document_to_record(doc)

    async def _update(self, user_id: str, fields: UserFields) -> Optional[UserRecord]:
        oid = parse_object_id(user_id)
        if oid is None:
            return None

        doc = await self._get_collection().find_one_and_update(
            {"_id": oid},
            {"$set": {**fields.model_dump(), UPDATED_AT_FIELD: utc_now()}},
            return_document=ReturnDocument.AFTER,
        )
        return document_to_record(doc) if doc else None

    async def _delete(self, user_id: str) -> Optional[UserRecord]:
        oid = parse_object_id(user_id)
        if oid is None:
            return None

        doc = await self._get_collection().find_one_and_delete({"_id": oid})
        return document_to_record(doc) if doc else None
