import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import BSONError
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from .errors import StoreError
from .filters import TaskFilter

logger = logging.getLogger(__name__)

TASKS_COLLECTION = "tasks"


@contextmanager
def store_errors(message: str):
    """Turn driver failures into a StoreError with a client-safe message."""
    try:
        yield
    except (PyMongoError, BSONError, OverflowError) as exc:
        raise StoreError(message) from exc


def to_object_id(task_id: str) -> Optional[ObjectId]:
    if not ObjectId.is_valid(task_id):
        return None
    return ObjectId(task_id)


class TaskStore:
    """Handle over the tasks collection.

    Opened once at startup, shared by all requests, closed on shutdown.
    """

    def __init__(
        self, mongodb_uri: str, db_name: str, collection_name: str = TASKS_COLLECTION
    ):
        self.mongodb_uri = mongodb_uri
        self.db_name = db_name
        self.collection_name = collection_name
        self._client: Optional[AsyncIOMotorClient] = None
        self._collection: Optional[AsyncIOMotorCollection] = None

    async def open(self) -> None:
        self._client = AsyncIOMotorClient(self.mongodb_uri, tz_aware=True)
        self._collection = self._client[self.db_name].get_collection(self.collection_name)

        # Indexes for the list filters
        with store_errors("Server error connecting to the database"):
            await self._collection.create_index([("category", ASCENDING)])
            await self._collection.create_index([("priority", ASCENDING)])
        logger.info("Connected to MongoDB database %s", self.db_name)

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()
            logger.info("MongoDB connection closed")
        self._client = None
        self._collection = None

    @property
    def collection(self) -> AsyncIOMotorCollection:
        if self._collection is None:
            raise StoreError("Task store is not open")
        return self._collection

    async def find(
        self, task_filter: TaskFilter, error_message: str = "Server error getting tasks"
    ) -> List[Dict[str, Any]]:
        with store_errors(error_message):
            return await self.collection.find(task_filter.to_query()).to_list(None)

    async def get(self, task_id: str) -> Optional[Dict[str, Any]]:
        object_id = to_object_id(task_id)
        if object_id is None:
            return None
        with store_errors("Server error getting task"):
            return await self.collection.find_one({"_id": object_id})

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        document = dict(document)
        with store_errors("Server error creating task"):
            result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return document

    async def update(
        self, task_id: str, fields: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Merge ``fields`` into the stored task and return its new state."""
        object_id = to_object_id(task_id)
        if object_id is None:
            return None
        with store_errors("Server error updating task"):
            return await self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )

    async def delete(self, task_id: str) -> bool:
        object_id = to_object_id(task_id)
        if object_id is None:
            return False
        with store_errors("Server error deleting task"):
            deleted = await self.collection.find_one_and_delete({"_id": object_id})
        return deleted is not None

    async def delete_all(self) -> int:
        with store_errors("Server error deleting tasks"):
            result = await self.collection.delete_many({})
        return result.deleted_count

    async def insert_many(self, documents: List[Dict[str, Any]]) -> int:
        with store_errors("Server error creating tasks"):
            result = await self.collection.insert_many([dict(d) for d in documents])
        return len(result.inserted_ids)

    async def summarize_by_type(self) -> List[Dict[str, Any]]:
        """Task count and average priority per task type, largest group first."""
        pipeline = [
            {
                "$group": {
                    "_id": "$taskType",
                    "count": {"$sum": 1},
                    "avgPriority": {"$avg": "$priority"},
                }
            },
            {"$sort": {"count": DESCENDING}},
        ]
        with store_errors("Server error getting statistics"):
            rows = await self.collection.aggregate(pipeline).to_list(None)
        return [
            {"taskType": row["_id"], "count": row["count"], "avgPriority": row["avgPriority"]}
            for row in rows
        ]
