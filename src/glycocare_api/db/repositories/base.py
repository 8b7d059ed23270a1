"""Base repository class with common database operations."""

from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection

from glycocare_api.utils import utc_now


class BaseRepository:
    """Base repository for a single collection."""

    def __init__(self, collection: AsyncIOMotorCollection):
        """
        Initialize repository with a MongoDB collection.

        Args:
            collection: Motor collection instance
        """
        self.collection = collection

    async def insert_one(self, document: dict[str, Any]) -> str:
        """
        Insert a single document.

        Args:
            document: Document to insert

        Returns:
            Inserted document ID as string
        """
        if "created_at" not in document:
            document["created_at"] = utc_now()

        result = await self.collection.insert_one(document)
        return str(result.inserted_id)
