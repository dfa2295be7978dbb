"""
Database index management for MongoDB.

Indexes are created at application startup.
"""

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from nutrition_service.core.logger import logger


async def create_indexes(collection: AsyncIOMotorCollection) -> None:
    """
    Create the indexes the product collection needs.

    Get-by-name does an exact match on `name`, so it is indexed. The index is
    not unique: existing data may hold duplicate names and the first match wins.
    """
    try:
        await collection.create_index([("name", ASCENDING)], name="idx_name")
        logger.info("Created index on 'name'", metadata={"collection": collection.name})
    except PyMongoError as e:
        # The service still works without the index, only slower
        logger.warning(
            "Failed to create product indexes",
            error=e,
            metadata={"event": "index_creation_failed", "collection": collection.name},
        )
