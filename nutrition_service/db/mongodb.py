"""
MongoDB database connection management
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from nutrition_service.core.config import Config
from nutrition_service.core.errors import PersistenceError
from nutrition_service.core.logger import logger


class Database:
    """Database connection manager"""

    def __init__(self, config: Config):
        self.config = config
        self.client: Optional[AsyncIOMotorClient] = None
        self.database = None

    async def connect(self) -> None:
        """Create database connection"""
        logger.info("Connecting to MongoDB...")
        try:
            self.client = AsyncIOMotorClient(
                self.config.mongodb_url,
                serverSelectionTimeoutMS=int(self.config.external_call_timeout * 1000),
            )
            self.database = self.client[self.config.mongodb_database]
            await self.client.admin.command("ping")
        except PyMongoError as e:
            logger.error(
                "Could not connect to MongoDB",
                error=e,
                metadata={"event": "mongodb_connection_error"},
            )
            raise PersistenceError("connect", detail=str(e)) from e

        logger.info(
            f"Successfully connected to MongoDB database '{self.config.mongodb_database}'",
            metadata={
                "event": "mongodb_connected",
                "database": self.config.mongodb_database,
                "host": self.config.mongodb_host,
            },
        )

    async def close(self) -> None:
        """Close database connection"""
        logger.info("Closing connection to MongoDB...")
        if self.client is not None:
            self.client.close()
            self.client = None
            self.database = None

    def product_collection(self) -> AsyncIOMotorCollection:
        """Get products collection"""
        if self.database is None:
            raise PersistenceError("product_collection", detail="database is not connected")
        return self.database[self.config.mongodb_collection]
