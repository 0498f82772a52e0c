"""MongoDB connection utilities for mongopager."""

import logging
from typing import Optional

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)


class MongoManager:
    """Manages the MongoDB client."""

    def __init__(self, settings: Optional[Settings] = None):
        self.client: Optional[AsyncMongoClient] = None
        self._settings = settings

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    async def initialize(self) -> None:
        """Create the MongoDB client."""
        if self.client is None:
            settings = self.settings
            self.client = AsyncMongoClient(
                settings.mongo_url,
                serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
                tz_aware=settings.mongo_tz_aware
            )
            logger.info(f"MongoDB client created for database '{settings.mongo_database}'")

    async def close(self) -> None:
        """Close the MongoDB client."""
        if self.client:
            await self.client.close()
            self.client = None

    async def get_database(self) -> AsyncDatabase:
        """Get the configured database, creating the client if needed."""
        if not self.client:
            await self.initialize()
        return self.client[self.settings.mongo_database]

    async def ping(self) -> bool:
        """Round-trip to the server."""
        database = await self.get_database()
        result = await database.command("ping")
        return bool(result.get("ok"))


# Global MongoDB manager instance
mongo_manager = MongoManager()


async def get_database() -> AsyncDatabase:
    """Get the configured MongoDB database."""
    return await mongo_manager.get_database()
