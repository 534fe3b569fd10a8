"""
MongoDB Client
==============

MongoDB client manager for database connections.
"""
import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from servicedesk.core.config import get_settings

logger = logging.getLogger(__name__)


class MongoClientManager:
    """
    MongoDB client manager.

    Manages the MongoDB connection and provides access to collections.
    An already-built client (e.g. an in-memory one in tests) can be passed in.
    """

    def __init__(
        self,
        uri: Optional[str] = None,
        database_name: Optional[str] = None,
        client: Optional[MongoClient] = None,
    ) -> None:
        settings = get_settings()
        self._uri = uri or settings.mongo_uri
        self._database_name = database_name or settings.mongo_database_name
        self._client: Optional[MongoClient] = client
        self._database: Optional[Database] = None

    def _initialize_client(self) -> None:
        """Initialize MongoDB client connection."""
        if self._client is None:
            # tz_aware so datetimes come back comparable with now()
            self._client = MongoClient(self._uri, tz_aware=True)
        self._database = self._client[self._database_name]
        logger.info("Connected to MongoDB database '%s'", self._database_name)

    def get_database(self) -> Database:
        """Get MongoDB database instance."""
        if self._database is None:
            self._initialize_client()
        return self._database

    def get_collection(self, collection_name: str) -> Collection:
        """
        Get a MongoDB collection.

        Args:
            collection_name: Name of the collection

        Returns:
            MongoDB Collection object
        """
        return self.get_database()[collection_name]

    def ping(self) -> bool:
        """Return True when the server answers a ping."""
        try:
            self.get_database().command("ping")
            return True
        except PyMongoError as exc:
            logger.warning("MongoDB ping failed: %s", exc)
            return False

    def close(self) -> None:
        """Close MongoDB connection."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._database = None


_manager: Optional[MongoClientManager] = None


def get_mongo_client() -> MongoClientManager:
    """Get the process-wide MongoDB client manager."""
    global _manager
    if _manager is None:
        _manager = MongoClientManager()
    return _manager
