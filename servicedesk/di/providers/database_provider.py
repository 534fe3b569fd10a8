from typing import TYPE_CHECKING, Optional

from pymongo import MongoClient

from servicedesk.infrastructure.db.mongo_connection import MongoClientManager, get_mongo_client

if TYPE_CHECKING:
    from servicedesk.di.base_container import BaseContainer


class DatabaseProvider:
    """Centralized database connection provider - single source of truth for all DB connections"""

    @staticmethod
    def register(container: "BaseContainer", client: Optional[MongoClient] = None) -> None:
        """
        Register all database connections in the container.
        A prebuilt client (tests pass an in-memory one) gets its own manager;
        otherwise the process-wide manager is used.
        """
        manager = MongoClientManager(client=client) if client is not None else get_mongo_client()
        container.register_singleton("mongo_client", manager)
