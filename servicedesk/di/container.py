from typing import Optional

from pymongo import MongoClient

from servicedesk.di.base_container import BaseContainer
from servicedesk.di.providers import (
    DatabaseProvider,
    ITSMProvider,
    KnowledgeProvider,
    PeopleProvider,
    ProjectManagementProvider,
    ReportProvider,
    RepositoryProvider,
)


class DIContainer(BaseContainer):
    """
    Main dependency injection container.
    Composes all providers in the correct order.

    Registration order is important:
    1. Database connections (DatabaseProvider)
    2. Repositories (RepositoryProvider) - depends on database
    3. Services (People, ProjectManagement, ITSM, Knowledge, Report) - depend on repositories
    """

    def __init__(self, mongo_client: Optional[MongoClient] = None) -> None:
        super().__init__()
        self._mongo_client = mongo_client
        self.setup()

    def setup(self) -> None:
        """
        Setup dependency registrations by composing all providers.
        Order matters: database → repositories → services
        """
        # Step 1: Register database connections (foundation)
        DatabaseProvider.register(self, self._mongo_client)

        # Step 2: Register repositories (depends on database)
        RepositoryProvider.register(self)

        # Step 3: Register services (depends on repositories)
        PeopleProvider.register(self)
        ProjectManagementProvider.register(self)
        ITSMProvider.register(self)
        KnowledgeProvider.register(self)
        ReportProvider.register(self)


# Global container instance (singleton pattern)
_container: Optional[DIContainer] = None


def get_container() -> DIContainer:
    """
    Get the global DI container instance (singleton pattern)

    Returns:
        DIContainer instance with all dependencies registered
    """
    global _container
    if _container is None:
        _container = DIContainer()
    return _container
