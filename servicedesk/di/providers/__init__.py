"""
Providers Package
=================

Dependency injection providers for registering dependencies.
"""
from servicedesk.di.providers.database_provider import DatabaseProvider
from servicedesk.di.providers.repository_provider import RepositoryProvider
from servicedesk.di.providers.people_provider import PeopleProvider
from servicedesk.di.providers.pm_provider import ProjectManagementProvider
from servicedesk.di.providers.itsm_provider import ITSMProvider
from servicedesk.di.providers.knowledge_provider import KnowledgeProvider
from servicedesk.di.providers.report_provider import ReportProvider

__all__ = [
    "DatabaseProvider",
    "RepositoryProvider",
    "PeopleProvider",
    "ProjectManagementProvider",
    "ITSMProvider",
    "KnowledgeProvider",
    "ReportProvider",
]
