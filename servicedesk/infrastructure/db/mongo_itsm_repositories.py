"""
MongoDB ITSM Repositories
=========================

Concrete MongoDB implementations for incidents, problems, changes,
releases, SLA policies, catalog items and service requests. Tickets are
looked up by their human-readable id within the organization.
"""
from typing import List, Optional

from pymongo import ASCENDING, DESCENDING

from servicedesk.domain.constants.itsm_constants import IncidentStatus
from servicedesk.domain.models.change import Change
from servicedesk.domain.models.incident import Incident
from servicedesk.domain.models.itsm_common import SLATracking
from servicedesk.domain.models.problem import Problem
from servicedesk.domain.models.release import Release
from servicedesk.domain.models.service_catalog import ServiceCatalogItem, ServiceRequest
from servicedesk.domain.models.sla import SLAPolicy
from servicedesk.domain.repositories.change_repository import ChangeRepository
from servicedesk.domain.repositories.incident_repository import IncidentRepository
from servicedesk.domain.repositories.problem_repository import ProblemRepository
from servicedesk.domain.repositories.release_repository import ReleaseRepository
from servicedesk.domain.repositories.service_catalog_repository import (
    ServiceCatalogRepository,
    ServiceRequestRepository,
)
from servicedesk.domain.repositories.sla_repository import SLARepository
from servicedesk.infrastructure.db.mongo_base_repository import MongoBaseRepository, normalize_datetimes


class MongoIncidentRepository(MongoBaseRepository[Incident], IncidentRepository):
    """MongoDB implementation of IncidentRepository."""

    entity_class = Incident
    searchable_fields = ("title", "incident_id", "description")

    def find_by_ticket_id(self, organization_id: str, incident_id: str) -> Optional[Incident]:
        return self._find_one({"organization_id": organization_id, "incident_id": incident_id})

    def find_active(self, organization_id: Optional[str] = None) -> List[Incident]:
        query = {"status": {"$in": list(IncidentStatus.ACTIVE)}}
        if organization_id is not None:
            query["organization_id"] = organization_id
        return self._find(query, sort=[("created_at", ASCENDING)])

    def find_sla_records(self, organization_id: str) -> List[SLATracking]:
        docs = self._collection.find({"organization_id": organization_id}, {"sla": 1})
        return [SLATracking.model_validate(normalize_datetimes(doc["sla"])) for doc in docs if doc.get("sla")]


class MongoProblemRepository(MongoBaseRepository[Problem], ProblemRepository):
    """MongoDB implementation of ProblemRepository."""

    entity_class = Problem
    searchable_fields = ("title", "problem_id", "description")

    def find_by_ticket_id(self, organization_id: str, problem_id: str) -> Optional[Problem]:
        return self._find_one({"organization_id": organization_id, "problem_id": problem_id})

    def find_by_known_error(self, organization_id: str, ke_id: str) -> Optional[Problem]:
        return self._find_one({"organization_id": organization_id, "known_error.ke_id": ke_id})


class MongoChangeRepository(MongoBaseRepository[Change], ChangeRepository):
    """MongoDB implementation of ChangeRepository."""

    entity_class = Change
    searchable_fields = ("title", "change_id", "description")

    def find_by_ticket_id(self, organization_id: str, change_id: str) -> Optional[Change]:
        return self._find_one({"organization_id": organization_id, "change_id": change_id})


class MongoReleaseRepository(MongoBaseRepository[Release], ReleaseRepository):
    """MongoDB implementation of ReleaseRepository."""

    entity_class = Release
    searchable_fields = ("name", "version", "release_id")

    def find_by_ticket_id(self, organization_id: str, release_id: str) -> Optional[Release]:
        return self._find_one({"organization_id": organization_id, "release_id": release_id})


class MongoSLARepository(MongoBaseRepository[SLAPolicy], SLARepository):
    """MongoDB implementation of SLARepository."""

    entity_class = SLAPolicy
    searchable_fields = ("name", "sla_id")

    def find_by_sla_id(self, organization_id: str, sla_id: str) -> Optional[SLAPolicy]:
        return self._find_one({"organization_id": organization_id, "sla_id": sla_id})

    def find_active_for_priority(self, organization_id: str, priority: str) -> List[SLAPolicy]:
        return self._find(
            {"organization_id": organization_id, "priority": priority, "is_active": True},
            sort=[("created_at", ASCENDING), ("id", ASCENDING)],
        )


class MongoServiceCatalogRepository(MongoBaseRepository[ServiceCatalogItem], ServiceCatalogRepository):
    """MongoDB implementation of ServiceCatalogRepository."""

    entity_class = ServiceCatalogItem
    searchable_fields = ("name", "description", "service_id")
    default_sort = [("order", ASCENDING), ("name", ASCENDING)]

    def find_by_service_id(self, organization_id: str, service_id: str) -> Optional[ServiceCatalogItem]:
        return self._find_one({"organization_id": organization_id, "service_id": service_id})

    def increment_requests(self, item_id: str) -> None:
        self._collection.update_one({"id": item_id}, {"$inc": {"total_requests": 1}})


class MongoServiceRequestRepository(MongoBaseRepository[ServiceRequest], ServiceRequestRepository):
    """MongoDB implementation of ServiceRequestRepository."""

    entity_class = ServiceRequest
    searchable_fields = ("request_id", "service_name")
    default_sort = [("created_at", DESCENDING), ("id", DESCENDING)]

    def find_by_ticket_id(self, organization_id: str, request_id: str) -> Optional[ServiceRequest]:
        return self._find_one({"organization_id": organization_id, "request_id": request_id})
