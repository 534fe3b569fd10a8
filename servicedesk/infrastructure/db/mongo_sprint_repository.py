"""
MongoDB Sprint Repository
=========================
"""
from typing import List, Optional

from pymongo import DESCENDING

from servicedesk.domain.constants.pm_constants import SprintStatus
from servicedesk.domain.models.sprint import Sprint
from servicedesk.domain.repositories.sprint_repository import SprintRepository
from servicedesk.infrastructure.db.mongo_base_repository import MongoBaseRepository


class MongoSprintRepository(MongoBaseRepository[Sprint], SprintRepository):
    """MongoDB implementation of SprintRepository."""

    entity_class = Sprint
    default_sort = [("number", DESCENDING)]

    def find_by_project(self, project_id: str) -> List[Sprint]:
        return self._find({"project_id": project_id})

    def find_active(self, project_id: str) -> Optional[Sprint]:
        return self._find_one({"project_id": project_id, "status": SprintStatus.ACTIVE})

    def find_completed(self, project_id: str, limit: int) -> List[Sprint]:
        return self._find(
            {"project_id": project_id, "status": SprintStatus.COMPLETED},
            sort=[("completed_at", DESCENDING), ("number", DESCENDING)],
            limit=limit,
        )

    def find_by_number(self, project_id: str, number: int) -> Optional[Sprint]:
        return self._find_one({"project_id": project_id, "number": number})

    def find_active_in_organization(self, organization_id: str) -> List[Sprint]:
        return self._find({"organization_id": organization_id, "status": SprintStatus.ACTIVE})

    def delete_by_project(self, project_id: str) -> int:
        return self._collection.delete_many({"project_id": project_id}).deleted_count
