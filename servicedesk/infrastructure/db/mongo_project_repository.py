"""
MongoDB Project Repository
==========================
"""
from typing import List, Optional

from servicedesk.domain.constants.pm_constants import ProjectStatus
from servicedesk.domain.models.project import Project
from servicedesk.domain.repositories.project_repository import ProjectRepository
from servicedesk.infrastructure.db.mongo_base_repository import MongoBaseRepository


class MongoProjectRepository(MongoBaseRepository[Project], ProjectRepository):
    """MongoDB implementation of ProjectRepository."""

    entity_class = Project
    searchable_fields = ("name", "key", "description")

    def find_by_key(self, organization_id: str, key: str) -> Optional[Project]:
        return self._find_one({"organization_id": organization_id, "key": key})

    def find_for_member(self, organization_id: str, user_id: Optional[str] = None, include_archived: bool = False) -> List[Project]:
        query = {"organization_id": organization_id}
        if user_id is not None:
            query["members.user_id"] = user_id
        if not include_archived:
            query["status"] = {"$ne": ProjectStatus.ARCHIVED}
        return self._find(query)
