"""
MongoDB Workflow Repository
===========================
"""
from typing import Optional

from servicedesk.domain.models.workflow import Workflow
from servicedesk.domain.repositories.workflow_repository import WorkflowRepository
from servicedesk.infrastructure.db.mongo_base_repository import MongoBaseRepository


class MongoWorkflowRepository(MongoBaseRepository[Workflow], WorkflowRepository):
    """MongoDB implementation of WorkflowRepository."""

    entity_class = Workflow

    def find_by_project(self, project_id: str) -> Optional[Workflow]:
        return self._find_one({"project_id": project_id})

    def find_organization_default(self, organization_id: str, methodology: str) -> Optional[Workflow]:
        return self._find_one({
            "organization_id": organization_id,
            "project_id": None,
            "methodology": methodology,
            "is_default": True,
        })

    def delete_by_project(self, project_id: str) -> int:
        return self._collection.delete_many({"project_id": project_id}).deleted_count
