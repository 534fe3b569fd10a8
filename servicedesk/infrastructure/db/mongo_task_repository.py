"""
MongoDB Task Repository
=======================
"""
from typing import Dict, List, Optional

from pymongo import ASCENDING

from servicedesk.domain.models.task import Task
from servicedesk.domain.repositories.task_repository import TaskRepository
from servicedesk.infrastructure.db.mongo_base_repository import MongoBaseRepository
from servicedesk.utils.datetime_utils import now


class MongoTaskRepository(MongoBaseRepository[Task], TaskRepository):
    """MongoDB implementation of TaskRepository."""

    entity_class = Task
    searchable_fields = ("title", "key")

    def find_by_project(self, project_id: str) -> List[Task]:
        return self._find({"project_id": project_id})

    def find_by_sprint(self, sprint_id: str) -> List[Task]:
        return self._find({"sprint_id": sprint_id})

    def find_backlog(self, project_id: str) -> List[Task]:
        return self._find(
            {"project_id": project_id, "sprint_id": None},
            sort=[("backlog_order", ASCENDING), ("created_at", ASCENDING)],
        )

    def move_to_sprint(self, task_ids: List[str], sprint_id: Optional[str]) -> int:
        if not task_ids:
            return 0
        result = self._collection.update_many(
            {"id": {"$in": list(task_ids)}},
            {"$set": {"sprint_id": sprint_id, "updated_at": now()}},
        )
        return result.modified_count

    def clear_sprint(self, sprint_id: str) -> int:
        result = self._collection.update_many(
            {"sprint_id": sprint_id},
            {"$set": {"sprint_id": None, "updated_at": now()}},
        )
        return result.modified_count

    def remove_subtask(self, parent_id: str, subtask_id: str) -> None:
        self._collection.update_one({"id": parent_id}, {"$pull": {"subtasks": subtask_id}})

    def count_by_category(self, organization_id: str) -> Dict[str, int]:
        return self.count_by(organization_id, "status.category")

    def delete_by_project(self, project_id: str) -> int:
        return self._collection.delete_many({"project_id": project_id}).deleted_count
