"""
MongoDB Board Repository
========================
"""
from typing import Optional

from servicedesk.domain.models.board import Board
from servicedesk.domain.repositories.board_repository import BoardRepository
from servicedesk.infrastructure.db.mongo_base_repository import MongoBaseRepository


class MongoBoardRepository(MongoBaseRepository[Board], BoardRepository):
    """MongoDB implementation of BoardRepository."""

    entity_class = Board

    def find_by_project(self, project_id: str) -> Optional[Board]:
        return self._find_one({"project_id": project_id, "is_default": True}) or self._find_one({"project_id": project_id})

    def delete_by_project(self, project_id: str) -> int:
        return self._collection.delete_many({"project_id": project_id}).deleted_count
