"""
MongoDB Knowledge Repositories
==============================

Concrete MongoDB implementations for categories and knowledge articles.
"""
import re
from typing import Dict, List, Optional

from pymongo import ASCENDING, DESCENDING

from servicedesk.domain.constants.fields import CommonFields
from servicedesk.domain.models.category import Category
from servicedesk.domain.models.knowledge_article import KnowledgeArticle
from servicedesk.domain.repositories.base_repository import Filters
from servicedesk.domain.repositories.category_repository import CategoryRepository
from servicedesk.domain.repositories.knowledge_article_repository import KnowledgeArticleRepository
from servicedesk.infrastructure.db.mongo_base_repository import MongoBaseRepository


class MongoCategoryRepository(MongoBaseRepository[Category], CategoryRepository):
    """MongoDB implementation of CategoryRepository."""

    entity_class = Category
    searchable_fields = ("name", "description")
    default_sort = [("order", ASCENDING), ("name", ASCENDING)]

    def find_by_name(self, organization_id: str, name: str, type: str) -> Optional[Category]:
        return self._find_one({
            CommonFields.ORGANIZATION_ID: organization_id,
            "type": type,
            "name": {"$regex": f"^{re.escape(name.strip())}$", "$options": "i"},
        })

    def find_children(self, organization_id: str, parent_id: str) -> List[Category]:
        return self._find({CommonFields.ORGANIZATION_ID: organization_id, "parent_id": parent_id})


class MongoKnowledgeArticleRepository(MongoBaseRepository[KnowledgeArticle], KnowledgeArticleRepository):
    """MongoDB implementation of KnowledgeArticleRepository."""

    entity_class = KnowledgeArticle
    searchable_fields = ("title", "summary", "content", "tags", "article_id")

    def find_by_article_id(self, organization_id: str, article_id: str) -> Optional[KnowledgeArticle]:
        return self._find_one({CommonFields.ORGANIZATION_ID: organization_id, "article_id": article_id})

    def find_by_slug(self, organization_id: str, slug: str) -> Optional[KnowledgeArticle]:
        return self._find_one({CommonFields.ORGANIZATION_ID: organization_id, "slug": slug})

    def find_top(
        self,
        organization_id: str,
        filters: Optional[Filters] = None,
        sort_field: str = "published_at",
        limit: int = 10,
    ) -> List[KnowledgeArticle]:
        return self._find(
            self._build_query(organization_id, filters),
            sort=[(sort_field, DESCENDING), (CommonFields.ID, DESCENDING)],
            limit=limit,
        )

    def increment_views(self, article_id: str) -> None:
        self._collection.update_one({CommonFields.ID: article_id}, {"$inc": {"metrics.views": 1}})

    def metrics_summary(self, organization_id: str) -> Dict[str, float]:
        views = list(self._collection.aggregate([
            {"$match": {CommonFields.ORGANIZATION_ID: organization_id}},
            {"$group": {"_id": None, "total": {"$sum": "$metrics.views"}}},
        ]))
        ratings = list(self._collection.aggregate([
            {"$match": {CommonFields.ORGANIZATION_ID: organization_id, "metrics.rating_count": {"$gt": 0}}},
            {"$group": {"_id": None, "avg": {"$avg": "$metrics.avg_rating"}}},
        ]))
        return {
            "total_views": views[0]["total"] if views else 0,
            "avg_rating": round(ratings[0]["avg"], 2) if ratings else 0,
        }
